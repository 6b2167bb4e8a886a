from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from intentc.templates.api_template import ApiOrchestrationTemplate
from intentc.templates.base import StepTemplate
from intentc.templates.crud_template import CrudTemplate
from intentc.templates.custom_template import CustomExecutionTemplate
from intentc.templates.ml_template import MlWorkflowTemplate
from intentc.templates.pipeline_template import DataPipelineTemplate


def build_registry() -> Mapping[str, StepTemplate]:
    templates = [
        CrudTemplate(),
        ApiOrchestrationTemplate(),
        DataPipelineTemplate(),
        MlWorkflowTemplate(),
        CustomExecutionTemplate(),
    ]
    return MappingProxyType({template.strategy: template for template in templates})
