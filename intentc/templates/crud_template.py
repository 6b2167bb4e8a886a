from __future__ import annotations

from intentc.models import ExecutionStep, IntentIR
from intentc.templates.base import make_step, step_id


class CrudTemplate:
    """Schema → database → endpoints → deploy, each step chained to the previous one."""

    strategy = "crud_generation"

    def expand(self, ir: IntentIR, start_order: int) -> list[ExecutionStep]:
        schema = start_order
        database = schema + 1
        endpoints = database + 1
        deploy = endpoints + 1
        return [
            make_step(
                schema,
                "generate_code",
                "generate_schema",
                {"entity_name": ir.name, "capabilities": list(ir.capabilities)},
                [step_id(schema - 1)],
            ),
            make_step(
                database,
                "create_resource",
                "create_database",
                {"schema_id": f"schema_from_{step_id(schema)}"},
                [step_id(schema)],
            ),
            make_step(
                endpoints,
                "generate_code",
                "generate_endpoints",
                {"operations": ["create", "read", "update", "delete"]},
                [step_id(database)],
            ),
            make_step(
                deploy,
                "deploy",
                "deploy_api",
                {"endpoints": f"from_{step_id(endpoints)}"},
                [step_id(endpoints)],
            ),
        ]
