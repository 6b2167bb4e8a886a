from __future__ import annotations

import json

import streamlit as st

from intentc.config import CompilerConfig
from intentc.core import IntentCompiler
from intentc.planners.audit import render_audit_log


EXAMPLE_INTENTS = {
    "crud": {
        "label": "🗂️ CRUD API",
        "source": """intent build_crud {
  goal: "Create a simple product catalog API",
  capabilities: ["create products", "read products", "update products", "delete products"],
  constraints: ["validate input data", "require authentication"]
}
""",
    },
    "ml": {
        "label": "🧠 ML Workflow",
        "source": """intent churn_model {
  goal: "Predict customer churn every week",
  capabilities: ["train churn model", "predict churn risk"],
  constraints: ["explainable features"],
  success_criteria: "auc above 0.8"
}
""",
    },
    "pipeline": {
        "label": "🔀 Data Pipeline",
        "source": """intent nightly_etl {
  goal: "Load sales exports into the warehouse",
  capabilities: ["transform csv exports", "process data quality checks"],
  architecture: { storage: warehouse, schedule: nightly }
}
""",
    },
    "fallback": {
        "label": "🧩 Custom",
        "source": """# nothing here matches a planning rule
intent say_hello {
  goal: "Greet the on-call engineer",
  capabilities: ["send greeting"]
}
""",
    },
}


st.set_page_config(page_title="Intent Plan Explorer", layout="wide")
st.title("Intent Plan Explorer")

if "source_input" not in st.session_state:
    st.session_state.source_input = EXAMPLE_INTENTS["crud"]["source"]

st.markdown("#### Examples")
example_cols = st.columns(len(EXAMPLE_INTENTS))
for idx, (key, example) in enumerate(EXAMPLE_INTENTS.items()):
    if example_cols[idx].button(example["label"], use_container_width=True, key=f"example_{key}"):
        st.session_state.source_input = example["source"]

with st.sidebar:
    strict_lexing = st.checkbox("Strict lexing", value=False, help="Reject characters the lexer does not know")
    validate_before_plan = st.checkbox("Validate before planning", value=False)
    max_complexity = st.number_input("Max complexity", min_value=0, value=50, step=5)
    show_json = st.checkbox("Show plan JSON", value=False)

source = st.text_area("Intent source", key="source_input", height=220)

if st.button("Compile"):
    config = CompilerConfig(
        strict_lexing=strict_lexing,
        validate_before_plan=validate_before_plan,
        max_complexity=int(max_complexity),
    )
    compiler = IntentCompiler(config=config)
    result = compiler.compile(source)

    st.caption(" → ".join(stage.value for stage in result.history))

    if result.validation_errors:
        for message in result.validation_errors:
            st.warning(message)

    if not result.ok:
        st.error(f"{result.stage.value}: {result.error}")
        st.stop()

    plan = result.plan
    metric_cols = st.columns(4)
    metric_cols[0].metric("Strategy", plan.strategy)
    metric_cols[1].metric("Steps", len(plan.steps))
    metric_cols[2].metric("Worst-case duration", f"{plan.estimated_duration_ms / 1000:.0f}s")
    metric_cols[3].metric("Estimated cost", f"{plan.estimated_cost:.2f}")

    st.subheader("Intent IR")
    st.json(result.ir.to_dict())

    st.subheader("Steps")
    st.table(
        [
            {
                "id": step.id,
                "type": step.type,
                "action": step.action,
                "depends on": ", ".join(step.dependencies) or "-",
                "timeout (ms)": step.timeout_ms,
            }
            for step in plan.steps
        ]
    )

    st.subheader("Resources")
    st.table([resource.to_dict() for resource in plan.resources])

    st.subheader("Audit log")
    st.code(render_audit_log(plan.audit_log), language="text")

    if show_json:
        st.subheader("Plan JSON")
        st.code(json.dumps(plan.to_dict(), indent=2), language="json")

st.caption("Tip: run with `streamlit run app.py`. The CLI equivalent is `python -m intentc.cli --source-file my.intent --audit`.")
