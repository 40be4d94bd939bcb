import pytest

from core.models import BudgetedPayload, SheetSelection
from stages.s3_request import ReportRequestBuilder


def _inputs(store, truncated: bool = False):
    selection = SheetSelection(
        matched=store.sheets[:1],
        selected=store.sheets[:1],
        matched_identifiers=(store.sheets[0].name,),
        missing_identifiers=("CounterStatsByRep",),
    )
    text = '[{"name": "AcrossReplicationsSummary", "data": []}]'
    payload = BudgetedPayload(
        text=text,
        full_length=len(text) + (100 if truncated else 0),
        max_chars=len(text),
    )
    return {"store": store, "selection": selection, "payload": payload}


@pytest.mark.asyncio
async def test_request_carries_sheet_names_payload_and_schema(make_store):
    store = make_store("AcrossReplicationsSummary", "Notes")

    request = await ReportRequestBuilder(estimation_enabled=False).execute(_inputs(store))

    assert request.sheet_names_detected == frozenset({"AcrossReplicationsSummary", "Notes"})
    assert request.payload in request.prompt
    assert "AcrossReplicationsSummary, Notes" in request.prompt
    assert "CounterStatsByRep" in request.prompt
    assert "cut to fit" not in request.prompt
    assert request.output_schema["type"] == "object"


@pytest.mark.asyncio
async def test_prompt_flags_truncated_payload(make_store):
    store = make_store("AcrossReplicationsSummary")

    request = await ReportRequestBuilder().execute(_inputs(store, truncated=True))

    assert "cut to fit" in request.prompt


def test_instruction_encodes_domain_rules():
    instruction = ReportRequestBuilder(estimation_enabled=False).prompt_builder.build_instruction()

    assert "AcrossReplicationsSummary" in instruction
    assert "ground truth" in instruction
    for family in ("wait time", "total time in system", "resource utilization", "queue length"):
        assert family in instruction
    assert "0.85" in instruction
    assert "bottleneck" in instruction and "risk" in instruction and "opportunity" in instruction
    assert "priority" in instruction
    assert "empty array" in instruction
    assert "Never invent values" in instruction


def test_bottleneck_threshold_is_configurable():
    builder = ReportRequestBuilder(bottleneck_threshold=0.9)

    assert "0.90" in builder.prompt_builder.build_instruction()


def test_schema_forces_report_shape():
    schema = ReportRequestBuilder(estimation_enabled=False).prompt_builder.build_schema()
    props = schema["properties"]

    assert set(schema["required"]) == {"summary", "kpis", "charts", "insights", "recommendations"}
    assert schema["additionalProperties"] is False
    assert props["summary"]["required"] == ["detectedSheets", "missingSheets", "overview"]

    kpi = props["kpis"]["items"]["properties"]
    assert kpi["value"]["type"] == "string"
    assert kpi["trend"]["enum"] == ["up", "down", "stable", None]

    insight = props["insights"]["items"]["properties"]
    assert insight["kind"]["enum"] == ["bottleneck", "risk", "opportunity"]

    recommendation = props["recommendations"]["items"]["properties"]
    assert recommendation["priority"]["enum"] == ["High", "Medium", "Low"]

    point = props["charts"]["properties"]["resourceUtilization"]["items"]["properties"]
    assert point["value"]["type"] == "number"
    assert "estimated" not in point


def test_estimation_mode_is_labelled_in_instruction_and_schema():
    builder = ReportRequestBuilder(estimation_enabled=True)
    schema = builder.prompt_builder.build_schema()
    point = schema["properties"]["charts"]["properties"]["queueTimes"]["items"]

    assert '"estimated": true' in builder.prompt_builder.build_instruction()
    assert point["properties"]["estimated"]["type"] == "boolean"
    assert "estimated" in point["required"]


@pytest.mark.asyncio
async def test_estimation_flag_travels_with_request(make_store):
    store = make_store("AcrossReplicationsSummary")

    request = await ReportRequestBuilder(estimation_enabled=True).execute(_inputs(store))

    assert request.estimation_enabled


def test_validate_input_requires_all_parts(make_store):
    builder = ReportRequestBuilder()
    inputs = _inputs(make_store("AcrossReplicationsSummary"))

    assert builder.validate_input(inputs)
    assert not builder.validate_input({"store": inputs["store"]})
