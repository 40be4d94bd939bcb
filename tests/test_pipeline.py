import json

import pytest

from core.enums import InsightKind
from core.exceptions import (
    DecodeError, EmptyResponseError, MalformedReportError, StageError
)
from core.models import WorkbookFile
from orchestrator import Orchestrator
from ui.progress import ProgressTracker


class RecordingProgress(ProgressTracker):
    def __init__(self):
        self.events = []

    def start_stage(self, stage_num, stage_name):
        self.events.append(("start", stage_num))

    def complete_stage(self, stage_num):
        self.events.append(("done", stage_num))

    def fail(self, stage_num, message):
        self.events.append(("fail", stage_num))

    def complete(self):
        self.events.append(("complete", None))


@pytest.mark.asyncio
async def test_packer_scenario_end_to_end(packer_workbook, stub_gateway, report_text):
    gateway = stub_gateway(response=report_text)
    progress = RecordingProgress()
    orchestrator = Orchestrator(progress=progress, gateway=gateway, estimation_enabled=False)

    ctx = await orchestrator.run(packer_workbook)

    # classifier keeps both known sheets
    assert [s.name for s in ctx.selection.selected] == [
        "AcrossReplicationsSummary", "DiscreteTimeStatsByRep"
    ]
    assert not ctx.selection.fallback_used

    # payload well under the limit is the untouched serialization
    assert not ctx.payload.truncated
    assert ctx.payload.text == orchestrator.stages[2].serialize(ctx.selection.selected)
    assert "Packer" in ctx.payload.text and "InputBuffer" in ctx.payload.text

    # the engine saw the instruction, the payload and the schema
    call = gateway.calls[0]
    assert ctx.payload.text in call["prompt"]
    assert call["schema"] == ctx.request.output_schema

    report = ctx.report
    assert report.charts.resource_utilization[0].name == "Packer"
    assert report.charts.resource_utilization[0].value == pytest.approx(0.92)
    bottlenecks = [i for i in report.insights if i.kind == InsightKind.BOTTLENECK]
    assert any("Packer" in i.title for i in bottlenecks)

    assert progress.events[-1] == ("complete", None)
    assert ("done", 5) in progress.events


@pytest.mark.asyncio
async def test_unknown_sheets_fall_back_to_all(make_workbook, stub_gateway, report_data):
    upload = make_workbook({
        "Resources": [["Name", "Busy"], ["Packer", 0.92]],
        "Queues": [["Name", "Wait"], ["InputBuffer", 12.4]],
    })
    report_data["summary"]["detectedSheets"] = ["Resources", "Queues"]
    gateway = stub_gateway(response=json.dumps(report_data))

    ctx = await Orchestrator(gateway=gateway).run(upload)

    assert ctx.selection.fallback_used
    assert len(ctx.selection.selected) == 2
    assert '"Resources"' in ctx.payload.text and '"Queues"' in ctx.payload.text


@pytest.mark.asyncio
async def test_corrupt_upload_stops_before_engine(stub_gateway, report_text):
    gateway = stub_gateway(response=report_text)
    progress = RecordingProgress()
    upload = WorkbookFile(file_name="export.xlsx", content=b"PK\x03\x04garbage")

    with pytest.raises(DecodeError):
        await Orchestrator(progress=progress, gateway=gateway).run(upload)

    assert gateway.calls == []
    assert ("fail", 0) in progress.events
    assert ("complete", None) not in progress.events


@pytest.mark.asyncio
async def test_empty_engine_response_propagates(packer_workbook, stub_gateway):
    gateway = stub_gateway(error=EmptyResponseError("no text", provider="stub"))
    progress = RecordingProgress()

    with pytest.raises(EmptyResponseError):
        await Orchestrator(progress=progress, gateway=gateway).run(packer_workbook)

    assert ("fail", 4) in progress.events


@pytest.mark.asyncio
async def test_malformed_engine_response_propagates(packer_workbook, stub_gateway, report_data):
    report_data["kpis"][0]["trend"] = "sideways"
    gateway = stub_gateway(response=json.dumps(report_data))

    with pytest.raises(MalformedReportError) as exc_info:
        await Orchestrator(gateway=gateway).analyze(packer_workbook)

    assert exc_info.value.field_path == "kpis[0].trend"


@pytest.mark.asyncio
async def test_report_naming_absent_sheet_is_rejected(packer_workbook, stub_gateway, report_data):
    report_data["summary"]["detectedSheets"].append("CounterStatsByRep")
    gateway = stub_gateway(response=json.dumps(report_data))

    with pytest.raises(MalformedReportError) as exc_info:
        await Orchestrator(gateway=gateway).analyze(packer_workbook)

    assert exc_info.value.field_path == "summary.detectedSheets[2]"


@pytest.mark.asyncio
async def test_small_budget_truncates_payload(packer_workbook, stub_gateway, report_text):
    gateway = stub_gateway(response=report_text)

    ctx = await Orchestrator(gateway=gateway, max_payload_chars=40).run(packer_workbook)

    assert len(ctx.payload.text) == 40
    assert ctx.payload.truncated
    assert "cut to fit" in gateway.calls[0]["prompt"]


@pytest.mark.asyncio
async def test_invalid_stage_input_is_stage_error(stub_gateway):
    orchestrator = Orchestrator(gateway=stub_gateway(response="{}"))

    with pytest.raises(StageError):
        await orchestrator.run("export.xlsx")
