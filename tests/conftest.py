import copy
import json
from pathlib import Path

import pytest
from openpyxl import Workbook

from core.interfaces import ReportGateway
from core.models import Sheet, SheetStore, WorkbookFile
from ui.renderer import ReportRenderer


class StubGateway(ReportGateway):
    """Gateway that returns a fixed text or raises a fixed error"""

    def __init__(self, response: str = None, error: Exception = None):
        self.response = response
        self.error = error
        self.calls = []

    @property
    def provider(self) -> str:
        return "stub"

    async def generate(self, instruction: str, prompt: str, schema: dict) -> str:
        self.calls.append({"instruction": instruction, "prompt": prompt, "schema": schema})
        if self.error is not None:
            raise self.error
        return self.response


class RecordingRenderer(ReportRenderer):
    def __init__(self):
        self.reports = []
        self.reset_callbacks = []

    def render(self, report, on_reset):
        self.reports.append(report)
        self.reset_callbacks.append(on_reset)


PACKER_REPORT = {
    "summary": {
        "detectedSheets": ["AcrossReplicationsSummary", "DiscreteTimeStatsByRep"],
        "missingSheets": ["CounterStatsByRep"],
        "overview": "The Packer runs at 92% utilization and drives waiting upstream.",
    },
    "kpis": [
        {"label": "Packer utilization", "value": "92", "unit": "%", "trend": "up"},
        {"label": "Wait time at InputBuffer", "value": "12.4", "unit": "min", "trend": None},
    ],
    "charts": {
        "resourceUtilization": [{"name": "Packer", "value": 0.92, "category": None}],
        "queueTimes": [{"name": "InputBuffer", "value": 12.4, "category": None}],
        "throughput": [],
    },
    "insights": [
        {
            "kind": "bottleneck",
            "title": "Packer is the bottleneck",
            "description": "Packer utilization of 0.92 exceeds 0.85.",
        }
    ],
    "recommendations": [
        {
            "title": "Add a second packer",
            "action": "Increase Packer capacity from 1 to 2 during peak shifts.",
            "priority": "High",
        }
    ],
}


@pytest.fixture
def report_data():
    """A valid report dict; tests may mutate their copy"""
    return copy.deepcopy(PACKER_REPORT)


@pytest.fixture
def report_text(report_data):
    return json.dumps(report_data)


@pytest.fixture
def stub_gateway():
    """Factory for StubGateway"""
    return StubGateway


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def make_store():
    """Build a SheetStore with one placeholder row per sheet"""
    def _make(*names: str) -> SheetStore:
        return SheetStore(sheets=tuple(
            Sheet(name=name, rows=({"Value": index},))
            for index, name in enumerate(names)
        ))
    return _make


@pytest.fixture
def make_workbook(tmp_path: Path):
    """Write an .xlsx with the given {sheet_name: rows} and return it as an upload"""
    def _make(sheets: dict, file_name: str = "export.xlsx") -> WorkbookFile:
        workbook = Workbook()
        workbook.remove(workbook.active)
        for name, rows in sheets.items():
            sheet = workbook.create_sheet(name)
            for row in rows:
                sheet.append(row)
        path = tmp_path / file_name
        workbook.save(path)
        return WorkbookFile.from_path(str(path))
    return _make


@pytest.fixture
def packer_workbook(make_workbook):
    return make_workbook({
        "AcrossReplicationsSummary": [
            ["Resource", "Utilization"],
            ["Packer", 0.92],
        ],
        "DiscreteTimeStatsByRep": [
            ["Queue", "WaitTime"],
            ["InputBuffer", 12.4],
        ],
    })
