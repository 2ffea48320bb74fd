import json

import pytest

from matchguard import cli
from matchguard.models.matching_models import CatalogReport, Outcome, ScenarioReport


@pytest.fixture
def mock_run_catalog(monkeypatch, settings):
    seen = {}

    async def _mock(scenarios, settings, workers=None):
        seen["ids"] = [s.id for s in scenarios]
        seen["workers"] = workers
        return CatalogReport(
            reports=[
                ScenarioReport(scenario_id=s.id, outcome=Outcome.REJECTED_AS_EXPECTED)
                for s in scenarios
            ]
        )

    monkeypatch.setattr("matchguard.cli.run_catalog", _mock)
    monkeypatch.setattr("matchguard.cli.get_settings", lambda: settings)
    return seen


def test_list_boundary_suite(monkeypatch, capsys):
    monkeypatch.setattr("sys.argv", ["matchguard", "list", "--suite", "boundary"])
    cli.main()

    out = capsys.readouterr().out
    assert "TC-21" in out
    assert "TC-1 " not in out


def test_run_writes_json_report(monkeypatch, mock_run_catalog, tmp_path, capsys):
    report_path = tmp_path / "report.json"
    monkeypatch.setattr(
        "sys.argv",
        ["matchguard", "run", "--id", "TC-5", "--id", "TC-21", "-w", "2", "--json", str(report_path)],
    )
    cli.main()

    assert mock_run_catalog == {"ids": ["TC-5", "TC-21"], "workers": 2}
    assert "rejected_as_expected: 2" in capsys.readouterr().out
    data = json.loads(report_path.read_text())
    assert [r["scenario_id"] for r in data["reports"]] == ["TC-5", "TC-21"]


def test_run_exits_non_zero_on_failure(monkeypatch, settings):
    async def _failing(scenarios, settings, workers=None):
        return CatalogReport(
            reports=[
                ScenarioReport(
                    scenario_id="TC-5",
                    outcome=Outcome.CONTRACT_VIOLATION,
                    status_code=200,
                    message="Expected status 400",
                )
            ]
        )

    monkeypatch.setattr("matchguard.cli.run_catalog", _failing)
    monkeypatch.setattr("matchguard.cli.get_settings", lambda: settings)
    monkeypatch.setattr("sys.argv", ["matchguard", "run", "--id", "TC-5"])

    with pytest.raises(SystemExit) as exc:
        cli.main()
    assert exc.value.code == 1


def test_unknown_scenario_id_exits(monkeypatch):
    monkeypatch.setattr("sys.argv", ["matchguard", "list", "--id", "TC-999"])
    with pytest.raises(SystemExit) as exc:
        cli.main()
    assert exc.value.code == 2


@pytest.mark.parametrize("workers", ["0", "-3"])
def test_run_rejects_non_positive_workers(monkeypatch, mock_run_catalog, workers):
    monkeypatch.setattr("sys.argv", ["matchguard", "run", "--workers", workers])
    with pytest.raises(SystemExit) as exc:
        cli.main()
    assert exc.value.code == 2
    assert "ids" not in mock_run_catalog


def test_malformed_quality_file_exits(monkeypatch, tmp_path):
    path = tmp_path / "cases.json"
    path.write_text(json.dumps([{"id": "Q-9", "expectedProductMatches": 0}]))
    monkeypatch.setattr("sys.argv", ["matchguard", "list", "--quality-file", str(path)])
    with pytest.raises(SystemExit) as exc:
        cli.main()
    assert exc.value.code == 2
