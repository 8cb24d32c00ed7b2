#!/usr/bin/env python3
"""
CLI round trip: classify, batch and insights commands
"""

import importlib.util
import json
from pathlib import Path

import pytest

CLI_PATH = Path(__file__).parent.parent.parent / "applications" / "cli" / "main.py"


@pytest.fixture(scope="module")
def cli():
    spec = importlib.util.spec_from_file_location("civic_triage_cli", CLI_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def write_json(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


class TestCli:

    def test_classify(self, cli, capsys):
        code = cli.main(["classify", "--title", "Urgent gas leak",
                         "--description", "Dangerous gas leak, immediate evacuation"])
        output = json.loads(capsys.readouterr().out)

        assert code == 0
        assert output["priority"] == "Critical"
        assert output["department"] == "Fire Department"
        assert "gas leak" in output["urgencyKeywords"]

    def test_classify_empty(self, cli, capsys):
        code = cli.main(["classify"])
        output = json.loads(capsys.readouterr().out)

        assert code == 0
        assert output["priority"] == "Low"
        assert output["confidence"] == 0.5

    def test_batch_then_insights(self, cli, capsys, tmp_path):
        complaints = [
            {"id": 1, "title": "Overflowing trash", "description": "bins not collected for a week"},
            {"id": 2, "title": "Fire alarm", "description": "smoke detector beeping, possible fire"},
        ]
        code = cli.main(["batch", write_json(tmp_path / "complaints.json", complaints)])
        batch = json.loads(capsys.readouterr().out)

        assert code == 0
        assert [item["id"] for item in batch] == [1, 2]
        assert batch[0]["analysis"]["department"] == "Sanitation"
        assert batch[1]["analysis"]["department"] == "Fire Department"

        code = cli.main(["insights", write_json(tmp_path / "classified.json", batch)])
        insights = json.loads(capsys.readouterr().out)

        assert code == 0
        assert insights["totalComplaints"] == 2
        assert insights["departmentDistribution"] == {"Sanitation": 1, "Fire Department": 1}
        assert insights["avgConfidence"] > 0
        assert sum(insights["sentimentDistribution"].values()) == 2

    def test_missing_file(self, cli, capsys, tmp_path):
        code = cli.main(["batch", str(tmp_path / "missing.json")])

        assert code == 1
        assert "Error" in capsys.readouterr().err

    def test_non_array_file(self, cli, capsys, tmp_path):
        code = cli.main(["insights", write_json(tmp_path / "object.json", {"id": 1})])

        assert code == 1
