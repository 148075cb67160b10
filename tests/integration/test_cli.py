"""Tests for the ``scalesim`` command-line entry point."""

from __future__ import annotations

import json

import pytest

from scalesim.__main__ import main


@pytest.fixture
def topology_file(tmp_path, topology_payload):
    path = tmp_path / "design.json"
    path.write_text(json.dumps(topology_payload))
    return path


class TestMain:
    def test_prints_report(self, topology_file, capsys):
        assert main([str(topology_file), "--seed", "1"]) == 0

        out = capsys.readouterr().out
        assert "Performance score: 80/100" in out
        assert "Requests: 60000 total" in out

    def test_json_output(self, topology_file, capsys):
        code = main([
            str(topology_file), "--seed", "1", "--rps", "600",
            "--system-id", "orders", "--provider", "gcp", "--json",
        ])

        data = json.loads(capsys.readouterr().out)
        assert code == 0
        assert data["systemId"] == "orders"
        assert data["performanceScore"] == 45
        assert data["resourceUtilization"]["cost"]["provider"] == "gcp"

    def test_failures_and_pattern(self, topology_file, capsys):
        code = main([
            str(topology_file), "--seed", "2", "--pattern", "wave",
            "--failure", "network_partition", "--failure", "service_failure", "--json",
        ])

        data = json.loads(capsys.readouterr().out)
        assert code == 0
        assert data["metrics"]["errorRate"] > 0.05

    def test_writes_charts(self, topology_file, tmp_path, capsys):
        pytest.importorskip("matplotlib")

        assert main([str(topology_file), "--seed", "1", "--plot-dir", str(tmp_path / "charts")]) == 0
        assert (tmp_path / "charts" / "series.png").exists()
        assert (tmp_path / "charts" / "components.png").exists()

    def test_missing_topology_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "nope.json")]) == 1
        assert "cannot read topology" in capsys.readouterr().err

    def test_malformed_topology(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"components": [{"id": "a"}]}))

        assert main([str(path)]) == 1
        assert "missing" in capsys.readouterr().err

    def test_non_numeric_position_exits_cleanly(self, tmp_path, capsys):
        path = tmp_path / "bad_position.json"
        path.write_text(json.dumps({"components": [{"id": "a", "type": "cache", "position": {"x": "left"}}]}))

        assert main([str(path)]) == 1
        assert "non-numeric position" in capsys.readouterr().err

    def test_invalid_duration(self, topology_file, capsys):
        assert main([str(topology_file), "--duration", "0"]) == 1
        assert "duration" in capsys.readouterr().err

    def test_unknown_failure_rejected_by_parser(self, topology_file):
        with pytest.raises(SystemExit):
            main([str(topology_file), "--failure", "meteor"])
