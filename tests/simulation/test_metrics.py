"""Tests for JSONL metrics logging."""

import json

import numpy as np

from expectigammon.core.types import Side
from expectigammon.simulation.metrics import MetricsLogger


def _read_entries(path):
    with open(path) as f:
        return [json.loads(line) for line in f]


class TestMetricsLogger:
    """Tests for MetricsLogger."""

    def test_writes_jsonl(self, tmp_path):
        """Test metrics written as JSON lines."""
        with MetricsLogger(log_dir=tmp_path, run_name="run", console_interval=0) as metrics:
            metrics.log_metrics({"win_rate": 0.5})
            metrics.log_metrics({"win_rate": 0.75})
            path = metrics.jsonl_path

        assert path == tmp_path / "run_metrics.jsonl"
        entries = _read_entries(path)
        assert [e["step"] for e in entries] == [0, 1]
        assert entries[1]["win_rate"] == 0.75
        assert "timestamp" in entries[0]

    def test_prefix_and_explicit_step(self, tmp_path):
        """Test metric prefix and explicit step."""
        with MetricsLogger(log_dir=tmp_path, console_interval=0) as metrics:
            metrics.log_metrics({"wins": 3}, step=10, prefix="eval/")

        entry = _read_entries(tmp_path / "expectigammon_metrics.jsonl")[0]
        assert entry["step"] == 10
        assert entry["eval/wins"] == 3

    def test_numpy_and_enum_values(self, tmp_path):
        """Test numpy and enum values are serialized."""
        with MetricsLogger(log_dir=tmp_path, console_interval=0) as metrics:
            metrics.log_metrics({
                "score": np.float32(0.5),
                "counts": np.array([1, 2]),
                "winner": Side.MAX,
            })

        entry = _read_entries(metrics.jsonl_path)[0]
        assert entry["score"] == 0.5
        assert entry["counts"] == [1, 2]
        assert entry["winner"] == "max"

    def test_hyperparams(self, tmp_path):
        """Test hyperparameter entry."""
        with MetricsLogger(log_dir=tmp_path, console_interval=0) as metrics:
            metrics.log_hyperparams({"depth": 2, "opponent": "random"})

        entry = _read_entries(metrics.jsonl_path)[0]
        assert entry["type"] == "hyperparameters"
        assert entry["depth"] == 2

    def test_console_interval(self, tmp_path, capsys):
        """Test console echo interval."""
        with MetricsLogger(log_dir=tmp_path, console_interval=2) as metrics:
            for step in range(4):
                metrics.log_metrics({"value": float(step)}, step=step)

        lines = capsys.readouterr().out.strip().splitlines()
        assert len(lines) == 2
        assert "value: 0.0000" in lines[0]
        assert "value: 2.0000" in lines[1]

    def test_creates_directory_and_appends(self, tmp_path):
        """Test directory creation and appending."""
        log_dir = tmp_path / "nested" / "logs"
        with MetricsLogger(log_dir=log_dir, console_interval=0) as metrics:
            metrics.log_metrics({"a": 1})
        with MetricsLogger(log_dir=log_dir, console_interval=0) as metrics:
            metrics.log_metrics({"a": 2})

        assert len(_read_entries(metrics.jsonl_path)) == 2

    def test_close_is_idempotent(self, tmp_path):
        """Test closing twice."""
        metrics = MetricsLogger(log_dir=tmp_path)
        metrics.close()
        metrics.close()
