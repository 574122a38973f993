"""Metrics logging for benchmark runs.

Every entry is appended to a JSON-lines file; selected entries are echoed
to the console.
"""

import json
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional
import numpy as np


def _json_default(value: Any) -> Any:
    """Make numpy scalars/arrays and enums JSON serializable."""
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Path):
        return str(value)
    return str(value)


@dataclass
class MetricsLogger:
    """Metrics logger writing JSONL records and console lines.

    Args:
        log_dir: Directory for logs
        run_name: Name of this run (file is ``<run_name>_metrics.jsonl``)
        console_interval: Echo to console every N steps (0 disables)
    """

    log_dir: Path
    run_name: str = "expectigammon"
    console_interval: int = 1

    # Internal state
    _jsonl_file: Optional[Any] = field(default=None, init=False, repr=False)
    _step_count: int = field(default=0, init=False, repr=False)
    _start_time: float = field(default_factory=time.time, init=False, repr=False)

    def __post_init__(self):
        """Create the log directory and open the JSONL file."""
        self.log_dir = Path(self.log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self._jsonl_file = open(self.jsonl_path, 'a')

    @property
    def jsonl_path(self) -> Path:
        return self.log_dir / f"{self.run_name}_metrics.jsonl"

    def _write(self, entry: Dict[str, Any]) -> None:
        self._jsonl_file.write(json.dumps(entry, default=_json_default) + '\n')
        self._jsonl_file.flush()

    def log_metrics(
        self,
        metrics: Dict[str, Any],
        step: Optional[int] = None,
        prefix: str = "",
    ) -> None:
        """Log metrics.

        Args:
            metrics: Dictionary of metric name -> value
            step: Step number (auto-incremented if None)
            prefix: Prefix to add to all metric names (e.g., "eval/")
        """
        if step is None:
            step = self._step_count
            self._step_count += 1

        if prefix:
            metrics = {f"{prefix}{k}": v for k, v in metrics.items()}

        self._write({
            "step": step,
            "timestamp": time.time() - self._start_time,
            **metrics,
        })

        if self.console_interval and step % self.console_interval == 0:
            self._log_console(step, metrics)

    def _log_console(self, step: int, metrics: Dict[str, Any]) -> None:
        """Log metrics to console in readable format."""
        elapsed = time.time() - self._start_time
        metrics_str = " | ".join(
            f"{k}: {v:.4f}" if isinstance(v, float) else f"{k}: {v}"
            for k, v in metrics.items()
        )
        print(f"[Step {step:6d}] [{elapsed:8.1f}s] {metrics_str}")

    def log_hyperparams(self, params: Dict[str, Any]) -> None:
        """Log run configuration.

        Args:
            params: Dictionary of parameter name -> value
        """
        self._write({
            "type": "hyperparameters",
            "timestamp": time.time() - self._start_time,
            **params,
        })

    def close(self) -> None:
        if self._jsonl_file is not None:
            self._jsonl_file.close()
            self._jsonl_file = None

    def __enter__(self) -> "MetricsLogger":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
