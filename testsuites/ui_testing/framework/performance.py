"""
================================================================================
Performance Monitor
================================================================================

Per-test wall-clock timings, shared by all test threads.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import threading
import time
from typing import Dict, Optional

from loguru import logger

from portal_tools.report_tools import attach_text


class PerformanceMonitor:
    """Thread-safe test timer with a text summary."""

    def __init__(self, threshold_ms: Optional[float] = None):
        self.threshold_ms = threshold_ms
        self._lock = threading.Lock()
        self._started: Dict[str, float] = {}
        self._durations: Dict[str, float] = {}

    def start_test(self, test_name: str) -> None:
        with self._lock:
            self._started[test_name] = time.monotonic()
        logger.debug(f"Performance monitoring started for: {test_name}")

    def end_test(self, test_name: str) -> Optional[float]:
        """
        Stop timing `test_name`.

        Returns:
            Duration in milliseconds, or None if the test was never started
        """
        with self._lock:
            started = self._started.pop(test_name, None)
            if started is None:
                return None
            duration_ms = (time.monotonic() - started) * 1000
            self._durations[test_name] = duration_ms

        logger.info(f"Test '{test_name}' took {duration_ms:.0f}ms")
        if self.threshold_ms is not None and duration_ms > self.threshold_ms:
            warning = (
                f"Test '{test_name}' ran longer than expected: "
                f"{duration_ms:.0f}ms (threshold: {self.threshold_ms:.0f}ms)"
            )
            logger.warning(warning)
            attach_text(warning, name="Performance Warning")
        return duration_ms

    def duration(self, test_name: str) -> Optional[float]:
        with self._lock:
            return self._durations.get(test_name)

    @property
    def test_count(self) -> int:
        with self._lock:
            return len(self._durations)

    @property
    def total_ms(self) -> float:
        with self._lock:
            return sum(self._durations.values())

    @property
    def average_ms(self) -> float:
        with self._lock:
            if not self._durations:
                return 0.0
            return sum(self._durations.values()) / len(self._durations)

    def summary(self) -> str:
        """Slowest tests first."""
        with self._lock:
            durations = sorted(self._durations.items(), key=lambda item: item[1], reverse=True)
        lines = [
            "=== PERFORMANCE SUMMARY ===",
            f"Total Tests: {len(durations)}",
            f"Total Execution Time: {sum(d for _, d in durations):.0f}ms",
            f"Average Execution Time: {(sum(d for _, d in durations) / len(durations)) if durations else 0.0:.2f}ms",
            "=== INDIVIDUAL TEST TIMES ===",
        ]
        lines.extend(f"{name}: {duration:.0f}ms" for name, duration in durations)
        return "\n".join(lines)

    def reset(self) -> None:
        with self._lock:
            self._started.clear()
            self._durations.clear()


__all__ = ["PerformanceMonitor"]
