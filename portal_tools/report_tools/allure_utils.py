"""
================================================================================
Allure Report Utilities
================================================================================

This module provides helpers for enriching Allure test reports produced by
the provider portal UI suite.

Features:
- Text, JSON and PNG attachment helpers
- Page state snapshot (URL + title) for failed steps
- Execution summary with pass rate

================================================================================
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union

import allure
from loguru import logger


# ================================================================================
# Attachment Helpers
# ================================================================================

def attach_json(data: Any, name: str = "Data"):
    """
    Attach JSON data to Allure report.

    Args:
        data: Data to attach (will be JSON serialized)
        name: Attachment name
    """
    json_str = json.dumps(data, indent=2, default=str)
    allure.attach(
        json_str,
        name=name,
        attachment_type=allure.attachment_type.JSON
    )


def attach_text(text: str, name: str = "Text"):
    """
    Attach text content to Allure report.

    Args:
        text: Text to attach
        name: Attachment name
    """
    allure.attach(
        text,
        name=name,
        attachment_type=allure.attachment_type.TEXT
    )


def attach_png(data: Union[bytes, str, Path], name: str = "Screenshot"):
    """
    Attach a PNG screenshot, given either raw bytes or a file path.

    Args:
        data: PNG bytes or path to a PNG file
        name: Attachment name
    """
    if isinstance(data, (bytes, bytearray)):
        allure.attach(
            bytes(data),
            name=name,
            attachment_type=allure.attachment_type.PNG
        )
        return

    path = Path(data)
    if not path.exists():
        logger.warning(f"Screenshot file not found, skipping attachment: {path}")
        return
    allure.attach.file(
        str(path),
        name=name,
        attachment_type=allure.attachment_type.PNG
    )


def attach_page_state(url: Optional[str], title: Optional[str], name: str = "Page State"):
    """
    Attach the current browser location for troubleshooting.

    Args:
        url: Current page URL (None when it could not be read)
        title: Current page title (None when it could not be read)
        name: Attachment name
    """
    attach_json(
        {
            "url": url or "<unavailable>",
            "title": title or "<unavailable>",
            "captured_at": datetime.now().isoformat(),
        },
        name=name,
    )


# ================================================================================
# Execution Summary
# ================================================================================

@dataclass
class ExecutionSummary:
    """Summary of outcomes recorded during a run."""
    passed: int = 0
    failed: int = 0
    broken: int = 0
    skipped: int = 0
    rerun: int = 0
    steps: int = 0
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())

    @property
    def total(self) -> int:
        """Final outcomes only; reruns are intermediate attempts."""
        return self.passed + self.failed + self.broken + self.skipped

    @property
    def pass_rate(self) -> float:
        """Calculate pass rate percentage."""
        if self.total == 0:
            return 0.0
        return (self.passed / self.total) * 100

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "total": self.total,
            "passed": self.passed,
            "failed": self.failed,
            "broken": self.broken,
            "skipped": self.skipped,
            "rerun": self.rerun,
            "steps": self.steps,
            "pass_rate": f"{self.pass_rate:.2f}%",
            "timestamp": self.timestamp,
        }
