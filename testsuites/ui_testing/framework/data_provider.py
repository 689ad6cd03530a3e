"""
================================================================================
YAML Data Provider
================================================================================

Loads data-driven UI cases from YAML for pytest parametrisation.

File format:
    cases:
      - id: missing_name
        description: Submitting without a name shows the required message
        tags: [negative]
        data:
          name: ""
          email: "group@test.example.com"
        expected:
          field: name
          message: "Name is required"

Features:
- Single case or list of cases per file
- Tag filtering
- pytest.param objects with readable ids

================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pytest
import yaml
from loguru import logger

from .exceptions import ConfigurationError


DATA_DIR = Path(__file__).parent.parent / "data"


@dataclass(frozen=True)
class DataCase:
    """One data-driven case."""
    case_id: str
    data: Dict[str, Any]
    expected: Dict[str, Any] = field(default_factory=dict)
    description: str = ""
    tags: tuple = ()


def load_cases(file_name: Union[str, Path], tags: Optional[List[str]] = None) -> List[DataCase]:
    """
    Load cases from a YAML file.

    Args:
        file_name: File name inside the data directory, or a path
        tags: Keep only cases carrying any of these tags

    Returns:
        List of DataCase objects

    Raises:
        ConfigurationError: Missing file, invalid YAML or malformed case
    """
    path = Path(file_name)
    if not path.is_absolute() and not path.exists():
        path = DATA_DIR / path
    if not path.exists():
        raise ConfigurationError(f"Test data file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"YAML parsing error in {path}: {e}") from e

    if content is None:
        logger.warning(f"Empty YAML file: {path}")
        return []

    # Handle both single case and list of cases
    raw_cases = content.get("cases", [content]) if isinstance(content, dict) else content
    if not isinstance(raw_cases, list):
        raw_cases = [raw_cases]

    cases = [_parse_case(raw, path, index) for index, raw in enumerate(raw_cases)]
    if tags:
        cases = [case for case in cases if any(tag in case.tags for tag in tags)]

    logger.info(f"Loaded {len(cases)} cases from {path.name}")
    return cases


def _parse_case(raw: Any, source: Path, index: int) -> DataCase:
    if not isinstance(raw, dict) or "data" not in raw:
        raise ConfigurationError(f"Case #{index} in {source} must be a mapping with a 'data' key")
    return DataCase(
        case_id=str(raw.get("id") or f"case_{index}"),
        data=dict(raw["data"] or {}),
        expected=dict(raw.get("expected") or {}),
        description=str(raw.get("description", "")),
        tags=tuple(raw.get("tags", [])),
    )


def as_params(cases: List[DataCase]) -> List[Any]:
    """Wrap cases as pytest.param with the case id as test id."""
    return [pytest.param(case, id=case.case_id) for case in cases]


__all__ = ["DATA_DIR", "DataCase", "as_params", "load_cases"]
