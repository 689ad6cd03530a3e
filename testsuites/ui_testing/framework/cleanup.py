"""
================================================================================
Test Data Cleanup Registry
================================================================================

Tracks backend entities created by tests and deletes them afterwards.

Features:
    - Records grouped per test name, plus an index per entity type
    - Per-test and suite-wide cleanup, most recently created first
    - Cleanup failures are logged and collected, never raised
    - REST delete actions for portal entities over httpx
    - Thread-safe: parallel tests register into one registry

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import itertools
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional

import httpx
from loguru import logger

from .config import PortalConfig


CleanupAction = Callable[[], None]

# REST collection paths per entity type
ENTITY_ENDPOINTS: Dict[str, str] = {
    "provider_group": "/api/provider-groups",
    "staff": "/api/staff",
    "location": "/api/locations",
    "nurse": "/api/nurses",
}


@dataclass(frozen=True)
class TestDataRecord:
    """One created entity awaiting cleanup."""

    __test__ = False

    test_name: str
    entity_type: str
    entity_id: str
    action: CleanupAction = field(repr=False, compare=False)
    sequence: int = 0
    created_at: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"{self.entity_type}:{self.entity_id} (test={self.test_name}, created={self.created_at:%H:%M:%S})"


@dataclass
class CleanupResult:
    """What one cleanup run did."""

    cleaned: List[TestDataRecord] = field(default_factory=list)
    failed: List[TestDataRecord] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


class TestDataCleanup:
    """
    Registry of created entities.

    Usage:
        registry = TestDataCleanup()
        registry.register("test_add_group", "provider_group", "pg-1", delete_action)
        registry.run_cleanup("test_add_group")
    """

    __test__ = False

    def __init__(self):
        self._lock = threading.Lock()
        self._by_test: Dict[str, List[TestDataRecord]] = {}
        self._by_type: Dict[str, List[str]] = {}
        self._sequence = itertools.count(1)

    def register(self, test_name: str, entity_type: str, entity_id: str, action: CleanupAction) -> TestDataRecord:
        """
        Register an entity for cleanup.

        Args:
            test_name: Test that created the entity
            entity_type: Entity kind, e.g. "provider_group"
            entity_id: Backend identifier
            action: Zero-argument callable deleting the entity

        Returns:
            The stored record
        """
        with self._lock:
            record = TestDataRecord(
                test_name=test_name,
                entity_type=entity_type,
                entity_id=str(entity_id),
                action=action,
                sequence=next(self._sequence),
            )
            self._by_test.setdefault(test_name, []).append(record)
            self._by_type.setdefault(entity_type, []).append(record.entity_id)
        logger.info(f"Registered test data for cleanup: {record}")
        return record

    def run_cleanup(self, test_name: str) -> CleanupResult:
        """Delete everything `test_name` registered, newest first."""
        with self._lock:
            records = self._by_test.pop(test_name, [])
            self._unindex(records)
        if not records:
            logger.debug(f"No test data to clean up for {test_name}")
        return self._execute(records)

    def run_all(self) -> CleanupResult:
        """Suite teardown: delete every remaining entity, newest first across tests."""
        with self._lock:
            records = [record for group in self._by_test.values() for record in group]
            self._by_test.clear()
            self._by_type.clear()
        logger.info(f"Suite cleanup of {len(records)} remaining entities")
        return self._execute(records)

    def pending(self, test_name: Optional[str] = None) -> List[TestDataRecord]:
        with self._lock:
            if test_name is not None:
                return list(self._by_test.get(test_name, []))
            return [record for group in self._by_test.values() for record in group]

    def entities_of_type(self, entity_type: str) -> List[str]:
        with self._lock:
            return list(self._by_type.get(entity_type, []))

    def summary(self) -> str:
        """Text summary of pending cleanup work."""
        with self._lock:
            lines = ["=== TEST DATA CLEANUP SUMMARY ==="]
            lines.append(f"Tests with pending data: {len(self._by_test)}")
            for entity_type, ids in sorted(self._by_type.items()):
                lines.append(f"{entity_type}: {len(ids)}")
            for test_name, records in sorted(self._by_test.items()):
                lines.append(f"{test_name}: {', '.join(str(r.entity_id) for r in records)}")
        return "\n".join(lines)

    def _unindex(self, records: List[TestDataRecord]) -> None:
        for record in records:
            ids = self._by_type.get(record.entity_type, [])
            if record.entity_id in ids:
                ids.remove(record.entity_id)
            if not ids:
                self._by_type.pop(record.entity_type, None)

    @staticmethod
    def _execute(records: List[TestDataRecord]) -> CleanupResult:
        result = CleanupResult()
        for record in sorted(records, key=lambda r: r.sequence, reverse=True):
            try:
                record.action()
                result.cleaned.append(record)
                logger.info(f"Cleaned up {record}")
            except Exception as e:
                result.failed.append(record)
                logger.error(f"Cleanup failed for {record}: {type(e).__name__}: {e}")
        return result


# ================================================================================
# REST delete actions
# ================================================================================

class PortalApiClient:
    """
    Minimal httpx client for deleting portal entities.

    Usage:
        with PortalApiClient.from_config(config) as api:
            api.delete_entity("provider_group", "pg-1")
    """

    def __init__(self, base_url: str, token: Optional[str] = None, timeout: float = 30.0,
                 transport: Optional[httpx.BaseTransport] = None):
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self.client = httpx.Client(
            base_url=base_url,
            headers=headers,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    @classmethod
    def from_config(cls, config: PortalConfig, transport: Optional[httpx.BaseTransport] = None) -> "PortalApiClient":
        return cls(
            base_url=config.api_base_url,
            token=config.get("app.api_token") or None,
            transport=transport,
        )

    def __enter__(self) -> "PortalApiClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        self.client.close()

    def delete_entity(self, entity_type: str, entity_id: str) -> None:
        """
        Delete one entity. A 404 counts as already deleted.

        Raises:
            KeyError: Unknown entity type
            httpx.HTTPStatusError: Any other non-2xx response
        """
        path = f"{ENTITY_ENDPOINTS[entity_type]}/{entity_id}"
        response = self.client.delete(path)
        if response.status_code == 404:
            logger.debug(f"{entity_type} {entity_id} already gone")
            return
        response.raise_for_status()
        logger.debug(f"DELETE {path} -> {response.status_code}")

    def delete_action(self, entity_type: str, entity_id: str) -> CleanupAction:
        return lambda: self.delete_entity(entity_type, entity_id)


def register_entity(
    registry: TestDataCleanup,
    api: PortalApiClient,
    test_name: str,
    entity_type: str,
    entity_id: str,
) -> TestDataRecord:
    """Register an entity whose cleanup is a REST delete."""
    return registry.register(test_name, entity_type, entity_id, api.delete_action(entity_type, entity_id))


__all__ = [
    "CleanupResult",
    "ENTITY_ENDPOINTS",
    "PortalApiClient",
    "TestDataCleanup",
    "TestDataRecord",
    "register_entity",
]
