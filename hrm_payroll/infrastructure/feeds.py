"""Clients for the HR backend that owns attendance, leave, staff and payroll data.

The payroll engine never persists anything itself.  It reads feeds through a
:class:`FeedClient` and hands create/update calls back to the same backend.
Tests and local runs use :class:`InMemoryFeedClient`; production installs an
:class:`HttpFeedClient` during application start-up.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Protocol

import httpx

from hrm_payroll.core.validation import DataUnavailable
from hrm_payroll.logging_config import get_logger

logger = get_logger(__name__)


class FeedClient(Protocol):
    """Contract for the HR backend integration."""

    def fetch_attendance(self, staff_id: str) -> list[dict[str, Any]]: ...

    def fetch_leaves(self) -> list[dict[str, Any]]: ...

    def fetch_staff(self) -> Any: ...

    def fetch_payrolls(self) -> Any: ...

    def create_payroll(self, payload: dict[str, Any]) -> dict[str, Any]: ...

    def update_payroll(self, payroll_id: str, payload: dict[str, Any]) -> dict[str, Any]: ...


def unwrap_list(payload: Any) -> list[Any]:
    """Return the list inside ``data`` / ``data.data`` envelopes."""

    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        data = payload.get("data")
        if isinstance(data, list):
            return data
        if isinstance(data, dict) and isinstance(data.get("data"), list):
            return data["data"]
    return []


class HttpFeedClient:
    """Feed client talking JSON over HTTP."""

    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        timeout: float = 10.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        if not base_url.startswith(("http://", "https://")):
            raise ValueError("base_url must include scheme and host")
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._client = http_client or httpx.Client(timeout=timeout)
        self._owns_client = http_client is None

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self._base_url}{path}"
        try:
            response = self._client.request(method, url, headers=self._headers(), **kwargs)
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("feed request failed", extra={"method": method, "url": url, "reason": str(exc)})
            raise DataUnavailable(f"{method} {path} failed: {exc}") from exc

    def fetch_attendance(self, staff_id: str) -> list[dict[str, Any]]:
        return unwrap_list(self._request("GET", f"/attendance/employee/{staff_id}"))

    def fetch_leaves(self) -> list[dict[str, Any]]:
        return unwrap_list(self._request("GET", "/leave-requests"))

    def fetch_staff(self) -> Any:
        return self._request("GET", "/employees")

    def fetch_payrolls(self) -> Any:
        return self._request("GET", "/payrolls")

    def create_payroll(self, payload: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "/payrolls", json=payload)

    def update_payroll(self, payroll_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        return self._request("PUT", f"/payrolls/{payroll_id}", json=payload)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()


class InMemoryFeedClient:
    """Feed client backed by plain lists."""

    def __init__(
        self,
        *,
        staff: list[dict[str, Any]] | None = None,
        attendance: list[dict[str, Any]] | None = None,
        leaves: list[dict[str, Any]] | None = None,
        payrolls: list[dict[str, Any]] | None = None,
    ) -> None:
        self.staff = list(staff or [])
        self.attendance = list(attendance or [])
        self.leaves = list(leaves or [])
        self.payrolls = list(payrolls or [])
        self._counter = 0

    @classmethod
    def from_directory(cls, root: Path) -> "InMemoryFeedClient":
        """Load ``staff.json``, ``attendance.json``, ``leaves.json`` and ``payrolls.json``."""

        def _read(name: str) -> list[dict[str, Any]]:
            path = root / name
            if not path.exists():
                return []
            return unwrap_list(json.loads(path.read_text(encoding="utf-8")))

        return cls(
            staff=_read("staff.json"),
            attendance=_read("attendance.json"),
            leaves=_read("leaves.json"),
            payrolls=_read("payrolls.json"),
        )

    def fetch_attendance(self, staff_id: str) -> list[dict[str, Any]]:
        rows = []
        for row in self.attendance:
            owner = row.get("employeeId") or row.get("staffId")
            if isinstance(owner, dict):
                owner = owner.get("_id") or owner.get("id")
            if str(owner) == str(staff_id):
                rows.append(dict(row))
        return rows

    def fetch_leaves(self) -> list[dict[str, Any]]:
        return [dict(row) for row in self.leaves]

    def fetch_staff(self) -> Any:
        return {"data": [dict(row) for row in self.staff]}

    def fetch_payrolls(self) -> Any:
        return {"data": {"payrolls": [dict(row) for row in self.payrolls]}}

    def create_payroll(self, payload: dict[str, Any]) -> dict[str, Any]:
        self._counter += 1
        record = {**payload, "_id": f"payroll-{self._counter:05d}"}
        self.payrolls.append(record)
        return {"success": True, "data": record}

    def update_payroll(self, payroll_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        for index, row in enumerate(self.payrolls):
            if str(row.get("_id") or row.get("id")) == payroll_id:
                self.payrolls[index] = {**row, **payload}
                return {"success": True, "data": self.payrolls[index]}
        raise DataUnavailable(f"payroll {payroll_id} not found")


_client: FeedClient = InMemoryFeedClient()


def configure_feed_client(client: FeedClient) -> None:
    """Install the feed client used by the payroll service."""

    global _client
    _client = client


def get_feed_client() -> FeedClient:
    """Return the currently configured feed client."""

    return _client
