"""
Terraform Cloud / Enterprise API client.

Covers only the endpoints the unblocker needs: paged workspace and run
listings and the apply/discard/cancel run actions.
"""

from __future__ import annotations

from typing import Any, Optional
from urllib.parse import urlparse

import requests

from .models import Run, RunList, WorkspaceList, WorkspaceRecord, Pagination


DEFAULT_ADDRESS = "https://app.terraform.io"
API_PATH = "/api/v2"


class TFEError(Exception):
    """Raised when a Terraform Cloud API call fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(TFEError):
    """Raised when the requested resource doesn't exist or isn't visible."""
    pass


class ClientError(TFEError):
    """Raised when the client can't be built from the given settings."""
    pass


def get_headers(token: str) -> dict:
    return {
        "Authorization": f"Bearer {token}",
        "Content-Type": "application/vnd.api+json",
    }


class TFEClient:
    """
    Thin synchronous wrapper around the Terraform Cloud v2 API.

    Every call blocks on a single HTTP round trip. Nothing is retried.
    """

    def __init__(
        self,
        token: str,
        address: str = DEFAULT_ADDRESS,
        timeout: float = 30,
        page_size: int = 20,
        session: requests.Session = None,
    ):
        if not token:
            raise ClientError("Missing API token")

        parsed = urlparse(address or "")
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ClientError(f"Invalid address: {address!r}")

        self.address = address.rstrip("/")
        self.base_url = f"{self.address}{API_PATH}"
        self.timeout = timeout
        self.page_size = page_size
        self.session = session or requests.Session()
        self.session.headers.update(get_headers(token))

    def _request(self, method: str, path: str, **kwargs: Any) -> Optional[dict]:
        url = f"{self.base_url}{path}"
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.Timeout:
            raise TFEError(f"{method} {path} timed out after {self.timeout} seconds") from None
        except requests.exceptions.RequestException as e:
            raise TFEError(f"{method} {path} failed: {e}") from e

        if resp.status_code == 404:
            raise NotFoundError(f"{method} {path}: resource not found", 404)
        if resp.status_code >= 400:
            raise TFEError(
                f"{method} {path} returned {resp.status_code}: {_error_detail(resp)}",
                resp.status_code,
            )

        if not resp.content:
            return None
        return resp.json()

    # =========================================================================
    # Listings
    # =========================================================================

    def list_workspaces(
        self,
        org: str,
        search: str = "",
        include_current_run: bool = True,
        page: int = 1,
    ) -> WorkspaceList:
        """List one page of an organization's workspaces."""
        params: dict[str, Any] = {
            "page[number]": page,
            "page[size]": self.page_size,
        }
        if search:
            params["search[name]"] = search
        if include_current_run:
            params["include"] = "current_run"

        body = self._request("GET", f"/organizations/{org}/workspaces", params=params) or {}

        included_runs = {
            item["id"]: Run.from_api(item)
            for item in body.get("included", [])
            if item.get("type") == "runs"
        }
        return WorkspaceList(
            items=[WorkspaceRecord.from_api(ws, included_runs) for ws in body.get("data", [])],
            pagination=Pagination.from_api(body),
        )

    def list_runs(self, workspace_id: str, page: int = 1) -> RunList:
        """List one page of a workspace's runs, most recent first."""
        params = {
            "page[number]": page,
            "page[size]": self.page_size,
        }
        body = self._request("GET", f"/workspaces/{workspace_id}/runs", params=params) or {}
        return RunList(
            items=[Run.from_api(run) for run in body.get("data", [])],
            pagination=Pagination.from_api(body),
        )

    # =========================================================================
    # Run actions
    # =========================================================================

    def _run_action(self, run_id: str, action: str, comment: str) -> None:
        self._request("POST", f"/runs/{run_id}/actions/{action}", json={"comment": comment})

    def apply_run(self, run_id: str, comment: str) -> None:
        self._run_action(run_id, "apply", comment)

    def discard_run(self, run_id: str, comment: str) -> None:
        self._run_action(run_id, "discard", comment)

    def cancel_run(self, run_id: str, comment: str) -> None:
        self._run_action(run_id, "cancel", comment)


def _error_detail(resp: requests.Response) -> str:
    """Flatten a JSON:API errors array into one line."""
    try:
        body = resp.json()
    except ValueError:
        return resp.text.strip() or resp.reason or "unknown error"

    errors = (body.get("errors") if isinstance(body, dict) else None) or []

    messages = []
    for error in errors:
        if isinstance(error, dict):
            parts = [error.get("title"), error.get("detail")]
            messages.append(": ".join(p for p in parts if p))
        else:
            messages.append(str(error))
    return "; ".join(m for m in messages if m) or resp.reason or "unknown error"
