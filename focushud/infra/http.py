"""
Shared HTTP boundary for the remote services.

Architecture Decision: Best-effort sync
Every failure (network, HTTP status, malformed body) is caught here and
turned into "no answer". Callers get None and decide to ignore it; nothing
above this layer ever sees an exception from the network.
"""

import enum
import logging
from typing import Any, NamedTuple, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class SyncError(enum.Enum):
    """Why a remote call produced no answer"""
    TRANSPORT = "transport"        # connection refused, DNS, timeout
    HTTP_STATUS = "http_status"    # non-2xx response
    MALFORMED = "malformed"        # body is not the JSON we expect
    INCONSISTENT = "inconsistent"  # caller asked for something impossible


class ApiResult(NamedTuple):
    """Outcome of one request: decoded body, or the kind of failure"""
    data: Optional[Any] = None
    error: Optional[SyncError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ApiClient:
    """
    Thin wrapper around ``httpx.AsyncClient``.

    Subclasses call ``_request`` and decide on the ``ApiResult`` of that
    very call. Requests on one client may overlap, so ``last_error`` (the
    most recent failure of any call) is for reporting only.
    """

    name = "API"

    def __init__(self, base_url: str, *, auth: Optional[httpx.Auth] = None,
                 headers: Optional[dict] = None, timeout: float = DEFAULT_TIMEOUT,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.last_error: Optional[SyncError] = None
        self._http = httpx.AsyncClient(
            base_url=base_url,
            auth=auth,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def _request(self, method: str, path: str, **kwargs) -> ApiResult:
        """
        Perform one request. No retries.

        Returns:
            ApiResult with the decoded JSON (None for a JSON ``null`` or an
            empty body), or with the error kind on any failure.
        """
        try:
            response = await self._http.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            return self._fail(SyncError.HTTP_STATUS, f"{method} {path} -> {e.response.status_code}")
        except httpx.HTTPError as e:
            return self._fail(SyncError.TRANSPORT, f"{method} {path}: {e!r}")

        if not response.content:
            return ApiResult()
        try:
            return ApiResult(response.json())
        except ValueError as e:
            return self._fail(SyncError.MALFORMED, f"{method} {path}: {e}")

    def _fail(self, kind: SyncError, message: str) -> ApiResult:
        self.last_error = kind
        logger.warning(f"{self.name} {kind.value} error: {message}")
        return ApiResult(error=kind)

    async def aclose(self):
        await self._http.aclose()
