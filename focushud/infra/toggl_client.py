"""
Toggl Track client - the time-entry side of the sync.

All methods are best effort: a failed call is logged and answered with
None / False / [] instead of raising.
"""

import logging
from typing import List, Optional

import httpx
from pydantic import ValidationError

from focushud.domain.models import Project, TimeEntry, utc_now
from focushud.infra.http import ApiClient, DEFAULT_TIMEOUT, SyncError

logger = logging.getLogger(__name__)

TOGGL_BASE_URL = "https://api.track.toggl.com/api/v9/"
CREATED_WITH = "FocusHUD"
ENTRY_TAGS = ["FocusHUD"]


class TogglClient(ApiClient):
    """Wraps the Toggl v9 REST API for a single API token"""

    name = "Toggl"

    def __init__(self, api_token: str, timeout: float = DEFAULT_TIMEOUT,
                 transport: Optional[httpx.AsyncBaseTransport] = None,
                 base_url: str = TOGGL_BASE_URL):
        # Toggl wants basic auth of "<token>:api_token"
        super().__init__(
            base_url,
            auth=httpx.BasicAuth(api_token, "api_token"),
            timeout=timeout,
            transport=transport,
        )

    async def current_entry(self) -> Optional[TimeEntry]:
        """
        Get the running entry of the user.

        Returns:
            The running TimeEntry, or None when nothing runs or the call failed
        """
        result = await self._request("GET", "me/time_entries/current")
        data = result.data
        if not data:
            return None
        try:
            return TimeEntry.model_validate(data)
        except ValidationError as e:
            self._fail(SyncError.MALFORMED, f"current entry: {e.error_count()} validation errors")
            return None

    async def start(self, description: str, workspace_id: int,
                    project_id: Optional[int] = None) -> bool:
        """
        Create a running entry (duration -1) starting now.

        The caller makes sure nothing else is running in the workspace.
        """
        payload = {
            "description": description,
            "tags": ENTRY_TAGS,
            "workspace_id": workspace_id,
            "project_id": project_id,
            "created_with": CREATED_WITH,
            "start": utc_now().strftime("%Y-%m-%dT%H:%M:%SZ"),
            "duration": -1,
        }
        result = await self._request("POST", f"workspaces/{workspace_id}/time_entries", json=payload)
        return result.ok

    async def stop(self, entry_id: int, workspace_id: int) -> bool:
        """
        Stop a running entry.

        Stopping an entry that is already stopped or gone is not an error for
        the caller; it only returns False.
        """
        result = await self._request(
            "PATCH", f"workspaces/{workspace_id}/time_entries/{entry_id}/stop"
        )
        if not result.ok:
            logger.info(f"Could not stop Toggl entry {entry_id} (maybe already stopped)")
            return False
        return True

    async def default_workspace(self) -> Optional[int]:
        """Get the default workspace id of the user"""
        data = (await self._request("GET", "me")).data
        if not isinstance(data, dict):
            return None
        workspace_id = data.get("default_workspace_id")
        if not isinstance(workspace_id, int):
            self._fail(SyncError.MALFORMED, "me: default_workspace_id missing")
            return None
        return workspace_id

    async def projects(self, workspace_id: int) -> List[Project]:
        """Get the active projects of a workspace"""
        result = await self._request("GET", f"workspaces/{workspace_id}/projects",
                                     params={"active": "true"})
        data = result.data
        if not isinstance(data, list):
            return []
        try:
            return [Project.model_validate(item) for item in data]
        except ValidationError as e:
            self._fail(SyncError.MALFORMED, f"projects: {e.error_count()} validation errors")
            return []
