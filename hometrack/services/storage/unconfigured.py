"""
Stub storage used when Supabase connection settings are missing.

Every operation fails with the same message so the UI can point the user
at the setup screen instead of showing empty data.
"""

import structlog

from hometrack.models.home import Home, HomeHistoryEntry
from hometrack.models.project import Project
from hometrack.models.result import StorageResult
from hometrack.services.storage.interface import ChildCollection, HomeStorage


SETUP_INCOMPLETE = "Supabase setup incomplete"

logger = structlog.get_logger(__name__)


class UnconfiguredHomeStorage(HomeStorage):
    """Reports every operation as failed."""

    def _fail(self, operation: str) -> StorageResult:
        logger.warning("storage_not_configured", operation=operation)
        return StorageResult.failure(SETUP_INCOMPLETE)

    async def get_home(self, user_id: str) -> StorageResult[Home]:
        return self._fail("get_home")

    async def create_home(self, home: Home, user_id: str) -> StorageResult[Home]:
        return self._fail("create_home")

    async def update_home(self, home: Home, user_id: str) -> StorageResult[Home]:
        return self._fail("update_home")

    async def get_projects(self, home_id: str) -> StorageResult[list[Project]]:
        return self._fail("get_projects")

    async def get_complete_project(self, project_id: str) -> StorageResult[Project]:
        return self._fail("get_complete_project")

    async def create_project(self, project: Project, home_id: str) -> StorageResult[Project]:
        return self._fail("create_project")

    async def update_project(self, project: Project) -> StorageResult[Project]:
        return self._fail("update_project")

    async def delete_project(self, project_id: str) -> StorageResult[bool]:
        return self._fail("delete_project")

    async def get_children(self, project_id: str, collection: ChildCollection) -> StorageResult[list]:
        return self._fail(f"get_{collection.value}")

    async def create_children(self, project_id: str, collection: ChildCollection, items: list) -> StorageResult[bool]:
        return self._fail(f"create_{collection.value}")

    async def replace_children(self, project_id: str, collection: ChildCollection, items: list) -> StorageResult[bool]:
        return self._fail(f"replace_{collection.value}")

    async def get_home_history(self, home_id: str) -> StorageResult[list[HomeHistoryEntry]]:
        return self._fail("get_home_history")

    async def create_home_history_entry(
        self,
        home_id: str,
        entry: HomeHistoryEntry,
    ) -> StorageResult[HomeHistoryEntry]:
        return self._fail("create_home_history_entry")

    async def update_home_history_entry(self, entry: HomeHistoryEntry) -> StorageResult[HomeHistoryEntry]:
        return self._fail("update_home_history_entry")
