"""
In-Memory Storage for guest/demo sessions.

Holds a private copy of the sample dataset and never touches the network.
New entities get timestamp-derived local ids such as
"project-guest-1718000000000". All values handed out are deep copies, so
callers cannot change stored state without going through a method.
"""

import time
from datetime import datetime, timezone
from typing import Optional

from hometrack.models.home import Home, HomeHistoryEntry
from hometrack.models.project import Project
from hometrack.models.result import StorageResult
from hometrack.services.storage.interface import ChildCollection, HomeStorage
from hometrack.services.storage.sample_data import (
    sample_home,
    sample_home_history,
    sample_projects,
)


GUEST_HOME_ID = "home-guest"


class InMemoryHomeStorage(HomeStorage):
    """Storage backed by plain Python lists."""

    def __init__(
        self,
        home: Optional[Home] = None,
        projects: Optional[list[Project]] = None,
        home_history: Optional[list[HomeHistoryEntry]] = None,
    ):
        self._home = home
        self._projects = list(projects or [])
        self._history = list(home_history or [])
        self._issued_ids: set[str] = set()

    @classmethod
    def with_sample_data(cls) -> "InMemoryHomeStorage":
        """Storage seeded with the built-in demo dataset."""
        return cls(
            home=sample_home(),
            projects=sample_projects(),
            home_history=sample_home_history(),
        )

    def _local_id(self, prefix: str) -> str:
        """Timestamp-derived id, unique within this storage."""
        stamp = int(time.time() * 1000)
        candidate = f"{prefix}-guest-{stamp}"
        while candidate in self._issued_ids:
            stamp += 1
            candidate = f"{prefix}-guest-{stamp}"
        self._issued_ids.add(candidate)
        return candidate

    def _find_project(self, project_id: str) -> Optional[int]:
        for idx, project in enumerate(self._projects):
            if project.id == project_id:
                return idx
        return None

    def _with_child_ids(self, collection: ChildCollection, items: list) -> list:
        if collection == ChildCollection.NOTES:
            return list(items)
        prefix = collection.value.rstrip("s")
        return [
            item if item.id else item.model_copy(update={"id": self._local_id(prefix)})
            for item in items
        ]

    # -------------------------------------------------------------------------
    # Home
    # -------------------------------------------------------------------------

    async def get_home(self, user_id: str) -> StorageResult[Home]:
        if self._home is None:
            return StorageResult.not_found("No home set up")
        return StorageResult.ok(self._home.model_copy(deep=True))

    async def create_home(self, home: Home, user_id: str) -> StorageResult[Home]:
        self._home = home.model_copy(update={"id": GUEST_HOME_ID}, deep=True)
        return StorageResult.ok(self._home.model_copy(deep=True))

    async def update_home(self, home: Home, user_id: str) -> StorageResult[Home]:
        if self._home is None or self._home.id != home.id:
            return StorageResult.not_found(f"Home not found: {home.id}")
        self._home = home.model_copy(deep=True)
        return StorageResult.ok(self._home.model_copy(deep=True))

    # -------------------------------------------------------------------------
    # Projects
    # -------------------------------------------------------------------------

    async def get_projects(self, home_id: str) -> StorageResult[list[Project]]:
        return StorageResult.ok([p.model_copy(deep=True) for p in self._projects])

    async def get_complete_project(self, project_id: str) -> StorageResult[Project]:
        idx = self._find_project(project_id)
        if idx is None:
            return StorageResult.not_found(f"Project not found: {project_id}")
        return StorageResult.ok(self._projects[idx].model_copy(deep=True))

    async def create_project(
        self,
        project: Project,
        home_id: str,
    ) -> StorageResult[Project]:
        now = datetime.now(timezone.utc)
        updates = {
            "id": self._local_id("project"),
            "created_date": now,
            "updated_date": now,
        }
        for collection in ChildCollection:
            updates[collection.value] = self._with_child_ids(
                collection, getattr(project, collection.value)
            )
        stored = project.model_copy(update=updates, deep=True)
        self._projects.append(stored)
        return StorageResult.ok(stored.model_copy(deep=True))

    async def update_project(self, project: Project) -> StorageResult[Project]:
        idx = self._find_project(project.id)
        if idx is None:
            return StorageResult.not_found(f"Project not found: {project.id}")
        updates = {"updated_date": datetime.now(timezone.utc)}
        for collection in ChildCollection:
            updates[collection.value] = self._with_child_ids(
                collection, getattr(project, collection.value)
            )
        self._projects[idx] = project.model_copy(update=updates, deep=True)
        return StorageResult.ok(self._projects[idx].model_copy(deep=True))

    async def delete_project(self, project_id: str) -> StorageResult[bool]:
        idx = self._find_project(project_id)
        if idx is None:
            return StorageResult.not_found(f"Project not found: {project_id}")
        del self._projects[idx]
        return StorageResult.ok(True)

    # -------------------------------------------------------------------------
    # Child collections
    # -------------------------------------------------------------------------

    async def get_children(
        self,
        project_id: str,
        collection: ChildCollection,
    ) -> StorageResult[list]:
        idx = self._find_project(project_id)
        if idx is None:
            return StorageResult.not_found(f"Project not found: {project_id}")
        items = getattr(self._projects[idx], collection.value)
        return StorageResult.ok(
            [i if isinstance(i, str) else i.model_copy(deep=True) for i in items]
        )

    async def create_children(
        self,
        project_id: str,
        collection: ChildCollection,
        items: list,
    ) -> StorageResult[bool]:
        idx = self._find_project(project_id)
        if idx is None:
            return StorageResult.not_found(f"Project not found: {project_id}")
        project = self._projects[idx]
        existing = getattr(project, collection.value)
        self._projects[idx] = project.model_copy(
            update={collection.value: existing + self._with_child_ids(collection, items)},
            deep=True,
        )
        return StorageResult.ok(True)

    async def replace_children(
        self,
        project_id: str,
        collection: ChildCollection,
        items: list,
    ) -> StorageResult[bool]:
        idx = self._find_project(project_id)
        if idx is None:
            return StorageResult.not_found(f"Project not found: {project_id}")
        self._projects[idx] = self._projects[idx].model_copy(
            update={collection.value: self._with_child_ids(collection, items)},
            deep=True,
        )
        return StorageResult.ok(True)

    # -------------------------------------------------------------------------
    # Home history
    # -------------------------------------------------------------------------

    async def get_home_history(
        self,
        home_id: str,
    ) -> StorageResult[list[HomeHistoryEntry]]:
        return StorageResult.ok([e.model_copy(deep=True) for e in self._history])

    async def create_home_history_entry(
        self,
        home_id: str,
        entry: HomeHistoryEntry,
    ) -> StorageResult[HomeHistoryEntry]:
        stored = entry.model_copy(update={"id": self._local_id("history")})
        self._history.insert(0, stored)
        return StorageResult.ok(stored.model_copy(deep=True))

    async def update_home_history_entry(
        self,
        entry: HomeHistoryEntry,
    ) -> StorageResult[HomeHistoryEntry]:
        for idx, existing in enumerate(self._history):
            if existing.id == entry.id:
                self._history[idx] = entry.model_copy(deep=True)
                return StorageResult.ok(entry.model_copy(deep=True))
        return StorageResult.not_found(f"History entry not found: {entry.id}")
