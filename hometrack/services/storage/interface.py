"""
Abstract Storage Interface

DESIGN DECISION: The orchestration layer talks to one storage capability.
Which implementation it gets is decided once, when the session starts:

1. SupabaseHomeStorage     - the user's real data
2. InMemoryHomeStorage     - guest/demo mode with sample data
3. UnconfiguredHomeStorage - connection settings missing, every call fails

Every operation returns a StorageResult (ok / not_found / failed) and never
raises, so callers can tell a missing row from a failed request.

Child collections of a project are updated by full replacement: all
existing rows for the project are deleted and the given list is inserted.
Implementations must make each replacement atomic.
"""

from abc import ABC, abstractmethod
from enum import Enum

from hometrack.models.home import Home, HomeHistoryEntry
from hometrack.models.project import (
    Contractor,
    Estimate,
    Photo,
    Project,
    Receipt,
    Task,
)
from hometrack.models.result import StorageResult


class ChildCollection(str, Enum):
    """
    The six collections a Project owns.

    Values are the Project attribute names.
    """
    TASKS = "tasks"
    PHOTOS = "photos"
    NOTES = "notes"
    ESTIMATES = "estimates"
    RECEIPTS = "receipts"
    CONTRACTORS = "contractors"


class HomeStorage(ABC):
    """
    Abstract interface for home, project and history storage.

    Any storage implementation must implement the abstract methods.
    The per-collection helpers at the bottom delegate to the generic
    child-collection methods.
    """

    # -------------------------------------------------------------------------
    # Home
    # -------------------------------------------------------------------------

    @abstractmethod
    async def get_home(self, user_id: str) -> StorageResult[Home]:
        """
        Retrieve the home owned by a user.

        Returns:
            ok(Home), or not_found if the user has not set up a home yet
        """
        pass

    @abstractmethod
    async def create_home(self, home: Home, user_id: str) -> StorageResult[Home]:
        """Insert the user's home and return the stored copy."""
        pass

    @abstractmethod
    async def update_home(self, home: Home, user_id: str) -> StorageResult[Home]:
        """Update the home in place and return the stored copy."""
        pass

    # -------------------------------------------------------------------------
    # Projects
    # -------------------------------------------------------------------------

    @abstractmethod
    async def get_projects(self, home_id: str) -> StorageResult[list[Project]]:
        """
        List all projects of a home with their child collections.

        Projects are ordered newest first by created_date.
        """
        pass

    @abstractmethod
    async def get_complete_project(self, project_id: str) -> StorageResult[Project]:
        """Fetch one project together with all six child collections."""
        pass

    @abstractmethod
    async def create_project(
        self,
        project: Project,
        home_id: str,
    ) -> StorageResult[Project]:
        """
        Insert a project and all of its child rows.

        Returns:
            The complete project as re-read from storage
        """
        pass

    @abstractmethod
    async def update_project(self, project: Project) -> StorageResult[Project]:
        """
        Update the project row and replace every child collection.

        Calling this twice with the same project leaves the same state as
        calling it once.
        """
        pass

    @abstractmethod
    async def delete_project(self, project_id: str) -> StorageResult[bool]:
        """Delete a project; its child rows go with it."""
        pass

    # -------------------------------------------------------------------------
    # Child collections
    # -------------------------------------------------------------------------

    @abstractmethod
    async def get_children(
        self,
        project_id: str,
        collection: ChildCollection,
    ) -> StorageResult[list]:
        """Read one child collection, ordered by its natural key."""
        pass

    @abstractmethod
    async def create_children(
        self,
        project_id: str,
        collection: ChildCollection,
        items: list,
    ) -> StorageResult[bool]:
        """Insert child rows. An empty list is a successful no-op."""
        pass

    @abstractmethod
    async def replace_children(
        self,
        project_id: str,
        collection: ChildCollection,
        items: list,
    ) -> StorageResult[bool]:
        """Atomically delete all rows of the collection and insert `items`."""
        pass

    # -------------------------------------------------------------------------
    # Home history
    # -------------------------------------------------------------------------

    @abstractmethod
    async def get_home_history(
        self,
        home_id: str,
    ) -> StorageResult[list[HomeHistoryEntry]]:
        """List history entries, most recent completion first."""
        pass

    @abstractmethod
    async def create_home_history_entry(
        self,
        home_id: str,
        entry: HomeHistoryEntry,
    ) -> StorageResult[HomeHistoryEntry]:
        pass

    @abstractmethod
    async def update_home_history_entry(
        self,
        entry: HomeHistoryEntry,
    ) -> StorageResult[HomeHistoryEntry]:
        pass

    # -------------------------------------------------------------------------
    # Per-collection helpers
    # -------------------------------------------------------------------------

    async def get_project_tasks(self, project_id: str) -> StorageResult[list[Task]]:
        return await self.get_children(project_id, ChildCollection.TASKS)

    async def create_project_tasks(self, project_id: str, tasks: list[Task]) -> StorageResult[bool]:
        return await self.create_children(project_id, ChildCollection.TASKS, tasks)

    async def update_project_tasks(self, project_id: str, tasks: list[Task]) -> StorageResult[bool]:
        return await self.replace_children(project_id, ChildCollection.TASKS, tasks)

    async def get_project_photos(self, project_id: str) -> StorageResult[list[Photo]]:
        return await self.get_children(project_id, ChildCollection.PHOTOS)

    async def create_project_photos(self, project_id: str, photos: list[Photo]) -> StorageResult[bool]:
        return await self.create_children(project_id, ChildCollection.PHOTOS, photos)

    async def update_project_photos(self, project_id: str, photos: list[Photo]) -> StorageResult[bool]:
        return await self.replace_children(project_id, ChildCollection.PHOTOS, photos)

    async def get_project_notes(self, project_id: str) -> StorageResult[list[str]]:
        return await self.get_children(project_id, ChildCollection.NOTES)

    async def create_project_notes(self, project_id: str, notes: list[str]) -> StorageResult[bool]:
        return await self.create_children(project_id, ChildCollection.NOTES, notes)

    async def update_project_notes(self, project_id: str, notes: list[str]) -> StorageResult[bool]:
        return await self.replace_children(project_id, ChildCollection.NOTES, notes)

    async def get_project_estimates(self, project_id: str) -> StorageResult[list[Estimate]]:
        return await self.get_children(project_id, ChildCollection.ESTIMATES)

    async def create_project_estimates(self, project_id: str, estimates: list[Estimate]) -> StorageResult[bool]:
        return await self.create_children(project_id, ChildCollection.ESTIMATES, estimates)

    async def update_project_estimates(self, project_id: str, estimates: list[Estimate]) -> StorageResult[bool]:
        return await self.replace_children(project_id, ChildCollection.ESTIMATES, estimates)

    async def get_project_receipts(self, project_id: str) -> StorageResult[list[Receipt]]:
        return await self.get_children(project_id, ChildCollection.RECEIPTS)

    async def create_project_receipts(self, project_id: str, receipts: list[Receipt]) -> StorageResult[bool]:
        return await self.create_children(project_id, ChildCollection.RECEIPTS, receipts)

    async def update_project_receipts(self, project_id: str, receipts: list[Receipt]) -> StorageResult[bool]:
        return await self.replace_children(project_id, ChildCollection.RECEIPTS, receipts)

    async def get_project_contractors(self, project_id: str) -> StorageResult[list[Contractor]]:
        return await self.get_children(project_id, ChildCollection.CONTRACTORS)

    async def create_project_contractors(self, project_id: str, contractors: list[Contractor]) -> StorageResult[bool]:
        return await self.create_children(project_id, ChildCollection.CONTRACTORS, contractors)

    async def update_project_contractors(self, project_id: str, contractors: list[Contractor]) -> StorageResult[bool]:
        return await self.replace_children(project_id, ChildCollection.CONTRACTORS, contractors)


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class StorageConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass


class ConfigurationError(StorageError):
    """Storage connection settings are missing or placeholders."""
    pass
