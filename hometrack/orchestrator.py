"""
Main Orchestrator for Home Tracker

This module ties the storage strategy, the session snapshot and the
activity log together and defines the flows for:
1. Loading (identity → home → projects + history)
2. Mutations (call storage → merge into snapshot on success)
3. Session lifecycle (start → sign out)

DESIGN DECISION: The orchestrator enforces the boundaries:
- The storage strategy is chosen once, when the session starts. A guest
  session can never reach the network.
- The snapshot only changes after storage confirms a write.
- Results that arrive after the session moved on are dropped.
- Every load and save is audited.
"""

import asyncio
from typing import Awaitable, Callable, Optional, TypeVar
from uuid import UUID

import structlog
from pydantic import BaseModel, Field

from hometrack.audit import AuditLogger, create_correlation_id
from hometrack.config import Settings, get_settings
from hometrack.identity import Identity, IdentityProvider
from hometrack.models.home import Home, HomeHistoryEntry
from hometrack.models.project import Project
from hometrack.models.result import StorageResult
from hometrack.navigation import Navigator
from hometrack.services.storage import (
    HomeStorage,
    InMemoryHomeStorage,
    SupabaseClient,
    SupabaseHomeStorage,
    UnconfiguredHomeStorage,
)


logger = structlog.get_logger(__name__)

T = TypeVar("T")

LOAD_FAILED_MESSAGE = "Failed to load your data. Please try again."

_ENTITY_LABELS = {
    "home": "home",
    "project": "project",
    "history_entry": "home history entry",
}


class DataOperationError(Exception):
    """A mutation could not be completed. `message` is safe to show the user."""

    def __init__(self, message: str, cause: Optional[str] = None):
        self.message = message
        self.cause = cause
        super().__init__(message)


class SessionState(BaseModel):
    """
    The in-memory snapshot for one session.

    Owned by the session that created it and passed to whatever needs it;
    there is no module-level copy.
    """

    home: Optional[Home] = None
    projects: list[Project] = Field(default_factory=list)
    home_history: list[HomeHistoryEntry] = Field(default_factory=list)
    loading: bool = False
    error: Optional[str] = None
    generation: int = Field(
        default=0,
        description="Bumped by every load; older in-flight loads become stale"
    )
    epoch: int = Field(
        default=0,
        description="Bumped when the session is cleared; every in-flight result becomes stale"
    )
    revision: int = Field(
        default=0,
        description="Bumped whenever a confirmed write is merged"
    )

    def advance(self) -> int:
        self.generation += 1
        return self.generation

    def clear(self) -> None:
        """Forget all data and invalidate anything still in flight."""
        self.advance()
        self.epoch += 1
        self.home = None
        self.projects = []
        self.home_history = []
        self.loading = False
        self.error = None


class HomeDataFlow:
    """
    Loads the user's data and applies mutations to the snapshot.

    Flow for every mutation:
    1. Check preconditions (user, home)
    2. Call storage
    3. OK → merge the returned entity into the snapshot
    4. Anything else → set the user-visible error and raise

    The snapshot is never updated optimistically.
    """

    def __init__(
        self,
        storage: HomeStorage,
        identity: Identity,
        state: Optional[SessionState] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._identity = identity
        self.state = state or SessionState()
        self._audit_logger = audit_logger or AuditLogger(is_guest=identity.is_guest)

    @property
    def is_guest(self) -> bool:
        return self._identity.is_guest

    def _is_stale(self, operation: str, started: int, current: int) -> bool:
        if started == current:
            return False
        self._audit_logger.log_stale_result(operation, started, current)
        return True

    def _load_is_stale(self, started: int) -> bool:
        return self._is_stale("load", started, self.state.generation)

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    async def load(self, correlation_id: Optional[UUID] = None) -> None:
        """
        Fetch the home, then its projects and history concurrently.

        Starting a load makes any older load stale. If a write is confirmed
        while the reads are in flight, the reads may predate it, so they are
        repeated.
        """
        correlation_id = correlation_id or create_correlation_id()
        started = self.state.advance()
        self.state.loading = True
        self.state.error = None

        try:
            while True:
                revision = self.state.revision
                home, projects, history = await self._fetch()
                if started != self.state.generation or revision == self.state.revision:
                    break
                logger.info("load_repeated_after_write", generation=started)
        except DataOperationError as e:
            if self._load_is_stale(started):
                return
            self.state.error = e.message
            self.state.loading = False
            self._audit_logger.log_data_load_failed(e.cause or e.message, correlation_id)
            return

        if self._load_is_stale(started):
            return

        self.state.home = home
        self.state.projects = projects
        self.state.home_history = history
        self.state.loading = False
        self._audit_logger.log_data_loaded(
            home_id=home.id if home else None,
            project_count=len(projects),
            history_count=len(history),
            correlation_id=correlation_id,
        )

    async def _fetch(
        self,
    ) -> tuple[Optional[Home], list[Project], list[HomeHistoryEntry]]:
        home_result = await self._storage.get_home(self._identity.user_id)
        if home_result.is_failure:
            raise DataOperationError(LOAD_FAILED_MESSAGE, home_result.error)

        home = home_result.value if home_result.is_ok else None
        if home is None:
            return None, [], []

        projects_result, history_result = await asyncio.gather(
            self._storage.get_projects(home.id),
            self._storage.get_home_history(home.id),
        )
        for result in (projects_result, history_result):
            if result.is_failure:
                raise DataOperationError(LOAD_FAILED_MESSAGE, result.error)
        return home, projects_result.unwrap_or([]), history_result.unwrap_or([])

    async def refresh_data(self) -> None:
        """Re-run the initial fetch. Guest data lives only in memory, so this is a no-op there."""
        if self.is_guest:
            return
        await self.load()

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def _require_user(self, action: str, entity_type: str) -> None:
        if not self.is_guest and not self._identity.user_id:
            self._reject(action, entity_type, "User not authenticated")

    def _require_home(self, action: str, entity_type: str) -> Home:
        if self.state.home is None:
            self._reject(action, entity_type, "Home not found")
        return self.state.home

    def _reject(self, action: str, entity_type: str, reason: str) -> None:
        self._audit_logger.log_save_failed(entity_type, action, reason)
        raise DataOperationError(reason)

    async def _mutate(
        self,
        entity_type: str,
        action: str,
        call: Awaitable[StorageResult[T]],
        merge: Callable[[T], None],
        entity_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> T:
        correlation_id = correlation_id or create_correlation_id()
        operation = f"{action}_{entity_type}"
        started = self.state.epoch
        self.state.error = None

        result = await call

        if not result.is_ok:
            message = f"Failed to {action} {_ENTITY_LABELS[entity_type]}. Please try again."
            if not self._is_stale(operation, started, self.state.epoch):
                self.state.error = message
            self._audit_logger.log_save_failed(
                entity_type=entity_type,
                action=action,
                error_message=result.error,
                entity_id=entity_id,
                correlation_id=correlation_id,
            )
            raise DataOperationError(message, result.error)

        # A load that starts meanwhile does not invalidate a confirmed write;
        # only clearing the session does.
        if not self._is_stale(operation, started, self.state.epoch):
            merge(result.value)
            self.state.revision += 1
        saved_id = getattr(result.value, "id", None) or entity_id
        self._audit_logger.log_saved(entity_type, action, saved_id, correlation_id)
        return result.value

    async def create_home(self, home: Home) -> Home:
        self._require_user("create", "home")
        self.state.loading = True
        try:
            return await self._mutate(
                "home", "create",
                self._storage.create_home(home, self._identity.user_id),
                self._set_home,
            )
        finally:
            self.state.loading = False

    async def update_home(self, home: Home) -> Home:
        self._require_user("update", "home")
        return await self._mutate(
            "home", "update",
            self._storage.update_home(home, self._identity.user_id),
            self._set_home,
            entity_id=home.id,
        )

    def _set_home(self, home: Home) -> None:
        self.state.home = home

    async def create_project(self, project: Project) -> Project:
        home = self._require_home("create", "project")

        def merge(created: Project) -> None:
            self.state.projects = self.state.projects + [created]

        return await self._mutate(
            "project", "create",
            self._storage.create_project(project, home.id),
            merge,
        )

    async def update_project(self, project: Project) -> Project:
        def merge(updated: Project) -> None:
            self.state.projects = [
                updated if p.id == updated.id else p for p in self.state.projects
            ]

        return await self._mutate(
            "project", "update",
            self._storage.update_project(project),
            merge,
            entity_id=project.id,
        )

    async def delete_project(self, project_id: str) -> bool:
        def merge(_deleted: bool) -> None:
            self.state.projects = [p for p in self.state.projects if p.id != project_id]

        return await self._mutate(
            "project", "delete",
            self._storage.delete_project(project_id),
            merge,
            entity_id=project_id,
        )

    async def create_home_history_entry(self, entry: HomeHistoryEntry) -> HomeHistoryEntry:
        home = self._require_home("create", "history_entry")

        def merge(created: HomeHistoryEntry) -> None:
            self.state.home_history = [created] + self.state.home_history

        return await self._mutate(
            "history_entry", "create",
            self._storage.create_home_history_entry(home.id, entry),
            merge,
        )

    async def update_home_history_entry(self, entry: HomeHistoryEntry) -> HomeHistoryEntry:
        def merge(updated: HomeHistoryEntry) -> None:
            self.state.home_history = [
                updated if e.id == updated.id else e for e in self.state.home_history
            ]

        return await self._mutate(
            "history_entry", "update",
            self._storage.update_home_history_entry(entry),
            merge,
            entity_id=entry.id,
        )


class HomeSession:
    """
    One signed-in (or guest) session.

    Owns the snapshot, the data flow and the navigator. Signing out tears all
    of it down; a new identity means a new session.
    """

    def __init__(
        self,
        identity: Identity,
        storage: HomeStorage,
        identity_provider: Optional[IdentityProvider] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self.identity = identity
        self.storage = storage
        self._identity_provider = identity_provider
        self._audit_logger = audit_logger or AuditLogger(is_guest=identity.is_guest)
        self.state = SessionState()
        self.flow = HomeDataFlow(storage, identity, self.state, self._audit_logger)
        self.navigator = Navigator()
        self.active = False

    @property
    def is_guest(self) -> bool:
        return self.identity.is_guest

    async def start(self) -> None:
        self.active = True
        self._audit_logger.log_session_started(self.identity.user_id)
        await self.flow.load()

    async def sign_out(self) -> None:
        """Sign out with the identity provider and drop everything this session held."""
        self.active = False
        self.state.clear()
        self.navigator.reset()
        self._audit_logger.log_session_signed_out(self.identity.user_id)
        if self._identity_provider is not None:
            await self._identity_provider.sign_out()


def create_storage(
    identity: Identity,
    settings: Optional[Settings] = None,
    supabase_client: Optional[SupabaseClient] = None,
) -> HomeStorage:
    """
    Pick the storage strategy for a session.

    Guest → in-memory sample data. Missing Supabase configuration → the
    unconfigured stub. Otherwise → Supabase with the user's token.
    """
    if identity.is_guest:
        return InMemoryHomeStorage.with_sample_data()

    supabase_settings = (settings or get_settings()).supabase
    if not supabase_settings.is_configured:
        logger.warning("supabase_not_configured", user_id=identity.user_id)
        return UnconfiguredHomeStorage()

    client = supabase_client or SupabaseClient(supabase_settings)
    client.set_access_token(identity.access_token)
    return SupabaseHomeStorage(client)


def create_session(
    identity: Identity,
    settings: Optional[Settings] = None,
    identity_provider: Optional[IdentityProvider] = None,
    supabase_client: Optional[SupabaseClient] = None,
) -> HomeSession:
    """
    Factory function to create a session and its components.

    Returns:
        A HomeSession that has not loaded anything yet; call `start()`.
    """
    storage = create_storage(identity, settings, supabase_client)
    return HomeSession(
        identity=identity,
        storage=storage,
        identity_provider=identity_provider,
    )
