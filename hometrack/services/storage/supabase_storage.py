"""
Supabase Storage Implementation

The user's data lives in a Supabase (PostgreSQL) project. Row level
security restricts every table to rows reachable from the user's own
`homes` row, so the client must carry the signed-in user's access token.

TRADEOFFS:
- One request per table per operation (no joins through PostgREST embeds),
  which keeps the column mapping explicit.
- Child rows are only written through Postgres functions in
  sql/schema.sql. Each call is one transaction and stamps created_at in
  list order, so a collection reads back in the order it was saved.
  update_project sends the project row and all six collections in a
  single update_project_with_children call.
- The supabase client is synchronous; queries run in worker threads so the
  six child-collection reads of a project can overlap.
"""

import asyncio
from datetime import datetime, timezone
from typing import Any, Callable, Optional

import httpx
import structlog
from postgrest.exceptions import APIError
from supabase import Client, create_client
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from hometrack.config import SupabaseSettings, get_settings
from hometrack.models.home import Home, HomeHistoryEntry
from hometrack.models.project import Project
from hometrack.models.result import StorageResult
from hometrack.services.storage.interface import (
    ChildCollection,
    ConfigurationError,
    HomeStorage,
    NotFoundError,
    StorageConnectionError,
)
from hometrack.services.storage.mapping import (
    CHILD_MAPPINGS,
    HISTORY_MAPPING,
    HOME_MAPPING,
    PROJECT_MAPPING,
    child_to_row,
    model_to_row,
    project_to_rows,
    row_to_child,
    row_to_model,
    rows_to_project,
)


logger = structlog.get_logger(__name__)

# SQLSTATE raised by the project functions in sql/schema.sql
PROJECT_NOT_FOUND = "P0002"


class SupabaseClient:
    """
    Low-level Supabase client wrapper.

    Connects lazily and attaches the user's access token so row level
    security sees the right user.
    """

    def __init__(
        self,
        settings: Optional[SupabaseSettings] = None,
        client: Optional[Client] = None,
    ):
        self._settings = settings or get_settings().supabase
        self._client: Optional[Client] = client
        self._access_token: Optional[str] = None

    def connect(self) -> Client:
        """Create the underlying client on first use."""
        if self._client is None:
            if not self._settings.is_configured:
                raise ConfigurationError("Supabase setup incomplete")
            try:
                self._client = create_client(
                    self._settings.url,
                    self._settings.anon_key,
                )
            except Exception as e:
                raise StorageConnectionError(f"Failed to connect to Supabase: {e}")
            if self._access_token:
                self._client.postgrest.auth(self._access_token)
        return self._client

    def set_access_token(self, token: Optional[str]) -> None:
        """Use the signed-in user's JWT for database requests."""
        self._access_token = token
        if self._client is not None and token:
            self._client.postgrest.auth(token)

    def table(self, name: str):
        return self.connect().table(name)

    def rpc(self, function_name: str, params: dict[str, Any]):
        return self.connect().rpc(function_name, params)


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class SupabaseHomeStorage(HomeStorage):
    """
    Supabase implementation of home storage.

    Every public method catches storage and transport errors, logs them and
    returns a failed StorageResult. Nothing propagates to the caller.
    """

    def __init__(self, client: Optional[SupabaseClient] = None):
        self._client = client or SupabaseClient()

    # -------------------------------------------------------------------------
    # Query execution
    # -------------------------------------------------------------------------

    async def _run(self, build: Callable[[], Any]) -> list[dict[str, Any]]:
        """Build a query and execute it in a worker thread."""
        query = build()
        response = await asyncio.to_thread(query.execute)
        return response.data or []

    @retry(
        retry=retry_if_exception_type(httpx.TransportError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def _select(
        self,
        table: str,
        column: str,
        value: str,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        """SELECT * ... WHERE column = value. Reads are safe to retry."""
        def build():
            query = self._client.table(table).select("*").eq(column, value)
            if order_by:
                query = query.order(order_by, desc=descending)
            if limit:
                query = query.limit(limit)
            return query

        return await self._run(build)

    def _failed(self, table: str, operation: str, error: Exception) -> StorageResult:
        if isinstance(error, APIError):
            message = error.message or str(error)
        else:
            message = str(error)
        logger.error(
            "storage_operation_failed",
            table=table,
            operation=operation,
            error=message,
            error_type=type(error).__name__,
        )
        return StorageResult.failure(message)

    # -------------------------------------------------------------------------
    # Home
    # -------------------------------------------------------------------------

    async def get_home(self, user_id: str) -> StorageResult[Home]:
        try:
            rows = await self._select(
                HOME_MAPPING.table, "user_id", user_id, limit=1
            )
            if not rows:
                return StorageResult.not_found(f"No home for user {user_id}")
            return StorageResult.ok(row_to_model(rows[0], HOME_MAPPING))
        except Exception as e:
            return self._failed(HOME_MAPPING.table, "get_home", e)

    async def create_home(self, home: Home, user_id: str) -> StorageResult[Home]:
        try:
            row = model_to_row(home, HOME_MAPPING, user_id)
            rows = await self._run(
                lambda: self._client.table(HOME_MAPPING.table).insert(row)
            )
            return StorageResult.ok(row_to_model(rows[0], HOME_MAPPING))
        except Exception as e:
            return self._failed(HOME_MAPPING.table, "create_home", e)

    async def update_home(self, home: Home, user_id: str) -> StorageResult[Home]:
        try:
            row = model_to_row(home, HOME_MAPPING)
            row.pop("id", None)
            row["last_updated"] = _utc_now_iso()
            rows = await self._run(
                lambda: self._client.table(HOME_MAPPING.table)
                .update(row)
                .eq("id", home.id)
                .eq("user_id", user_id)
            )
            if not rows:
                raise NotFoundError(f"Home not found: {home.id}")
            return StorageResult.ok(row_to_model(rows[0], HOME_MAPPING))
        except NotFoundError as e:
            return StorageResult.not_found(str(e))
        except Exception as e:
            return self._failed(HOME_MAPPING.table, "update_home", e)

    # -------------------------------------------------------------------------
    # Projects
    # -------------------------------------------------------------------------

    async def _read_children(
        self,
        project_id: str,
    ) -> dict[ChildCollection, list[dict[str, Any]]]:
        """Fetch the six child tables of a project concurrently."""
        collections = list(ChildCollection)
        results = await asyncio.gather(*[
            self._select(
                CHILD_MAPPINGS[c].table,
                "project_id",
                project_id,
                order_by=CHILD_MAPPINGS[c].order_by,
                descending=CHILD_MAPPINGS[c].descending,
            )
            for c in collections
        ])
        return dict(zip(collections, results))

    async def get_projects(self, home_id: str) -> StorageResult[list[Project]]:
        try:
            project_rows = await self._select(
                PROJECT_MAPPING.table,
                "home_id",
                home_id,
                order_by=PROJECT_MAPPING.order_by,
                descending=PROJECT_MAPPING.descending,
            )
            projects = []
            for project_row in project_rows:
                children = await self._read_children(project_row["id"])
                projects.append(rows_to_project(project_row, children))
            return StorageResult.ok(projects)
        except Exception as e:
            return self._failed(PROJECT_MAPPING.table, "get_projects", e)

    async def get_complete_project(self, project_id: str) -> StorageResult[Project]:
        try:
            rows = await self._select(PROJECT_MAPPING.table, "id", project_id, limit=1)
            if not rows:
                return StorageResult.not_found(f"Project not found: {project_id}")
            children = await self._read_children(project_id)
            return StorageResult.ok(rows_to_project(rows[0], children))
        except Exception as e:
            return self._failed(PROJECT_MAPPING.table, "get_complete_project", e)

    async def create_project(
        self,
        project: Project,
        home_id: str,
    ) -> StorageResult[Project]:
        try:
            project_row, children = project_to_rows(project, home_id)
            rows = await self._run(
                lambda: self._client.table(PROJECT_MAPPING.table).insert(project_row)
            )
            project_id = rows[0]["id"]
        except Exception as e:
            return self._failed(PROJECT_MAPPING.table, "create_project", e)

        payload = {
            CHILD_MAPPINGS[c].table: child_rows
            for c, child_rows in children.items()
            if child_rows
        }
        if payload:
            try:
                # One call stores every collection in array order, or nothing.
                await self._run(
                    lambda: self._client.rpc(
                        "replace_all_project_children",
                        {"p_project_id": project_id, "p_children": payload},
                    )
                )
            except Exception as e:
                failed = self._failed(PROJECT_MAPPING.table, "create_project", e)
                await self.delete_project(project_id)
                return failed

        return await self.get_complete_project(project_id)

    async def update_project(self, project: Project) -> StorageResult[Project]:
        try:
            project_row, children = project_to_rows(project)
            project_row.pop("id", None)
            project_row["updated_date"] = _utc_now_iso()
            payload = {
                CHILD_MAPPINGS[c].table: child_rows
                for c, child_rows in children.items()
            }
            await self._run(
                lambda: self._client.rpc(
                    "update_project_with_children",
                    {
                        "p_project_id": project.id,
                        "p_project": project_row,
                        "p_children": payload,
                    },
                )
            )
        except APIError as e:
            if e.code == PROJECT_NOT_FOUND:
                return StorageResult.not_found(f"Project not found: {project.id}")
            return self._failed(PROJECT_MAPPING.table, "update_project", e)
        except Exception as e:
            return self._failed(PROJECT_MAPPING.table, "update_project", e)

        return await self.get_complete_project(project.id)

    async def delete_project(self, project_id: str) -> StorageResult[bool]:
        try:
            rows = await self._run(
                lambda: self._client.table(PROJECT_MAPPING.table)
                .delete()
                .eq("id", project_id)
            )
            if not rows:
                return StorageResult.not_found(f"Project not found: {project_id}")
            return StorageResult.ok(True)
        except Exception as e:
            return self._failed(PROJECT_MAPPING.table, "delete_project", e)

    # -------------------------------------------------------------------------
    # Child collections
    # -------------------------------------------------------------------------

    async def get_children(
        self,
        project_id: str,
        collection: ChildCollection,
    ) -> StorageResult[list]:
        mapping = CHILD_MAPPINGS[collection]
        try:
            rows = await self._select(
                mapping.table,
                "project_id",
                project_id,
                order_by=mapping.order_by,
                descending=mapping.descending,
            )
            return StorageResult.ok([row_to_child(row, collection) for row in rows])
        except Exception as e:
            return self._failed(mapping.table, f"get_{collection.value}", e)

    async def create_children(
        self,
        project_id: str,
        collection: ChildCollection,
        items: list,
    ) -> StorageResult[bool]:
        if not items:
            return StorageResult.ok(True)
        mapping = CHILD_MAPPINGS[collection]
        try:
            rows = [child_to_row(item, collection) for item in items]
            # Appended after the existing rows, in list order.
            await self._run(
                lambda: self._client.rpc(
                    "insert_project_children",
                    {
                        "p_project_id": project_id,
                        "p_table": mapping.table,
                        "p_rows": rows,
                    },
                )
            )
            return StorageResult.ok(True)
        except Exception as e:
            return self._failed(mapping.table, f"create_{collection.value}", e)

    async def replace_children(
        self,
        project_id: str,
        collection: ChildCollection,
        items: list,
    ) -> StorageResult[bool]:
        mapping = CHILD_MAPPINGS[collection]
        try:
            rows = [child_to_row(item, collection) for item in items]
            await self._run(
                lambda: self._client.rpc(
                    "replace_project_children",
                    {
                        "p_project_id": project_id,
                        "p_table": mapping.table,
                        "p_rows": rows,
                    },
                )
            )
            return StorageResult.ok(True)
        except Exception as e:
            return self._failed(mapping.table, f"replace_{collection.value}", e)

    # -------------------------------------------------------------------------
    # Home history
    # -------------------------------------------------------------------------

    async def get_home_history(
        self,
        home_id: str,
    ) -> StorageResult[list[HomeHistoryEntry]]:
        try:
            rows = await self._select(
                HISTORY_MAPPING.table,
                "home_id",
                home_id,
                order_by=HISTORY_MAPPING.order_by,
                descending=HISTORY_MAPPING.descending,
            )
            return StorageResult.ok([row_to_model(row, HISTORY_MAPPING) for row in rows])
        except Exception as e:
            return self._failed(HISTORY_MAPPING.table, "get_home_history", e)

    async def create_home_history_entry(
        self,
        home_id: str,
        entry: HomeHistoryEntry,
    ) -> StorageResult[HomeHistoryEntry]:
        try:
            row = model_to_row(entry, HISTORY_MAPPING, home_id)
            rows = await self._run(
                lambda: self._client.table(HISTORY_MAPPING.table).insert(row)
            )
            return StorageResult.ok(row_to_model(rows[0], HISTORY_MAPPING))
        except Exception as e:
            return self._failed(HISTORY_MAPPING.table, "create_home_history_entry", e)

    async def update_home_history_entry(
        self,
        entry: HomeHistoryEntry,
    ) -> StorageResult[HomeHistoryEntry]:
        try:
            row = model_to_row(entry, HISTORY_MAPPING)
            row.pop("id", None)
            rows = await self._run(
                lambda: self._client.table(HISTORY_MAPPING.table)
                .update(row)
                .eq("id", entry.id)
            )
            if not rows:
                return StorageResult.not_found(f"History entry not found: {entry.id}")
            return StorageResult.ok(row_to_model(rows[0], HISTORY_MAPPING))
        except Exception as e:
            return self._failed(HISTORY_MAPPING.table, "update_home_history_entry", e)
