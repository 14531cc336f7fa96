"""
Row <-> model mapping for the relational schema.

Every domain attribute maps to exactly one column and back. The table
definitions live in sql/schema.sql; keep the two in sync.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from hometrack.models.home import Home, HomeHistoryEntry
from hometrack.models.project import (
    Contractor,
    Estimate,
    Photo,
    Project,
    Receipt,
    Task,
)
from hometrack.services.storage.interface import ChildCollection


class TableMapping(BaseModel):
    """How one entity type is stored."""
    model_config = ConfigDict(frozen=True)

    table: str
    model: Optional[type[BaseModel]] = None
    # domain attribute -> column
    columns: dict[str, str]
    # natural sort key for reads
    order_by: str
    descending: bool = False
    # foreign key column naming the parent
    parent_column: str


HOME_MAPPING = TableMapping(
    table="homes",
    model=Home,
    columns={
        "id": "id",
        "address": "address",
        "purchase_date": "purchase_date",
        "purchase_price": "purchase_price",
        "current_value": "current_value",
        "last_updated": "last_updated",
        "bedrooms": "bedrooms",
        "bathrooms": "bathrooms",
        "square_footage": "square_footage",
        "year_built": "year_built",
        "property_type": "property_type",
        "photos": "photos",
    },
    order_by="created_at",
    parent_column="user_id",
)

PROJECT_MAPPING = TableMapping(
    table="projects",
    model=Project,
    columns={
        "id": "id",
        "name": "name",
        "description": "description",
        "status": "status",
        "target_start_date": "target_start_date",
        "estimated_completion_date": "estimated_completion_date",
        "actual_completion_date": "actual_completion_date",
        "budget": "budget",
        "actual_cost": "actual_cost",
        "projected_value": "projected_value",
        "actual_value": "actual_value",
        "created_date": "created_date",
        "updated_date": "updated_date",
    },
    order_by="created_date",
    descending=True,
    parent_column="home_id",
)

HISTORY_MAPPING = TableMapping(
    table="home_history",
    model=HomeHistoryEntry,
    columns={
        "id": "id",
        "project_name": "project_name",
        "completion_date": "completion_date",
        "description": "description",
        "before_photo": "before_photo",
        "after_photo": "after_photo",
        "projected_value": "projected_value",
        "actual_value": "actual_value",
        "was_tracked_project": "was_tracked_project",
        "original_project_id": "original_project_id",
    },
    order_by="completion_date",
    descending=True,
    parent_column="home_id",
)

CHILD_MAPPINGS: dict[ChildCollection, TableMapping] = {
    ChildCollection.TASKS: TableMapping(
        table="tasks",
        model=Task,
        columns={
            "id": "id",
            "name": "name",
            "description": "description",
            "status": "status",
            "assigned_to": "assigned_to",
            "due_date": "due_date",
            "completed_date": "completed_date",
        },
        order_by="created_at",
        parent_column="project_id",
    ),
    ChildCollection.PHOTOS: TableMapping(
        table="photos",
        model=Photo,
        columns={
            "id": "id",
            "url": "url",
            "type": "type",
            "caption": "caption",
            "uploaded_date": "uploaded_date",
        },
        order_by="uploaded_date",
        descending=True,
        parent_column="project_id",
    ),
    # Notes are bare strings; the single "note" column holds the text.
    ChildCollection.NOTES: TableMapping(
        table="project_notes",
        columns={"note": "note"},
        order_by="created_at",
        parent_column="project_id",
    ),
    ChildCollection.ESTIMATES: TableMapping(
        table="estimates",
        model=Estimate,
        columns={
            "id": "id",
            "contractor": "contractor",
            "amount": "amount",
            "description": "description",
            "date": "date",
            "selected": "selected",
        },
        order_by="date",
        descending=True,
        parent_column="project_id",
    ),
    ChildCollection.RECEIPTS: TableMapping(
        table="receipts",
        model=Receipt,
        columns={
            "id": "id",
            "vendor": "vendor",
            "amount": "amount",
            "category": "category",
            "date": "date",
            "image_url": "receipt_image_url",
        },
        order_by="date",
        descending=True,
        parent_column="project_id",
    ),
    ChildCollection.CONTRACTORS: TableMapping(
        table="contractors",
        model=Contractor,
        columns={
            "id": "id",
            "name": "name",
            "company": "company",
            "phone": "phone",
            "email": "email",
            "specialty": "specialty",
            "rating": "rating",
        },
        order_by="created_at",
        parent_column="project_id",
    ),
}


def model_to_row(
    entity: BaseModel,
    mapping: TableMapping,
    parent_id: Optional[str] = None,
) -> dict[str, Any]:
    """
    Convert a model to a storage row.

    A missing id is left out so the database assigns one.
    """
    data = entity.model_dump(mode="json")
    row = {}
    for attr, column in mapping.columns.items():
        if attr == "id" and data.get("id") is None:
            continue
        row[column] = data.get(attr)
    if parent_id is not None:
        row[mapping.parent_column] = parent_id
    return row


def row_to_model(row: dict[str, Any], mapping: TableMapping) -> BaseModel:
    """
    Convert a storage row to a model.

    NULL columns fall back to the model defaults (e.g. an empty photo list).
    """
    values = {
        attr: row[column]
        for attr, column in mapping.columns.items()
        if row.get(column) is not None
    }
    return mapping.model(**values)


def child_to_row(
    item: Any,
    collection: ChildCollection,
    project_id: Optional[str] = None,
) -> dict[str, Any]:
    mapping = CHILD_MAPPINGS[collection]
    if collection == ChildCollection.NOTES:
        row = {"note": item}
        if project_id is not None:
            row[mapping.parent_column] = project_id
        return row
    return model_to_row(item, mapping, project_id)


def row_to_child(row: dict[str, Any], collection: ChildCollection) -> Any:
    if collection == ChildCollection.NOTES:
        return row["note"]
    return row_to_model(row, CHILD_MAPPINGS[collection])


def project_to_rows(
    project: Project,
    home_id: Optional[str] = None,
) -> tuple[dict[str, Any], dict[ChildCollection, list[dict[str, Any]]]]:
    """
    Split a project into its own row and the rows of each child table.

    Child rows carry project_id only when the project already has an id.
    """
    project_row = model_to_row(project, PROJECT_MAPPING, home_id)
    children = {
        collection: [
            child_to_row(item, collection, project.id)
            for item in getattr(project, collection.value)
        ]
        for collection in ChildCollection
    }
    return project_row, children


def rows_to_project(
    project_row: dict[str, Any],
    children: dict[ChildCollection, list[dict[str, Any]]],
) -> Project:
    """Assemble a Project from its row and the rows of each child table."""
    project = row_to_model(project_row, PROJECT_MAPPING)
    return project.model_copy(
        update={
            collection.value: [
                row_to_child(row, collection)
                for row in children.get(collection, [])
            ]
            for collection in ChildCollection
        }
    )
