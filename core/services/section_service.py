# =============================================================================
# core/services/section_service.py - Section Content CRUD
# =============================================================================
# Generic get/patch/post/delete over the portfolio's relational layout:
#
#   parent rows  (home, about, ... one live English row per section, or
#                 several for gallery / education / awards)
#   child items  (resolved by (section, itemType) in core.registry)
#   nested items (resolved by (parentTable, nestedType))
#
# Child and nested writes only persist whitelisted columns, matched through
# lib.naming so callers may use any key convention. Image columns are stored
# as full public URLs; deleting a row with an image removes the object first
# on a best-effort basis.
#
# Every write is a single-row PostgREST call. Writes spanning several rows
# (an item and its nested items) are not atomic.
# =============================================================================

import logging
from dataclasses import dataclass
from typing import Any

from app.config import settings
from app.exceptions import (
    RowNotFoundError,
    StorageDeleteError,
    UpstreamError,
    ValidationFailedError,
)
from core.registry import (
    IMAGE_FIELD_ALIASES,
    Relation,
    Section,
    get_schema,
    nested_relations,
    resolve_child,
    resolve_nested,
    resolve_section,
)
from core.services.storage_service import StorageService
from lib.naming import match_field, pick_fields
from lib.storage_paths import storage_key_for
from lib.supabase_client import SupabaseClient, execute_query

logger = logging.getLogger(__name__)

# Defaults for a new gallery row; caller values override them
GALLERY_ROW_DEFAULTS = {
    "title": "",
    "description": "",
    "imageUrl": "",
    "sortOrder": 0,
}


@dataclass
class DeletionOutcome:
    """
    Result of a row deletion.

    storage_key is the object the row pointed at (None when it had no
    image); storage_warning holds the error when removing it failed. The
    row itself is deleted either way.
    """
    table: str
    row_id: Any
    storage_key: str | None = None
    storage_warning: str | None = None

    @property
    def storage_cleaned(self) -> bool:
        return self.storage_key is not None and self.storage_warning is None


def _normalize_image_columns(payload: dict[str, Any], columns) -> dict[str, Any]:
    """Copy of payload with every non-empty image column made a full URL."""
    result = dict(payload)
    for column in columns:
        value = result.get(column)
        if isinstance(value, str) and value:
            result[column] = StorageService.normalize_image_url(value)
    return result


def _embed_select(relations: list[Relation], nested: bool = False) -> str:
    """PostgREST select string embedding the given relations."""
    parts = ["*"]
    for relation in relations:
        inner = "*"
        if nested and relation.eager_nested:
            inner = _embed_select(nested_relations(relation.table))
        parts.append(f"{relation.table}({inner})")
    return ", ".join(parts)


class SectionService:
    """
    Service for portfolio content operations.

    Provides a clean interface between the admin routes and the database.
    """

    # -------------------------------------------------------------------------
    # Shared row helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _live_rows(table: str, select: str = "*", order: str = "id") -> list[dict[str, Any]]:
        client = SupabaseClient.get_client()
        response = execute_query(
            client.table(table)
            .select(select)
            .eq("languageCode", settings.DEFAULT_LANGUAGE_CODE)
            .eq("isActive", True)
            .order(order),
            f"Failed to load {table}",
        )
        return response.data or []

    @staticmethod
    def _insert(table: str, payload: dict[str, Any]) -> dict[str, Any]:
        client = SupabaseClient.get_client()
        response = execute_query(client.table(table).insert(payload), f"Create in {table} failed")
        if not response.data:
            raise UpstreamError(f"Create in {table} failed", "insert returned no data")
        row = response.data[0]
        logger.info(f"Created {table} row: {row.get('id')}")
        return row

    @staticmethod
    def _update_by_id(table: str, row_id: Any, payload: dict[str, Any]) -> dict[str, Any]:
        if not payload:
            raise ValidationFailedError("No fields to update")

        client = SupabaseClient.get_client()
        response = execute_query(
            client.table(table).update(payload).eq("id", row_id),
            f"Update of {table} failed",
        )
        if not response.data:
            raise RowNotFoundError(f"No {table} row with id {row_id}", table, row_id)

        logger.info(f"Updated {table} row {row_id}: {sorted(payload)}")
        return response.data[0]

    @staticmethod
    def _delete_row(table: str, row_id: Any, image_field: str | None) -> DeletionOutcome:
        """
        Delete a row, removing its image from storage first.

        A failed storage removal is logged and recorded on the outcome; the
        row is deleted regardless.
        """
        client = SupabaseClient.get_client()
        outcome = DeletionOutcome(table=table, row_id=row_id)

        if image_field:
            response = execute_query(
                client.table(table).select("*").eq("id", row_id),
                f"Failed to load {table} row",
            )
            rows = response.data or []
            if rows:
                _, value = match_field(rows[0], image_field)
                key = storage_key_for(value, settings.STORAGE_BUCKET)
                if key:
                    outcome.storage_key = key
                    try:
                        StorageService.remove_asset(key)
                    except StorageDeleteError as e:
                        logger.warning(f"Storage delete (non-fatal) for {table}/{row_id}: {e.message}")
                        outcome.storage_warning = e.message

        response = execute_query(
            client.table(table).delete().eq("id", row_id),
            f"Delete from {table} failed",
        )
        if not response.data:
            raise RowNotFoundError(f"No {table} row with id {row_id}", table, row_id)

        logger.info(f"Deleted {table} row {row_id}")
        return outcome

    # -------------------------------------------------------------------------
    # Parent rows
    # -------------------------------------------------------------------------

    @staticmethod
    def get_parent_default_row(section: str | Section, index: int = 0) -> dict[str, Any]:
        """
        Get a section's live parent row.

        Live rows are the English, active ones, ordered by id; index picks
        among them for sections with several rows.

        Raises:
            UnknownSectionError: Unknown section
            RowNotFoundError: No live rows, or index out of range
        """
        table = resolve_section(section).value
        rows = SectionService._live_rows(table)

        if not rows:
            raise RowNotFoundError(f"Section {table} parent not found", table)
        if index < 0 or index >= len(rows):
            raise RowNotFoundError(f"Section {table} row index {index} not found", table)

        return rows[index]

    @staticmethod
    def patch_parent_row(section: str | Section, body: dict[str, Any]) -> dict[str, Any]:
        """
        Update a section's default live row.

        The body is applied as-is (the parent table's columns are the
        contract); image columns are normalized to full URLs.
        """
        table = resolve_section(section).value
        row = SectionService.get_parent_default_row(table)
        payload = _normalize_image_columns(body, IMAGE_FIELD_ALIASES)
        return SectionService._update_by_id(table, row["id"], payload)

    @staticmethod
    def patch_parent_row_by_id(section: str | Section, row_id: int, body: dict[str, Any]) -> dict[str, Any]:
        """Update a specific parent row (any language / visibility)."""
        table = resolve_section(section).value
        payload = _normalize_image_columns(body, IMAGE_FIELD_ALIASES)
        return SectionService._update_by_id(table, row_id, payload)

    # -------------------------------------------------------------------------
    # Gallery rows (each row is itself an item)
    # -------------------------------------------------------------------------

    @staticmethod
    def list_gallery_rows() -> list[dict[str, Any]]:
        select = _embed_select(nested_relations(Section.GALLERY.value))
        return SectionService._live_rows(Section.GALLERY.value, select=select, order="sortOrder")

    @staticmethod
    def create_gallery_row(body: dict[str, Any]) -> dict[str, Any]:
        payload = {
            **GALLERY_ROW_DEFAULTS,
            **body,
            "languageCode": settings.DEFAULT_LANGUAGE_CODE,
            "isActive": True,
        }
        payload = _normalize_image_columns(payload, IMAGE_FIELD_ALIASES)
        return SectionService._insert(Section.GALLERY.value, payload)

    @staticmethod
    def patch_gallery_row(row_id: int, body: dict[str, Any]) -> dict[str, Any]:
        return SectionService.patch_parent_row_by_id(Section.GALLERY, row_id, body)

    @staticmethod
    def delete_gallery_row(row_id: int) -> DeletionOutcome:
        return SectionService._delete_row(Section.GALLERY.value, row_id, "imageUrl")

    # -------------------------------------------------------------------------
    # Child items
    # -------------------------------------------------------------------------

    @staticmethod
    def list_child_items(
        section: str | Section,
        item_type: str | None = None,
        parent_id: int | None = None,
    ) -> list[dict[str, Any]]:
        """
        List a section's child items, ordered by id.

        Args:
            section: Section name
            item_type: Child relation (defaults to the only one)
            parent_id: Parent row id (defaults to the live row)

        Returns:
            Child rows; project items embed technologies and highlights
        """
        relation = resolve_child(section, item_type)
        if parent_id is None:
            parent_id = SectionService.get_parent_default_row(section)["id"]

        select = "*"
        if relation.eager_nested:
            select = _embed_select(nested_relations(relation.table))

        client = SupabaseClient.get_client()
        response = execute_query(
            client.table(relation.table)
            .select(select)
            .eq(relation.foreign_key, parent_id)
            .order("id"),
            f"Failed to load {relation.table}",
        )
        rows = response.data or []
        logger.debug(f"Fetched {len(rows)} {relation.table} rows for parent {parent_id}")
        return rows

    @staticmethod
    def create_child_item(
        section: str | Section,
        item_type: str | None,
        body: dict[str, Any],
        parent_id: int | None = None,
    ) -> dict[str, Any]:
        """
        Create a child item from whitelisted body fields.

        Education items default educationType to "School".
        """
        relation = resolve_child(section, item_type)
        if parent_id is None:
            parent_id = SectionService.get_parent_default_row(section)["id"]

        payload = pick_fields(body, relation.fields)
        if relation.image_field:
            payload = _normalize_image_columns(payload, (relation.image_field,))
        if relation.table == "education_items" and payload.get("educationType") is None:
            payload["educationType"] = "School"

        payload[relation.foreign_key] = parent_id
        return SectionService._insert(relation.table, payload)

    @staticmethod
    def patch_child_item(
        section: str | Section,
        item_type: str | None,
        item_id: int,
        body: dict[str, Any],
    ) -> dict[str, Any]:
        """
        Partially update a child item.

        Raises:
            ValidationFailedError: No whitelisted field in the body
            RowNotFoundError: No row with that id
        """
        relation = resolve_child(section, item_type)
        payload = pick_fields(body, relation.fields)
        if relation.image_field:
            payload = _normalize_image_columns(payload, (relation.image_field,))
        return SectionService._update_by_id(relation.table, item_id, payload)

    @staticmethod
    def delete_child_item(
        section: str | Section,
        item_type: str | None,
        item_id: int,
    ) -> DeletionOutcome:
        relation = resolve_child(section, item_type)
        return SectionService._delete_row(relation.table, item_id, relation.image_field)

    # -------------------------------------------------------------------------
    # Nested items
    # -------------------------------------------------------------------------

    @staticmethod
    def list_nested(parent_table: str, parent_id: int, nested_type: str) -> list[dict[str, Any]]:
        relation = resolve_nested(parent_table, nested_type)
        client = SupabaseClient.get_client()
        response = execute_query(
            client.table(relation.table)
            .select("*")
            .eq(relation.foreign_key, parent_id)
            .order("id"),
            f"Failed to load {relation.table}",
        )
        return response.data or []

    @staticmethod
    def create_nested(
        parent_table: str,
        parent_id: int,
        nested_type: str,
        body: dict[str, Any],
    ) -> dict[str, Any]:
        relation = resolve_nested(parent_table, nested_type)
        payload = pick_fields(body, relation.fields)
        if relation.image_field:
            payload = _normalize_image_columns(payload, (relation.image_field,))
        payload[relation.foreign_key] = parent_id
        return SectionService._insert(relation.table, payload)

    @staticmethod
    def patch_nested(
        parent_table: str,
        nested_type: str,
        item_id: int,
        body: dict[str, Any],
    ) -> dict[str, Any]:
        relation = resolve_nested(parent_table, nested_type)
        payload = pick_fields(body, relation.fields)
        if relation.image_field:
            payload = _normalize_image_columns(payload, (relation.image_field,))
        return SectionService._update_by_id(relation.table, item_id, payload)

    @staticmethod
    def delete_nested(parent_table: str, nested_type: str, item_id: int) -> DeletionOutcome:
        relation = resolve_nested(parent_table, nested_type)
        return SectionService._delete_row(relation.table, item_id, relation.image_field)

    # -------------------------------------------------------------------------
    # Public read
    # -------------------------------------------------------------------------

    @staticmethod
    def get_section_content(section: str | Section) -> list[dict[str, Any]]:
        """
        Live parent rows of a section with their child relations embedded.

        Project items additionally embed their technologies and highlights;
        gallery rows embed their categories.
        """
        schema = get_schema(section)
        relations = list(schema.children.values()) or nested_relations(schema.parent_table)
        order = "sortOrder" if schema.section is Section.GALLERY else "id"
        return SectionService._live_rows(
            schema.parent_table,
            select=_embed_select(relations, nested=True),
            order=order,
        )
