"""Generic CRUD endpoints, one router per entity collection."""

from typing import Any, Literal

from fastapi import APIRouter, Body, Depends, Query, Response
from pydantic import BaseModel

from tms.api.dependencies import get_engine
from tms.engine import TransportEngine
from tms.query.engine import SortConfig, ViewQuery


class PageResponse(BaseModel):
    """Paginated list of records."""
    items: list[dict[str, Any]]
    page: int
    page_size: int
    total_items: int
    total_pages: int


def build_entity_router(kind: str) -> APIRouter:
    """
    CRUD router for one collection.

    Records are accepted with camelCase or snake_case field names and
    returned in their persisted camelCase shape.
    """
    router = APIRouter()

    @router.get("/", response_model=PageResponse)
    def list_records(
        search: str | None = Query(default=None, description="Free-text search"),
        status: str | None = Query(default=None, description="Filter by status"),
        sort_key: str | None = Query(default=None, description="Field to sort on"),
        sort_direction: Literal["ascending", "descending"] = Query(default="ascending"),
        page: int = Query(default=1, ge=1, description="Page number"),
        page_size: int | None = Query(default=None, ge=1, le=100, description="Page size"),
        engine: TransportEngine = Depends(get_engine),
    ):
        """List records with optional filtering, sorting and pagination."""
        query = ViewQuery(
            search=search,
            status=status,
            sort=SortConfig(key=sort_key, direction=sort_direction) if sort_key else None,
            page=page,
            page_size=page_size,
        )
        result = engine.query(kind, query)
        return PageResponse(
            items=[record.to_record() for record in result.items],
            page=result.page,
            page_size=result.page_size,
            total_items=result.total_items,
            total_pages=result.total_pages,
        )

    @router.post("/", status_code=201)
    def create_record(
        fields: dict[str, Any] = Body(..., description="Record fields"),
        engine: TransportEngine = Depends(get_engine),
    ):
        """Create a record; id and creation date are assigned by the engine."""
        return engine.repository(kind).create(fields).to_record()

    @router.get("/{entity_id}")
    def get_record(entity_id: str, engine: TransportEngine = Depends(get_engine)):
        """Get a single record."""
        return engine.repository(kind).get(entity_id).to_record()

    @router.patch("/{entity_id}")
    def update_record(
        entity_id: str,
        fields: dict[str, Any] = Body(..., description="Fields to change"),
        engine: TransportEngine = Depends(get_engine),
    ):
        """Merge the supplied fields over a record."""
        return engine.repository(kind).update(entity_id, fields).to_record()

    @router.delete("/{entity_id}", status_code=204)
    def delete_record(entity_id: str, engine: TransportEngine = Depends(get_engine)):
        """Delete a record. References held by other records are not touched."""
        engine.repository(kind).delete(entity_id)
        return Response(status_code=204)

    return router
