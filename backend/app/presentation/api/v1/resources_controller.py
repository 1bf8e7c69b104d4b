"""Resources API controller — add, inspect and remove knowledge-base content."""

import logging

from fastapi import APIRouter, Depends, status

from app.application.schemas import (
    ClearResponse,
    EmbeddingSummarySchema,
    IngestRequest,
    IngestResponse,
    ResourceDetailSchema,
    ResourceSchema,
)
from app.application.services import RetrievalService
from app.domain.entities import Resource
from app.domain.exceptions import RetrievalError
from app.infrastructure.dependencies import get_retrieval_service, require_admin_token
from app.presentation.api.v1.errors import to_http_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/resources", tags=["resources"])


def _to_schema(resource: Resource) -> ResourceSchema:
    return ResourceSchema(
        id=resource.id,
        content=resource.content,
        created_at=resource.created_at,
        updated_at=resource.updated_at,
    )


# ── Endpoints ────────────────────────────────────────────────────────

@router.post("", response_model=IngestResponse, status_code=status.HTTP_201_CREATED)
async def create_resource(
    body: IngestRequest,
    service: RetrievalService = Depends(get_retrieval_service),
):
    """Create a resource and embed its chunks."""
    try:
        result = await service.ingest(body.content)
    except RetrievalError as e:
        logger.warning("Ingestion rejected: %s", e)
        raise to_http_error(e)

    return IngestResponse(
        resource_id=result.resource_id,
        chunk_count=result.chunk_count,
        message=f"Resource created and embedded into {result.chunk_count} chunk(s)",
    )


@router.get("", response_model=list[ResourceSchema])
async def list_resources(
    service: RetrievalService = Depends(get_retrieval_service),
):
    """List every resource, oldest first."""
    try:
        resources = await service.list_resources()
    except RetrievalError as e:
        raise to_http_error(e)
    return [_to_schema(r) for r in resources]


@router.delete("", response_model=ClearResponse, dependencies=[Depends(require_admin_token)])
async def clear_resources(
    service: RetrievalService = Depends(get_retrieval_service),
):
    """Delete every embedding and then every resource."""
    try:
        result = await service.clear_all()
    except RetrievalError as e:
        raise to_http_error(e)

    logger.warning(
        "Knowledge base cleared: %d resources, %d embeddings",
        result.deleted_resources,
        result.deleted_embeddings,
    )
    return ClearResponse(
        deleted_embeddings=result.deleted_embeddings,
        deleted_resources=result.deleted_resources,
        message="All data cleared successfully",
    )


@router.get("/{resource_id}", response_model=ResourceDetailSchema)
async def get_resource(
    resource_id: str,
    service: RetrievalService = Depends(get_retrieval_service),
):
    """Get a resource together with the chunks it was embedded as."""
    try:
        resource = await service.get_resource(resource_id)
        embeddings = await service.get_resource_embeddings(resource_id)
    except RetrievalError as e:
        raise to_http_error(e)

    return ResourceDetailSchema(
        **_to_schema(resource).model_dump(),
        embeddings=[
            EmbeddingSummarySchema(
                id=record.id,
                content=record.content,
                dimensions=len(record.embedding),
            )
            for record in embeddings
        ],
    )


@router.delete("/{resource_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_resource(
    resource_id: str,
    service: RetrievalService = Depends(get_retrieval_service),
) -> None:
    """Delete a resource and its embeddings."""
    try:
        await service.delete_resource(resource_id)
    except RetrievalError as e:
        raise to_http_error(e)
