"""Query API controller — semantic search used to ground chat answers."""

from fastapi import APIRouter, Depends

from app.application.schemas import QueryMatchSchema, QueryRequest, QueryResponse
from app.application.services import RetrievalService
from app.domain.exceptions import RetrievalError
from app.infrastructure.dependencies import get_retrieval_service
from app.presentation.api.v1.errors import to_http_error

router = APIRouter(prefix="/query", tags=["query"])


@router.post("", response_model=QueryResponse)
async def execute_query(
    body: QueryRequest,
    service: RetrievalService = Depends(get_retrieval_service),
):
    """Return the stored chunks most similar to the question."""
    try:
        matches = await service.query(
            body.question,
            min_similarity=body.min_similarity,
            limit=body.limit,
        )
    except RetrievalError as e:
        raise to_http_error(e)

    return QueryResponse(
        matches=[
            QueryMatchSchema(
                content=m.content,
                similarity=m.similarity,
                resource_id=m.resource_id,
            )
            for m in matches
        ],
        total_matches=len(matches),
    )
