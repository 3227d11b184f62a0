"""Conversation query REST API routes - V1."""

from typing import Any, Dict, Optional
from fastapi import APIRouter, HTTPException, Depends, Query

from ...errors import (
    ComparatorError,
    ConversationNotFoundError,
    FunnelSpecError,
    StoreError,
)
from ...models.conversation import (
    ConversationExplanation,
    ConversationPage,
    FunnelReport,
    IntentsResponse,
)
from ...models.filters import FilterSpec
from ...services import ConversationQueryService

router = APIRouter(prefix="/api/v1/conversations", tags=["Conversations"])

# Query service (set by main.py)
query_service: ConversationQueryService = None


def get_query_service() -> ConversationQueryService:
    """Dependency to get the query service."""
    if query_service is None:
        raise HTTPException(status_code=500, detail="Query service not initialized")
    return query_service


def _to_http_error(error: Exception) -> HTTPException:
    if isinstance(error, (ComparatorError, FunnelSpecError)):
        return HTTPException(status_code=400, detail=str(error))
    if isinstance(error, ConversationNotFoundError):
        return HTTPException(status_code=404, detail=str(error))
    return HTTPException(status_code=503, detail=str(error))


@router.post("/query", response_model=ConversationPage)
async def query_conversations(
    spec: FilterSpec,
    service: ConversationQueryService = Depends(get_query_service)
):
    """Filter, funnel-match and paginate a project's conversations."""
    try:
        return await service.query_conversations(spec)
    except (ComparatorError, FunnelSpecError, StoreError) as e:
        raise _to_http_error(e)


@router.post("/funnel", response_model=FunnelReport)
async def funnel_report(
    spec: FilterSpec,
    service: ConversationQueryService = Depends(get_query_service)
):
    """Count filtered conversations reaching each step of an inOrder funnel."""
    try:
        return await service.funnel_report(spec)
    except (ComparatorError, FunnelSpecError, StoreError) as e:
        raise _to_http_error(e)


@router.get("/{project_id}/intents", response_model=IntentsResponse)
async def get_intents(
    project_id: str,
    service: ConversationQueryService = Depends(get_query_service)
):
    """List the distinct intents of a project's conversations."""
    try:
        return IntentsResponse(intents=await service.get_intents(project_id))
    except StoreError as e:
        raise _to_http_error(e)


@router.get("/{project_id}/{conversation_id}", response_model=Dict[str, Any])
async def get_conversation(
    project_id: str,
    conversation_id: str,
    sender_id: Optional[str] = Query(None, description="Look up by tracker sender id instead"),
    service: ConversationQueryService = Depends(get_query_service)
):
    """Get one conversation document."""
    try:
        return await service.get_conversation(project_id, conversation_id, sender_id)
    except (ConversationNotFoundError, StoreError) as e:
        raise _to_http_error(e)


@router.post("/{project_id}/{conversation_id}/explain", response_model=ConversationExplanation)
async def explain_conversation(
    project_id: str,
    conversation_id: str,
    spec: FilterSpec,
    service: ConversationQueryService = Depends(get_query_service)
):
    """Show which clauses of a filter one conversation passes."""
    if spec.project_id != project_id:
        raise HTTPException(status_code=400, detail="projectId does not match the path")
    try:
        conversation = await service.get_conversation(project_id, conversation_id)
        return await service.explain(spec, conversation)
    except (ComparatorError, FunnelSpecError, ConversationNotFoundError, StoreError) as e:
        raise _to_http_error(e)
