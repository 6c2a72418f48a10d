"""Rule routes: execution history (receipts) for audit drill-down."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from taskline.api.v1.dependencies import get_current_user_id, get_query_service
from taskline.application.use_cases.tasks import TaskQueryService
from taskline.schemas.rule import RuleExecutionListResponse, RuleExecutionResponse

router = APIRouter()


@router.get("/{rule_id}/executions", response_model=RuleExecutionListResponse)
async def list_rule_executions(
    rule_id: int,
    _user_id: Annotated[int, Depends(get_current_user_id)],
    queries: Annotated[TaskQueryService, Depends(get_query_service)],
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
):
    """Receipts for the rule, newest first, with the total count."""
    items, total = await queries.list_rule_executions(rule_id, skip=skip, limit=limit)
    return RuleExecutionListResponse(
        items=[RuleExecutionResponse.model_validate(e) for e in items],
        total=total,
    )
