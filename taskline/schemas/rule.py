"""Rule execution API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class RuleExecutionResponse(BaseModel):
    """Rule execution receipt."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    rule_id: int
    source_task_id: int
    user_id: int | None
    tasks_created: int
    executed_at: datetime


class RuleExecutionListResponse(BaseModel):
    """Page of receipts plus the total for the rule."""

    items: list[RuleExecutionResponse]
    total: int
