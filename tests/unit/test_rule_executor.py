"""RuleExecutor and RuleMatcher unit tests with mocked collaborators."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from taskline.application.dtos.rule import MatchedRule
from taskline.domain.entities.rule import RuleEntity, TaskTemplateEntity
from taskline.domain.entities.task import Completed, TaskEntity
from taskline.domain.enums import TriggerEvent
from taskline.infrastructure.services.rule_executor import RuleExecutor
from taskline.infrastructure.services.rule_matcher import RuleMatcher
from taskline.infrastructure.services.task_template_renderer import TaskTemplateRenderer


def _source(card_id: int | None = 4) -> TaskEntity:
    return TaskEntity(
        id=10,
        project_id=1,
        type_id=1,
        title="Login broken",
        description=None,
        priority=3,
        status=Completed(completed_by=5),
        version=3,
        card_id=card_id,
        created_by=2,
        created_at=datetime(2026, 1, 1, tzinfo=UTC),
    )


def _rule(rule_id: int, project_id: int = 1) -> RuleEntity:
    return RuleEntity(
        id=rule_id,
        workflow_id=1,
        project_id=project_id,
        name=f"rule {rule_id}",
        source_type_id=1,
        trigger_event="completed",
        active=True,
    )


def _template(template_id: int, name: str, type_id: int = 2) -> TaskTemplateEntity:
    return TaskTemplateEntity(
        id=template_id,
        project_id=1,
        name=name,
        description="Follow up on {{father}}",
        type_id=type_id,
        priority=4,
    )


@pytest.fixture
def executor_mocks():
    matcher = AsyncMock()
    execution_repo = AsyncMock()
    creator = AsyncMock()
    counter = iter(range(100, 200))
    creator.create = AsyncMock(side_effect=lambda data: MagicMock(id=next(counter)))
    executor = RuleExecutor(matcher, TaskTemplateRenderer(), execution_repo, creator)
    return executor, matcher, execution_repo, creator


async def test_fan_out_creates_one_task_per_template(executor_mocks) -> None:
    executor, matcher, execution_repo, creator = executor_mocks
    matcher.match = AsyncMock(
        return_value=[MatchedRule(_rule(1), [_template(1, "Review {{father}}"), _template(2, "Deploy")])]
    )
    execution_repo.try_record = AsyncMock(return_value=55)

    created = await executor.execute(7, _source(), 5)

    assert created == [100, 101]
    first = creator.create.await_args_list[0].args[0]
    assert first.title == "Review [Task #10: Login broken]"
    assert first.description == "Follow up on [Task #10: Login broken]"
    assert first.card_id == 4
    assert first.created_by == 5
    assert first.priority == 4
    assert first.created_from_rule_id == 1
    execution_repo.set_tasks_created.assert_awaited_once_with(55, 2)


async def test_existing_receipt_skips_rule(executor_mocks) -> None:
    executor, matcher, execution_repo, creator = executor_mocks
    matcher.match = AsyncMock(
        return_value=[
            MatchedRule(_rule(1), [_template(1, "A")]),
            MatchedRule(_rule(2), [_template(2, "B")]),
        ]
    )
    execution_repo.try_record = AsyncMock(side_effect=[None, 56])

    created = await executor.execute(7, _source(), 5)

    assert created == [100]
    assert creator.create.await_args.args[0].title == "B"
    execution_repo.set_tasks_created.assert_awaited_once_with(56, 1)


async def test_card_none_is_inherited(executor_mocks) -> None:
    executor, matcher, execution_repo, creator = executor_mocks
    matcher.match = AsyncMock(return_value=[MatchedRule(_rule(1), [_template(1, "A")])])
    execution_repo.try_record = AsyncMock(return_value=1)
    await executor.execute(7, _source(card_id=None), 5)
    assert creator.create.await_args.args[0].card_id is None


async def test_long_rendered_title_is_truncated(executor_mocks) -> None:
    executor, matcher, execution_repo, creator = executor_mocks
    matcher.match = AsyncMock(
        return_value=[MatchedRule(_rule(1), [_template(1, "x" * 250 + " {{father}}")])]
    )
    execution_repo.try_record = AsyncMock(return_value=1)
    await executor.execute(7, _source(), 5)
    assert len(creator.create.await_args.args[0].title) == 255


async def test_matcher_drops_rules_outside_project_and_sorts() -> None:
    repo = AsyncMock()
    repo.find_matching = AsyncMock(
        return_value=[MatchedRule(_rule(3)), MatchedRule(_rule(2, project_id=9)), MatchedRule(_rule(1))]
    )
    matched = await RuleMatcher(repo).match(1, 1, TriggerEvent.COMPLETED)
    assert [m.rule.id for m in matched] == [1, 3]
    repo.find_matching.assert_awaited_once_with(1, 1, "completed")
