"""Task listing filters, dependencies and rule execution history on SQLite."""

import pytest

from taskline.api.v1.dependencies import build_lifecycle_service
from taskline.application.dtos.task import TaskCreate, TaskListFilters
from taskline.application.use_cases.tasks import TaskDependencyService, TaskQueryService
from taskline.domain.exceptions import (
    InvalidReferenceException,
    NotFoundOrConflictException,
    ResourceNotFoundException,
    ValidationException,
)
from taskline.infrastructure.persistence.repositories import (
    RuleExecutionRepository,
    RuleRepository,
    TaskDependencyRepository,
    TaskRepository,
)

from tests.conftest import ALICE, BOB


def _queries(session) -> TaskQueryService:
    return TaskQueryService(
        TaskRepository(session), RuleRepository(session), RuleExecutionRepository(session)
    )


def _dependencies(session) -> TaskDependencyService:
    return TaskDependencyService(
        session, TaskRepository(session), TaskDependencyRepository(session)
    )


@pytest.fixture
def create_task(in_session, world):
    async def _create(title, *, type_id=None, description=None, project_id=None):
        data = TaskCreate(
            project_id=project_id or world.project_id,
            type_id=type_id or world.bug_type_id,
            title=title,
            priority=3,
            created_by=ALICE,
            description=description,
        )
        return await in_session(lambda s: build_lifecycle_service(s).create_task(data))

    return _create


@pytest.fixture
def list_tasks(in_session, world):
    async def _list(user_id=ALICE, project_id=None, **filters):
        tasks = await in_session(
            lambda s: _queries(s).list_tasks(
                project_id or world.project_id, user_id, TaskListFilters(**filters)
            )
        )
        return [t.title for t in tasks]

    return _list


async def test_list_is_newest_first_and_project_scoped(world, create_task, list_tasks) -> None:
    await create_task("first")
    await create_task("second")
    await create_task("elsewhere", project_id=world.other_project_id, type_id=world.other_bug_type_id)
    assert await list_tasks() == ["second", "first"]
    assert await list_tasks(project_id=world.other_project_id) == ["elsewhere"]


async def test_list_filters_by_status(create_task, list_tasks, in_session) -> None:
    idle = await create_task("idle")
    taken = await create_task("taken")
    worked = await create_task("worked")
    await in_session(lambda s: build_lifecycle_service(s).claim_task(taken.id, ALICE, 1))
    await in_session(lambda s: build_lifecycle_service(s).claim_task(worked.id, BOB, 1))
    await in_session(lambda s: build_lifecycle_service(s).start_work(worked.id, BOB, 2))

    assert await list_tasks(status="available") == [idle.title]
    assert await list_tasks(status="claimed") == ["worked", "taken"]
    assert await list_tasks(status="ongoing") == ["worked"]
    assert await list_tasks(status="completed") == []
    assert await list_tasks(claimed_by_me=True) == ["taken"]
    assert await list_tasks(user_id=BOB, claimed_by_me=True) == ["worked"]


async def test_list_filters_by_type_capability_and_text(world, create_task, list_tasks) -> None:
    await create_task("Crash on save", description="Stack trace attached")
    await create_task("Review release notes", type_id=world.review_type_id)

    assert await list_tasks(type_id=world.review_type_id) == ["Review release notes"]
    assert await list_tasks(capability_id=11) == ["Crash on save"]
    assert await list_tasks(capability_id=99) == []
    assert await list_tasks(text_query="RELEASE") == ["Review release notes"]
    assert await list_tasks(text_query="stack trace") == ["Crash on save"]


async def test_unknown_status_filter_is_rejected(world, list_tasks) -> None:
    with pytest.raises(ValidationException):
        await list_tasks(status="done")


async def test_unknown_project_is_not_found(world, list_tasks) -> None:
    with pytest.raises(ResourceNotFoundException):
        await list_tasks(project_id=9999)


async def test_blocked_until_dependency_completes(create_task, list_tasks, in_session) -> None:
    deploy = await create_task("deploy")
    fix = await create_task("fix")
    dep = await in_session(lambda s: _dependencies(s).add_dependency(deploy.id, fix.id, ALICE))
    assert dep.task_id == fix.id
    assert dep.status == "available"

    assert await list_tasks(blocked=True) == ["deploy"]
    assert await list_tasks(blocked=False) == ["fix"]

    await in_session(lambda s: build_lifecycle_service(s).claim_task(fix.id, ALICE, 1))
    [claimed_dep] = await in_session(lambda s: _dependencies(s).list_dependencies(deploy.id))
    assert claimed_dep.status == "claimed"
    assert claimed_dep.claimed_by == ALICE

    await in_session(lambda s: build_lifecycle_service(s).complete_task(fix.id, ALICE, 2))
    assert await list_tasks(blocked=True) == []


async def test_dependency_rules(world, create_task, in_session) -> None:
    a = await create_task("a")
    b = await create_task("b")
    foreign = await create_task(
        "foreign", project_id=world.other_project_id, type_id=world.other_bug_type_id
    )

    with pytest.raises(ValidationException):
        await in_session(lambda s: _dependencies(s).add_dependency(a.id, a.id, ALICE))
    with pytest.raises(InvalidReferenceException):
        await in_session(lambda s: _dependencies(s).add_dependency(a.id, foreign.id, ALICE))
    with pytest.raises(InvalidReferenceException):
        await in_session(lambda s: _dependencies(s).add_dependency(a.id, 9999, ALICE))
    with pytest.raises(NotFoundOrConflictException):
        await in_session(lambda s: _dependencies(s).add_dependency(9999, a.id, ALICE))

    await in_session(lambda s: _dependencies(s).add_dependency(a.id, b.id, ALICE))
    with pytest.raises(ValidationException):
        await in_session(lambda s: _dependencies(s).add_dependency(a.id, b.id, ALICE))
    deps = await in_session(lambda s: _dependencies(s).list_dependencies(a.id))
    assert [d.task_id for d in deps] == [b.id]


async def test_rule_execution_history(world, make_rule, create_task, in_session) -> None:
    rule_id = await make_rule(
        world.project_id, world.bug_type_id, [("Review {{father}}", world.review_type_id)]
    )
    for title in ("one", "two"):
        task = await create_task(title)
        await in_session(lambda s: build_lifecycle_service(s).claim_task(task.id, ALICE, 1))
        await in_session(lambda s: build_lifecycle_service(s).complete_task(task.id, ALICE, 2))

    items, total = await in_session(lambda s: _queries(s).list_rule_executions(rule_id, limit=1))
    assert total == 2
    assert len(items) == 1
    assert items[0].tasks_created == 1
    assert items[0].user_id == ALICE

    with pytest.raises(ResourceNotFoundException):
        await in_session(lambda s: _queries(s).list_rule_executions(9999))
