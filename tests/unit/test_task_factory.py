"""TaskFactory reference checks with a mocked repository."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from taskline.application.dtos.task import TaskCreate
from taskline.application.use_cases.tasks import TaskFactory
from taskline.domain.enums import TaskEventKind
from taskline.domain.exceptions import InvalidReferenceException, ValidationException


def _data(**overrides) -> TaskCreate:
    values = {"project_id": 1, "type_id": 2, "title": "Fix", "priority": 3, "created_by": 5}
    values.update(overrides)
    return TaskCreate(**values)


@pytest.fixture
def factory_mocks():
    repo = AsyncMock()
    repo.get_project_org_id = AsyncMock(return_value=7)
    repo.type_in_project = AsyncMock(return_value=True)
    repo.card_in_project = AsyncMock(return_value=True)
    repo.create = AsyncMock(return_value=MagicMock(id=10))
    recorder = AsyncMock()
    return TaskFactory(repo, recorder), repo, recorder


async def test_create_inserts_and_records_event(factory_mocks) -> None:
    factory, repo, recorder = factory_mocks
    task = await factory.create(_data(card_id=3))
    repo.create.assert_awaited_once()
    recorder.record.assert_awaited_once_with(7, task, 5, TaskEventKind.CREATED)


async def test_unknown_project(factory_mocks) -> None:
    factory, repo, _ = factory_mocks
    repo.get_project_org_id = AsyncMock(return_value=None)
    with pytest.raises(InvalidReferenceException) as exc_info:
        await factory.create(_data())
    assert exc_info.value.details["field"] == "project_id"
    repo.create.assert_not_awaited()


async def test_type_outside_project(factory_mocks) -> None:
    factory, repo, _ = factory_mocks
    repo.type_in_project = AsyncMock(return_value=False)
    with pytest.raises(InvalidReferenceException) as exc_info:
        await factory.create(_data())
    assert exc_info.value.details == {"field": "type_id", "value": 2}


async def test_card_checked_only_when_given(factory_mocks) -> None:
    factory, repo, _ = factory_mocks
    repo.card_in_project = AsyncMock(return_value=False)
    await factory.create(_data())
    repo.card_in_project.assert_not_awaited()
    with pytest.raises(InvalidReferenceException):
        await factory.create(_data(card_id=99))


async def test_domain_validation_runs_first(factory_mocks) -> None:
    factory, repo, _ = factory_mocks
    with pytest.raises(ValidationException):
        await factory.create(_data(priority=6))
    repo.get_project_org_id.assert_not_awaited()
