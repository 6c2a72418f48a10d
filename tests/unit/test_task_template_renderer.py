"""TaskTemplateRenderer: placeholder substitution against the source task."""

from datetime import UTC, datetime

import pytest

from taskline.domain.entities.task import Available, TaskEntity
from taskline.infrastructure.services.task_template_renderer import (
    TaskTemplateRenderer,
    father_reference,
)


@pytest.fixture
def source() -> TaskEntity:
    return TaskEntity(
        id=10,
        project_id=1,
        type_id=1,
        title="Login broken",
        description=None,
        priority=3,
        status=Available(),
        version=3,
        card_id=None,
        created_by=5,
        created_at=datetime(2026, 1, 1, tzinfo=UTC),
    )


@pytest.fixture
def renderer() -> TaskTemplateRenderer:
    return TaskTemplateRenderer()


def test_father_renders_back_reference(renderer, source) -> None:
    assert renderer.render("Review {{father}}", source) == "Review [Task #10: Login broken]"
    assert father_reference(source).startswith("[Task #10")


def test_spaced_placeholder_and_other_names(renderer, source) -> None:
    out = renderer.render("{{ father_id }} / {{father_title}}", source)
    assert out == "10 / Login broken"


def test_unknown_placeholder_passes_through_unchanged(renderer, source) -> None:
    assert renderer.render("Ask {{ owner }} about {{father}}", source) == (
        "Ask {{ owner }} about [Task #10: Login broken]"
    )


def test_plain_text_is_untouched(renderer, source) -> None:
    assert renderer.render("Write release notes", source) == "Write release notes"


def test_broken_statement_is_kept_and_father_still_rendered(renderer, source) -> None:
    out = renderer.render("{% if %} {{father}}", source)
    assert out == "{% if %} [Task #10: Login broken]"


def test_title_with_jinja_syntax_is_not_evaluated(renderer) -> None:
    sneaky = TaskEntity(
        id=11,
        project_id=1,
        type_id=1,
        title="{{ 7 * 7 }}",
        description=None,
        priority=3,
        status=Available(),
        version=1,
        card_id=None,
        created_by=5,
        created_at=datetime(2026, 1, 1, tzinfo=UTC),
    )
    assert renderer.render("Review {{father}}", sneaky) == "Review [Task #11: {{ 7 * 7 }}]"


@pytest.mark.parametrize(
    "template",
    [
        "Ask {{ owner | default('x') }}",
        "Ask {{foo|upper}}",
        "Deploy {# internal note #} now",
        "{% if urgent %}URGENT {% endif %}Deploy",
        "{{ father | no_such_filter }}",
        "{{ father.missing_attribute }}",
        "{{ 7 * 7 }}",
    ],
)
def test_unrecognized_constructs_pass_through(renderer, source, template) -> None:
    assert renderer.render(template, source) == template


def test_filters_on_known_names_are_applied(renderer, source) -> None:
    assert renderer.render("Retest {{ father_title | upper }}", source) == "Retest LOGIN BROKEN"


def test_known_and_unknown_names_mixed(renderer, source) -> None:
    out = renderer.render("{{father}} for {{ owner }} {# todo #}", source)
    assert out == "[Task #10: Login broken] for {{ owner }} {# todo #}"
