"""initial task lifecycle schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""

from collections.abc import Sequence
from typing import Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001_initial"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id() -> sa.Column:
    return sa.Column("id", sa.BigInteger(), sa.Identity(), primary_key=True)


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        server_default=sa.text("now()"),
        nullable=False,
    )


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "projects",
        _id(),
        sa.Column("org_id", sa.BigInteger(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        _created_at(),
    )
    op.create_index("ix_projects_org_id", "projects", ["org_id"])

    op.create_table(
        "task_types",
        _id(),
        sa.Column("project_id", sa.BigInteger(), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("icon", sa.String(64), nullable=False),
        sa.Column("capability_id", sa.BigInteger(), nullable=True),
        sa.UniqueConstraint("name", "project_id", name="uq_task_types_name_project"),
    )
    op.create_index("ix_task_types_project_id", "task_types", ["project_id"])
    op.create_index("ix_task_types_capability_id", "task_types", ["capability_id"])

    op.create_table(
        "cards",
        _id(),
        sa.Column("project_id", sa.BigInteger(), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        _created_at(),
    )
    op.create_index("ix_cards_project_id", "cards", ["project_id"])

    op.create_table(
        "workflows",
        _id(),
        sa.Column("org_id", sa.BigInteger(), nullable=False),
        sa.Column("project_id", sa.BigInteger(), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("active", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("created_by", sa.BigInteger(), nullable=False),
        _created_at(),
        sa.UniqueConstraint("project_id", "name", name="uq_workflows_project_name"),
    )
    op.create_index("ix_workflows_org_id", "workflows", ["org_id"])
    op.create_index("ix_workflows_project_id", "workflows", ["project_id"])

    op.create_table(
        "rules",
        _id(),
        sa.Column(
            "workflow_id",
            sa.BigInteger(),
            sa.ForeignKey("workflows.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("goal", sa.Text(), nullable=True),
        sa.Column("task_type_id", sa.BigInteger(), sa.ForeignKey("task_types.id"), nullable=True),
        sa.Column("trigger_event", sa.String(32), nullable=False),
        sa.Column("active", sa.Boolean(), server_default=sa.true(), nullable=False),
        _created_at(),
        sa.CheckConstraint(
            "trigger_event IN ('created', 'claimed', 'released', 'completed')",
            name="rules_trigger_event_check",
        ),
    )
    op.create_index("ix_rules_workflow_id", "rules", ["workflow_id"])

    op.create_table(
        "task_templates",
        _id(),
        sa.Column("org_id", sa.BigInteger(), nullable=False),
        sa.Column("project_id", sa.BigInteger(), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("type_id", sa.BigInteger(), nullable=False),
        sa.Column("priority", sa.Integer(), server_default=sa.text("3"), nullable=False),
        sa.Column("created_by", sa.BigInteger(), nullable=False),
        _created_at(),
        sa.CheckConstraint("priority BETWEEN 1 AND 5", name="task_templates_priority_range"),
    )
    op.create_index("ix_task_templates_org_id", "task_templates", ["org_id"])
    op.create_index("ix_task_templates_project_id", "task_templates", ["project_id"])

    op.create_table(
        "rule_templates",
        sa.Column(
            "rule_id",
            sa.BigInteger(),
            sa.ForeignKey("rules.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "template_id",
            sa.BigInteger(),
            sa.ForeignKey("task_templates.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("execution_order", sa.Integer(), server_default=sa.text("0"), nullable=False),
    )

    op.create_table(
        "tasks",
        _id(),
        sa.Column("project_id", sa.BigInteger(), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("type_id", sa.BigInteger(), sa.ForeignKey("task_types.id"), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("priority", sa.Integer(), server_default=sa.text("3"), nullable=False),
        sa.Column("status", sa.String(16), server_default="available", nullable=False),
        sa.Column("is_ongoing", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("claimed_by", sa.BigInteger(), nullable=True),
        sa.Column("claimed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("version", sa.Integer(), server_default=sa.text("1"), nullable=False),
        sa.Column("card_id", sa.BigInteger(), sa.ForeignKey("cards.id"), nullable=True),
        sa.Column("created_by", sa.BigInteger(), nullable=False),
        sa.Column(
            "created_from_rule_id",
            sa.BigInteger(),
            sa.ForeignKey("rules.id", ondelete="SET NULL"),
            nullable=True,
        ),
        _created_at(),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.CheckConstraint("priority BETWEEN 1 AND 5", name="tasks_priority_range"),
        sa.CheckConstraint(
            "status IN ('available', 'claimed', 'completed')", name="tasks_status_check"
        ),
        sa.CheckConstraint(
            "status != 'claimed' OR claimed_by IS NOT NULL",
            name="tasks_claimed_has_claimant",
        ),
        sa.CheckConstraint(
            "NOT is_ongoing OR status = 'claimed'", name="tasks_ongoing_only_when_claimed"
        ),
        sa.CheckConstraint("version >= 1", name="tasks_version_positive"),
    )
    op.create_index("ix_tasks_project_id", "tasks", ["project_id"])
    op.create_index("ix_tasks_type_id", "tasks", ["type_id"])
    op.create_index("ix_tasks_claimed_by", "tasks", ["claimed_by"])
    op.create_index("ix_tasks_card_id", "tasks", ["card_id"])
    op.create_index("ix_tasks_project_status", "tasks", ["project_id", "status"])

    op.create_table(
        "task_dependencies",
        _id(),
        sa.Column(
            "task_id",
            sa.BigInteger(),
            sa.ForeignKey("tasks.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "depends_on_task_id",
            sa.BigInteger(),
            sa.ForeignKey("tasks.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("created_by", sa.BigInteger(), nullable=False),
        _created_at(),
        sa.UniqueConstraint("task_id", "depends_on_task_id", name="uq_task_dependencies_pair"),
        sa.CheckConstraint("task_id != depends_on_task_id", name="task_dependencies_not_self"),
    )
    op.create_index("ix_task_dependencies_task_id", "task_dependencies", ["task_id"])
    op.create_index(
        "ix_task_dependencies_depends_on_task_id", "task_dependencies", ["depends_on_task_id"]
    )

    op.create_table(
        "rule_executions",
        _id(),
        sa.Column(
            "rule_id",
            sa.BigInteger(),
            sa.ForeignKey("rules.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "source_task_id",
            sa.BigInteger(),
            sa.ForeignKey("tasks.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("user_id", sa.BigInteger(), nullable=True),
        sa.Column("tasks_created", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column(
            "executed_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.UniqueConstraint("rule_id", "source_task_id", name="uq_rule_executions_rule_source"),
    )
    op.create_index("ix_rule_executions_rule_id", "rule_executions", ["rule_id"])
    op.create_index("ix_rule_executions_source_task_id", "rule_executions", ["source_task_id"])

    op.create_table(
        "task_events",
        _id(),
        sa.Column("org_id", sa.BigInteger(), nullable=False),
        sa.Column("project_id", sa.BigInteger(), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("task_id", sa.BigInteger(), sa.ForeignKey("tasks.id"), nullable=False),
        sa.Column("actor_user_id", sa.BigInteger(), nullable=False),
        sa.Column("kind", sa.String(32), nullable=False),
        _created_at(),
        sa.CheckConstraint(
            "kind IN ('task_created', 'task_claimed', 'task_released', 'task_completed', "
            "'task_work_started', 'task_work_paused', 'task_updated')",
            name="task_events_kind_check",
        ),
    )
    op.create_index("ix_task_events_org_created_at", "task_events", ["org_id", "created_at"])
    op.create_index(
        "ix_task_events_project_created_at", "task_events", ["project_id", "created_at"]
    )
    op.create_index("ix_task_events_task_created_at", "task_events", ["task_id", "created_at"])
    op.create_index(
        "ix_task_events_actor_created_at", "task_events", ["actor_user_id", "created_at"]
    )

    op.create_table(
        "work_sessions",
        _id(),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("task_id", sa.BigInteger(), sa.ForeignKey("tasks.id"), nullable=False),
        sa.Column(
            "started_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "last_heartbeat_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("ended_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("ended_reason", sa.String(32), nullable=True),
    )
    op.create_index("ix_work_sessions_task_id", "work_sessions", ["task_id"])
    op.create_index(
        "uq_work_sessions_open_user_task",
        "work_sessions",
        ["user_id", "task_id"],
        unique=True,
        postgresql_where=sa.text("ended_at IS NULL"),
    )
    op.create_index(
        "ix_work_sessions_user_open",
        "work_sessions",
        ["user_id"],
        postgresql_where=sa.text("ended_at IS NULL"),
    )


def downgrade() -> None:
    """Downgrade schema."""
    for table in (
        "work_sessions",
        "task_events",
        "rule_executions",
        "task_dependencies",
        "tasks",
        "rule_templates",
        "task_templates",
        "rules",
        "workflows",
        "cards",
        "task_types",
        "projects",
    ):
        op.drop_table(table)
