"""Seed dev data from scripts/seed-data.json.

Creates projects, task types, cards, workflows with rules and templates, and
a few tasks (through the lifecycle engine, so 'created' events are written).

Usage:
    python -m scripts.seed_dev_data [path/to/seed-data.json]

Requires DATABASE_URL. On SQLite the schema is created in place; on Postgres
run `alembic upgrade head` first.
"""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from sqlalchemy.ext.asyncio import AsyncSession

from taskline.api.v1.dependencies import build_lifecycle_service
from taskline.application.dtos.task import TaskCreate
from taskline.core.config import get_settings
from taskline.infrastructure.persistence import database as db_mod
from taskline.infrastructure.persistence.models import Card, Project, TaskType
from taskline.infrastructure.persistence.repositories import RuleRepository

SEED_USER_ID = 1


def _project_root() -> Path:
    return Path(__file__).resolve().parent.parent


def _load_env() -> None:
    """Load .env from project root so get_settings() sees DATABASE_URL when run as script."""
    load_dotenv(_project_root() / ".env", override=True)


async def _add(session: AsyncSession, obj: Any) -> Any:
    session.add(obj)
    await session.flush()
    return obj


async def _seed_project(session: AsyncSession, p: dict[str, Any]) -> None:
    project = await _add(session, Project(org_id=p["org_id"], name=p["name"]))
    print(f"Project {p['name']} -> {project.id}")

    types: dict[str, int] = {}
    for t in p.get("task_types", []):
        row = await _add(
            session,
            TaskType(project_id=project.id, name=t["name"], icon=t.get("icon", "task")),
        )
        types[t["key"]] = row.id
    cards: dict[str, int] = {}
    for c in p.get("cards", []):
        row = await _add(session, Card(project_id=project.id, title=c["title"]))
        cards[c["key"]] = row.id

    rule_repo = RuleRepository(session)
    for w in p.get("workflows", []):
        workflow = await rule_repo.create_workflow(
            p["org_id"], project.id, w["name"], SEED_USER_ID, description=w.get("description")
        )
        for r in w.get("rules", []):
            rule = await rule_repo.create_rule(
                workflow.id,
                r["name"],
                r["trigger_event"],
                source_type_id=types.get(r.get("source_type", "")),
            )
            for order, tmpl in enumerate(r.get("templates", [])):
                template = await rule_repo.create_template(
                    p["org_id"],
                    project.id,
                    tmpl["name"],
                    types[tmpl["type"]],
                    SEED_USER_ID,
                    priority=tmpl.get("priority", 3),
                )
                await rule_repo.attach_template(rule.id, template.id, order)
            print(f"  Rule {r['name']} -> {rule.id}")

    lifecycle = build_lifecycle_service(session)
    for t in p.get("tasks", []):
        task = await lifecycle.create_task(
            TaskCreate(
                project_id=project.id,
                type_id=types[t["type"]],
                title=t["title"],
                priority=t.get("priority", 3),
                created_by=SEED_USER_ID,
                card_id=cards.get(t.get("card", "")),
            )
        )
        print(f"  Task {t['title']} -> {task.id}")


async def run(path: Path) -> None:
    _load_env()
    if not path.exists():
        print(f"Seed file not found: {path}", file=sys.stderr)
        sys.exit(1)
    with path.open() as f:
        data = json.load(f)

    get_settings.cache_clear()
    db_mod._ensure_engine()
    assert db_mod.engine is not None and db_mod.AsyncSessionLocal is not None
    if get_settings().database_url.startswith("sqlite"):
        from taskline.infrastructure.persistence import models  # noqa: F401

        async with db_mod.engine.begin() as conn:
            await conn.run_sync(db_mod.Base.metadata.create_all)

    async with db_mod.AsyncSessionLocal() as session:
        async with session.begin():
            for p in data.get("projects", []):
                await _seed_project(session, p)
    await db_mod.dispose_engine()
    print("Seed completed.")


def main() -> None:
    root = _project_root()
    path_arg = sys.argv[1] if len(sys.argv) > 1 else None
    path = Path(path_arg) if path_arg else root / "scripts" / "seed-data.json"
    if not path.is_absolute():
        path = (root / path).resolve()
    asyncio.run(run(path))


if __name__ == "__main__":
    main()
