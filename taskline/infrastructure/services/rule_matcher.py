"""Rule matcher: resolves the rules a lifecycle event triggers (implements IRuleMatcher)."""

from __future__ import annotations

from taskline.application.dtos.rule import MatchedRule
from taskline.application.interfaces.repositories import IRuleRepository
from taskline.domain.enums import TriggerEvent
from taskline.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class RuleMatcher:
    """Finds active rules for (project, source type, trigger) in ascending rule id order."""

    def __init__(self, rule_repo: IRuleRepository) -> None:
        self.rule_repo = rule_repo

    async def match(
        self, project_id: int, source_type_id: int, trigger_event: TriggerEvent
    ) -> list[MatchedRule]:
        candidates = await self.rule_repo.find_matching(
            project_id, source_type_id, trigger_event.value
        )
        # The query already scopes by project; re-checking keeps a broken
        # query from leaking rules across projects.
        matched = [
            m
            for m in candidates
            if m.rule.matches(project_id, source_type_id, trigger_event.value)
        ]
        if len(matched) != len(candidates):
            logger.error(
                "Rule lookup returned %d rule(s) outside scope (project_id=%s, trigger=%s)",
                len(candidates) - len(matched),
                project_id,
                trigger_event.value,
            )
        return sorted(matched, key=lambda m: m.rule.id)
