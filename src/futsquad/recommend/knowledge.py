"""Bundled meta knowledge base folded into recommendation prompts."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from futsquad.recommend.schemas import KnowledgeBase


logger = logging.getLogger(__name__)

DEFAULT_KNOWLEDGE_BASE_PATH = Path(__file__).resolve().parent.parent / "data" / "knowledge_base.json"


def load_knowledge_base(path: Path | None = None) -> KnowledgeBase:
    """Load the knowledge base, falling back to an empty one on any failure."""

    path = path or DEFAULT_KNOWLEDGE_BASE_PATH
    try:
        return KnowledgeBase.model_validate(json.loads(path.read_text(encoding="utf-8")))
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        logger.warning("Failed to load knowledge base from %s: %s", path, exc)
        return KnowledgeBase()


def render_knowledge_base(knowledge: KnowledgeBase) -> str:
    lines: list[str] = []
    if knowledge.general_advice:
        lines.append(f"General advice: {knowledge.general_advice}")
    for formation in knowledge.meta_formations:
        name = formation.get("name", "")
        description = formation.get("description", "")
        if name:
            lines.append(f"Meta formation {name}: {description}".rstrip(": "))
    for playstyle in knowledge.playstyles_plus_meta:
        name = playstyle.get("name", "")
        positions = ", ".join(playstyle.get("positions", []))
        if name:
            lines.append(f"PlayStyle+ {name} ({positions}): {playstyle.get('description', '')}")
    for archetype in knowledge.player_archetypes:
        role = archetype.get("role", "")
        if role:
            stats = ", ".join(archetype.get("key_stats", []))
            lines.append(f"Archetype {role}: key stats {stats}")
    return "\n".join(lines)
