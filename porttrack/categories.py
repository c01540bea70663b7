"""Naming-convention classifier for reference type categories."""

from __future__ import annotations

from typing import Sequence, Tuple

AUTO = "auto"

BLOCK = "block"
ITEM = "item"
ENTITY = "entity"
AI_GOAL = "ai_goal"
AI_BRAIN = "ai_brain"
AI_CONTROL = "ai_control"
AI_PATHING = "ai_pathing"
OTHER = "other"

#: Report order for category summaries; unknown categories follow alphabetically.
CATEGORY_ORDER: Tuple[str, ...] = (
    BLOCK,
    ITEM,
    ENTITY,
    AI_GOAL,
    AI_BRAIN,
    AI_CONTROL,
    AI_PATHING,
    OTHER,
)

# Checked top to bottom; the first suffix hit wins.
_SUFFIX_RULES: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("Goal",), AI_GOAL),
    (("Task", "Sensor", "Memory"), AI_BRAIN),
    (("Control",), AI_CONTROL),
    (("Navigation", "PathNodeMaker"), AI_PATHING),
    (("Entity",), ENTITY),
)


def classify_name(class_name: str) -> str:
    """Return the category for an entity-tree type name.

    ``MeleeAttackGoal`` is an ``ai_goal``, ``LookControl`` an ``ai_control``;
    names matching no suffix fall through to ``other``.
    """
    for suffixes, category in _SUFFIX_RULES:
        if class_name.endswith(suffixes):
            return category
    return OTHER


def resolve_category(declared: str, class_name: str) -> str:
    """Use ``declared`` unless it is ``auto``, in which case classify by name."""
    if declared == AUTO:
        return classify_name(class_name)
    return declared


def ordered_categories(categories: Sequence[str]) -> list[str]:
    present = set(categories)
    known = [name for name in CATEGORY_ORDER if name in present]
    extra = sorted(present.difference(CATEGORY_ORDER))
    return known + extra


__all__ = [
    "AUTO",
    "CATEGORY_ORDER",
    "classify_name",
    "ordered_categories",
    "resolve_category",
]
