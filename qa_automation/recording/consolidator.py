"""Interaction Consolidator - collapses raw capture noise into semantic actions.

Raw recordings are keystroke-level: every character typed produces an
``input`` event and every field is focused by a click first. Script
generation wants one fill per field and no focus clicks.
"""

from typing import Sequence

import structlog

from .models import Interaction, InteractionType, VALUE_EVENTS

logger = structlog.get_logger()


def _same_target(a: Interaction, b: Interaction) -> bool:
    return a.element.css_selector == b.element.css_selector


def consolidate_interactions(interactions: Sequence[Interaction]) -> list[Interaction]:
    """Collapse an ordered interaction stream in a single pass.

    Rules:
    1. A run of consecutive input/change events on the same selector collapses
       to the last event of the run (it carries the final value).
    2. A click immediately followed by an input on the same selector is
       dropped; it only focused the field.

    Everything else passes through unchanged and in order.

    Args:
        interactions: Recorded interactions in capture order

    Returns:
        Consolidated list of interactions
    """
    consolidated: list[Interaction] = []
    i = 0
    count = len(interactions)

    while i < count:
        current = interactions[i]

        if current.type in VALUE_EVENTS:
            j = i
            while (
                j + 1 < count
                and interactions[j + 1].type in VALUE_EVENTS
                and _same_target(interactions[j + 1], current)
            ):
                j += 1
            consolidated.append(interactions[j])
            i = j + 1
            continue

        if current.type == InteractionType.CLICK and i + 1 < count:
            following = interactions[i + 1]
            if following.type == InteractionType.INPUT and _same_target(following, current):
                i += 1
                continue

        consolidated.append(current)
        i += 1

    logger.debug(
        "Consolidated interactions",
        original=count,
        consolidated=len(consolidated),
    )
    return consolidated
