"""Recording module - interaction records, sessions and stream shaping.

Interaction records arrive from the browser capture layer as JSON. This
package models them, tracks the session lifecycle, and reduces the raw
stream to the semantic sequence test generation works from.
"""

from .consolidator import consolidate_interactions
from .flow_grouper import FlowGroup, group_interactions, page_name
from .models import (
    ElementInfo,
    Interaction,
    InteractionType,
    Session,
    SessionStatus,
    SourceLocation,
)

__all__ = [
    # Models
    "InteractionType",
    "ElementInfo",
    "SourceLocation",
    "Interaction",
    "SessionStatus",
    "Session",
    # Stream shaping
    "consolidate_interactions",
    "FlowGroup",
    "group_interactions",
    "page_name",
]
