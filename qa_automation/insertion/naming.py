"""Naming strategies for generated test identifiers.

All strategies are pure: the same element, anchor and hint always produce
the same identifier. Uniqueness within a file is enforced separately by
``make_unique`` against the identifiers already taken.
"""

import re
import time
from typing import Optional

from ..config import NamingStrategy
from ..recording.models import ElementInfo, SourceLocation

SEGMENT_MAX_LENGTH = 30
LABEL_MAX_LENGTH = 40
ACTION_LABEL_MAX_LENGTH = 20
HIERARCHY_DEPTH = 3

# Input types that name the action on their own
ACTION_INPUT_TYPES = ("submit", "email", "password", "search")

# Checked in order against the element's visible text
ACTION_WORDS = (
    "submit",
    "login",
    "logout",
    "save",
    "delete",
    "cancel",
    "close",
    "open",
    "search",
    "add",
    "edit",
    "create",
    "remove",
)


def to_kebab(value: str) -> str:
    """Convert ``LoginForm`` / ``login_form`` / ``Login Form`` to ``login-form``."""
    value = re.sub(r"([a-z])([A-Z])", r"\1-\2", value)
    value = re.sub(r"[\s_]+", "-", value)
    value = re.sub(r"[^a-zA-Z0-9-]", "", value)
    return value.lower()


def clean_segment(value: str, max_length: int = SEGMENT_MAX_LENGTH) -> str:
    """Kebab-case, collapse hyphens, trim and cap one identifier segment."""
    cleaned = re.sub(r"-+", "-", to_kebab(value)).strip("-")
    return cleaned[:max_length].rstrip("-")


def infer_action(element: ElementInfo) -> Optional[str]:
    """Infer an action word from the element's type, text and label."""
    if element.input_type in ACTION_INPUT_TYPES:
        return element.input_type

    text = (element.text_content or element.inner_text or "").lower()
    for word in ACTION_WORDS:
        if word in text:
            return word

    if element.attributes.get("type") == "submit":
        return "submit"
    if element.aria_label:
        return clean_segment(element.aria_label, ACTION_LABEL_MAX_LENGTH)
    return None


def infer_identifier(element: ElementInfo) -> Optional[str]:
    return element.aria_label or element.text_content or element.placeholder or None


def _join(segments: list[Optional[str]]) -> str:
    joined = "-".join(s for s in segments if s)
    return joined or f"element-{int(time.time() * 1000)}"


def component_action(
    element: ElementInfo,
    source: Optional[SourceLocation] = None,
    action: Optional[str] = None,
) -> str:
    """``{component}-{action}-{tag}``, e.g. ``login-form-submit-button``."""
    segments = []
    if source and source.component_name:
        segments.append(clean_segment(source.component_name))

    hint = action or infer_action(element)
    if hint:
        segments.append(clean_segment(hint))

    segments.append(clean_segment(element.tag_name))
    return _join(segments)


def hierarchical(element: ElementInfo, source: Optional[SourceLocation] = None) -> str:
    """``{outer}-{inner}-{element}``, e.g. ``dashboard-user-menu-logout``."""
    segments = []
    if source and source.component_hierarchy:
        # Hierarchy is nearest-first; identifiers read outer-to-inner
        for component in reversed(source.component_hierarchy[:HIERARCHY_DEPTH]):
            segments.append(clean_segment(component))

    identifier = infer_identifier(element)
    segments.append(clean_segment(identifier or element.tag_name))
    return _join(segments)


def descriptive(element: ElementInfo) -> str:
    """``{label}-{tag}``, e.g. ``save-changes-button``."""
    segments = []
    label = (
        element.aria_label
        or element.text_content
        or element.placeholder
        or element.inner_text
    )
    if label:
        segments.append(clean_segment(label, LABEL_MAX_LENGTH))
    segments.append(clean_segment(element.tag_name))
    return _join(segments)


def generate_test_id(
    strategy: NamingStrategy | str,
    element: ElementInfo,
    source: Optional[SourceLocation] = None,
    action: Optional[str] = None,
) -> str:
    """Generate a test identifier with the given naming strategy.

    Args:
        strategy: Naming strategy (enum or its string value)
        element: Descriptor of the targeted element
        source: Source anchor carrying component names
        action: Explicit action hint, overrides inference

    Returns:
        Identifier string (not yet made unique)
    """
    strategy = NamingStrategy(strategy)
    if strategy == NamingStrategy.HIERARCHICAL:
        return hierarchical(element, source)
    if strategy == NamingStrategy.DESCRIPTIVE:
        return descriptive(element)
    return component_action(element, source, action)


def make_unique(test_id: str, existing: set[str]) -> str:
    """Return ``test_id``, suffixed with -2, -3, ... if it is already taken."""
    if test_id not in existing:
        return test_id

    counter = 2
    while f"{test_id}-{counter}" in existing:
        counter += 1
    return f"{test_id}-{counter}"
