"""Assertion Rule Engine - infers assertions from interaction context.

Rules are an ordered table evaluated against a three-element window
(previous, current, next) around one interaction. Every matching rule
contributes one assertion; the table order is the emission order.
"""

from dataclasses import dataclass
from typing import Callable, NamedTuple, Optional, Sequence
from urllib.parse import urlparse

from ..recording.models import Interaction, InteractionType
from .models import AssertionKind, Confidence, GeneratedAssertion

INPUT_VALUE_PREVIEW_LENGTH = 30


class InteractionWindow(NamedTuple):
    """Neighbourhood of the interaction being annotated."""

    previous: Optional[Interaction]
    current: Interaction
    next: Optional[Interaction]


@dataclass(frozen=True)
class AssertionRule:
    """One row of the rule table."""

    name: str
    predicate: Callable[[InteractionWindow], bool]
    build: Callable[[InteractionWindow], tuple[AssertionKind, str, str]]  # kind, target, description
    confidence: Confidence

    def apply(self, window: InteractionWindow) -> Optional[GeneratedAssertion]:
        if not self.predicate(window):
            return None
        kind, target, description = self.build(window)
        return GeneratedAssertion(
            kind=kind,
            target=target,
            confidence=self.confidence,
            description=description,
            rule=self.name,
        )


def url_path(url: str) -> str:
    return urlparse(url).path or "/"


def _is(window_part: Optional[Interaction], kind: InteractionType) -> bool:
    return window_part is not None and window_part.type == kind


def _click_then_navigation(w: InteractionWindow) -> tuple[AssertionKind, str, str]:
    path = url_path(w.next.url)
    return AssertionKind.URL_CONTAINS, path, f"Verify navigation to {path} after click"


def _navigation(w: InteractionWindow) -> tuple[AssertionKind, str, str]:
    path = url_path(w.current.url)
    return AssertionKind.URL_CONTAINS, path, f"Verify URL contains {path}"


def _submit_settled(w: InteractionWindow) -> tuple[AssertionKind, str, str]:
    return AssertionKind.LOAD_STATE, "networkidle", "Wait for form submission to complete"


def _submit_redirect(w: InteractionWindow) -> tuple[AssertionKind, str, str]:
    path = url_path(w.next.url)
    return (
        AssertionKind.URL_CONTAINS,
        path,
        f"Verify redirect after form submission to {path}",
    )


def _click_reveals(w: InteractionWindow) -> tuple[AssertionKind, str, str]:
    test_id = w.next.element.existing_test_id
    return (
        AssertionKind.ELEMENT_VISIBLE,
        test_id,
        f"Verify {test_id} becomes visible after click",
    )


def _input_value(w: InteractionWindow) -> tuple[AssertionKind, str, str]:
    value = w.current.value[:INPUT_VALUE_PREVIEW_LENGTH]
    return AssertionKind.INPUT_VALUE, value, f"Verify input value is '{value}'"


ASSERTION_RULES: tuple[AssertionRule, ...] = (
    AssertionRule(
        name="click-then-navigation",
        predicate=lambda w: (
            w.current.type == InteractionType.CLICK and _is(w.next, InteractionType.NAVIGATION)
        ),
        build=_click_then_navigation,
        confidence=Confidence.HIGH,
    ),
    AssertionRule(
        name="navigation",
        predicate=lambda w: w.current.type == InteractionType.NAVIGATION,
        build=_navigation,
        confidence=Confidence.HIGH,
    ),
    AssertionRule(
        name="submit-settled",
        predicate=lambda w: w.current.type == InteractionType.SUBMIT,
        build=_submit_settled,
        confidence=Confidence.HIGH,
    ),
    AssertionRule(
        name="submit-redirect",
        predicate=lambda w: (
            w.current.type == InteractionType.SUBMIT
            and w.next is not None
            and w.next.url != w.current.url
        ),
        build=_submit_redirect,
        confidence=Confidence.HIGH,
    ),
    AssertionRule(
        name="click-reveals-element",
        predicate=lambda w: (
            w.current.type == InteractionType.CLICK
            and w.next is not None
            and w.next.type != InteractionType.NAVIGATION
            and bool(w.next.element.existing_test_id)
        ),
        build=_click_reveals,
        confidence=Confidence.MEDIUM,
    ),
    AssertionRule(
        name="input-value",
        predicate=lambda w: w.current.type == InteractionType.INPUT and bool(w.current.value),
        build=_input_value,
        confidence=Confidence.LOW,
    ),
)


def window_at(interactions: Sequence[Interaction], index: int) -> InteractionWindow:
    """Build the (previous, current, next) window around ``index``."""
    return InteractionWindow(
        previous=interactions[index - 1] if index > 0 else None,
        current=interactions[index],
        next=interactions[index + 1] if index + 1 < len(interactions) else None,
    )


def infer_assertions(
    interactions: Sequence[Interaction],
    index: int,
    rules: Sequence[AssertionRule] = ASSERTION_RULES,
) -> list[GeneratedAssertion]:
    """Infer assertions for the interaction at ``index``.

    Args:
        interactions: Consolidated interaction sequence
        index: Position of the interaction to annotate
        rules: Rule table to evaluate, in order

    Returns:
        Assertions from every matching rule, in table order
    """
    window = window_at(interactions, index)
    assertions = []
    for rule in rules:
        assertion = rule.apply(window)
        if assertion is not None:
            assertions.append(assertion)
    return assertions
