"""Data models for test script generation."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from ..config import ScriptLanguage


class Confidence(str, Enum):
    """How sure the rule engine is about an inferred assertion.

    Only HIGH assertions are emitted as executable code; the rest become
    TODO comments for a human to review.
    """

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class AssertionKind(str, Enum):
    """Assertion shapes the templates know how to render."""

    URL_CONTAINS = "url_contains"
    LOAD_STATE = "load_state"
    ELEMENT_VISIBLE = "element_visible"
    INPUT_VALUE = "input_value"


@dataclass(frozen=True)
class GeneratedAssertion:
    """An inferred assertion.

    Attributes:
        kind: Assertion shape
        target: URL path, load state, test identifier or value, depending on kind
        confidence: Rule confidence
        description: Human-readable summary (used for TODO comments)
        rule: Name of the rule that produced it
    """

    kind: AssertionKind
    target: str
    confidence: Confidence
    description: str
    rule: str = ""

    @property
    def is_executable(self) -> bool:
        return self.confidence == Confidence.HIGH

    def same_check(self, other: Optional["GeneratedAssertion"]) -> bool:
        """True when ``other`` asserts the same thing, whichever rule produced it."""
        return (
            other is not None
            and other.kind == self.kind
            and other.target == self.target
            and other.confidence == self.confidence
        )


class LocatorStrategy(str, Enum):
    """Ways a generated script can locate an element."""

    TEST_ID = "test_id"
    ROLE = "role"
    TEXT = "text"
    PLACEHOLDER = "placeholder"
    ID = "id"
    CSS = "css"


# Priority order: most stable first
CLICK_STRATEGY_PRIORITY: list[LocatorStrategy] = [
    LocatorStrategy.TEST_ID,
    LocatorStrategy.ROLE,
    LocatorStrategy.TEXT,
    LocatorStrategy.ID,
    LocatorStrategy.CSS,
]

FILL_STRATEGY_PRIORITY: list[LocatorStrategy] = [
    LocatorStrategy.TEST_ID,
    LocatorStrategy.ROLE,
    LocatorStrategy.PLACEHOLDER,
    LocatorStrategy.TEXT,
    LocatorStrategy.ID,
    LocatorStrategy.CSS,
]


@dataclass(frozen=True)
class Locator:
    """A chosen element locator.

    For ROLE, ``value`` is the role and ``name`` the accessible name; for ID
    and CSS, ``value`` is a CSS selector.
    """

    strategy: LocatorStrategy
    value: str
    name: Optional[str] = None


@dataclass
class GeneratedTestFile:
    """A generated test script.

    Attributes:
        file_path: Absolute path the script should be written to
        content: Full script text
        description: Human-readable summary
        language: Script language
        interaction_count: Interactions the script was built from
    """

    file_path: Path
    content: str
    description: str
    language: ScriptLanguage = ScriptLanguage.TYPESCRIPT
    interaction_count: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON reports."""
        return {
            "file_path": str(self.file_path),
            "content": self.content,
            "description": self.description,
            "language": self.language.value,
            "interaction_count": self.interaction_count,
            "metadata": self.metadata,
        }
