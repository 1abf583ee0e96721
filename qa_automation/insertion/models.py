"""Data models for test identifier insertion."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..errors import AnchorUnresolvedError, DuplicateIdentifierError, QAAutomationError


class SkipReason(str, Enum):
    """Why a planned or pending insertion produced no edit."""

    NO_ANCHOR = "no_anchor"
    UNRESOLVED_POSITION = "unresolved_position"
    DUPLICATE_POSITION = "duplicate_position"
    DUPLICATE_IDENTIFIER = "duplicate_identifier"
    PRE_EXISTING = "pre_existing"
    ELEMENT_NOT_FOUND = "element_not_found"


@dataclass(frozen=True)
class TestIdInsertion:
    """One planned attribute insertion.

    Attributes:
        file_path: Source file the edit targets
        line: 1-based line of the opening tag
        column: 0-based column of the opening tag (None matches any element on the line)
        test_id: Identifier to insert
        element_tag_name: Expected tag name, ``*`` for any
        component_name: Component that owns the element
    """

    __test__ = False  # not a pytest test class

    file_path: str
    line: int
    column: Optional[int]
    test_id: str
    element_tag_name: str = "*"
    component_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "file_path": self.file_path,
            "line": self.line,
            "column": self.column,
            "test_id": self.test_id,
            "element_tag_name": self.element_tag_name,
            "component_name": self.component_name,
        }


@dataclass(frozen=True)
class SkipRecord:
    """A skipped interaction or insertion with its reason."""

    reason: SkipReason
    message: str
    selector: Optional[str] = None
    test_id: Optional[str] = None
    file_path: Optional[str] = None

    def as_error(self) -> QAAutomationError:
        """Typed exception form of this skip, for callers that want to raise it."""
        if self.reason == SkipReason.DUPLICATE_IDENTIFIER and self.test_id:
            return DuplicateIdentifierError(self.test_id, self.file_path)
        if self.reason in (SkipReason.NO_ANCHOR, SkipReason.UNRESOLVED_POSITION):
            return AnchorUnresolvedError(self.message, self.file_path)
        return QAAutomationError(self.message)

    def to_dict(self) -> dict:
        return {
            "reason": self.reason.value,
            "message": self.message,
            "selector": self.selector,
            "test_id": self.test_id,
            "file_path": self.file_path,
        }


@dataclass
class InsertionPlan:
    """Edits, skips and selector mappings computed for one processing run."""

    insertions: list[TestIdInsertion] = field(default_factory=list)
    skipped: list[SkipRecord] = field(default_factory=list)
    test_id_map: dict[str, str] = field(default_factory=dict)  # selector -> identifier

    def merge(self, other: "InsertionPlan") -> None:
        self.insertions.extend(other.insertions)
        self.skipped.extend(other.skipped)
        for selector, test_id in other.test_id_map.items():
            self.test_id_map.setdefault(selector, test_id)

    def to_dict(self) -> dict:
        return {
            "insertions": [i.to_dict() for i in self.insertions],
            "skipped": [s.to_dict() for s in self.skipped],
            "test_id_map": dict(self.test_id_map),
        }


@dataclass
class InsertionResult:
    """Outcome of applying insertions to one file's text.

    Attributes:
        code: Source text with the insertions applied
        inserted: Number of attributes inserted
        skipped: Insertions that were not applied, with reasons
    """

    code: str
    inserted: int = 0
    skipped: list[SkipRecord] = field(default_factory=list)


@dataclass
class FileChange:
    """Original and modified text of one source file, with its diff."""

    file_path: str
    original: str
    modified: str
    diff: str

    def to_dict(self) -> dict:
        return {
            "file_path": self.file_path,
            "diff": self.diff,
        }
