"""Data models for recorded UI interactions and recording sessions."""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from ..errors import InvalidTransitionError


class InteractionType(str, Enum):
    """Kinds of interaction the capture layer reports."""

    CLICK = "click"
    DOUBLE_CLICK = "dblclick"
    INPUT = "input"
    CHANGE = "change"
    SUBMIT = "submit"
    KEY_DOWN = "keydown"
    KEY_UP = "keyup"
    FOCUS = "focus"
    BLUR = "blur"
    NAVIGATION = "navigation"
    SCROLL = "scroll"
    HOVER = "hover"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: str) -> "InteractionType":
        """Map a raw kind string to an InteractionType, tolerating unknown kinds."""
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


# Kinds whose consecutive events on one element carry a progressively typed value
VALUE_EVENTS = frozenset({InteractionType.INPUT, InteractionType.CHANGE})


def _pick(data: dict, *keys: str, default: Any = None) -> Any:
    """Return the first present key (camelCase from the browser, snake_case from Python)."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


@dataclass(frozen=True)
class SourceLocation:
    """Link from an interaction to the markup that rendered its target.

    `column_number` is None when the capture layer could not determine a
    column; 0 is a real column.
    """

    file_path: str
    line_number: int
    column_number: Optional[int] = None
    component_name: Optional[str] = None
    component_hierarchy: tuple[str, ...] = ()  # nearest component first

    @classmethod
    def from_dict(cls, data: dict) -> "SourceLocation":
        return cls(
            file_path=_pick(data, "filePath", "file_path", default=""),
            line_number=int(_pick(data, "lineNumber", "line_number", "line", default=0)),
            column_number=_pick(data, "columnNumber", "column_number", "column"),
            component_name=_pick(data, "componentName", "component_name"),
            component_hierarchy=tuple(
                _pick(data, "componentHierarchy", "component_hierarchy", default=())
            ),
        )

    def to_dict(self) -> dict:
        return {
            "filePath": self.file_path,
            "lineNumber": self.line_number,
            "columnNumber": self.column_number,
            "componentName": self.component_name,
            "componentHierarchy": list(self.component_hierarchy),
        }


@dataclass(frozen=True)
class ElementInfo:
    """Descriptor of the DOM element an interaction targeted."""

    tag_name: str
    css_selector: str = ""
    text_content: Optional[str] = None
    attributes: dict[str, str] = field(default_factory=dict)
    existing_test_id: Optional[str] = None
    aria_label: Optional[str] = None
    aria_role: Optional[str] = None
    inner_text: Optional[str] = None
    placeholder: Optional[str] = None
    input_type: Optional[str] = None
    value: Optional[str] = None
    source: Optional[SourceLocation] = None

    @classmethod
    def from_dict(cls, data: dict) -> "ElementInfo":
        source = data.get("source")
        return cls(
            tag_name=str(_pick(data, "tagName", "tag_name", default="unknown")).lower(),
            css_selector=_pick(data, "cssSelector", "css_selector", default=""),
            text_content=_pick(data, "textContent", "text_content"),
            attributes=dict(data.get("attributes") or {}),
            existing_test_id=_pick(data, "existingTestId", "existing_test_id"),
            aria_label=_pick(data, "ariaLabel", "aria_label"),
            aria_role=_pick(data, "ariaRole", "aria_role"),
            inner_text=_pick(data, "innerText", "inner_text"),
            placeholder=_pick(data, "placeholder"),
            input_type=_pick(data, "inputType", "input_type"),
            value=_pick(data, "value"),
            source=SourceLocation.from_dict(source) if isinstance(source, dict) else None,
        )

    def to_dict(self) -> dict:
        data = {
            "tagName": self.tag_name,
            "cssSelector": self.css_selector,
            "textContent": self.text_content,
            "attributes": dict(self.attributes),
            "existingTestId": self.existing_test_id,
            "ariaLabel": self.aria_label,
            "ariaRole": self.aria_role,
            "innerText": self.inner_text,
            "placeholder": self.placeholder,
            "inputType": self.input_type,
            "value": self.value,
        }
        if self.source:
            data["source"] = self.source.to_dict()
        return {key: value for key, value in data.items() if value is not None}


@dataclass(frozen=True)
class Interaction:
    """One captured user action."""

    type: InteractionType
    url: str
    element: ElementInfo
    timestamp: int = 0  # ms since epoch
    id: str = ""
    value: Optional[str] = None
    key: Optional[str] = None
    source: Optional[SourceLocation] = None
    coordinates: Optional[tuple[int, int]] = None
    metadata: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "Interaction":
        """Create an Interaction from capture-layer JSON."""
        source = data.get("source")
        coordinates = data.get("coordinates")
        if isinstance(coordinates, dict):
            coordinates = (int(coordinates.get("x", 0)), int(coordinates.get("y", 0)))

        return cls(
            type=InteractionType.parse(str(data.get("type", ""))),
            url=data.get("url", ""),
            element=ElementInfo.from_dict(data.get("element") or {}),
            timestamp=int(data.get("timestamp", 0)),
            id=str(data.get("id", "")),
            value=data.get("value"),
            key=data.get("key"),
            source=SourceLocation.from_dict(source) if isinstance(source, dict) else None,
            coordinates=tuple(coordinates) if coordinates else None,
            metadata=dict(data.get("metadata") or {}),
        )

    @property
    def anchor(self) -> Optional[SourceLocation]:
        """Source anchor from the interaction itself or from its element."""
        return self.source or self.element.source

    @property
    def selector(self) -> str:
        return self.element.css_selector

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "type": self.type.value,
            "timestamp": self.timestamp,
            "url": self.url,
            "element": self.element.to_dict(),
        }
        if self.value is not None:
            data["value"] = self.value
        if self.key is not None:
            data["key"] = self.key
        if self.source:
            data["source"] = self.source.to_dict()
        if self.coordinates:
            data["coordinates"] = {"x": self.coordinates[0], "y": self.coordinates[1]}
        if self.metadata:
            data["metadata"] = dict(self.metadata)
        return data


class SessionStatus(str, Enum):
    """Lifecycle states of a recording session."""

    RECORDING = "recording"
    PAUSED = "paused"
    STOPPED = "stopped"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


# Allowed lifecycle transitions; ERROR -> PROCESSING is a retry
SESSION_TRANSITIONS: dict[SessionStatus, frozenset[SessionStatus]] = {
    SessionStatus.RECORDING: frozenset({SessionStatus.PAUSED, SessionStatus.STOPPED}),
    SessionStatus.PAUSED: frozenset({SessionStatus.RECORDING, SessionStatus.STOPPED}),
    SessionStatus.STOPPED: frozenset({SessionStatus.PROCESSING}),
    SessionStatus.PROCESSING: frozenset({SessionStatus.COMPLETED, SessionStatus.ERROR}),
    SessionStatus.COMPLETED: frozenset(),
    SessionStatus.ERROR: frozenset({SessionStatus.PROCESSING}),
}


@dataclass
class Session:
    """A recording session and its ordered interactions.

    Status changes only through `transition`; processing runs work on
    `snapshot()` so interactions appended afterwards never leak into them.
    """

    id: str
    name: str
    start_url: str = ""
    status: SessionStatus = SessionStatus.RECORDING
    interactions: list[Interaction] = field(default_factory=list)
    started_at: int = field(default_factory=lambda: int(time.time() * 1000))
    stopped_at: Optional[int] = None
    metadata: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "Session":
        """Create a Session from its persisted JSON form."""
        status = data.get("status", SessionStatus.RECORDING.value)
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name") or f"session-{data.get('id', '')}",
            start_url=_pick(data, "startUrl", "start_url", default=""),
            status=SessionStatus(status),
            interactions=[Interaction.from_dict(i) for i in data.get("interactions", [])],
            started_at=int(_pick(data, "startedAt", "started_at", default=0)),
            stopped_at=_pick(data, "stoppedAt", "stopped_at"),
            metadata=dict(data.get("metadata") or {}),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "status": self.status.value,
            "startUrl": self.start_url,
            "startedAt": self.started_at,
            "stoppedAt": self.stopped_at,
            "interactions": [i.to_dict() for i in self.interactions],
            "metadata": dict(self.metadata),
        }

    def can_transition(self, target: SessionStatus) -> bool:
        return target in SESSION_TRANSITIONS[self.status]

    def transition(self, target: SessionStatus) -> None:
        """Apply a lifecycle event.

        Raises:
            InvalidTransitionError: if `target` is not reachable from the current status
        """
        if not self.can_transition(target):
            raise InvalidTransitionError(self.id, self.status.value, target.value)
        self.status = target
        if target == SessionStatus.STOPPED:
            self.stopped_at = int(time.time() * 1000)

    def add_interaction(self, interaction: Interaction) -> bool:
        """Append an interaction; only accepted while recording."""
        if self.status != SessionStatus.RECORDING:
            return False
        self.interactions.append(interaction)
        return True

    def snapshot(self) -> tuple[Interaction, ...]:
        """Immutable view of the interactions for one processing run."""
        return tuple(self.interactions)

    @property
    def interaction_count(self) -> int:
        return len(self.interactions)
