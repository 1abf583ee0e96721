"""Flow Grouper - splits an interaction stream into navigation-bounded groups."""

from dataclasses import dataclass, field
from typing import Optional, Sequence
from urllib.parse import urlparse

from .models import Interaction, InteractionType


@dataclass
class FlowGroup:
    """A page-level segment of a recorded flow."""

    name: str
    base_url: str
    interactions: list[Interaction] = field(default_factory=list)
    source_file: Optional[str] = None

    @property
    def description(self) -> str:
        return self.name

    def append(self, interaction: Interaction) -> None:
        self.interactions.append(interaction)
        if self.source_file is None and interaction.anchor:
            self.source_file = interaction.anchor.file_path or None

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "baseUrl": self.base_url,
            "sourceFile": self.source_file,
            "interactionCount": len(self.interactions),
        }


def page_name(url: str) -> str:
    """Human name for the page at `url`: ``home page`` for ``/``, else ``<path> page``."""
    path = urlparse(url).path or "/"
    if path == "/":
        return "home page"
    return f"{path.lstrip('/')} page"


def group_interactions(
    interactions: Sequence[Interaction],
    start_url: Optional[str] = None,
) -> list[FlowGroup]:
    """Partition interactions into flow groups.

    A navigation to a URL different from the open group's base URL closes
    that group and opens a new one. The navigation event itself belongs to
    the group it opens, so the generator can still assert on it. Empty
    groups are never returned.

    Args:
        interactions: Consolidated interactions in order
        start_url: URL the session started on (defaults to the first interaction's URL)

    Returns:
        Ordered list of FlowGroup
    """
    if not interactions:
        return []

    first_url = start_url or interactions[0].url
    groups: list[FlowGroup] = []
    current = FlowGroup(name=page_name(first_url), base_url=first_url)

    for interaction in interactions:
        if (
            interaction.type == InteractionType.NAVIGATION
            and interaction.url != current.base_url
        ):
            if current.interactions:
                groups.append(current)
            current = FlowGroup(name=page_name(interaction.url), base_url=interaction.url)

        current.append(interaction)

    if current.interactions:
        groups.append(current)

    return groups
