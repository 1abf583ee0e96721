"""Playwright test generator - compiles a recorded session into test scripts."""

from pathlib import Path
from typing import Optional, Sequence
from urllib.parse import urlparse

import structlog

from ..config import ProjectConfig, ScriptLanguage
from ..insertion.files import resolve_test_file_path, script_file_name
from ..insertion.naming import make_unique
from ..recording.consolidator import consolidate_interactions
from ..recording.flow_grouper import FlowGroup, group_interactions
from ..recording.models import ElementInfo, Interaction, InteractionType, Session
from .assertions import infer_assertions, url_path
from .models import (
    CLICK_STRATEGY_PRIORITY,
    FILL_STRATEGY_PRIORITY,
    GeneratedAssertion,
    GeneratedTestFile,
    Locator,
    LocatorStrategy,
)
from .templates import PythonPlaywrightTemplate, ScriptTemplate, TypeScriptPlaywrightTemplate

logger = structlog.get_logger()


# Template registry mapping output language to template class
TEMPLATE_REGISTRY: dict[ScriptLanguage, type[ScriptTemplate]] = {
    ScriptLanguage.TYPESCRIPT: TypeScriptPlaywrightTemplate,
    ScriptLanguage.PYTHON: PythonPlaywrightTemplate,
}

# Visible text at or above this length is not used as a locator
SHORT_TEXT_LIMIT = 50

KEYBOARD_KEYS = frozenset({"Enter", "Escape", "Tab"})


def build_locator_candidates(
    element: ElementInfo,
    test_id: Optional[str],
    default_role: Optional[str] = None,
) -> dict[LocatorStrategy, Locator]:
    """Every locator that can be derived for ``element``, keyed by strategy."""
    candidates: dict[LocatorStrategy, Locator] = {}

    if test_id:
        candidates[LocatorStrategy.TEST_ID] = Locator(LocatorStrategy.TEST_ID, test_id)

    role = element.aria_role or default_role
    if role and element.aria_label:
        candidates[LocatorStrategy.ROLE] = Locator(LocatorStrategy.ROLE, role, element.aria_label)

    text = (element.text_content or element.inner_text or "").strip()
    if text and len(text) < SHORT_TEXT_LIMIT:
        candidates[LocatorStrategy.TEXT] = Locator(LocatorStrategy.TEXT, text)

    if element.placeholder:
        candidates[LocatorStrategy.PLACEHOLDER] = Locator(
            LocatorStrategy.PLACEHOLDER, element.placeholder
        )

    element_id = element.attributes.get("id")
    if element_id:
        candidates[LocatorStrategy.ID] = Locator(LocatorStrategy.ID, f"#{element_id}")

    candidates[LocatorStrategy.CSS] = Locator(
        LocatorStrategy.CSS, element.css_selector or element.tag_name
    )
    return candidates


def select_locator(
    element: ElementInfo,
    test_id: Optional[str],
    priority: Sequence[LocatorStrategy],
    default_role: Optional[str] = None,
) -> Locator:
    """Pick the most stable locator available, in ``priority`` order."""
    candidates = build_locator_candidates(element, test_id, default_role)
    for strategy in priority:
        if strategy in candidates:
            return candidates[strategy]
    return candidates[LocatorStrategy.CSS]


class PlaywrightTestGenerator:
    """Generates Playwright test scripts from recording sessions.

    The session is consolidated and split into navigation-bounded flow
    groups. When all groups share at most one source file a single script
    covers the whole session; otherwise each group gets its own script.

    Example:
        generator = PlaywrightTestGenerator(config)
        files = generator.generate(session, {"#email": "login-page-email-input"})
        for test_file in files:
            print(test_file.file_path)
            print(test_file.content)
    """

    def __init__(
        self,
        config: Optional[ProjectConfig] = None,
        language: ScriptLanguage | str | None = None,
    ):
        """Initialize the generator.

        Args:
            config: Project configuration (paths, base URL, test id attribute)
            language: Output language, overrides ``config.test_language``
        """
        self.config = config or ProjectConfig()
        self.language = ScriptLanguage(language or self.config.test_language)
        self.template = TEMPLATE_REGISTRY[self.language](self.config.testid_attribute)
        self.log = logger.bind(component="test_generator", language=self.language.value)

    def generate(
        self,
        session: Session,
        test_id_map: Optional[dict[str, str]] = None,
        interactions: Optional[Sequence[Interaction]] = None,
    ) -> list[GeneratedTestFile]:
        """Generate test files for a session.

        Args:
            session: Recording session
            test_id_map: CSS selector -> assigned or existing test identifier
            interactions: Snapshot to generate from (defaults to ``session.snapshot()``)

        Returns:
            Generated test files; empty when the session has no interactions
        """
        test_id_map = test_id_map or {}
        consolidated = consolidate_interactions(
            interactions if interactions is not None else session.snapshot()
        )
        groups = group_interactions(consolidated, session.start_url or None)
        if not groups:
            self.log.warning("No interactions to generate tests from", session_id=session.id)
            return []

        source_files = {g.source_file for g in groups if g.source_file}
        if len(source_files) <= 1:
            files = [self._single_file(session, groups, consolidated, test_id_map)]
        else:
            files = []
            used_paths: set[str] = set()
            offset = 0
            for group in groups:
                files.append(self._group_file(
                    session, group, consolidated, offset, test_id_map, used_paths
                ))
                offset += len(group.interactions)

        self.log.info(
            "Generated tests",
            session_id=session.id,
            files=len(files),
            groups=len(groups),
            interactions=len(consolidated),
        )
        return files

    def _single_file(
        self,
        session: Session,
        groups: list[FlowGroup],
        consolidated: list[Interaction],
        test_id_map: dict[str, str],
    ) -> GeneratedTestFile:
        source_file = next((g.source_file for g in groups if g.source_file), None)
        body = self.generate_body(consolidated, test_id_map)
        content = self.template.generate(
            session.name, f"should complete {session.name} flow", body
        )
        return GeneratedTestFile(
            file_path=self._test_path(source_file, session.name),
            content=content,
            description=f"E2E test for {session.name} ({len(consolidated)} interactions)",
            language=self.language,
            interaction_count=len(consolidated),
            metadata={"groups": [g.to_dict() for g in groups]},
        )

    def _group_file(
        self,
        session: Session,
        group: FlowGroup,
        consolidated: list[Interaction],
        offset: int,
        test_id_map: dict[str, str],
        used_paths: set[str],
    ) -> GeneratedTestFile:
        body = self.generate_body(group.interactions, test_id_map, consolidated, offset)
        content = self.template.generate(
            session.name, f"should interact with {group.description}", body
        )
        path = self._unique_path(self._test_path(group.source_file, group.name), used_paths)
        return GeneratedTestFile(
            file_path=path,
            content=content,
            description=f"E2E test for {group.description}",
            language=self.language,
            interaction_count=len(group.interactions),
            metadata={"group": group.to_dict()},
        )

    def generate_body(
        self,
        interactions: Sequence[Interaction],
        test_id_map: dict[str, str],
        context: Optional[Sequence[Interaction]] = None,
        offset: int = 0,
    ) -> list[str]:
        """Generate the statements of one test.

        Args:
            interactions: Interactions to render, in order
            test_id_map: CSS selector -> test identifier
            context: Full sequence the interactions are a slice of, so
                assertion windows can see past the slice boundary
            offset: Index of ``interactions[0]`` within ``context``

        Returns:
            Statement lines (blank strings separate sections)
        """
        if not interactions:
            return []
        context = context if context is not None else interactions

        current_url = interactions[0].url
        lines = [self.template.goto(self.goto_target(current_url)), ""]
        last_assertion: Optional[GeneratedAssertion] = None

        for index, interaction in enumerate(interactions):
            if interaction.type == InteractionType.NAVIGATION:
                if interaction.url != current_url:
                    current_url = interaction.url
                    lines.append("")
                    lines.append(self.template.comment(f"Navigate to {url_path(interaction.url)}"))
                elif offset + index == 0:
                    # Session start: the opening goto already lands here
                    continue
            else:
                statement = self.action_statement(interaction, test_id_map)
                if statement is None:
                    continue
                lines.append(statement)
                last_assertion = None

            for assertion in infer_assertions(context, offset + index):
                if assertion.same_check(last_assertion):
                    continue
                lines.append(self.template.assertion(assertion))
                last_assertion = assertion

        return lines

    def action_statement(
        self,
        interaction: Interaction,
        test_id_map: dict[str, str],
    ) -> Optional[str]:
        """Render the action for one interaction, or None when it has no script form."""
        element = interaction.element
        test_id = element.existing_test_id or test_id_map.get(element.css_selector)
        kind = interaction.type

        if kind in (InteractionType.CLICK, InteractionType.DOUBLE_CLICK):
            locator = select_locator(element, test_id, CLICK_STRATEGY_PRIORITY)
            return self.template.click(locator, double=kind == InteractionType.DOUBLE_CLICK)

        if kind in (InteractionType.INPUT, InteractionType.CHANGE):
            value = interaction.value or element.value or ""
            if not value:
                return None
            locator = select_locator(element, test_id, FILL_STRATEGY_PRIORITY, default_role="textbox")
            if kind == InteractionType.CHANGE and element.tag_name == "select":
                return self.template.select_option(locator, value)
            return self.template.fill(locator, value)

        if kind == InteractionType.SUBMIT:
            # The click on the submit control already performs the action
            return self.template.comment("Form submitted")

        if kind == InteractionType.KEY_DOWN:
            if interaction.key in KEYBOARD_KEYS:
                return self.template.press_key(interaction.key)
            return None

        return self.template.comment(f"{kind.value} event on {element.tag_name}")

    def goto_target(self, url: str) -> str:
        """Path (plus query) for same-origin URLs, the absolute URL otherwise."""
        parsed = urlparse(url)
        if not parsed.scheme:
            return url or "/"

        base = urlparse(self.config.base_url)
        if (parsed.scheme, parsed.netloc) != (base.scheme, base.netloc):
            return url

        target = parsed.path or "/"
        if parsed.query:
            target = f"{target}?{parsed.query}"
        return target

    def _test_path(self, source_file: Optional[str], fallback_name: str) -> Path:
        root = Path(self.config.project_root)
        if source_file:
            return resolve_test_file_path(
                source_file,
                root,
                self.config.source_dir,
                self.config.test_output_dir,
                self.language,
            )
        return root / self.config.test_output_dir / script_file_name(fallback_name, self.language)

    def _unique_path(self, path: Path, used_paths: set[str]) -> Path:
        suffix = self.template.file_extension
        base = str(path)[: -len(suffix)] if str(path).endswith(suffix) else str(path)
        unique = make_unique(base, used_paths)
        used_paths.add(unique)
        if self.language == ScriptLanguage.PYTHON:
            unique = base + unique[len(base):].replace("-", "_")
        return Path(unique + suffix)
