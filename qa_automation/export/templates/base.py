"""Base template class for generated test scripts."""

import re
from abc import ABC, abstractmethod

from ...config import ScriptLanguage
from ..formatters import CodeFormatter
from ..models import GeneratedAssertion, Locator

DEFAULT_TESTID_ATTRIBUTE = "data-testid"


class ScriptTemplate(ABC):
    """Base class for script templates.

    Each output language implements this class; the generator decides what
    to emit and the template decides how it is spelled.
    """

    # Override these in subclasses
    language: ScriptLanguage = ScriptLanguage.TYPESCRIPT
    file_extension: str = ".txt"
    indent: str = "  "
    comment_prefix: str = "//"
    max_blank_lines: int = 1

    def __init__(self, testid_attribute: str = DEFAULT_TESTID_ATTRIBUTE):
        """Initialize template.

        Args:
            testid_attribute: Attribute Playwright should resolve test ids against
        """
        self.testid_attribute = testid_attribute
        self.formatter = CodeFormatter(self.language, max_blank_lines=self.max_blank_lines)

    @abstractmethod
    def render_file(self, suite_name: str, test_name: str, body: list[str]) -> str:
        """Wrap body statements into a complete test file."""

    @abstractmethod
    def goto(self, url: str) -> str:
        """Generate a navigation statement."""

    @abstractmethod
    def locator(self, locator: Locator) -> str:
        """Generate a locator expression."""

    @abstractmethod
    def click(self, locator: Locator, double: bool = False) -> str:
        """Generate a click (or double click) statement."""

    @abstractmethod
    def fill(self, locator: Locator, value: str) -> str:
        """Generate a fill statement."""

    @abstractmethod
    def select_option(self, locator: Locator, value: str) -> str:
        """Generate a select-option statement."""

    @abstractmethod
    def press_key(self, key: str) -> str:
        """Generate a keyboard press statement."""

    @abstractmethod
    def assertion_code(self, assertion: GeneratedAssertion) -> str:
        """Generate executable code for a high-confidence assertion."""

    def assertion(self, assertion: GeneratedAssertion) -> str:
        """Executable code for high confidence, a TODO comment otherwise."""
        if assertion.is_executable:
            return self.assertion_code(assertion)
        return self.todo(assertion.description)

    def generate(self, suite_name: str, test_name: str, body: list[str]) -> str:
        """Generate and format a complete script."""
        return self.formatter.format_code(self.render_file(suite_name, test_name, body))

    @property
    def uses_custom_testid_attribute(self) -> bool:
        return self.testid_attribute != DEFAULT_TESTID_ATTRIBUTE

    def quote(self, value: str) -> str:
        return self.formatter.format_string_literal(value)

    def comment(self, text: str) -> str:
        return f"{self.comment_prefix} {text}"

    def todo(self, text: str) -> str:
        return f"{self.comment_prefix} TODO: {text}"

    def indent_lines(self, lines: list[str], depth: int) -> list[str]:
        """Indent non-blank lines by ``depth`` levels."""
        prefix = self.indent * depth
        return [f"{prefix}{line}" if line.strip() else "" for line in lines]

    def to_pascal_case(self, name: str) -> str:
        """Convert name to PascalCase."""
        words = re.sub(r"[^a-zA-Z0-9]", " ", name).split()
        return "".join(w[:1].upper() + w[1:] for w in words) if words else "Flow"

    def to_snake_case(self, name: str) -> str:
        """Convert name to snake_case."""
        # Insert underscore before capitals
        s1 = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", name)
        s2 = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1)
        # Replace non-alphanumeric with underscore
        s3 = re.sub(r"[^a-zA-Z0-9]", "_", s2)
        # Clean up multiple underscores
        return re.sub(r"_+", "_", s3).lower().strip("_")
