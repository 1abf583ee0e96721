"""Python pytest-playwright script template."""

from ...config import ScriptLanguage
from ..models import AssertionKind, GeneratedAssertion, Locator, LocatorStrategy
from .base import ScriptTemplate


class PythonPlaywrightTemplate(ScriptTemplate):
    """Template for sync pytest-playwright tests."""

    language = ScriptLanguage.PYTHON
    file_extension = ".py"
    indent = "    "
    comment_prefix = "#"
    max_blank_lines = 2

    def render_file(self, suite_name: str, test_name: str, body: list[str]) -> str:
        """Generate a pytest class with a single test method."""
        class_name = f"Test{self.to_pascal_case(suite_name)}"
        method_name = f"test_{self.to_snake_case(test_name)}"

        imports = []
        if any("re.compile(" in line for line in body):
            imports.append("import re")
            imports.append("")
        if self.uses_custom_testid_attribute:
            imports.append("import pytest")
        imports.append("from playwright.sync_api import Page, expect")

        lines = list(imports)
        if self.uses_custom_testid_attribute:
            lines.extend([
                "",
                "",
                "@pytest.fixture(autouse=True)",
                "def _test_id_attribute(playwright):",
                f"    playwright.selectors.set_test_id_attribute({self.quote(self.testid_attribute)})",
            ])

        lines.extend([
            "",
            "",
            f"class {class_name}:",
            f'    """{suite_name}"""',
            "",
            f"    def {method_name}(self, page: Page):",
        ])
        lines.extend(self.indent_lines(body or ["pass"], 2))
        return "\n".join(lines)

    def goto(self, url: str) -> str:
        return f"page.goto({self.quote(url)})"

    def locator(self, locator: Locator) -> str:
        if locator.strategy == LocatorStrategy.TEST_ID:
            return f"page.get_by_test_id({self.quote(locator.value)})"
        if locator.strategy == LocatorStrategy.ROLE:
            if locator.name:
                return f"page.get_by_role({self.quote(locator.value)}, name={self.quote(locator.name)})"
            return f"page.get_by_role({self.quote(locator.value)})"
        if locator.strategy == LocatorStrategy.TEXT:
            return f"page.get_by_text({self.quote(locator.value)})"
        if locator.strategy == LocatorStrategy.PLACEHOLDER:
            return f"page.get_by_placeholder({self.quote(locator.value)})"
        return f"page.locator({self.quote(locator.value)})"

    def click(self, locator: Locator, double: bool = False) -> str:
        method = "dblclick" if double else "click"
        return f"{self.locator(locator)}.{method}()"

    def fill(self, locator: Locator, value: str) -> str:
        return f"{self.locator(locator)}.fill({self.quote(value)})"

    def select_option(self, locator: Locator, value: str) -> str:
        return f"{self.locator(locator)}.select_option({self.quote(value)})"

    def press_key(self, key: str) -> str:
        return f"page.keyboard.press({self.quote(key)})"

    def assertion_code(self, assertion: GeneratedAssertion) -> str:
        if assertion.kind == AssertionKind.URL_CONTAINS:
            return f"expect(page).to_have_url(re.compile(re.escape({self.quote(assertion.target)})))"
        if assertion.kind == AssertionKind.LOAD_STATE:
            return f"page.wait_for_load_state({self.quote(assertion.target)})"
        if assertion.kind == AssertionKind.ELEMENT_VISIBLE:
            return f"expect(page.get_by_test_id({self.quote(assertion.target)})).to_be_visible()"
        return self.todo(assertion.description)
