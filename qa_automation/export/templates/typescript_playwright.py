"""TypeScript Playwright script template."""

import re

from ...config import ScriptLanguage
from ..models import AssertionKind, GeneratedAssertion, Locator, LocatorStrategy
from .base import ScriptTemplate

REGEX_SPECIAL = re.compile(r"[.*+?^${}()|\[\]\\/]")


class TypeScriptPlaywrightTemplate(ScriptTemplate):
    """Template for @playwright/test specs."""

    language = ScriptLanguage.TYPESCRIPT
    file_extension = ".spec.ts"
    indent = "  "
    comment_prefix = "//"

    def render_file(self, suite_name: str, test_name: str, body: list[str]) -> str:
        """Generate a test.describe block with a single test."""
        imports = "import { test, expect } from '@playwright/test';"
        if self.uses_custom_testid_attribute:
            imports = "import { test, expect, selectors } from '@playwright/test';"

        lines = [imports, "", f"test.describe({self.quote(suite_name)}, () => {{"]
        if self.uses_custom_testid_attribute:
            lines.extend([
                "  test.beforeAll(() => {",
                f"    selectors.setTestIdAttribute({self.quote(self.testid_attribute)});",
                "  });",
                "",
            ])
        lines.append(f"  test({self.quote(test_name)}, async ({{ page }}) => {{")
        lines.extend(self.indent_lines(body, 2))
        lines.extend(["  });", "});"])
        return "\n".join(lines)

    def goto(self, url: str) -> str:
        return f"await page.goto({self.quote(url)});"

    def locator(self, locator: Locator) -> str:
        if locator.strategy == LocatorStrategy.TEST_ID:
            return f"page.getByTestId({self.quote(locator.value)})"
        if locator.strategy == LocatorStrategy.ROLE:
            if locator.name:
                return f"page.getByRole({self.quote(locator.value)}, {{ name: {self.quote(locator.name)} }})"
            return f"page.getByRole({self.quote(locator.value)})"
        if locator.strategy == LocatorStrategy.TEXT:
            return f"page.getByText({self.quote(locator.value)})"
        if locator.strategy == LocatorStrategy.PLACEHOLDER:
            return f"page.getByPlaceholder({self.quote(locator.value)})"
        return f"page.locator({self.quote(locator.value)})"

    def click(self, locator: Locator, double: bool = False) -> str:
        method = "dblclick" if double else "click"
        return f"await {self.locator(locator)}.{method}();"

    def fill(self, locator: Locator, value: str) -> str:
        return f"await {self.locator(locator)}.fill({self.quote(value)});"

    def select_option(self, locator: Locator, value: str) -> str:
        return f"await {self.locator(locator)}.selectOption({self.quote(value)});"

    def press_key(self, key: str) -> str:
        return f"await page.keyboard.press({self.quote(key)});"

    def assertion_code(self, assertion: GeneratedAssertion) -> str:
        if assertion.kind == AssertionKind.URL_CONTAINS:
            pattern = REGEX_SPECIAL.sub(lambda m: "\\" + m.group(0), assertion.target)
            return f"await expect(page).toHaveURL(/{pattern}/);"
        if assertion.kind == AssertionKind.LOAD_STATE:
            return f"await page.waitForLoadState({self.quote(assertion.target)});"
        if assertion.kind == AssertionKind.ELEMENT_VISIBLE:
            return f"await expect(page.getByTestId({self.quote(assertion.target)})).toBeVisible();"
        return self.todo(assertion.description)
