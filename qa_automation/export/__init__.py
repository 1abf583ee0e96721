"""Test script export - Playwright scripts from recorded sessions.

Supported output languages:
- TypeScript: @playwright/test
- Python: pytest-playwright

Example:
    from qa_automation.export import PlaywrightTestGenerator

    generator = PlaywrightTestGenerator(config)
    for test_file in generator.generate(session, test_id_map):
        print(test_file.file_path)
"""

from .assertions import ASSERTION_RULES, AssertionRule, infer_assertions
from .generator import PlaywrightTestGenerator
from .models import (
    AssertionKind,
    Confidence,
    GeneratedAssertion,
    GeneratedTestFile,
    Locator,
    LocatorStrategy,
)

__all__ = [
    "PlaywrightTestGenerator",
    "GeneratedTestFile",
    "GeneratedAssertion",
    "AssertionKind",
    "Confidence",
    "Locator",
    "LocatorStrategy",
    "AssertionRule",
    "ASSERTION_RULES",
    "infer_assertions",
]
