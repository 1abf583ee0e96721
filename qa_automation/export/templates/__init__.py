"""Script templates for the supported output languages."""

from .base import ScriptTemplate
from .python_playwright import PythonPlaywrightTemplate
from .typescript_playwright import TypeScriptPlaywrightTemplate

__all__ = [
    "ScriptTemplate",
    "PythonPlaywrightTemplate",
    "TypeScriptPlaywrightTemplate",
]
