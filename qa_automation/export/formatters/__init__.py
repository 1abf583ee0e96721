"""Code formatters for generated scripts."""

from .code_formatter import CodeFormatter

__all__ = ["CodeFormatter"]
