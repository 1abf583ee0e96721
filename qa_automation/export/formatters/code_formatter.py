"""Code formatter for generated test scripts."""

from ...config import ScriptLanguage


class CodeFormatter:
    """Normalises whitespace of generated scripts."""

    def __init__(self, language: ScriptLanguage = ScriptLanguage.TYPESCRIPT, max_blank_lines: int = 1):
        """Initialize formatter for a specific language.

        Args:
            language: Script language
            max_blank_lines: Longest run of blank lines kept
        """
        self.language = ScriptLanguage(language)
        self.max_blank_lines = max_blank_lines

    def format_code(self, code: str) -> str:
        """Format code: strip trailing whitespace, collapse blank runs, end with one newline.

        Args:
            code: Raw generated code

        Returns:
            Formatted code
        """
        lines = [line.rstrip() for line in code.split("\n")]

        formatted_lines = []
        blank_count = 0
        for line in lines:
            if line == "":
                blank_count += 1
                if blank_count <= self.max_blank_lines:
                    formatted_lines.append(line)
            else:
                blank_count = 0
                formatted_lines.append(line)

        return "\n".join(formatted_lines).strip("\n") + "\n"

    def format_string_literal(self, value: str, single_quotes: bool | None = None) -> str:
        """Format a string literal for this language.

        Args:
            value: String value
            single_quotes: Force single quotes (default: language convention)

        Returns:
            Quoted and escaped literal
        """
        if single_quotes is None:
            single_quotes = self.language == ScriptLanguage.TYPESCRIPT

        escaped = value.replace("\\", "\\\\").replace("\n", "\\n")
        if single_quotes:
            escaped = escaped.replace("'", "\\'")
            return f"'{escaped}'"
        escaped = escaped.replace('"', '\\"')
        return f'"{escaped}"'
