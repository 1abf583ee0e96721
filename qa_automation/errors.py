"""Error taxonomy for the interaction-to-code engine.

Every error here is local to one item (a file, an insertion, a backup path).
Public operations record them in result objects instead of letting them
escape; the classes exist so callers can still handle them by type.
"""


class QAAutomationError(Exception):
    """Base class for all engine errors."""


class ConfigError(QAAutomationError):
    """Raised when a project configuration file cannot be used."""


class SourceSyntaxError(QAAutomationError):
    """A source file could not be parsed as markup-bearing code."""

    def __init__(self, file_path: str | None, line: int, column: int, detail: str = ""):
        self.file_path = file_path
        self.line = line
        self.column = column
        self.detail = detail
        location = f"{file_path or '<source>'}:{line}:{column}"
        message = f"Syntax error at {location}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class AnchorUnresolvedError(QAAutomationError):
    """An interaction could not be mapped to a markup element."""

    def __init__(self, message: str, file_path: str | None = None):
        self.file_path = file_path
        super().__init__(message)


class DuplicateIdentifierError(QAAutomationError):
    """A planned identifier already exists in the target file."""

    def __init__(self, test_id: str, file_path: str | None = None):
        self.test_id = test_id
        self.file_path = file_path
        super().__init__(f'Test ID "{test_id}" already exists in file')


class WriteFailureError(QAAutomationError):
    """Writing a source file, test script or backup failed."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to write {path}: {reason}")


class RestoreError(QAAutomationError):
    """A backup could not be restored to its original location."""

    def __init__(self, backup_path: str, reason: str):
        self.backup_path = backup_path
        self.reason = reason
        super().__init__(f"Failed to restore {backup_path}: {reason}")


class InvalidTransitionError(QAAutomationError, ValueError):
    """A session lifecycle event is not allowed in the current state."""

    def __init__(self, session_id: str, current: str, target: str):
        self.session_id = session_id
        self.current = current
        self.target = target
        super().__init__(
            f"Session {session_id} cannot move from '{current}' to '{target}'"
        )
