"""File utilities - diff preview, backups, rollback and test path resolution."""

import difflib
import re
import shutil
from pathlib import Path

import structlog

from ..config import ScriptLanguage
from ..errors import RestoreError, WriteFailureError

logger = structlog.get_logger()

NO_NEWLINE_MARKER = "\\ No newline at end of file"


def compute_diff(original: str, modified: str, file_path: str) -> str:
    """Unified diff between two versions of a file, for preview only."""
    original_lines = original.splitlines(keepends=True)
    modified_lines = modified.splitlines(keepends=True)

    lines = []
    for line in difflib.unified_diff(
        original_lines,
        modified_lines,
        fromfile=file_path,
        tofile=file_path,
        fromfiledate="original",
        tofiledate="modified",
    ):
        if line.endswith("\n"):
            lines.append(line)
        else:
            # Last line of a file without a trailing newline
            lines.append(line + "\n")
            lines.append(NO_NEWLINE_MARKER + "\n")
    return "".join(lines)


def read_source_file(path: str | Path) -> str:
    # CRLF line endings are preserved
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()


def write_source_file(path: str | Path, content: str) -> None:
    """Write ``content`` to ``path``, creating parent directories.

    Raises:
        WriteFailureError: if the file cannot be written
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(content)
    except OSError as e:
        raise WriteFailureError(str(path), str(e)) from e


def backup_file(
    file_path: str | Path,
    project_root: str | Path,
    backup_dir: str = ".qa-backup",
) -> Path:
    """Copy a file under the backup root, mirroring its project-relative path.

    ``<root>/src/pages/Login.tsx`` is backed up to
    ``<root>/<backup_dir>/src/pages/Login.tsx``.

    Returns:
        Path of the backup copy

    Raises:
        WriteFailureError: if the file is outside the project root or the copy fails
    """
    root = Path(project_root).resolve()
    source = Path(file_path).resolve()
    try:
        relative = source.relative_to(root)
    except ValueError:
        raise WriteFailureError(str(file_path), f"not inside project root {root}") from None

    backup_path = root / backup_dir / relative
    try:
        backup_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, backup_path)
    except OSError as e:
        raise WriteFailureError(str(backup_path), str(e)) from e

    logger.debug("Backed up file", file_path=str(source), backup_path=str(backup_path))
    return backup_path


def restore_from_backup(
    backup_path: str | Path,
    project_root: str | Path,
    backup_dir: str = ".qa-backup",
) -> Path:
    """Copy a backup over the file it was taken from.

    Returns:
        Path of the restored original

    Raises:
        RestoreError: if the path is not under the backup root, or the backup
            is missing or unreadable
    """
    root = Path(project_root).resolve()
    backup_root = root / backup_dir
    backup = Path(backup_path)
    if not backup.is_absolute():
        backup = root / backup
    backup = backup.resolve()

    try:
        relative = backup.relative_to(backup_root)
    except ValueError:
        raise RestoreError(str(backup_path), f"not inside backup root {backup_root}") from None

    if not backup.is_file():
        raise RestoreError(str(backup_path), "backup file does not exist")

    original = root / relative
    try:
        original.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(backup, original)
    except OSError as e:
        raise RestoreError(str(backup_path), str(e)) from e

    logger.debug("Restored file", backup_path=str(backup), file_path=str(original))
    return original


def _snake_case(value: str) -> str:
    value = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", value)
    value = re.sub(r"[^a-zA-Z0-9]+", "_", value)
    return value.strip("_").lower()


def script_file_name(stem: str, language: ScriptLanguage | str = ScriptLanguage.TYPESCRIPT) -> str:
    """File name of a generated test for a source stem or flow name.

    ``LoginPage`` -> ``login-page.spec.ts`` (TypeScript) or
    ``test_login_page.py`` (Python).
    """
    language = ScriptLanguage(language)
    snake = _snake_case(stem) or "flow"
    if language == ScriptLanguage.PYTHON:
        return f"test_{snake}.py"
    return f"{snake.replace('_', '-')}.spec.ts"


def resolve_test_file_path(
    source_file: str | Path,
    project_root: str | Path,
    source_dir: str = "src",
    test_output_dir: str = "tests/e2e",
    language: ScriptLanguage | str = ScriptLanguage.TYPESCRIPT,
) -> Path:
    """Map a source file to the path of its generated test.

    ``<root>/src/pages/LoginPage.tsx`` -> ``<root>/tests/e2e/pages/login-page.spec.ts``.
    Files outside the source directory are mirrored relative to the project
    root instead; files outside the project are placed at the top of the
    test output directory.
    """
    root = Path(project_root)
    source = Path(source_file)
    if not source.is_absolute():
        source = root / source

    relative = None
    for base in (root / source_dir, root):
        try:
            relative = source.relative_to(base)
            break
        except ValueError:
            continue
    if relative is None:
        relative = Path(source.name)

    return root / test_output_dir / relative.parent / script_file_name(relative.stem, language)

