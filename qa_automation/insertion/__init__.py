"""Insertion - planning and applying test identifiers in React source.

Provides:
- Naming strategies and per-file uniqueness
- Per-file insertion planning from anchored interactions
- Format-preserving insertion into JSX opening tags
- Diff preview, backups and rollback
"""

from .files import (
    backup_file,
    compute_diff,
    read_source_file,
    resolve_test_file_path,
    restore_from_backup,
    script_file_name,
    write_source_file,
)
from .inserter import insert_test_ids
from .models import (
    FileChange,
    InsertionPlan,
    InsertionResult,
    SkipReason,
    SkipRecord,
    TestIdInsertion,
)
from .naming import generate_test_id, make_unique
from .planner import InsertionPlanner

__all__ = [
    # Models
    "TestIdInsertion",
    "SkipReason",
    "SkipRecord",
    "InsertionPlan",
    "InsertionResult",
    "FileChange",
    # Naming
    "generate_test_id",
    "make_unique",
    # Planning and execution
    "InsertionPlanner",
    "insert_test_ids",
    # Files
    "compute_diff",
    "backup_file",
    "restore_from_backup",
    "resolve_test_file_path",
    "script_file_name",
    "read_source_file",
    "write_source_file",
]
