"""Session processor - from a recorded session to source edits and test scripts.

Processing is split the same way a reviewer works:
1. ``process_session`` computes a preview (plan, diffs, scripts) and writes nothing
2. ``apply_result`` backs up and writes the previewed files
3. ``rollback`` restores files from the backups ``apply_result`` recorded

None of these raise for per-item problems; every error and warning is
collected in the returned result.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional, Sequence

import structlog

from .config import ProjectConfig
from .errors import RestoreError, SourceSyntaxError, WriteFailureError
from .export.generator import PlaywrightTestGenerator
from .export.models import GeneratedTestFile
from .indexer.react_analyzer import analyze_react_file
from .insertion.files import (
    backup_file,
    compute_diff,
    read_source_file,
    restore_from_backup,
    write_source_file,
)
from .insertion.inserter import insert_test_ids
from .insertion.models import FileChange, InsertionPlan, SkipReason
from .insertion.planner import InsertionPlanner
from .recording.consolidator import consolidate_interactions
from .recording.models import Interaction, Session, SessionStatus
from .utils.logging import LogContext, log_operation

logger = structlog.get_logger()

NO_TESTS_ERROR = "No tests could be generated from the session interactions"
NO_SOURCE_WARNING = (
    "No source file locations found in interactions. "
    "Test IDs will not be inserted into source files. "
    "Tests will be generated using available selectors (placeholder, ID, CSS)."
)


@dataclass
class ProcessingResult:
    """Preview of everything a session would change.

    Attributes:
        session_id: Session the result belongs to
        plan: Aggregated insertion plan across files
        file_changes: Source files that would change, with diffs
        generated_tests: Test scripts that would be written
        backup_paths: Filled in by ``apply_result``
        errors: Per-item failures, or the single no-output error
        warnings: Non-fatal anomalies (missing files, skipped insertions)
    """

    session_id: str
    plan: InsertionPlan = field(default_factory=InsertionPlan)
    file_changes: list[FileChange] = field(default_factory=list)
    generated_tests: list[GeneratedTestFile] = field(default_factory=list)
    backup_paths: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON reports."""
        return {
            "session_id": self.session_id,
            "success": self.success,
            "plan": self.plan.to_dict(),
            "file_changes": [c.to_dict() for c in self.file_changes],
            "generated_tests": [t.to_dict() for t in self.generated_tests],
            "backup_paths": list(self.backup_paths),
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }


@dataclass
class ApplyResult:
    """Files written by ``apply_result``."""

    applied: list[str] = field(default_factory=list)
    backup_paths: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict:
        return {
            "applied": list(self.applied),
            "backup_paths": list(self.backup_paths),
            "errors": list(self.errors),
        }


@dataclass
class RollbackResult:
    """Files restored by ``rollback``."""

    restored: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict:
        return {"restored": list(self.restored), "errors": list(self.errors)}


class SessionProcessor:
    """Turns recorded sessions into test identifier edits and Playwright scripts.

    Example:
        processor = SessionProcessor(load_config())
        result = processor.process_session(session)
        print(processor.dry_run_report(result))
        if result.success:
            applied = processor.apply_result(result)
            ...
            processor.rollback(applied.backup_paths)
    """

    def __init__(self, config: Optional[ProjectConfig] = None):
        self.config = config or ProjectConfig()
        self.planner = InsertionPlanner(
            self.config.naming_strategy,
            self.config.testid_attribute,
        )
        self.generator = PlaywrightTestGenerator(self.config)
        self.log = logger.bind(component="session_processor")

    @property
    def project_root(self) -> Path:
        return Path(self.config.project_root)

    def run(self, session: Session) -> ProcessingResult:
        """Process a stopped (or failed) session, driving its lifecycle status."""
        session.transition(SessionStatus.PROCESSING)
        result = self.process_session(session)
        session.transition(SessionStatus.COMPLETED if result.success else SessionStatus.ERROR)
        return result

    def process_session(self, session: Session) -> ProcessingResult:
        """Compute insertions, diffs and test scripts for a session.

        Nothing is written to disk. Interactions recorded after this call
        starts are not part of the result.

        Args:
            session: Recording session

        Returns:
            ProcessingResult preview
        """
        result = ProcessingResult(session_id=session.id)

        with LogContext(session_id=session.id):
            interactions = session.snapshot()
            self.log.info(
                "Processing session",
                name=session.name,
                interactions=len(interactions),
                project_root=str(self.project_root),
            )

            consolidated = consolidate_interactions(interactions)
            file_groups = self.group_by_source_file(consolidated)
            if not file_groups:
                result.warnings.append(NO_SOURCE_WARNING)
            result.plan.skipped.extend(InsertionPlanner.skip_unanchored(consolidated))

            for abs_path, file_interactions in file_groups.items():
                self._process_file(abs_path, file_interactions, result)

            for skip in result.plan.skipped:
                if skip.test_id and skip.reason != SkipReason.DUPLICATE_POSITION:
                    result.warnings.append(f"Skipped {skip.test_id}: {skip.message}")
                else:
                    result.warnings.append(skip.message)

            # Tests are generated even without source edits; the generator
            # falls back to role, text, id and CSS locators.
            try:
                result.generated_tests = self.generator.generate(
                    session, result.plan.test_id_map, interactions
                )
            except Exception as e:
                self.log.exception("Test generation failed")
                result.errors.append(f"Error generating tests: {e}")

            if not result.generated_tests and not result.errors:
                result.errors.append(NO_TESTS_ERROR)

            self.log.info(
                "Session processed",
                insertions=len(result.plan.insertions),
                file_changes=len(result.file_changes),
                tests=len(result.generated_tests),
                warnings=len(result.warnings),
                errors=len(result.errors),
            )

        return result

    def _process_file(
        self,
        abs_path: Path,
        interactions: Sequence[Interaction],
        result: ProcessingResult,
    ) -> None:
        file_path = self._display_path(str(abs_path))
        if not abs_path.is_file():
            result.warnings.append(f"Source file not found: {file_path}")
            return

        try:
            code = read_source_file(abs_path)
            analysis = analyze_react_file(code, str(abs_path), self.config.testid_attribute)
        except SourceSyntaxError as e:
            self.log.warning("Skipping unparseable file", file_path=file_path, error=str(e))
            result.errors.append(f"Error processing {file_path}: {e}")
            return
        except (OSError, UnicodeDecodeError) as e:
            result.errors.append(f"Error processing {file_path}: {e}")
            return

        file_plan = self.planner.plan(str(abs_path), analysis, interactions)
        if file_plan.insertions:
            inserted = insert_test_ids(
                code,
                file_plan.insertions,
                str(abs_path),
                self.config.testid_attribute,
            )
            file_plan.skipped.extend(inserted.skipped)

            # Selectors must not point at identifiers that never made it into the file
            dropped = {s.test_id for s in inserted.skipped if s.test_id}
            file_plan.test_id_map = {
                selector: test_id
                for selector, test_id in file_plan.test_id_map.items()
                if test_id not in dropped
            }

            if inserted.inserted > 0:
                result.file_changes.append(FileChange(
                    file_path=str(abs_path),
                    original=code,
                    modified=inserted.code,
                    diff=compute_diff(code, inserted.code, file_path),
                ))

        result.plan.merge(file_plan)

    def apply_result(self, result: ProcessingResult) -> ApplyResult:
        """Write previewed source changes and test scripts.

        Each changed source file is backed up first (when enabled). A failed
        backup or write is recorded and the remaining files still proceed.
        """
        applied = ApplyResult()

        with LogContext(session_id=result.session_id), log_operation(
            "apply_result", self.log
        ) as op:
            for change in result.file_changes:
                try:
                    if self.config.backup_before_modify:
                        backup = backup_file(
                            change.file_path, self.project_root, self.config.backup_dir
                        )
                        applied.backup_paths.append(str(backup))
                        result.backup_paths.append(str(backup))
                    write_source_file(change.file_path, change.modified)
                    applied.applied.append(change.file_path)
                except WriteFailureError as e:
                    self.log.error("Source write failed", file_path=change.file_path, error=str(e))
                    applied.errors.append(str(e))

            for test in result.generated_tests:
                path = self.resolve_path(str(test.file_path))
                try:
                    write_source_file(path, test.content)
                    applied.applied.append(str(path))
                except WriteFailureError as e:
                    self.log.error("Test write failed", file_path=str(path), error=str(e))
                    applied.errors.append(f"Failed to write test {test.file_path}: {e.reason}")

            op["applied"] = len(applied.applied)
            op["failed"] = len(applied.errors)

        return applied

    def rollback(self, backup_paths: Iterable[str]) -> RollbackResult:
        """Restore files from backups; each path is attempted independently."""
        rollback = RollbackResult()

        with log_operation("rollback", self.log) as op:
            for backup_path in backup_paths:
                try:
                    original = restore_from_backup(
                        backup_path, self.project_root, self.config.backup_dir
                    )
                    rollback.restored.append(str(original))
                except RestoreError as e:
                    self.log.error("Restore failed", backup_path=str(backup_path), error=str(e))
                    rollback.errors.append(str(e))

            op["restored"] = len(rollback.restored)
            op["failed"] = len(rollback.errors)

        return rollback

    def dry_run_report(self, result: ProcessingResult) -> str:
        """Plain-text summary of what applying ``result`` would do."""
        lines = [f"Session {result.session_id}"]

        lines.append(f"Planned insertions ({len(result.plan.insertions)}):")
        for insertion in result.plan.insertions:
            column = insertion.column if insertion.column is not None else "*"
            lines.append(
                f"  {self._display_path(insertion.file_path)}:{insertion.line}:{column} "
                f"<{insertion.element_tag_name}> {self.config.testid_attribute}=\"{insertion.test_id}\""
            )

        if result.plan.skipped:
            lines.append(f"Skipped ({len(result.plan.skipped)}):")
            for skip in result.plan.skipped:
                lines.append(f"  [{skip.reason.value}] {skip.message}")

        lines.append(f"Files to modify ({len(result.file_changes)}):")
        for change in result.file_changes:
            lines.append(f"  {self._display_path(change.file_path)}")

        lines.append(f"Tests to write ({len(result.generated_tests)}):")
        for test in result.generated_tests:
            lines.append(f"  {self._display_path(str(test.file_path))} - {test.description}")

        for label, messages in (("Warnings", result.warnings), ("Errors", result.errors)):
            if messages:
                lines.append(f"{label} ({len(messages)}):")
                lines.extend(f"  {message}" for message in messages)

        return "\n".join(lines) + "\n"

    def resolve_path(self, file_path: str) -> Path:
        """Resolve a path relative to the project root."""
        path = Path(file_path)
        return path if path.is_absolute() else self.project_root / path

    def _display_path(self, file_path: str) -> str:
        try:
            return str(Path(file_path).resolve().relative_to(self.project_root.resolve()))
        except ValueError:
            return file_path

    def group_by_source_file(
        self,
        interactions: Iterable[Interaction],
    ) -> dict[Path, list[Interaction]]:
        """Group interactions by the resolved file their source anchor points to.

        Relative and absolute spellings of one file share a group.
        """
        groups: dict[Path, list[Interaction]] = {}
        for interaction in interactions:
            anchor = interaction.anchor
            if anchor is None or not anchor.file_path:
                continue
            groups.setdefault(self.resolve_path(anchor.file_path).resolve(), []).append(interaction)
        return groups


def process_session(session: Session, config: Optional[ProjectConfig] = None) -> ProcessingResult:
    """Convenience wrapper around ``SessionProcessor.process_session``."""
    return SessionProcessor(config).process_session(session)
