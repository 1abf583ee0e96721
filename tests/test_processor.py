"""Tests for the session processor."""

import pytest

from qa_automation.config import ProjectConfig
from qa_automation.processor import (
    NO_SOURCE_WARNING,
    NO_TESTS_ERROR,
    SessionProcessor,
    process_session,
)
from qa_automation.recording.models import Session, SessionStatus

BASE = "http://localhost:5173"
LOGIN_IDS = [
    "login-page-email-input",
    "login-page-password-input",
    "login-page-submit-button",
]


@pytest.fixture
def processor(project_config):
    """Processor for the temporary LoginPage project."""
    return SessionProcessor(project_config)


@pytest.mark.e2e
class TestProcessSession:
    """End-to-end preview of a recorded session."""

    def test_login_scenario(self, processor, project, login_session, login_page_source):
        """Test the LoginPage session yields three identifiers and one test file."""
        result = processor.process_session(login_session)

        assert result.success
        assert result.errors == []
        assert result.warnings == []
        assert [i.test_id for i in result.plan.insertions] == LOGIN_IDS

        [change] = result.file_changes
        assert change.file_path == str(project.resolve() / "src/pages/LoginPage.tsx")
        assert change.original == login_page_source
        for test_id in LOGIN_IDS:
            assert f'data-testid="{test_id}"' in change.modified
        assert change.diff.startswith("--- src/pages/LoginPage.tsx")

        [test_file] = result.generated_tests
        lines = [line.strip() for line in test_file.content.splitlines()]
        assert lines.index("await page.goto('/');") < lines.index(
            "await page.getByTestId('login-page-email-input').fill('user@example.com');"
        )
        assert "await page.getByTestId('login-page-password-input').fill('password123');" in lines
        assert "await page.getByTestId('login-page-submit-button').click();" in lines
        assert "await expect(page).toHaveURL(/\\/dashboard/);" in lines

    def test_preview_writes_nothing(self, processor, project, login_session, login_page_source):
        """Test processing does not touch the file system."""
        processor.process_session(login_session)

        assert (project / "src/pages/LoginPage.tsx").read_text() == login_page_source
        assert not (project / "tests").exists()
        assert not (project / ".qa-backup").exists()

    def test_already_instrumented_file(self, processor, project, login_session):
        """Test a second run after applying reuses the identifiers."""
        first = processor.process_session(login_session)
        processor.apply_result(first)

        second = processor.process_session(login_session)

        assert second.success
        assert second.plan.insertions == []
        assert second.file_changes == []
        assert set(second.plan.test_id_map.values()) == set(LOGIN_IDS)
        assert "getByTestId('login-page-submit-button')" in second.generated_tests[0].content

    def test_missing_source_file(self, processor, project, login_session):
        """Test a missing file is a warning and tests are still generated."""
        (project / "src/pages/LoginPage.tsx").unlink()

        result = processor.process_session(login_session)

        assert result.success
        assert result.warnings == ["Source file not found: src/pages/LoginPage.tsx"]
        assert result.file_changes == []
        assert "getByPlaceholder('Email')" in result.generated_tests[0].content

    def test_syntax_error_is_local_to_file(self, processor, project, login_session, make_interaction):
        """Test an unparseable file is recorded without stopping other files."""
        broken = project / "src/Broken.tsx"
        broken.write_text("export const Broken = () => <div>;\n")
        login_session.interactions.insert(
            1, make_interaction("click", selector="#x", line=1, file_path="src/Broken.tsx")
        )

        result = processor.process_session(login_session)

        assert not result.success
        assert len(result.errors) == 1
        assert result.errors[0].startswith("Error processing src/Broken.tsx:")
        assert len(result.file_changes) == 1
        assert result.generated_tests

    def test_unanchored_session(self, processor, make_interaction):
        """Test sessions without anchors still produce a script."""
        session = Session(
            id="s-2",
            name="search",
            start_url=f"{BASE}/",
            status=SessionStatus.STOPPED,
            interactions=[make_interaction("click", selector="#go", text_content="Go")],
        )

        result = processor.process_session(session)

        assert result.success
        assert result.warnings[0] == NO_SOURCE_WARNING
        assert result.plan.skipped[0].selector == "#go"
        assert "getByText('Go')" in result.generated_tests[0].content

    def test_empty_session_is_an_error(self, processor):
        """Test no output at all is surfaced as a single error."""
        session = Session(id="s-3", name="empty", status=SessionStatus.STOPPED)

        result = processor.process_session(session)

        assert result.errors == [NO_TESTS_ERROR]

    def test_existing_identifiers_are_avoided(self, processor, project, login_session):
        """Test new identifiers do not collide with ones already in the file."""
        page = project / "src/pages/LoginPage.tsx"
        page.write_text(page.read_text().replace(
            '<form className="login-form">',
            '<form className="login-form" data-testid="login-page-submit-button">',
        ))

        result = processor.process_session(login_session)

        assert "form > button" in result.plan.test_id_map
        assert result.plan.test_id_map["form > button"] == "login-page-submit-button-2"

    def test_relative_and_absolute_anchors_share_one_file(
        self, processor, project, make_interaction, login_page_source
    ):
        """Test two spellings of one path produce a single plan, write and backup."""
        page = project / "src/pages/LoginPage.tsx"
        session = Session(
            id="s-5",
            name="login",
            start_url=f"{BASE}/",
            status=SessionStatus.STOPPED,
            interactions=[
                make_interaction("input", selector="#email", tag_name="input", value="a@b.c",
                                 line=6, file_path="src/pages/LoginPage.tsx",
                                 input_type="email", placeholder="Email", attributes={"id": "email", "type": "email"}),
                make_interaction("input", selector="#password", tag_name="input", value="pw",
                                 line=7, file_path=str(page),
                                 input_type="password", placeholder="Password", attributes={"id": "password", "type": "password"}),
            ],
        )

        result = processor.process_session(session)

        assert len(result.file_changes) == 1
        assert [i.test_id for i in result.plan.insertions] == LOGIN_IDS[:2]

        applied = processor.apply_result(result)

        source = page.read_text()
        assert 'data-testid="login-page-email-input"' in source
        assert 'data-testid="login-page-password-input"' in source
        assert applied.backup_paths == [str(project.resolve() / ".qa-backup/src/pages/LoginPage.tsx")]
        assert (project / ".qa-backup/src/pages/LoginPage.tsx").read_text() == login_page_source

    def test_module_level_helper(self, project_config, login_session):
        assert process_session(login_session, project_config).success


class TestApplyAndRollback:
    """Tests for apply_result and rollback."""

    def test_apply_writes_sources_and_tests(self, processor, project, login_session, login_page_source):
        result = processor.process_session(login_session)

        applied = processor.apply_result(result)

        assert applied.success
        source = (project / "src/pages/LoginPage.tsx").read_text()
        assert 'data-testid="login-page-email-input"' in source
        spec = project / "tests/e2e/pages/login-page.spec.ts"
        assert spec.read_text() == result.generated_tests[0].content
        backup = project.resolve() / ".qa-backup/src/pages/LoginPage.tsx"
        assert applied.backup_paths == [str(backup)]
        assert result.backup_paths == [str(backup)]
        assert backup.read_text() == login_page_source

    def test_apply_without_backups(self, project, login_session):
        config = ProjectConfig(project_root=project, backup_before_modify=False)
        processor = SessionProcessor(config)

        applied = processor.apply_result(processor.process_session(login_session))

        assert applied.success
        assert applied.backup_paths == []
        assert not (project / ".qa-backup").exists()

    def test_rollback_restores_originals(self, processor, project, login_session, login_page_source):
        applied = processor.apply_result(processor.process_session(login_session))

        rollback = processor.rollback(applied.backup_paths)

        assert rollback.success
        assert rollback.restored == [str(project.resolve() / "src/pages/LoginPage.tsx")]
        assert (project / "src/pages/LoginPage.tsx").read_text() == login_page_source

    def test_rollback_errors_are_collected(self, processor, project, login_session):
        applied = processor.apply_result(processor.process_session(login_session))

        rollback = processor.rollback([str(project / ".qa-backup/missing.tsx"), *applied.backup_paths])

        assert not rollback.success
        assert len(rollback.errors) == 1
        assert len(rollback.restored) == 1

    def test_write_failures_are_collected(self, processor, project, login_session):
        """Test a failed test write is recorded and the source change still applies."""
        (project / "tests").write_text("not a directory")

        applied = processor.apply_result(processor.process_session(login_session))

        assert not applied.success
        assert applied.errors[0].startswith("Failed to write test")
        assert 'data-testid=' in (project / "src/pages/LoginPage.tsx").read_text()


class TestLifecycleAndReport:
    """Tests for run and dry_run_report."""

    def test_run_completes_session(self, processor, login_session):
        processor.run(login_session)

        assert login_session.status == SessionStatus.COMPLETED

    def test_run_marks_failed_session(self, processor):
        session = Session(id="s-4", name="empty", status=SessionStatus.STOPPED)

        processor.run(session)

        assert session.status == SessionStatus.ERROR

    def test_run_requires_stopped_session(self, processor, login_session):
        login_session.status = SessionStatus.RECORDING

        with pytest.raises(ValueError):
            processor.run(login_session)

    def test_dry_run_report(self, processor, login_session):
        result = processor.process_session(login_session)

        report = processor.dry_run_report(result)

        assert report.startswith("Session session-1\n")
        assert "Planned insertions (3):" in report
        assert 'src/pages/LoginPage.tsx:8:6 <button> data-testid="login-page-submit-button"' in report
        assert "tests/e2e/pages/login-page.spec.ts - E2E test for login" in report
        assert "Errors" not in report

    def test_to_dict(self, processor, login_session):
        data = processor.process_session(login_session).to_dict()

        assert data["success"] is True
        assert len(data["plan"]["insertions"]) == 3
        assert data["generated_tests"][0]["language"] == "typescript"
