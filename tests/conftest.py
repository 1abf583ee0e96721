"""Shared fixtures for qa-automation tests."""

import pytest

from qa_automation.config import ProjectConfig
from qa_automation.recording.models import (
    ElementInfo,
    Interaction,
    InteractionType,
    Session,
    SessionStatus,
    SourceLocation,
)

BASE_URL = "http://localhost:5173"
LOGIN_PAGE_PATH = "src/pages/LoginPage.tsx"

LOGIN_PAGE_SOURCE = """import React from "react";

export function LoginPage() {
  return (
    <form className="login-form">
      <input id="email" type="email" placeholder="Email" />
      <input id="password" type="password" placeholder="Password" />
      <button type="submit">Sign in</button>
    </form>
  );
}
"""


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "e2e: mark test as end-to-end test"
    )


@pytest.fixture
def login_page_source():
    """LoginPage component: form on line 5, inputs on 6-7, button on 8."""
    return LOGIN_PAGE_SOURCE


@pytest.fixture
def make_interaction():
    """Factory for interactions; ``line`` anchors the target in LoginPage.tsx."""
    counter = {"value": 0}

    def _make(
        kind="click",
        selector="",
        tag_name="button",
        url=f"{BASE_URL}/",
        value=None,
        key=None,
        line=None,
        column=6,
        file_path=LOGIN_PAGE_PATH,
        component_name="LoginPage",
        **element_fields,
    ):
        counter["value"] += 1
        source = None
        if line is not None:
            source = SourceLocation(
                file_path=file_path,
                line_number=line,
                column_number=column,
                component_name=component_name,
            )
        return Interaction(
            type=InteractionType(kind),
            url=url,
            element=ElementInfo(tag_name=tag_name, css_selector=selector, **element_fields),
            timestamp=1_700_000_000_000 + counter["value"],
            id=f"i-{counter['value']}",
            value=value,
            key=key,
            source=source,
        )

    return _make


@pytest.fixture
def login_interactions(make_interaction):
    """navigate(/), fill email, fill password, click submit, navigate(/dashboard)."""
    return [
        make_interaction("navigation", tag_name="body", url=f"{BASE_URL}/"),
        make_interaction(
            "input",
            selector="#email",
            tag_name="input",
            value="user@example.com",
            line=6,
            input_type="email",
            placeholder="Email",
            attributes={"id": "email", "type": "email"},
        ),
        make_interaction(
            "input",
            selector="#password",
            tag_name="input",
            value="password123",
            line=7,
            input_type="password",
            placeholder="Password",
            attributes={"id": "password", "type": "password"},
        ),
        make_interaction(
            "click",
            selector="form > button",
            tag_name="button",
            line=8,
            text_content="Sign in",
            attributes={"type": "submit"},
        ),
        make_interaction("navigation", tag_name="body", url=f"{BASE_URL}/dashboard"),
    ]


@pytest.fixture
def login_session(login_interactions):
    """A stopped session recorded on the LoginPage."""
    return Session(
        id="session-1",
        name="login",
        start_url=f"{BASE_URL}/",
        status=SessionStatus.STOPPED,
        interactions=list(login_interactions),
    )


@pytest.fixture
def project(tmp_path, login_page_source):
    """Project root on disk containing src/pages/LoginPage.tsx."""
    page = tmp_path / LOGIN_PAGE_PATH
    page.parent.mkdir(parents=True)
    page.write_text(login_page_source, encoding="utf-8")
    return tmp_path


@pytest.fixture
def project_config(project):
    """ProjectConfig rooted at the temporary project."""
    return ProjectConfig(project_root=project, base_url=BASE_URL)
