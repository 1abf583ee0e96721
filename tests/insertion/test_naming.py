"""Tests for test identifier naming strategies."""

import pytest

from qa_automation.config import NamingStrategy
from qa_automation.insertion.naming import (
    clean_segment,
    generate_test_id,
    infer_action,
    make_unique,
    to_kebab,
)
from qa_automation.recording.models import ElementInfo, SourceLocation


@pytest.fixture
def login_source():
    """Anchor inside the LoginPage component."""
    return SourceLocation(
        file_path="src/pages/LoginPage.tsx",
        line_number=8,
        column_number=6,
        component_name="LoginPage",
        component_hierarchy=("LoginForm", "LoginPage", "App", "Root"),
    )


class TestSegments:
    """Tests for segment cleaning helpers."""

    @pytest.mark.parametrize("value,expected", [
        ("LoginForm", "login-form"),
        ("login_form", "login-form"),
        ("Login Form", "login-form"),
        ("userMenuItem", "user-menu-item"),
    ])
    def test_to_kebab(self, value, expected):
        """Test conversion to kebab-case."""
        assert to_kebab(value) == expected

    def test_clean_segment_collapses_and_trims(self):
        """Test punctuation removal, hyphen collapsing and trimming."""
        assert clean_segment("--Hello!!  World--") == "hello-world"

    def test_clean_segment_caps_length(self):
        """Test segments are capped without a trailing hyphen."""
        assert len(clean_segment("a" * 50)) == 30
        assert clean_segment("word " * 10, max_length=10) == "word-word"


class TestInferAction:
    """Tests for action inference."""

    @pytest.mark.parametrize("input_type", ["submit", "email", "password", "search"])
    def test_input_type(self, input_type):
        """Test descriptive input types name the action."""
        assert infer_action(ElementInfo(tag_name="input", input_type=input_type)) == input_type

    def test_keyword_in_text(self):
        """Test keywords in visible text."""
        assert infer_action(ElementInfo(tag_name="button", text_content="Save changes")) == "save"
        assert infer_action(ElementInfo(tag_name="a", inner_text="Log out")) is None
        assert infer_action(ElementInfo(tag_name="a", inner_text="Logout")) == "logout"

    def test_submit_type_attribute(self):
        """Test a submit button without a keyword in its text."""
        element = ElementInfo(tag_name="button", text_content="Sign in", attributes={"type": "submit"})
        assert infer_action(element) == "submit"

    def test_aria_label(self):
        """Test the aria label is used as a last resort."""
        element = ElementInfo(tag_name="button", aria_label="Toggle navigation menu panel")
        assert infer_action(element) == "toggle-navigation-me"

    def test_no_action(self):
        """Test elements without hints have no action."""
        assert infer_action(ElementInfo(tag_name="div")) is None


class TestStrategies:
    """Tests for generate_test_id."""

    def test_component_action(self, login_source):
        """Test {component}-{action}-{tag}."""
        element = ElementInfo(tag_name="input", input_type="email")

        assert generate_test_id(NamingStrategy.COMPONENT_ACTION, element, login_source) == (
            "login-page-email-input"
        )

    def test_component_action_explicit_hint(self, login_source):
        """Test an explicit action hint overrides inference."""
        element = ElementInfo(tag_name="button", text_content="Save")

        assert generate_test_id("component-action", element, login_source, action="confirm") == (
            "login-page-confirm-button"
        )

    def test_component_action_without_component(self):
        """Test missing segments are skipped."""
        element = ElementInfo(tag_name="button", text_content="Delete")
        assert generate_test_id(NamingStrategy.COMPONENT_ACTION, element) == "delete-button"

    def test_hierarchical(self, login_source):
        """Test the first three components read outer to inner."""
        element = ElementInfo(tag_name="button", aria_label="Logout")

        assert generate_test_id(NamingStrategy.HIERARCHICAL, element, login_source) == (
            "app-login-page-login-form-logout"
        )

    def test_hierarchical_falls_back_to_tag(self):
        """Test the tag name is used when nothing identifies the element."""
        source = SourceLocation("a.tsx", 1, component_hierarchy=("Panel",))
        element = ElementInfo(tag_name="section")

        assert generate_test_id(NamingStrategy.HIERARCHICAL, element, source) == "panel-section"

    def test_descriptive(self):
        """Test {label}-{tag}."""
        element = ElementInfo(tag_name="button", text_content="Save changes")
        assert generate_test_id(NamingStrategy.DESCRIPTIVE, element) == "save-changes-button"

    def test_descriptive_label_cap(self):
        """Test descriptive labels allow 40 characters."""
        element = ElementInfo(tag_name="p", text_content="x" * 60)
        assert generate_test_id("descriptive", element) == "x" * 40 + "-p"

    def test_empty_result_falls_back_to_timestamp(self):
        """Test an identifier is produced even with nothing to name."""
        test_id = generate_test_id(NamingStrategy.DESCRIPTIVE, ElementInfo(tag_name="!!"))
        assert test_id.startswith("element-")
        assert test_id[len("element-"):].isdigit()

    def test_deterministic(self, login_source):
        """Test the same inputs give the same identifier."""
        element = ElementInfo(tag_name="button", text_content="Add item")
        first = generate_test_id(NamingStrategy.COMPONENT_ACTION, element, login_source)
        second = generate_test_id(NamingStrategy.COMPONENT_ACTION, element, login_source)

        assert first == second == "login-page-add-button"

    def test_unknown_strategy(self):
        """Test an unknown strategy name is rejected."""
        with pytest.raises(ValueError):
            generate_test_id("random", ElementInfo(tag_name="div"))


class TestMakeUnique:
    """Tests for make_unique."""

    def test_free_identifier_unchanged(self):
        assert make_unique("x", set()) == "x"

    def test_first_suffix(self):
        assert make_unique("x", {"x"}) == "x-2"

    def test_skips_taken_suffixes(self):
        assert make_unique("x", {"x", "x-2", "x-3"}) == "x-4"
