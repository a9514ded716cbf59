"""
Unit tests for the form builder view helpers and the generate action.
"""

from unittest.mock import patch, MagicMock
import pytest

from formgen.config_loader import get_default_config
from formgen.field_model import FieldType
from formgen.form_builder_view import FormBuilderView, _format_bound, _parse_bound
from formgen.session_manager import SessionManager
from formgen.validator import DiagnosticKind


class MockSessionState(dict):
    """Mock session state that supports both dict and attribute access."""
    def __setattr__(self, key, value):
        self[key] = value

    def __getattr__(self, key):
        try:
            return self[key]
        except KeyError:
            raise AttributeError(f"'{type(self).__name__}' object has no attribute '{key}'")


@pytest.fixture
def mock_streamlit():
    """Patch Streamlit for the action buttons: Clear All is not clicked, Generate is."""
    mock_state = MockSessionState()
    with patch('streamlit.session_state', mock_state), \
         patch('streamlit.columns', return_value=[MagicMock(), MagicMock()]), \
         patch('streamlit.button', side_effect=[False, True]), \
         patch('streamlit.error') as mock_error, \
         patch('streamlit.warning') as mock_warning, \
         patch('streamlit.toast') as mock_toast:
        SessionManager.initialize(get_default_config())
        yield {
            'session_state': mock_state,
            'error': mock_error,
            'warning': mock_warning,
            'toast': mock_toast
        }


class TestBounds:
    """Test cases for numeric bound parsing and formatting."""

    def test_parse_bound(self):
        """Test parsing typed bounds."""
        assert _parse_bound("", "Min") is None
        assert _parse_bound("  ", "Min") is None
        assert _parse_bound("5", "Min") == 5.0
        assert _parse_bound(" -2.5 ", "Max") == -2.5

    def test_parse_bound_invalid(self):
        """Test that non-numeric input is rejected with the field label."""
        with pytest.raises(ValueError, match="Max must be a number"):
            _parse_bound("ten", "Max")

    def test_format_bound(self):
        """Test formatting bounds for display."""
        assert _format_bound(None) == ""
        assert _format_bound(5.0) == "5"
        assert _format_bound(2.5) == "2.5"


class TestGenerateAction:
    """Test cases for the generate button."""

    def test_generate_valid_form(self, mock_streamlit):
        """Test that a valid field set stores generated code."""
        field_set = SessionManager.get_field_set()
        descriptor = field_set.add_field(FieldType.EMAIL)
        field_set.set_label(descriptor.id, "Work Email")
        SessionManager.set_form_details("Contact Us", "", True, True)

        generated = FormBuilderView._render_actions(field_set, get_default_config())

        assert generated is True
        code = SessionManager.get_generated_code()
        assert "export function ContactUs()" in code.component_text
        assert SessionManager.get_last_diagnostics() == []
        mock_streamlit['toast'].assert_called_once()
        mock_streamlit['error'].assert_not_called()

    def test_generate_empty_form(self, mock_streamlit):
        """Test that an empty field set reports an error and stores no code."""
        field_set = SessionManager.get_field_set()

        FormBuilderView._render_actions(field_set, get_default_config())

        assert SessionManager.get_generated_code() is None
        diagnostics = SessionManager.get_last_diagnostics()
        assert [d.kind for d in diagnostics] == [DiagnosticKind.EMPTY_FIELD_SET]
        mock_streamlit['error'].assert_called_once()

    def test_generate_leaves_field_set_unchanged(self, mock_streamlit):
        """Test that a rejected generation does not modify the fields."""
        field_set = SessionManager.get_field_set()
        field_set.add_field(FieldType.TEXT)
        before = field_set.snapshot()

        FormBuilderView._render_actions(field_set, get_default_config())

        assert field_set.snapshot() == before
        assert SessionManager.get_generated_code() is None
