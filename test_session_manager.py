"""
Unit tests for session state management.
"""

from unittest.mock import patch
import pytest

from formgen.config_loader import get_default_config
from formgen.field_model import FieldType
from formgen.field_set import FieldSet
from formgen.session_manager import SessionManager, DEFAULT_FORM_NAME
from formgen.synthesizer import GeneratedCode
from formgen.validator import empty_field_set


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
def session_state():
    mock_state = MockSessionState()
    with patch('streamlit.session_state', mock_state):
        yield mock_state


@pytest.fixture
def generated():
    return GeneratedCode(schema_text="const formSchema = z.object({})\n", component_text="export function F() {}\n")


class TestInitialize:
    """Test cases for SessionManager.initialize."""

    def test_initialize_sets_defaults(self, session_state):
        """Test that all keys are created with defaults."""
        SessionManager.initialize()

        assert isinstance(session_state['field_set'], FieldSet)
        assert session_state['form_name'] == DEFAULT_FORM_NAME
        assert session_state['form_description'] == ""
        assert session_state['typescript'] is True
        assert session_state['use_router'] is True
        assert session_state['generated_code'] is None
        assert session_state['last_diagnostics'] == []
        assert session_state['session_id'].startswith("session_")

    def test_initialize_uses_generator_config(self, session_state):
        """Test that config seeds the form name and mode flags."""
        config = get_default_config()
        config['generator']['typescript'] = False
        config['generator']['default_form_name'] = "Signup"

        SessionManager.initialize(config)

        assert session_state['typescript'] is False
        assert session_state['form_name'] == "Signup"

    def test_initialize_keeps_existing_values(self, session_state):
        """Test that reruns do not overwrite session values."""
        SessionManager.initialize()
        field_set = session_state['field_set']
        field_set.add_field(FieldType.TEXT)
        session_state['form_name'] = "Contact Us"
        session_id = session_state['session_id']

        SessionManager.initialize()

        assert session_state['field_set'] is field_set
        assert len(session_state['field_set']) == 1
        assert session_state['form_name'] == "Contact Us"
        assert session_state['session_id'] == session_id


class TestFormDetails:
    """Test cases for form details and generated code."""

    def test_get_field_set_creates_when_missing(self, session_state):
        """Test get_field_set without prior initialization."""
        field_set = SessionManager.get_field_set()

        assert isinstance(field_set, FieldSet)
        assert SessionManager.get_field_set() is field_set

    def test_set_form_details_clears_stale_code(self, session_state, generated):
        """Test that changed details drop generated code."""
        SessionManager.initialize()
        SessionManager.set_generated_code(generated)

        SessionManager.set_form_details("Contact Us", "Reach us", False, True)

        details = SessionManager.get_form_details()
        assert details == {
            'form_name': "Contact Us",
            'form_description': "Reach us",
            'typescript': False,
            'use_router': True
        }
        assert SessionManager.get_generated_code() is None

    def test_unchanged_details_keep_code(self, session_state, generated):
        """Test that identical details keep generated code."""
        SessionManager.initialize()
        SessionManager.set_generated_code(generated)
        details = SessionManager.get_form_details()

        SessionManager.set_form_details(
            details['form_name'], details['form_description'], details['typescript'], details['use_router']
        )

        assert SessionManager.get_generated_code() is generated

    def test_set_generated_code_with_diagnostics(self, session_state, generated):
        """Test storing code and diagnostics together."""
        SessionManager.initialize()
        diagnostic = empty_field_set()

        SessionManager.set_generated_code(None, [diagnostic])

        assert SessionManager.get_generated_code() is None
        assert SessionManager.get_last_diagnostics() == [diagnostic]

    def test_field_edited_clears_code(self, session_state, generated):
        """Test that editing a field invalidates generated code."""
        SessionManager.initialize()
        SessionManager.set_generated_code(generated, [empty_field_set()])

        SessionManager.field_edited()

        assert SessionManager.get_generated_code() is None
        assert SessionManager.get_last_diagnostics() == []


class TestResetSession:
    """Test cases for SessionManager.reset_session."""

    def test_reset_session(self, session_state, generated):
        """Test that reset drops fields and restores defaults."""
        SessionManager.initialize()
        SessionManager.get_field_set().add_field(FieldType.EMAIL)
        SessionManager.set_form_details("Contact Us", "", True, True)
        SessionManager.set_generated_code(generated)
        session_state['diagnostic_DuplicateName_email'] = True

        SessionManager.reset_session()

        assert len(SessionManager.get_field_set()) == 0
        assert session_state['form_name'] == DEFAULT_FORM_NAME
        assert SessionManager.get_generated_code() is None
        assert 'diagnostic_DuplicateName_email' not in session_state
        assert SessionManager.get_session_id() is not None
