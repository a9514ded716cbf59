"""
Session state management for the form code builder.
Owns the field set, form details, mode flags and the last generation result.
"""

import streamlit as st
from typing import Dict, Any, List, Optional
from datetime import datetime
import logging

from .field_set import FieldSet
from .synthesizer import GeneratedCode
from .validator import Diagnostic

logger = logging.getLogger(__name__)

DEFAULT_FORM_NAME = "My Form"


class SessionManager:
    """Manages Streamlit session state for the form builder."""

    @staticmethod
    def initialize(config: Optional[Dict[str, Any]] = None):
        """
        Initialize session state keys that are not set yet.

        Calling this on every rerun is safe: existing values are kept.

        Args:
            config: Application configuration; the generator section seeds the
                form name and mode flags
        """
        generator = (config or {}).get('generator', {})
        defaults = {
            'field_set': FieldSet(),
            'form_name': generator.get('default_form_name', DEFAULT_FORM_NAME),
            'form_description': "",
            'typescript': generator.get('typescript', True),
            'use_router': generator.get('use_router', True),
            'generated_code': None,
            'last_diagnostics': [],
            'session_id': None,
            'last_activity': datetime.now()
        }

        for key, default_value in defaults.items():
            if key not in st.session_state:
                st.session_state[key] = default_value

        if not st.session_state.session_id:
            st.session_state.session_id = f"session_{datetime.now().strftime('%Y%m%d_%H%M%S')}"
            logger.info(f"Session initialized: {st.session_state.session_id}")

    @staticmethod
    def get_session_id() -> Optional[str]:
        return st.session_state.get('session_id')

    @staticmethod
    def update_activity():
        st.session_state.last_activity = datetime.now()

    @staticmethod
    def get_field_set() -> FieldSet:
        """Get the session's field set, creating it if needed."""
        if 'field_set' not in st.session_state:
            st.session_state.field_set = FieldSet()
        return st.session_state.field_set

    @staticmethod
    def get_form_details() -> Dict[str, Any]:
        """Form name, description and mode flags as one dictionary."""
        return {
            'form_name': st.session_state.get('form_name', DEFAULT_FORM_NAME),
            'form_description': st.session_state.get('form_description', ""),
            'typescript': st.session_state.get('typescript', True),
            'use_router': st.session_state.get('use_router', True)
        }

    @staticmethod
    def set_form_details(form_name: str, form_description: str, typescript: bool, use_router: bool):
        """Store form details, dropping stale generated code when they change."""
        new_details = {
            'form_name': form_name,
            'form_description': form_description,
            'typescript': typescript,
            'use_router': use_router
        }
        if new_details != SessionManager.get_form_details():
            logger.debug(f"Form details changed: {new_details}")
            for key, value in new_details.items():
                st.session_state[key] = value
            SessionManager.clear_generated_code()
            SessionManager.update_activity()

    @staticmethod
    def get_generated_code() -> Optional[GeneratedCode]:
        return st.session_state.get('generated_code')

    @staticmethod
    def set_generated_code(code: Optional[GeneratedCode], diagnostics: Optional[List[Diagnostic]] = None):
        """Store the result of the last generate action."""
        st.session_state.generated_code = code
        st.session_state.last_diagnostics = list(diagnostics or [])
        SessionManager.update_activity()

    @staticmethod
    def clear_generated_code():
        st.session_state.generated_code = None
        st.session_state.last_diagnostics = []

    @staticmethod
    def get_last_diagnostics() -> List[Diagnostic]:
        return st.session_state.get('last_diagnostics', [])

    @staticmethod
    def field_edited():
        """Record that the field set changed; previously generated code is now stale."""
        SessionManager.clear_generated_code()
        SessionManager.update_activity()

    @staticmethod
    def reset_session(config: Optional[Dict[str, Any]] = None):
        """Reset the entire session state."""
        logger.info(f"Resetting session: {SessionManager.get_session_id()}")

        for key in list(st.session_state.keys()):
            del st.session_state[key]

        SessionManager.initialize(config)
