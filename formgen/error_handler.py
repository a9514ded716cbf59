"""
Error handling utilities for the form code builder.
Maps exceptions to user-friendly messages and is the single place where
validator diagnostics are shown to the user.
"""

import streamlit as st
import logging
import traceback
from typing import Dict, Any, Optional, Callable, Sequence

from .exceptions import FormBuilderError, create_user_friendly_error_message
from .ui_feedback import Notify
from .validator import Diagnostic

logger = logging.getLogger(__name__)


class ErrorType:
    """Error type constants."""
    CONFIGURATION = "configuration"
    VALIDATION = "validation"
    GENERATION = "generation"
    USER_INPUT = "user_input"
    SYSTEM = "system"


class ErrorHandler:
    """Error handling and diagnostic reporting for the form builder UI."""

    @staticmethod
    def handle_error(
        error: Exception,
        context: str,
        error_type: str = ErrorType.SYSTEM,
        user_message: Optional[str] = None,
        show_details: bool = False
    ) -> None:
        """
        Handle errors with user-friendly messages.

        Args:
            error: The exception that occurred
            context: Context where the error occurred
            error_type: Type of error (from ErrorType constants)
            user_message: Custom user-friendly message
            show_details: Whether to show technical details expanded
        """
        logger.error(f"Error in {context}: {str(error)}", exc_info=True)

        if not user_message:
            user_message = ErrorHandler._get_user_friendly_message(error, error_type)

        ErrorHandler._display_error(user_message, error, context, show_details)

    @staticmethod
    def _get_user_friendly_message(error: Exception, error_type: str) -> str:
        """Generate user-friendly error messages based on error type."""
        if isinstance(error, FormBuilderError):
            details = create_user_friendly_error_message(error)
            return f"{details['title']}: {details['message']}"

        error_messages = {
            ErrorType.CONFIGURATION: {
                FileNotFoundError: "📄 Configuration file not found. Default settings are in use.",
                PermissionError: "🔒 Configuration file cannot be read. Please check file permissions.",
                "default": "📄 Configuration error occurred. Default settings are in use."
            },

            ErrorType.VALIDATION: {
                ValueError: "✅ Field settings are invalid. Please review the field and try again.",
                "default": "✅ Validation error occurred. Please review your fields and try again."
            },

            ErrorType.GENERATION: {
                ValueError: "🧩 Form code could not be generated from the current fields.",
                "default": "🧩 Code generation failed. Please review your fields and try again."
            },

            ErrorType.USER_INPUT: {
                ValueError: "⚠️ Invalid input provided. Please check your entry and try again.",
                IndexError: "⚠️ That item no longer exists. Please refresh and try again.",
                "default": "⚠️ Input error. Please review your entry and try again."
            },

            ErrorType.SYSTEM: {
                MemoryError: "💻 System is running low on memory. Please try again.",
                ImportError: "💻 Required system component is missing. Please reinstall the application.",
                "default": "💻 System error occurred. Please try again."
            }
        }

        error_type_messages = error_messages.get(error_type, error_messages[ErrorType.SYSTEM])

        for exception_type, message in error_type_messages.items():
            if exception_type != "default" and isinstance(error, exception_type):
                return message

        return error_type_messages.get("default", "An unexpected error occurred.")

    @staticmethod
    def _display_error(
        user_message: str,
        error: Exception,
        context: str,
        show_details: bool = False
    ) -> None:
        """Display error message to user with recovery suggestions."""
        st.error(user_message)

        if isinstance(error, FormBuilderError) and error.recovery_suggestions:
            st.markdown("**🔧 Suggested Actions:**")
            for suggestion in error.recovery_suggestions:
                st.markdown(f"- {suggestion}")

        with st.expander("🔍 Technical Details", expanded=show_details):
            st.write(f"**Error Type:** {type(error).__name__}")
            st.write(f"**Context:** {context}")
            st.write(f"**Error Message:** {str(error)}")
            st.code(traceback.format_exc())

    @staticmethod
    def with_error_handling(
        func: Callable,
        context: str,
        error_type: str = ErrorType.SYSTEM,
        user_message: Optional[str] = None,
        show_details: bool = False,
        default_return: Any = None
    ) -> Any:
        """
        Run ``func`` and report any exception instead of propagating it.

        Args:
            func: Function to execute
            context: Context description
            error_type: Type of error expected
            user_message: Custom user message
            show_details: Show technical details
            default_return: Value to return on error

        Returns:
            Function result or default_return on error
        """
        try:
            return func()
        except Exception as e:
            ErrorHandler.handle_error(e, context, error_type, user_message, show_details)
            return default_return

    @staticmethod
    def report_diagnostics(diagnostics: Sequence[Diagnostic], notify: bool = True) -> Dict[str, int]:
        """
        Show validator diagnostics: one toast per category plus an inline line each.

        Errors are toasted every time they are reported. Warnings are
        recomputed on every rerun, so their toast is shown once per distinct
        message while the inline warning stays visible.

        Args:
            diagnostics: Diagnostics from validate() or check_consistency()
            notify: Also raise toast notifications

        Returns:
            Counts of reported errors and warnings
        """
        counts = {'errors': 0, 'warnings': 0}
        seen_kinds = set()

        for diagnostic in diagnostics:
            if diagnostic.is_error:
                counts['errors'] += 1
                st.error(f"❌ {diagnostic.message}")
                if notify and diagnostic.kind not in seen_kinds:
                    Notify.error(diagnostic.message)
            else:
                counts['warnings'] += 1
                st.warning(f"⚠️ {diagnostic.message}")
                if notify and diagnostic.kind not in seen_kinds:
                    Notify.once(
                        diagnostic.message,
                        notification_type='warning',
                        key=f"diagnostic_{diagnostic.kind.value}_{'_'.join(diagnostic.subjects)}"
                    )
            seen_kinds.add(diagnostic.kind)

        if counts['errors'] or counts['warnings']:
            logger.info(f"Reported {counts['errors']} error(s) and {counts['warnings']} warning(s)")
        return counts
