"""
UI feedback utilities for the form code builder.
Provides toast notifications and inline validation result display.
"""

import streamlit as st
import time
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)

ICONS = {
    'success': '✅',
    'info': 'ℹ️',
    'warning': '⚠️',
    'error': '❌'
}


class UserFeedback:
    """Inline user feedback helpers."""

    @staticmethod
    def error(message: str, icon: str = "❌"):
        st.error(f"{icon} {message}")

    @staticmethod
    def show_validation_results(errors: List[str], warnings: Optional[List[str]] = None):
        """Show validation results with errors and warnings."""
        if warnings is None:
            warnings = []

        if errors:
            st.error("❌ **Validation Errors:**")
            for error in errors:
                st.error(f"  • {error}")

        if warnings:
            st.warning("⚠️ **Warnings:**")
            for warning in warnings:
                st.warning(f"  • {warning}")

        if not errors and not warnings:
            st.success("✅ **Validation Passed:** No issues found")


class Notify:
    """
    Toast-first notification helper.
    Uses st.toast for non-blocking notifications and falls back to an
    ephemeral placeholder when toasts are unavailable.

    Usage:
    Notify.success("Form code generated")
    Notify.once("Duplicate field names detected", notification_type="warning", key="dup_warned")
    """

    @staticmethod
    def _display_notification(message: str, notification_type: str = 'info') -> None:
        """Internal method to display notification based on type."""
        icon = ICONS.get(notification_type, ICONS['info'])

        try:
            if hasattr(st, 'toast'):
                st.toast(message, icon=icon)
                return

            placeholder = st.empty()
            full_message = f"{icon} {message}"
            if notification_type == 'success':
                placeholder.success(full_message)
            elif notification_type == 'warning':
                placeholder.warning(full_message)
            elif notification_type == 'error':
                placeholder.error(full_message)
            else:
                placeholder.info(full_message)
            time.sleep(3)
            placeholder.empty()
        except Exception as e:
            logger.error(f"Error displaying notification: {e}", exc_info=True)
            full_message = f"{icon} {message}"
            if notification_type == 'success':
                st.success(full_message)
            elif notification_type == 'warning':
                st.warning(full_message)
            elif notification_type == 'error':
                st.error(full_message)
            else:
                st.info(full_message)

    @staticmethod
    def success(message: str) -> None:
        """Show success notification."""
        Notify._display_notification(message, 'success')

    @staticmethod
    def info(message: str) -> None:
        """Show info notification."""
        Notify._display_notification(message, 'info')

    @staticmethod
    def warn(message: str) -> None:
        """Show warning notification."""
        Notify._display_notification(message, 'warning')

    @staticmethod
    def error(message: str) -> None:
        """Show error notification."""
        Notify._display_notification(message, 'error')

    @staticmethod
    def once(message: str, notification_type: str = 'info', key: str = 'default_once') -> bool:
        """
        Show notification only once per session for the given key.
        Returns True if shown, False if already shown.
        """
        if key not in st.session_state:
            st.session_state[key] = False
        if not st.session_state[key]:
            Notify._display_notification(message, notification_type)
            st.session_state[key] = True
            return True
        return False
