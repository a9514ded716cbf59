"""
Custom exception classes for the form code builder.

This module provides the exception hierarchy used by the field set editor,
the code synthesizer and the configuration loader, with centralized helpers
for logging and displaying them.
"""

import logging
from typing import Optional, Dict, Any, List
from pathlib import Path

logger = logging.getLogger(__name__)


class FormBuilderError(Exception):
    """
    Base exception for form builder errors.

    Attributes:
        message: Error message
        context: Additional context information
        recovery_suggestions: List of suggested recovery actions
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None,
                 recovery_suggestions: Optional[List[str]] = None):
        self.message = message
        self.context = context or {}
        self.recovery_suggestions = recovery_suggestions or []
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message

    def get_full_details(self) -> Dict[str, Any]:
        """Get complete error details including context and suggestions."""
        return {
            'error_type': self.__class__.__name__,
            'message': self.message,
            'context': self.context,
            'recovery_suggestions': self.recovery_suggestions
        }


class FieldNotFoundError(FormBuilderError):
    """Raised when an edit operation references a field id that is not in the set."""

    def __init__(self, field_id: str, message: Optional[str] = None):
        self.field_id = field_id

        if message is None:
            message = f"No field with id '{field_id}' in the current form"

        super().__init__(
            message,
            context={'field_id': field_id},
            recovery_suggestions=[
                "Refresh the page to resynchronize the editor",
                "Re-add the field if it was removed"
            ]
        )


class UnsupportedFieldTypeError(FormBuilderError):
    """
    Raised when a field type without a registered field kind reaches the synthesizer.

    This is a programming error: the closed FieldType enumeration guarantees
    that editor-produced descriptors never trigger it.
    """

    def __init__(self, field_type: Any, message: Optional[str] = None):
        self.field_type = field_type

        if message is None:
            message = f"Unsupported field type: {field_type!r}"

        super().__init__(
            message,
            context={'field_type': repr(field_type)},
            recovery_suggestions=["Register a field kind for this type in formgen.field_kinds"]
        )


class ConfigurationLoadError(FormBuilderError):
    """
    Exception raised when configuration file loading fails.

    This includes YAML parsing errors, file not found, permission issues, etc.
    """

    def __init__(self, config_path: Path, original_error: Exception,
                 message: Optional[str] = None):
        self.config_path = config_path
        self.original_error = original_error

        if message is None:
            message = f"Failed to load configuration from {config_path}: {str(original_error)}"

        context = {
            'config_path': str(config_path),
            'original_error_type': type(original_error).__name__,
            'original_error_message': str(original_error)
        }

        recovery_suggestions = [
            "Check if config.yaml exists and is readable",
            "Verify YAML syntax is correct",
            "Application will use default configuration as fallback"
        ]

        super().__init__(message, context, recovery_suggestions)


def create_user_friendly_error_message(error: FormBuilderError) -> Dict[str, Any]:
    """
    Create user-friendly error message for display in UI.

    Args:
        error: FormBuilderError instance

    Returns:
        Dictionary with formatted error information for UI display
    """
    error_details = error.get_full_details()

    error_type_info = {
        'FieldNotFoundError': {
            'title': 'Field Not Found',
            'icon': '🏷️',
            'severity': 'warning'
        },
        'UnsupportedFieldTypeError': {
            'title': 'Unsupported Field Type',
            'icon': '🧩',
            'severity': 'error'
        },
        'ConfigurationLoadError': {
            'title': 'Configuration File Error',
            'icon': '📄',
            'severity': 'warning'
        }
    }

    error_type = error_details['error_type']
    type_info = error_type_info.get(error_type, {
        'title': 'Form Builder Error',
        'icon': '❌',
        'severity': 'error'
    })

    return {
        'title': f"{type_info['icon']} {type_info['title']}",
        'message': error_details['message'],
        'severity': type_info['severity'],
        'context': error_details['context'],
        'recovery_suggestions': error_details['recovery_suggestions']
    }


def log_error_with_context(error: FormBuilderError, operation: str) -> None:
    """
    Log error with full context information.

    Args:
        error: FormBuilderError instance
        operation: Description of the operation that failed
    """
    logger.error(f"Form builder error during {operation}")
    logger.error(f"Error type: {type(error).__name__}")
    logger.error(f"Error message: {error.message}")

    if error.context:
        logger.error("Error context:")
        for key, value in error.context.items():
            logger.error(f"  {key}: {value}")

    if error.recovery_suggestions:
        logger.info("Recovery suggestions:")
        for i, suggestion in enumerate(error.recovery_suggestions, 1):
            logger.info(f"  {i}. {suggestion}")
