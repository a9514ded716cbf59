"""
Descriptor validation for the form code builder.

Two entry points:

* ``validate`` runs before generation and rejects field sets that break the
  structural invariants (empty set, missing labels, missing options,
  duplicate names).
* ``check_consistency`` is the cheap, non-fatal check the editor runs after
  every mutation so duplicate names are reported immediately.

Neither function displays anything; both return ``Diagnostic`` values that
the caller hands to a single reporting handler.
"""

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Sequence, Tuple
import logging

from .field_model import FieldDescriptor

logger = logging.getLogger(__name__)


class DiagnosticKind(str, Enum):
    """Stable identifiers for every diagnostic the validator can produce."""

    EMPTY_FIELD_SET = "EmptyFieldSet"
    MISSING_LABEL = "MissingLabel"
    MISSING_OPTIONS = "MissingOptions"
    DUPLICATE_NAME = "DuplicateName"
    DUPLICATE_OPTION_VALUE = "DuplicateOptionValue"


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    """
    One user-displayable validation finding.

    Attributes:
        kind: Stable machine-readable kind
        severity: ERROR blocks generation, WARNING does not
        message: Rendered message for display
        subjects: Names of the offending fields (or values)
    """
    kind: DiagnosticKind
    severity: Severity
    message: str
    subjects: Tuple[str, ...] = ()

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of ``validate``: the untouched fields plus any diagnostics."""
    fields: Tuple[FieldDescriptor, ...]
    diagnostics: Tuple[Diagnostic, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return not any(d.is_error for d in self.diagnostics)

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.is_error]

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if not d.is_error]


def empty_field_set() -> Diagnostic:
    return Diagnostic(
        kind=DiagnosticKind.EMPTY_FIELD_SET,
        severity=Severity.ERROR,
        message="No fields added. Please add at least one field to generate the form code."
    )


def missing_label(names: Sequence[str]) -> Diagnostic:
    return Diagnostic(
        kind=DiagnosticKind.MISSING_LABEL,
        severity=Severity.ERROR,
        message=(
            "Please ensure all fields have labels and all options have labels. "
            f"Incomplete fields: {', '.join(names)}"
        ),
        subjects=tuple(names)
    )


def missing_options(names: Sequence[str]) -> Diagnostic:
    return Diagnostic(
        kind=DiagnosticKind.MISSING_OPTIONS,
        severity=Severity.ERROR,
        message=f"Select, radio and combobox fields need at least one option: {', '.join(names)}",
        subjects=tuple(names)
    )


def duplicate_name(names: Sequence[str], severity: Severity = Severity.WARNING) -> Diagnostic:
    return Diagnostic(
        kind=DiagnosticKind.DUPLICATE_NAME,
        severity=severity,
        message=(
            f"Duplicate field names detected: {', '.join(names)}. "
            "Please ensure all field names are unique."
        ),
        subjects=tuple(names)
    )


def duplicate_option_value(field_name: str, values: Sequence[str]) -> Diagnostic:
    return Diagnostic(
        kind=DiagnosticKind.DUPLICATE_OPTION_VALUE,
        severity=Severity.WARNING,
        message=f"Field '{field_name}' has options with the same value: {', '.join(values)}",
        subjects=(field_name,) + tuple(values)
    )


def find_duplicate_names(fields: Sequence[FieldDescriptor]) -> List[str]:
    """
    Return every name used by more than one descriptor, in first-seen order.

    Args:
        fields: Descriptors to inspect

    Returns:
        List of colliding names (each reported once)
    """
    counts = Counter(f.name for f in fields)
    duplicates = []
    for f in fields:
        if counts[f.name] > 1 and f.name not in duplicates:
            duplicates.append(f.name)
    return duplicates


def _find_duplicate_option_values(descriptor: FieldDescriptor) -> List[str]:
    counts = Counter(option.value for option in descriptor.options or [])
    return sorted(value for value, count in counts.items() if count > 1)


def _has_missing_label(descriptor: FieldDescriptor) -> bool:
    if not descriptor.label.strip():
        return True
    return any(not option.label.strip() for option in descriptor.options or [])


def check_consistency(fields: Sequence[FieldDescriptor]) -> List[Diagnostic]:
    """
    Non-fatal consistency check run after every edit.

    Args:
        fields: Current descriptor list

    Returns:
        Warning diagnostics (duplicate names, duplicate option values)
    """
    warnings: List[Diagnostic] = []

    duplicates = find_duplicate_names(fields)
    if duplicates:
        logger.debug(f"check_consistency: duplicate names {duplicates}")
        warnings.append(duplicate_name(duplicates))

    for descriptor in fields:
        values = _find_duplicate_option_values(descriptor)
        if values:
            warnings.append(duplicate_option_value(descriptor.name, values))

    return warnings


def validate(fields: Sequence[FieldDescriptor]) -> ValidationResult:
    """
    Validate a descriptor set before code generation.

    The fields are returned unchanged (same order, same objects); only the
    diagnostics decide whether generation may proceed.

    Args:
        fields: Ordered descriptors to validate

    Returns:
        ValidationResult whose ``ok`` is False when any error was found
    """
    snapshot = tuple(fields)

    if not snapshot:
        logger.info("Validation rejected an empty field set")
        return ValidationResult(fields=snapshot, diagnostics=(empty_field_set(),))

    diagnostics: List[Diagnostic] = []

    unlabeled = [f.name for f in snapshot if _has_missing_label(f)]
    if unlabeled:
        diagnostics.append(missing_label(unlabeled))

    optionless = [f.name for f in snapshot if f.has_options and not f.options]
    if optionless:
        diagnostics.append(missing_options(optionless))

    duplicates = find_duplicate_names(snapshot)
    if duplicates:
        diagnostics.append(duplicate_name(duplicates, severity=Severity.ERROR))

    for descriptor in snapshot:
        values = _find_duplicate_option_values(descriptor)
        if values:
            diagnostics.append(duplicate_option_value(descriptor.name, values))

    result = ValidationResult(fields=snapshot, diagnostics=tuple(diagnostics))
    if result.ok:
        logger.debug(f"Validation passed for {len(snapshot)} fields")
    else:
        logger.info(f"Validation failed: {[d.kind.value for d in result.errors]}")
    return result
