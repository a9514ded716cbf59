"""
Unit tests for descriptor validation and diagnostics.
"""

import pytest

from formgen.field_model import FieldOption, FieldType, create_field
from formgen.validator import (
    DiagnosticKind,
    Severity,
    check_consistency,
    duplicate_name,
    find_duplicate_names,
    validate,
)


def _select(label, options):
    return create_field(
        FieldType.SELECT,
        label=label,
        options=[FieldOption(label=text, value=value) for text, value in options]
    )


class TestValidate:
    """Test cases for validate."""

    def test_empty_field_set(self):
        result = validate([])

        assert not result.ok
        assert [d.kind for d in result.errors] == [DiagnosticKind.EMPTY_FIELD_SET]
        assert result.errors[0].message == (
            "No fields added. Please add at least one field to generate the form code."
        )

    def test_valid_fields_pass_unchanged(self):
        fields = [
            create_field(FieldType.TEXT, label="Name"),
            _select("Color", [("Red", "red")]),
        ]

        result = validate(fields)

        assert result.ok
        assert result.diagnostics == ()
        assert list(result.fields) == fields
        assert result.fields[0] is fields[0]

    def test_missing_field_label(self):
        unlabeled = create_field(FieldType.TEXT, field_id="abc")

        result = validate([create_field(FieldType.TEXT, label="Name"), unlabeled])

        assert not result.ok
        assert result.errors[0].kind == DiagnosticKind.MISSING_LABEL
        assert result.errors[0].subjects == ("field_abc",)

    def test_whitespace_label_counts_as_missing(self):
        result = validate([create_field(FieldType.TEXT, label="   ", name="blank")])
        assert result.errors[0].kind == DiagnosticKind.MISSING_LABEL

    def test_missing_option_label(self):
        result = validate([_select("Color", [("Red", "red"), ("", "option_1")])])

        assert [d.kind for d in result.errors] == [DiagnosticKind.MISSING_LABEL]
        assert result.errors[0].subjects == ("color",)

    def test_missing_options(self):
        result = validate([create_field(FieldType.RADIO, label="Size", options=[])])

        assert [d.kind for d in result.errors] == [DiagnosticKind.MISSING_OPTIONS]
        assert result.errors[0].subjects == ("size",)

    def test_duplicate_names_are_errors(self):
        fields = [
            create_field(FieldType.TEXT, label="Email"),
            create_field(FieldType.EMAIL, label="email"),
        ]

        result = validate(fields)

        assert not result.ok
        assert result.errors[0].kind == DiagnosticKind.DUPLICATE_NAME
        assert result.errors[0].message == (
            "Duplicate field names detected: email. Please ensure all field names are unique."
        )

    def test_duplicate_option_values_only_warn(self):
        result = validate([_select("Color", [("Red", "red"), ("RED", "red")])])

        assert result.ok
        assert [d.kind for d in result.warnings] == [DiagnosticKind.DUPLICATE_OPTION_VALUE]
        assert result.warnings[0].subjects == ("color", "red")

    def test_multiple_errors_are_all_reported(self):
        fields = [
            create_field(FieldType.TEXT, name="dup"),
            create_field(FieldType.TEXT, label="Dup"),
            create_field(FieldType.COMBOBOX, label="Pick", options=[]),
        ]

        kinds = [d.kind for d in validate(fields).errors]

        assert kinds == [
            DiagnosticKind.MISSING_LABEL,
            DiagnosticKind.MISSING_OPTIONS,
            DiagnosticKind.DUPLICATE_NAME,
        ]


class TestConsistency:
    """Test cases for the non-fatal consistency check."""

    def test_no_warnings_for_clean_set(self):
        assert check_consistency([create_field(FieldType.TEXT, label="A")]) == []

    def test_duplicate_names_warn(self):
        fields = [create_field(FieldType.TEXT, name="a"), create_field(FieldType.TEXT, name="a")]

        warnings = check_consistency(fields)

        assert len(warnings) == 1
        assert warnings[0].severity == Severity.WARNING
        assert warnings[0].subjects == ("a",)

    def test_empty_set_is_consistent(self):
        assert check_consistency([]) == []

    def test_find_duplicate_names_preserves_first_seen_order(self):
        fields = [create_field(FieldType.TEXT, name=n) for n in ["b", "a", "b", "a", "c"]]
        assert find_duplicate_names(fields) == ["b", "a"]


class TestDiagnostics:
    """Test cases for diagnostic constructors."""

    @pytest.mark.parametrize("severity", [Severity.ERROR, Severity.WARNING])
    def test_duplicate_name_severity(self, severity):
        diagnostic = duplicate_name(["a", "b"], severity=severity)

        assert diagnostic.is_error == (severity == Severity.ERROR)
        assert "a, b" in diagnostic.message

    def test_diagnostic_kind_values_are_stable(self):
        assert DiagnosticKind.EMPTY_FIELD_SET.value == "EmptyFieldSet"
        assert DiagnosticKind.DUPLICATE_OPTION_VALUE.value == "DuplicateOptionValue"
