"""
Unit tests for the validate-then-synthesize pipeline.
"""

from formgen.field_kinds import SynthesisOptions
from formgen.field_model import FieldOption, FieldType, create_field
from formgen.generator import generate_form_code
from formgen.validator import DiagnosticKind


class TestGenerateFormCode:
    """Test cases for generate_form_code."""

    def test_empty_field_set_produces_no_code(self):
        result = generate_form_code("Empty", "", [])

        assert not result.ok
        assert result.code is None
        assert [d.kind for d in result.errors] == [DiagnosticKind.EMPTY_FIELD_SET]

    def test_invalid_fields_block_generation(self):
        fields = [create_field(FieldType.TEXT, name="untitled")]

        result = generate_form_code("Form", "", fields)

        assert result.code is None
        assert result.errors[0].kind == DiagnosticKind.MISSING_LABEL

    def test_valid_fields_generate_code(self):
        fields = [create_field(FieldType.EMAIL, label="Work Email", is_required=True)]

        result = generate_form_code("Contact Us", "", fields)

        assert result.ok
        assert result.errors == []
        assert "export function ContactUs()" in result.code.component_text
        assert "work_email" in result.code.schema_text

    def test_warnings_do_not_block_generation(self):
        fields = [create_field(
            FieldType.SELECT,
            label="Color",
            options=[FieldOption(label="Red", value="red"), FieldOption(label="RED", value="red")]
        )]

        result = generate_form_code("Colors", "", fields)

        assert result.ok
        assert [d.kind for d in result.warnings] == [DiagnosticKind.DUPLICATE_OPTION_VALUE]

    def test_modes_and_options_are_forwarded(self):
        fields = [create_field(FieldType.DATE, label="Start")]

        result = generate_form_code(
            "Booking", "", fields,
            typescript=False,
            use_router=True,
            options=SynthesisOptions(success_route="/booked", min_date="2020-01-01")
        )

        text = result.code.component_text
        assert 'router.push("/booked")' in text
        assert 'new Date("2020-01-01")' in text
        assert "z.infer" not in text
