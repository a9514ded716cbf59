"""
Streamlit editing surface for the form code builder.

The view only collects edits and forwards them to the session's FieldSet;
validation and code generation happen in formgen.generator.
"""

import streamlit as st
import logging
import re
from datetime import date
from typing import Any, Dict, List, Optional

from .config_loader import get_synthesis_options
from .error_handler import ErrorHandler, ErrorType
from .field_kinds import get_field_kind
from .field_model import FIELD_TYPE_LABELS, FieldDescriptor, FieldType, FieldValidation
from .field_set import FieldSet
from .generator import generate_form_code
from .session_manager import SessionManager
from .synthesizer import component_name
from .ui_feedback import Notify, UserFeedback

logger = logging.getLogger(__name__)

LANGUAGES = ["TypeScript", "JavaScript"]
FRAMEWORKS = ["Next.js", "React"]


def _parse_bound(text: str, label: str) -> Optional[float]:
    """Parse an optional numeric bound typed by the user."""
    text = (text or "").strip()
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        raise ValueError(f"{label} must be a number, got '{text}'")


def _format_bound(value: Optional[float]) -> str:
    if value is None:
        return ""
    return str(int(value)) if float(value).is_integer() else str(value)


class FormBuilderView:
    """Form builder page: form details, field editors and generated code."""

    @staticmethod
    def render(config: Dict[str, Any]) -> None:
        """Render the whole builder page."""
        SessionManager.initialize(config)
        field_set = SessionManager.get_field_set()

        FormBuilderView._render_form_details()
        st.divider()
        FormBuilderView._render_add_field(field_set)

        ErrorHandler.report_diagnostics(field_set.consistency_warnings())

        if not len(field_set):
            st.info("No fields yet. Choose a field type and click 'Add Field' to get started.")

        fields = list(field_set)
        for index, descriptor in enumerate(fields):
            FormBuilderView._render_field_editor(field_set, index, descriptor, len(fields))

        st.divider()
        just_generated = FormBuilderView._render_actions(field_set, config)
        FormBuilderView._render_generated_code(show_diagnostics=not just_generated)

    @staticmethod
    def _render_form_details() -> None:
        st.subheader("📝 Form Details")
        details = SessionManager.get_form_details()

        col1, col2 = st.columns([2, 1])
        with col1:
            form_name = st.text_input(
                "Form Name",
                value=details['form_name'],
                key="form_name_input",
                help="Shown as the card title; also becomes the component name"
            )
            form_description = st.text_area(
                "Form Description",
                value=details['form_description'],
                key="form_description_input",
                height=68
            )
        with col2:
            language = st.radio(
                "Language",
                options=LANGUAGES,
                index=0 if details['typescript'] else 1,
                key="language_input",
                horizontal=True
            )
            framework = st.radio(
                "Framework",
                options=FRAMEWORKS,
                index=0 if details['use_router'] else 1,
                key="framework_input",
                horizontal=True,
                help="Next.js adds a router redirect after a successful submit"
            )
            st.caption(f"Component: `{component_name(form_name)}`")

        SessionManager.set_form_details(
            form_name=form_name,
            form_description=form_description,
            typescript=(language == "TypeScript"),
            use_router=(framework == "Next.js")
        )

    @staticmethod
    def _render_add_field(field_set: FieldSet) -> None:
        st.subheader("🏷️ Fields")
        col1, col2, col3 = st.columns([2, 1, 1])

        with col1:
            field_type = st.selectbox(
                "Field Type",
                options=list(FieldType),
                format_func=lambda t: FIELD_TYPE_LABELS[t],
                key="new_field_type",
                label_visibility="collapsed"
            )
        with col2:
            if st.button("➕ Add Field", type="primary", key="add_field_btn"):
                descriptor = field_set.add_field(field_type)
                SessionManager.field_edited()
                Notify.success(f"Added {FIELD_TYPE_LABELS[descriptor.type]} field")
                st.rerun()
        with col3:
            st.metric("Total Fields", len(field_set))

    @staticmethod
    def _render_field_editor(field_set: FieldSet, index: int, field: FieldDescriptor, total: int) -> None:
        """Render the expander for one field and apply any edits made in it."""
        field_id = field.id
        required_indicator = " 🔴" if field.is_required else ""
        header = f"{index + 1}. {field.label or 'Untitled field'} ({FIELD_TYPE_LABELS[field.type]}){required_indicator}"

        with st.expander(header, expanded=not field.label):
            col1, col2, col3, col4 = st.columns([1, 1, 1, 3])
            with col1:
                if st.button("🔼", key=f"move_up_{field_id}", help="Move field up", disabled=(index == 0)):
                    field_set.move_up(field_id)
                    SessionManager.field_edited()
                    st.rerun()
            with col2:
                if st.button("🔽", key=f"move_down_{field_id}", help="Move field down",
                             disabled=(index == total - 1)):
                    field_set.move_down(field_id)
                    SessionManager.field_edited()
                    st.rerun()
            with col3:
                if st.button("🗑️", key=f"delete_{field_id}", help="Delete this field"):
                    field_set.remove_field(field_id)
                    SessionManager.field_edited()
                    Notify.info(f"Removed field {field.display_label}")
                    st.rerun()
            with col4:
                st.caption(f"Name: `{field.name}`")

            col1, col2 = st.columns(2)
            with col1:
                new_label = st.text_input("Label", value=field.label, key=f"label_{field_id}")
                new_type = st.selectbox(
                    "Type",
                    options=list(FieldType),
                    index=list(FieldType).index(field.type),
                    format_func=lambda t: FIELD_TYPE_LABELS[t],
                    key=f"type_{field_id}"
                )
            with col2:
                new_placeholder = st.text_input("Placeholder", value=field.placeholder or "",
                                                key=f"placeholder_{field_id}")
                new_description = st.text_input("Description", value=field.description or "",
                                                key=f"description_{field_id}")

            col1, col2 = st.columns(2)
            with col1:
                new_required = st.checkbox("Required", value=field.is_required, key=f"required_{field_id}")
            with col2:
                new_disabled = st.checkbox("Disabled", value=field.is_disabled, key=f"disabled_{field_id}")

            if new_label != field.label:
                rejection = field_set.set_label(field_id, new_label)
                if rejection is not None:
                    ErrorHandler.report_diagnostics([rejection])
                else:
                    SessionManager.field_edited()

            if new_type != field.type:
                field_set.change_type(field_id, new_type)
                SessionManager.field_edited()
                st.rerun()

            updates = {}
            if new_placeholder != (field.placeholder or ""):
                updates['placeholder'] = new_placeholder or None
            if new_description != (field.description or ""):
                updates['description'] = new_description or None
            if new_required != field.is_required:
                updates['is_required'] = new_required
            if new_disabled != field.is_disabled:
                updates['is_disabled'] = new_disabled
            FormBuilderView._apply_updates(field_set, field_id, updates)

            current = field_set.get(field_id)
            if current.has_options:
                FormBuilderView._render_options_editor(field_set, current)
            else:
                FormBuilderView._render_default_editor(field_set, current)

            if get_field_kind(current.type).text_like:
                FormBuilderView._render_validation_editor(field_set, current)

    @staticmethod
    def _apply_updates(field_set: FieldSet, field_id: str, updates: Dict[str, Any]) -> None:
        if not updates:
            return
        ErrorHandler.with_error_handling(
            lambda: field_set.update_field(field_id, **updates),
            context=f"updating field {field_id}",
            error_type=ErrorType.USER_INPUT
        )
        SessionManager.field_edited()

    @staticmethod
    def _render_default_editor(field_set: FieldSet, field: FieldDescriptor) -> None:
        key = f"default_{field.id}_{field.type.value}"

        if field.type == FieldType.FILE:
            return

        if field.type == FieldType.CHECKBOX:
            checked = st.checkbox("Checked by default", value=(field.default_value == "true"), key=key)
            new_default = "true" if checked else ""
        elif field.type == FieldType.DATE:
            new_default = st.text_input("Default Date (YYYY-MM-DD)", value=field.default_value, key=key)
            if new_default.strip():
                try:
                    date.fromisoformat(new_default.strip())
                except ValueError:
                    st.warning("⚠️ Not an ISO date; the generated form will start empty")
        else:
            new_default = st.text_input("Default Value", value=field.default_value, key=key)

        if new_default != field.default_value:
            FormBuilderView._apply_updates(field_set, field.id, {'default_value': new_default})

    @staticmethod
    def _render_options_editor(field_set: FieldSet, field: FieldDescriptor) -> None:
        """Edit option labels, remove options and pick the default option."""
        st.markdown("**Options**")
        options = list(field.options or [])
        # Keys include the option count so rows never inherit a removed option's widget state
        prefix = f"option_{field.id}_{len(options)}"

        for i, option in enumerate(options):
            col1, col2, col3 = st.columns([3, 2, 1])
            with col1:
                new_label = st.text_input(
                    f"Option {i + 1}",
                    value=option.label,
                    key=f"{prefix}_{i}",
                    label_visibility="collapsed",
                    placeholder=f"Option {i + 1} label"
                )
            with col2:
                st.caption(f"value: `{option.value}`" + (" ⭐" if option.is_default else ""))
            with col3:
                if st.button("✖️", key=f"{prefix}_remove_{i}", help="Remove option"):
                    field_set.remove_option(field.id, i)
                    SessionManager.field_edited()
                    st.rerun()

            if new_label != option.label:
                field_set.set_option_label(field.id, i, new_label)
                SessionManager.field_edited()

        if st.button("➕ Add Option", key=f"add_option_{field.id}"):
            field_set.add_option(field.id)
            SessionManager.field_edited()
            st.rerun()

        current = field_set.get(field.id)
        choices: List[Optional[int]] = [None] + list(range(len(current.options or [])))
        default_index = next((i for i, o in enumerate(current.options or []) if o.is_default), None)
        selected = st.selectbox(
            "Default Option",
            options=choices,
            index=choices.index(default_index),
            format_func=lambda i: "None" if i is None else (current.options[i].label or f"Option {i + 1}"),
            key=f"{prefix}_default"
        )
        if selected != default_index:
            field_set.set_default_option(field.id, selected)
            SessionManager.field_edited()

    @staticmethod
    def _render_validation_editor(field_set: FieldSet, field: FieldDescriptor) -> None:
        validation = field.validation or FieldValidation()
        st.markdown("**Validation**")

        col1, col2, col3 = st.columns(3)
        with col1:
            min_text = st.text_input("Min", value=_format_bound(validation.min), key=f"min_{field.id}")
        with col2:
            max_text = st.text_input("Max", value=_format_bound(validation.max), key=f"max_{field.id}")
        with col3:
            pattern = st.text_input("Pattern (regex)", value=validation.pattern or "", key=f"pattern_{field.id}")

        if pattern.strip():
            try:
                re.compile(pattern)
            except re.error as e:
                st.warning(f"⚠️ Pattern may not be a valid regular expression: {e}")

        try:
            new_validation = FieldValidation(
                min=_parse_bound(min_text, "Min"),
                max=_parse_bound(max_text, "Max"),
                pattern=pattern or None
            )
        except ValueError as e:
            UserFeedback.error(str(e))
            return

        if new_validation != validation:
            value = None if new_validation.is_empty() else new_validation
            FormBuilderView._apply_updates(field_set, field.id, {'validation': value})

    @staticmethod
    def _render_actions(field_set: FieldSet, config: Dict[str, Any]) -> bool:
        """Render generate/clear buttons. Returns True when code was generated in this run."""
        col1, col2 = st.columns([3, 1])

        with col2:
            if st.button("🗑️ Clear All", key="clear_all_btn", disabled=not len(field_set)):
                field_set.clear()
                SessionManager.field_edited()
                Notify.info("All fields removed")
                st.rerun()

        with col1:
            if not st.button("🚀 Generate Form Code", type="primary", key="generate_btn"):
                return False

        details = SessionManager.get_form_details()
        result = ErrorHandler.with_error_handling(
            lambda: generate_form_code(
                details['form_name'],
                details['form_description'],
                field_set.snapshot(),
                typescript=details['typescript'],
                use_router=details['use_router'],
                options=get_synthesis_options(config)
            ),
            context="generating form code",
            error_type=ErrorType.GENERATION
        )
        if result is None:
            return True

        SessionManager.set_generated_code(result.code, result.errors)
        ErrorHandler.report_diagnostics(result.diagnostics)
        if result.ok:
            Notify.success("Form code generated")
        return True

    @staticmethod
    def _render_generated_code(show_diagnostics: bool = True) -> None:
        stored = SessionManager.get_last_diagnostics()
        if show_diagnostics and stored:
            UserFeedback.show_validation_results(
                [d.message for d in stored if d.is_error],
                [d.message for d in stored if not d.is_error]
            )

        code = SessionManager.get_generated_code()
        if code is None:
            return

        details = SessionManager.get_form_details()
        extension = "tsx" if details['typescript'] else "jsx"
        name = component_name(details['form_name'])

        component_tab, schema_tab = st.tabs(["⚛️ Component", "🛡️ Schema"])
        with component_tab:
            st.code(code.component_text, language=extension)
            st.download_button(
                "⬇️ Download Component",
                data=code.component_text,
                file_name=f"{name}.{extension}",
                mime="text/plain",
                key="download_component"
            )
        with schema_tab:
            st.code(code.schema_text, language="typescript" if details['typescript'] else "javascript")
            st.download_button(
                "⬇️ Download Schema",
                data=code.schema_text,
                file_name=f"form-schema.{'ts' if details['typescript'] else 'js'}",
                mime="text/plain",
                key="download_schema"
            )
