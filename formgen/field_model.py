"""
Field descriptor models for the form code builder.
Defines the Pydantic models that describe one form field and the pure
identifier derivation used for field names and option values.
"""

from enum import Enum
from typing import List, Optional
import re
import uuid
import logging

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

logger = logging.getLogger(__name__)

_INVALID_IDENTIFIER_CHARS = re.compile(r'[^a-z0-9_]')
_VALID_IDENTIFIER_CHAR = re.compile(r'[a-z0-9_]')


class FieldType(str, Enum):
    """Closed set of field kinds the builder can generate code for."""

    TEXT = "text"
    TEXTAREA = "textarea"
    NUMBER = "number"
    EMAIL = "email"
    PASSWORD = "password"
    SELECT = "select"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    DATE = "date"
    FILE = "file"
    COMBOBOX = "combobox"


FIELD_TYPE_LABELS = {
    FieldType.TEXT: "Text",
    FieldType.TEXTAREA: "Textarea",
    FieldType.NUMBER: "Number",
    FieldType.EMAIL: "Email",
    FieldType.PASSWORD: "Password",
    FieldType.SELECT: "Select",
    FieldType.CHECKBOX: "Checkbox",
    FieldType.RADIO: "Radio",
    FieldType.DATE: "Date",
    FieldType.FILE: "File Upload",
    FieldType.COMBOBOX: "Combobox",
}

OPTION_FIELD_TYPES = frozenset({FieldType.SELECT, FieldType.RADIO, FieldType.COMBOBOX})


def derive_identifier(text: str, fallback: str) -> str:
    """
    Derive a machine identifier from display text.

    The text is lower-cased and every character outside ``[a-z0-9_]`` is
    replaced with an underscore. Empty input, or input without a single
    valid character, yields ``fallback`` instead.

    Args:
        text: Display text (a field label or option label)
        fallback: Identifier to use when nothing usable can be derived

    Returns:
        Normalized identifier
    """
    lowered = (text or "").lower()
    if not _VALID_IDENTIFIER_CHAR.search(lowered):
        return fallback
    return _INVALID_IDENTIFIER_CHARS.sub('_', lowered)


def field_name_fallback(field_id: str) -> str:
    """Synthetic name used when a label yields no identifier."""
    return f"field_{_INVALID_IDENTIFIER_CHARS.sub('_', field_id.lower())}"


def option_value_fallback(index: int) -> str:
    """Synthetic option value used when an option label yields no identifier."""
    return f"option_{index}"


def derive_field_name(label: str, field_id: str) -> str:
    return derive_identifier(label, field_name_fallback(field_id))


def derive_option_value(label: str, index: int) -> str:
    return derive_identifier(label, option_value_fallback(index))


def new_field_id() -> str:
    """Generate an opaque, identifier-safe field id."""
    return uuid.uuid4().hex


class FieldOption(BaseModel):
    """One selectable entry of a select, radio or combobox field."""

    model_config = ConfigDict(frozen=True)

    label: str = ""
    value: str = ""
    is_default: bool = False


def blank_option(index: int) -> FieldOption:
    """Unlabeled option at position ``index``, valued with its positional fallback."""
    return FieldOption(value=option_value_fallback(index))


class FieldValidation(BaseModel):
    """Optional numeric bounds and pattern applied to a field's value."""

    model_config = ConfigDict(frozen=True)

    min: Optional[float] = Field(default=None, allow_inf_nan=False)
    max: Optional[float] = Field(default=None, allow_inf_nan=False)
    pattern: Optional[str] = None

    @field_validator('pattern')
    @classmethod
    def _blank_pattern_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v

    @model_validator(mode='after')
    def _check_bounds(self) -> 'FieldValidation':
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError(f"min ({self.min}) must not exceed max ({self.max})")
        return self

    def is_empty(self) -> bool:
        return self.min is None and self.max is None and self.pattern is None


class FieldDescriptor(BaseModel):
    """
    Configuration of one logical form field.

    Descriptors are immutable; editing operations produce validated copies
    through ``replace_field``.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_field_id)
    type: FieldType
    label: str = ""
    name: str = ""
    placeholder: Optional[str] = None
    description: Optional[str] = None
    is_required: bool = False
    is_disabled: bool = False
    default_value: str = ""
    options: Optional[List[FieldOption]] = None
    validation: Optional[FieldValidation] = None

    @model_validator(mode='after')
    def _check_options(self) -> 'FieldDescriptor':
        if self.options is None:
            return self

        defaults = [option for option in self.options if option.is_default]
        if len(defaults) > 1:
            raise ValueError(f"Field '{self.name}' has {len(defaults)} default options; at most one is allowed")

        if self.default_value:
            values = [option.value for option in self.options]
            if self.default_value not in values:
                raise ValueError(
                    f"Default value '{self.default_value}' of field '{self.name}' "
                    f"does not reference an existing option"
                )
        return self

    @property
    def has_options(self) -> bool:
        return self.type in OPTION_FIELD_TYPES

    @property
    def display_label(self) -> str:
        """Label shown to end users, falling back to the machine name."""
        return self.label or self.name

    def default_option(self) -> Optional[FieldOption]:
        for option in self.options or []:
            if option.is_default:
                return option
        return None


def replace_field(field: FieldDescriptor, **updates) -> FieldDescriptor:
    """
    Return a copy of ``field`` with ``updates`` applied and all model checks re-run.

    ``model_copy(update=...)`` skips validation, so copies are rebuilt from a dump.
    """
    data = field.model_dump()
    data.update(updates)
    return FieldDescriptor.model_validate(data)


def create_field(field_type: FieldType, field_id: Optional[str] = None, **attributes) -> FieldDescriptor:
    """
    Create a descriptor with a derived name and type-appropriate options.

    Args:
        field_type: Kind of field to create
        field_id: Optional explicit id (a fresh one is generated otherwise)
        **attributes: Additional descriptor attributes (label, placeholder, ...)

    Returns:
        New FieldDescriptor
    """
    field_type = FieldType(field_type)
    field_id = field_id or new_field_id()
    label = attributes.pop('label', "")

    if 'options' not in attributes and field_type in OPTION_FIELD_TYPES:
        attributes['options'] = [blank_option(0)]

    return FieldDescriptor(
        id=field_id,
        type=field_type,
        label=label,
        name=attributes.pop('name', None) or derive_field_name(label, field_id),
        **attributes
    )
