"""
Editing operations over the ordered list of field descriptors.

The FieldSet is owned by the editing surface for the lifetime of one session.
Descriptors are frozen, so every edit swaps in a rebuilt descriptor and the
generator always receives an immutable snapshot.
"""

from typing import Iterator, List, Optional, Tuple
import logging

from .exceptions import FieldNotFoundError
from .field_model import (
    OPTION_FIELD_TYPES,
    FieldDescriptor,
    FieldOption,
    FieldType,
    blank_option,
    create_field,
    derive_field_name,
    derive_option_value,
    replace_field,
)
from .field_kinds import get_field_kind
from .validator import Diagnostic, Severity, check_consistency, duplicate_name

logger = logging.getLogger(__name__)

# Attributes update_field may change directly; label, type and options
# have dedicated operations that keep derived values in sync.
EDITABLE_ATTRIBUTES = frozenset({
    'placeholder',
    'description',
    'is_required',
    'is_disabled',
    'default_value',
    'validation',
})


class FieldSet:
    """Ordered, mutable collection of field descriptors."""

    def __init__(self, fields: Optional[List[FieldDescriptor]] = None):
        self._fields: List[FieldDescriptor] = list(fields or [])

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self) -> Iterator[FieldDescriptor]:
        return iter(list(self._fields))

    def __getitem__(self, index: int) -> FieldDescriptor:
        return self._fields[index]

    def snapshot(self) -> Tuple[FieldDescriptor, ...]:
        """Read-only copy handed to the validator and synthesizer."""
        return tuple(self._fields)

    def index_of(self, field_id: str) -> int:
        for i, descriptor in enumerate(self._fields):
            if descriptor.id == field_id:
                return i
        raise FieldNotFoundError(field_id)

    def get(self, field_id: str) -> FieldDescriptor:
        return self._fields[self.index_of(field_id)]

    def _store(self, index: int, descriptor: FieldDescriptor) -> FieldDescriptor:
        self._fields[index] = descriptor
        return descriptor

    def consistency_warnings(self) -> List[Diagnostic]:
        return check_consistency(self._fields)

    # ------------------------------------------------------------------
    # Field lifecycle
    # ------------------------------------------------------------------

    def add_field(self, field_type: FieldType) -> FieldDescriptor:
        """
        Append a new blank field of the given type.

        Args:
            field_type: Kind of field to add

        Returns:
            The created descriptor
        """
        descriptor = create_field(field_type)
        self._fields.append(descriptor)
        logger.info(f"Added {descriptor.type.value} field {descriptor.id} at position {len(self._fields)}")
        return descriptor

    def remove_field(self, field_id: str) -> FieldDescriptor:
        index = self.index_of(field_id)
        removed = self._fields.pop(index)
        logger.info(f"Removed field {removed.name} ({field_id})")
        return removed

    def clear(self) -> None:
        logger.info(f"Cleared {len(self._fields)} fields")
        self._fields = []

    def move_field(self, from_index: int, to_index: int) -> None:
        """
        Move the field at ``from_index`` so it ends up at ``to_index``.

        Args:
            from_index: Current position
            to_index: Target position (clamped to the list bounds)
        """
        if not 0 <= from_index < len(self._fields):
            raise IndexError(f"No field at position {from_index}")
        to_index = max(0, min(to_index, len(self._fields) - 1))
        if from_index == to_index:
            return
        descriptor = self._fields.pop(from_index)
        self._fields.insert(to_index, descriptor)
        logger.debug(f"Moved field {descriptor.name} from {from_index} to {to_index}")

    def move_up(self, field_id: str) -> None:
        index = self.index_of(field_id)
        if index > 0:
            self.move_field(index, index - 1)

    def move_down(self, field_id: str) -> None:
        index = self.index_of(field_id)
        if index < len(self._fields) - 1:
            self.move_field(index, index + 1)

    # ------------------------------------------------------------------
    # Field attributes
    # ------------------------------------------------------------------

    def update_field(self, field_id: str, **updates) -> FieldDescriptor:
        """
        Apply simple attribute updates to one field.

        Args:
            field_id: Field to update
            **updates: Attribute values, restricted to EDITABLE_ATTRIBUTES

        Returns:
            The updated descriptor

        Raises:
            ValueError: If an attribute is not directly editable, or the
                result breaks a descriptor invariant
        """
        unknown = set(updates) - EDITABLE_ATTRIBUTES
        if unknown:
            raise ValueError(f"Attributes cannot be updated directly: {sorted(unknown)}")

        index = self.index_of(field_id)
        descriptor = self._fields[index]

        if 'default_value' in updates and descriptor.options is not None:
            return self._set_option_default_value(index, updates.pop('default_value'), **updates)

        return self._store(index, replace_field(descriptor, **updates))

    def set_label(self, field_id: str, label: str) -> Optional[Diagnostic]:
        """
        Change a field's label and re-derive its name.

        The edit is rejected when the derived name is already used by another
        field; the set is left unchanged and a DuplicateName diagnostic is
        returned instead.

        Args:
            field_id: Field to relabel
            label: New display label

        Returns:
            None on success, otherwise the rejection diagnostic
        """
        index = self.index_of(field_id)
        descriptor = self._fields[index]
        new_name = derive_field_name(label, descriptor.id)

        if any(other.name == new_name and other.id != field_id for other in self._fields):
            logger.info(f"Rejected label '{label}': field name '{new_name}' is already in use")
            return duplicate_name([new_name], severity=Severity.ERROR)

        self._store(index, replace_field(descriptor, label=label, name=new_name))
        return None

    def change_type(self, field_id: str, field_type: FieldType) -> FieldDescriptor:
        """
        Switch a field to another kind.

        Options are kept when moving between option-bearing kinds, created
        when entering one and dropped when leaving; the default value is
        reset unless the options carry over. Validation bounds and pattern are
        dropped for kinds that do not edit them.
        """
        field_type = FieldType(field_type)
        index = self.index_of(field_id)
        descriptor = self._fields[index]
        if descriptor.type == field_type:
            return descriptor

        updates = {'type': field_type}
        if field_type in OPTION_FIELD_TYPES:
            if descriptor.options is None:
                updates['options'] = [blank_option(0)]
                updates['default_value'] = ""
        else:
            updates['options'] = None
            updates['default_value'] = ""
        if not get_field_kind(field_type).text_like:
            updates['validation'] = None

        logger.debug(f"Changing field {descriptor.name} from {descriptor.type.value} to {field_type.value}")
        return self._store(index, replace_field(descriptor, **updates))

    # ------------------------------------------------------------------
    # Options
    # ------------------------------------------------------------------

    def _option_field(self, field_id: str) -> Tuple[int, FieldDescriptor]:
        index = self.index_of(field_id)
        descriptor = self._fields[index]
        if descriptor.options is None:
            raise ValueError(f"Field '{descriptor.name}' of type {descriptor.type.value} has no options")
        return index, descriptor

    def _store_options(self, index: int, descriptor: FieldDescriptor,
                       options: List[FieldOption]) -> FieldDescriptor:
        default = next((option.value for option in options if option.is_default), "")
        return self._store(index, replace_field(descriptor, options=options, default_value=default))

    def add_option(self, field_id: str) -> FieldDescriptor:
        index, descriptor = self._option_field(field_id)
        options = list(descriptor.options)
        taken = {option.value for option in options}
        position = len(options)
        while blank_option(position).value in taken:
            position += 1
        options.append(blank_option(position))
        return self._store_options(index, descriptor, options)

    def set_option_label(self, field_id: str, option_index: int, label: str) -> FieldDescriptor:
        """
        Relabel one option and re-derive its value.

        If the option is the current default, the field's default value
        follows the new option value.
        """
        index, descriptor = self._option_field(field_id)
        options = list(descriptor.options)
        if not 0 <= option_index < len(options):
            raise IndexError(f"Field '{descriptor.name}' has no option at position {option_index}")

        current = options[option_index]
        options[option_index] = FieldOption(
            label=label,
            value=derive_option_value(label, option_index),
            is_default=current.is_default
        )
        return self._store_options(index, descriptor, options)

    def remove_option(self, field_id: str, option_index: int) -> FieldDescriptor:
        index, descriptor = self._option_field(field_id)
        options = list(descriptor.options)
        if not 0 <= option_index < len(options):
            raise IndexError(f"Field '{descriptor.name}' has no option at position {option_index}")
        removed = options.pop(option_index)
        if removed.is_default:
            logger.debug(f"Removed default option '{removed.value}' from {descriptor.name}; default cleared")
        return self._store_options(index, descriptor, options)

    def set_default_option(self, field_id: str, option_index: Optional[int]) -> FieldDescriptor:
        """
        Mark exactly one option as the default, clearing any previous default.

        Args:
            field_id: Option-bearing field
            option_index: Option to mark, or None to clear the default
        """
        index, descriptor = self._option_field(field_id)
        options = list(descriptor.options)
        if option_index is not None and not 0 <= option_index < len(options):
            raise IndexError(f"Field '{descriptor.name}' has no option at position {option_index}")

        options = [
            FieldOption(label=option.label, value=option.value, is_default=(i == option_index))
            for i, option in enumerate(options)
        ]
        return self._store_options(index, descriptor, options)

    def _set_option_default_value(self, index: int, value: str, **updates) -> FieldDescriptor:
        descriptor = self._fields[index]
        values = [option.value for option in descriptor.options]
        if value and value not in values:
            raise ValueError(f"Default value '{value}' does not match any option of '{descriptor.name}'")

        options = [
            FieldOption(label=option.label, value=option.value, is_default=bool(value) and option.value == value)
            for option in descriptor.options
        ]
        if len([option for option in options if option.is_default]) > 1:
            first = next(i for i, option in enumerate(options) if option.is_default)
            options = [
                FieldOption(label=option.label, value=option.value, is_default=(i == first))
                for i, option in enumerate(options)
            ]
        return self._store(index, replace_field(descriptor, options=options, default_value=value, **updates))
