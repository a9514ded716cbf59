"""
Per-type code generation strategies.

Each ``FieldKind`` knows how to turn one descriptor into:

* a schema clause (base rule, required/optional shaping, bounds, pattern),
* the JSX block rendered inside the generated form,
* the initial value placed in ``useForm({ defaultValues })``,
* the UI primitives it needs imported.

Kinds are registered in ``FIELD_KINDS`` keyed by ``FieldType``; adding a new
field type means adding a subclass and registering it.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Tuple
import logging

from .code_ir import (
    Arrow, ArrayLit, BinOp, Bool, Call, Conditional, Expr, ExprStmt, Ident,
    JsxAttr, JsxElement, JsxExpr, JsxSpread, JsxText, New, Not, Num,
    ObjectLit, ObjectPattern, Param, Str, chain, jsx, member_path,
)
from .code_printer import format_number
from .exceptions import UnsupportedFieldTypeError
from .field_model import FieldDescriptor, FieldType

logger = logging.getLogger(__name__)

# (module, imported name)
ImportSpec = Tuple[str, str]

VAL = Ident('val')
UNDEFINED = Ident('undefined')
FIELD_VALUE = member_path('field.value')
FIELD_ON_CHANGE = member_path('field.onChange')


@dataclass(frozen=True)
class SynthesisOptions:
    """
    Generator settings that come from configuration rather than the form.

    Attributes:
        success_route: Route pushed after a successful submit when the router is enabled
        min_date: Earliest selectable date in generated date pickers (ISO format)
    """
    success_route: str = "/success"
    min_date: str = "1900-01-01"


@dataclass(frozen=True)
class SynthesisContext:
    typescript: bool = True
    use_router: bool = True
    options: SynthesisOptions = field(default_factory=SynthesisOptions)


def _is_empty(value: Expr) -> Expr:
    """``val === undefined || val === ''``"""
    return BinOp('||', BinOp('===', value, UNDEFINED), BinOp('===', value, Str('')))


def _refine(body: Expr, message: str) -> Tuple:
    return ('refine', Arrow((Param('val'),), body), ObjectLit((('message', Str(message)),)))


def _has_text(value: Optional[str]) -> bool:
    return bool(value and value.strip())


class FieldKind:
    """
    Base strategy shared by all field types.

    Subclasses override ``base_rule`` and ``control`` (or ``item_children`` for
    layouts that differ from the label/control/description/message stack).
    """

    field_type: FieldType = None
    text_like = False
    has_options = False

    # ------------------------------------------------------------------
    # Schema
    # ------------------------------------------------------------------

    def base_rule(self, field: FieldDescriptor, ctx: SynthesisContext) -> Expr:
        raise NotImplementedError

    def required_check(self, field: FieldDescriptor) -> Expr:
        """Predicate that holds when a required value is present."""
        present = BinOp('&&', BinOp('!==', VAL, UNDEFINED), BinOp('!==', VAL, Ident('null')))
        if not self.text_like:
            return present
        trimmed = chain(Call(Ident('String'), (VAL,)), 'trim')
        return BinOp('&&', present, BinOp('!==', trimmed, Str('')))

    def finalize_rule(self, rule: Expr, field: FieldDescriptor, ctx: SynthesisContext) -> Expr:
        """Hook for trailing clauses that must run after every refinement."""
        return rule

    def schema_rule(self, field: FieldDescriptor, ctx: SynthesisContext) -> Expr:
        """
        Build the complete schema clause for one field.

        Clause order is fixed: base rule, required or optional, min, max,
        pattern, then any kind-specific trailing clause.

        Args:
            field: Descriptor to generate the clause for
            ctx: Synthesis context (language and framework modes)

        Returns:
            Expression for the right-hand side of ``name: ...``
        """
        rule = self.base_rule(field, ctx)

        if field.is_required:
            rule = chain(rule, _refine(self.required_check(field), f"{field.display_label} is required"))
        else:
            rule = chain(rule, 'optional')

        validation = field.validation
        if validation is not None:
            if validation.min is not None:
                bound = format_number(validation.min)
                check = BinOp('>=', Call(Ident('Number'), (VAL,)), Num(validation.min))
                rule = chain(rule, _refine(BinOp('||', _is_empty(VAL), check), f"Must be at least {bound}"))
            if validation.max is not None:
                bound = format_number(validation.max)
                check = BinOp('<=', Call(Ident('Number'), (VAL,)), Num(validation.max))
                rule = chain(rule, _refine(BinOp('||', _is_empty(VAL), check), f"Must be at most {bound}"))
            if validation.pattern is not None:
                test = chain(New(Ident('RegExp'), (Str(validation.pattern),)), ('test', VAL))
                rule = chain(rule, _refine(
                    BinOp('||', _is_empty(VAL), test),
                    f"Must match the pattern {validation.pattern}"
                ))

        return self.finalize_rule(rule, field, ctx)

    # ------------------------------------------------------------------
    # Default value
    # ------------------------------------------------------------------

    def default_value(self, field: FieldDescriptor, ctx: SynthesisContext) -> Expr:
        if field.default_value:
            return Str(field.default_value)
        return UNDEFINED

    # ------------------------------------------------------------------
    # Imports
    # ------------------------------------------------------------------

    def imports(self, ctx: SynthesisContext) -> List[ImportSpec]:
        return []

    # ------------------------------------------------------------------
    # Markup
    # ------------------------------------------------------------------

    def render_pattern(self) -> ObjectPattern:
        return ObjectPattern((('field', None),))

    def item_class(self) -> Optional[str]:
        return None

    def label(self, field: FieldDescriptor) -> JsxElement:
        return jsx('FormLabel', JsxText(field.display_label))

    def description(self, field: FieldDescriptor) -> List[JsxElement]:
        if _has_text(field.description):
            return [jsx('FormDescription', JsxText(field.description))]
        return []

    def placeholder_attrs(self, field: FieldDescriptor) -> Tuple[JsxAttr, ...]:
        if _has_text(field.placeholder):
            return (JsxAttr('placeholder', field.placeholder),)
        return ()

    def disabled_attrs(self, field: FieldDescriptor) -> Tuple[JsxAttr, ...]:
        return (JsxAttr('disabled'),) if field.is_disabled else ()

    def control(self, field: FieldDescriptor, ctx: SynthesisContext) -> JsxElement:
        raise NotImplementedError

    def item_children(self, field: FieldDescriptor, ctx: SynthesisContext) -> List[JsxElement]:
        return (
            [self.label(field), jsx('FormControl', self.control(field, ctx))]
            + self.description(field)
            + [jsx('FormMessage')]
        )

    def render(self, field: FieldDescriptor, ctx: SynthesisContext) -> JsxElement:
        """
        Build the ``<FormField>`` block bound to ``field.name``.

        Args:
            field: Descriptor to render
            ctx: Synthesis context

        Returns:
            JSX element for the field
        """
        item_attrs = ()
        if self.item_class():
            item_attrs = (JsxAttr('className', self.item_class()),)
        item = JsxElement('FormItem', item_attrs, tuple(self.item_children(field, ctx)))

        return JsxElement('FormField', (
            JsxAttr('control', member_path('form.control')),
            JsxAttr('name', field.name),
            JsxAttr('render', Arrow((Param(self.render_pattern()),), item)),
        ))


class InputKind(FieldKind):
    """Plain ``<Input>`` controls differing only in their ``type`` attribute."""

    text_like = True

    def base_rule(self, field, ctx):
        return chain(Ident('z'), 'string')

    def imports(self, ctx):
        return [("@/components/ui/input", "Input")]

    def control(self, field, ctx):
        attrs = (
            (JsxAttr('type', self.field_type.value),)
            + self.placeholder_attrs(field)
            + self.disabled_attrs(field)
            + (JsxSpread(Ident('field')),)
        )
        return JsxElement('Input', attrs)


class TextKind(InputKind):
    field_type = FieldType.TEXT


class PasswordKind(InputKind):
    field_type = FieldType.PASSWORD


class EmailKind(InputKind):
    field_type = FieldType.EMAIL

    def base_rule(self, field, ctx):
        return chain(Ident('z'), 'string', 'email')


class NumberKind(InputKind):
    """
    Numbers are collected as strings so min/max refinements see the raw input;
    the transform to a number is appended after every other clause.
    """

    field_type = FieldType.NUMBER

    def base_rule(self, field, ctx):
        is_number = Not(Call(Ident('isNaN'), (Call(Ident('Number'), (VAL,)),)))
        return chain(Ident('z'), 'string', _refine(BinOp('||', _is_empty(VAL), is_number), "Must be a number"))

    def finalize_rule(self, rule, field, ctx):
        convert = Conditional(_is_empty(VAL), UNDEFINED, Call(Ident('Number'), (VAL,)))
        return chain(rule, ('transform', Arrow((Param('val'),), convert)))


class TextareaKind(FieldKind):
    field_type = FieldType.TEXTAREA
    text_like = True

    def base_rule(self, field, ctx):
        return chain(Ident('z'), 'string')

    def imports(self, ctx):
        return [("@/components/ui/textarea", "Textarea")]

    def control(self, field, ctx):
        attrs = self.placeholder_attrs(field) + self.disabled_attrs(field) + (JsxSpread(Ident('field')),)
        return JsxElement('Textarea', attrs)


class CheckboxKind(FieldKind):
    field_type = FieldType.CHECKBOX

    def base_rule(self, field, ctx):
        return chain(Ident('z'), 'boolean')

    def default_value(self, field, ctx):
        return Bool(field.default_value == "true")

    def imports(self, ctx):
        return [("@/components/ui/checkbox", "Checkbox")]

    def item_class(self):
        return "flex flex-row items-start space-x-3 space-y-0 rounded-md border p-4"

    def control(self, field, ctx):
        attrs = (
            JsxAttr('checked', FIELD_VALUE),
            JsxAttr('onCheckedChange', FIELD_ON_CHANGE),
        ) + self.disabled_attrs(field)
        return JsxElement('Checkbox', attrs)

    def item_children(self, field, ctx):
        text = jsx(
            'div',
            self.label(field),
            *self.description(field),
            jsx('FormMessage'),
            className="space-y-1 leading-none"
        )
        return [jsx('FormControl', self.control(field, ctx)), text]


class OptionKind(FieldKind):
    """Shared behaviour of select, radio and combobox fields."""

    has_options = True

    def base_rule(self, field, ctx):
        values = tuple(Str(option.value) for option in field.options or [])
        return Call(member_path('z.enum'), (ArrayLit(values),))

    def default_value(self, field, ctx):
        option = field.default_option()
        if option is not None:
            return Str(option.value)
        return UNDEFINED


class SelectKind(OptionKind):
    field_type = FieldType.SELECT

    def imports(self, ctx):
        module = "@/components/ui/select"
        return [(module, name) for name in
                ("Select", "SelectContent", "SelectItem", "SelectTrigger", "SelectValue")]

    def item_children(self, field, ctx):
        items = tuple(
            JsxElement('SelectItem', (JsxAttr('value', option.value),), (JsxText(option.label),))
            for option in field.options or []
        )
        trigger = jsx('FormControl', jsx('SelectTrigger', JsxElement('SelectValue', self.placeholder_attrs(field))))
        select = JsxElement(
            'Select',
            (JsxAttr('onValueChange', FIELD_ON_CHANGE), JsxAttr('defaultValue', FIELD_VALUE))
            + self.disabled_attrs(field),
            (trigger, JsxElement('SelectContent', (), items))
        )
        return [self.label(field), select] + self.description(field) + [jsx('FormMessage')]


class RadioKind(OptionKind):
    field_type = FieldType.RADIO

    def imports(self, ctx):
        return [("@/components/ui/radio-group", "RadioGroup"), ("@/components/ui/radio-group", "RadioGroupItem")]

    def item_class(self):
        return "space-y-3"

    def control(self, field, ctx):
        items = tuple(
            jsx(
                'FormItem',
                jsx('FormControl', JsxElement('RadioGroupItem', (JsxAttr('value', option.value),))),
                jsx('FormLabel', JsxText(option.label), className="font-normal"),
                className="flex items-center space-x-3 space-y-0"
            )
            for option in field.options or []
        )
        attrs = (
            JsxAttr('onValueChange', FIELD_ON_CHANGE),
            JsxAttr('defaultValue', FIELD_VALUE),
            JsxAttr('className', "flex flex-col space-y-1"),
        ) + self.disabled_attrs(field)
        return JsxElement('RadioGroup', attrs, items)


def _trigger_class(base_class: str) -> Call:
    """``cn(base, !field.value && "text-muted-foreground")`` for popover trigger buttons."""
    return Call(
        Ident('cn'),
        (Str(base_class, '"'), BinOp('&&', Not(FIELD_VALUE), Str("text-muted-foreground", '"'))),
        multiline=True
    )


class DateKind(FieldKind):
    field_type = FieldType.DATE

    def base_rule(self, field, ctx):
        return chain(Ident('z'), 'date')

    def default_value(self, field, ctx):
        text = (field.default_value or "").strip()
        if not text:
            return UNDEFINED
        try:
            parsed = date.fromisoformat(text)
        except ValueError:
            logger.debug(f"Ignoring non-ISO default date '{text}' for field {field.name}")
            return UNDEFINED
        return New(Ident('Date'), (Str(parsed.isoformat()),))

    def imports(self, ctx):
        return [
            ("@/components/ui/button", "Button"),
            ("@/components/ui/calendar", "Calendar"),
            ("@/components/ui/popover", "Popover"),
            ("@/components/ui/popover", "PopoverContent"),
            ("@/components/ui/popover", "PopoverTrigger"),
            ("@/lib/utils", "cn"),
            ("date-fns", "format"),
            ("lucide-react", "CalendarIcon"),
        ]

    def item_class(self):
        return "flex flex-col"

    def item_children(self, field, ctx):
        hint = field.placeholder if _has_text(field.placeholder) else "Pick a date"
        shown = Conditional(
            FIELD_VALUE,
            Call(Ident('format'), (FIELD_VALUE, Str("PPP", '"'))),
            jsx('span', JsxText(hint))
        )
        button = JsxElement(
            'Button',
            (JsxAttr('variant', "outline"), JsxAttr('className', _trigger_class("w-[240px] pl-3 text-left font-normal")))
            + self.disabled_attrs(field),
            (JsxExpr(shown), jsx('CalendarIcon', className="ml-auto h-4 w-4 opacity-50"))
        )

        date_param = Ident('date')
        out_of_range = BinOp(
            '||',
            BinOp('>', date_param, New(Ident('Date'))),
            BinOp('<', date_param, New(Ident('Date'), (Str(ctx.options.min_date, '"'),)))
        )
        calendar = JsxElement('Calendar', (
            JsxAttr('mode', "single"),
            JsxAttr('selected', FIELD_VALUE),
            JsxAttr('onSelect', FIELD_ON_CHANGE),
            JsxAttr('disabled', Arrow((Param('date'),), out_of_range)),
            JsxAttr('initialFocus'),
        ))

        popover = jsx(
            'Popover',
            jsx('PopoverTrigger', jsx('FormControl', button), asChild=None),
            jsx('PopoverContent', calendar, className="w-auto p-0", align="start"),
        )
        return [self.label(field), popover] + self.description(field) + [jsx('FormMessage')]


class FileKind(FieldKind):
    field_type = FieldType.FILE

    def base_rule(self, field, ctx):
        if ctx.typescript:
            return Call(member_path('z.instanceof'), (Ident('FileList'),))
        return chain(Ident('z'), 'any')

    def default_value(self, field, ctx):
        return UNDEFINED

    def imports(self, ctx):
        return [("@/components/ui/input", "Input")]

    def render_pattern(self):
        return ObjectPattern((('field', ObjectPattern((('value', None), ('onChange', None)), rest='fieldProps')),))

    def control(self, field, ctx):
        on_change = Arrow((Param('e'),), Call(Ident('onChange'), (member_path('e.target.files'),)))
        attrs = (
            JsxAttr('type', "file"),
            JsxAttr('onChange', on_change),
        ) + self.disabled_attrs(field) + (JsxSpread(Ident('fieldProps')),)
        return JsxElement('Input', attrs)


class ComboboxKind(OptionKind):
    field_type = FieldType.COMBOBOX

    def imports(self, ctx):
        return [
            ("@/components/ui/button", "Button"),
            ("@/components/ui/command", "Command"),
            ("@/components/ui/command", "CommandEmpty"),
            ("@/components/ui/command", "CommandGroup"),
            ("@/components/ui/command", "CommandInput"),
            ("@/components/ui/command", "CommandItem"),
            ("@/components/ui/popover", "Popover"),
            ("@/components/ui/popover", "PopoverContent"),
            ("@/components/ui/popover", "PopoverTrigger"),
            ("@/lib/utils", "cn"),
            ("lucide-react", "CheckIcon"),
            ("lucide-react", "ChevronsUpDown"),
        ]

    def item_class(self):
        return "flex flex-col"

    def selected_label(self, field: FieldDescriptor) -> Expr:
        """Map the current value back to its option label, falling back to the raw value."""
        label: Expr = FIELD_VALUE
        for option in reversed(field.options or []):
            label = Conditional(BinOp('===', FIELD_VALUE, Str(option.value, '"')), Str(option.label, '"'), label)
        return label

    def item_children(self, field, ctx):
        hint = field.placeholder if _has_text(field.placeholder) else "Select an option"
        shown = Conditional(FIELD_VALUE, self.selected_label(field), Str(hint, '"'))
        button = JsxElement(
            'Button',
            (
                JsxAttr('variant', "outline"),
                JsxAttr('role', "combobox"),
                JsxAttr('className', _trigger_class("w-[200px] justify-between")),
            ) + self.disabled_attrs(field),
            (JsxExpr(shown), jsx('ChevronsUpDown', className="ml-2 h-4 w-4 shrink-0 opacity-50"))
        )

        items = []
        for option in field.options or []:
            select = Arrow((), (ExprStmt(Call(
                member_path('form.setValue'),
                (Str(field.name, '"'), Str(option.value, '"'))
            )),))
            check_class = Call(Ident('cn'), (
                Str("mr-2 h-4 w-4", '"'),
                Conditional(
                    BinOp('===', FIELD_VALUE, Str(option.value, '"')),
                    Str("opacity-100", '"'),
                    Str("opacity-0", '"')
                ),
            ), multiline=True)
            items.append(JsxElement(
                'CommandItem',
                (JsxAttr('value', option.label), JsxAttr('onSelect', select)),
                (JsxElement('CheckIcon', (JsxAttr('className', check_class),)), JsxText(option.label))
            ))

        command = jsx(
            'Command',
            JsxElement('CommandInput', (JsxAttr('placeholder', "Search..."),)),
            jsx('CommandEmpty', JsxText("No option found.")),
            JsxElement('CommandGroup', (), tuple(items)),
        )
        popover = jsx(
            'Popover',
            jsx('PopoverTrigger', jsx('FormControl', button), asChild=None),
            jsx('PopoverContent', command, className="w-[200px] p-0"),
        )
        return [self.label(field), popover] + self.description(field) + [jsx('FormMessage')]


FIELD_KINDS: Dict[FieldType, FieldKind] = {
    kind.field_type: kind
    for kind in (
        TextKind(), TextareaKind(), NumberKind(), EmailKind(), PasswordKind(),
        SelectKind(), CheckboxKind(), RadioKind(), DateKind(), FileKind(),
        ComboboxKind(),
    )
}


def get_field_kind(field_type) -> FieldKind:
    """
    Look up the strategy for a field type.

    Args:
        field_type: FieldType member (or its string value)

    Returns:
        Registered FieldKind

    Raises:
        UnsupportedFieldTypeError: If no kind is registered for the type
    """
    try:
        return FIELD_KINDS[FieldType(field_type)]
    except (KeyError, ValueError):
        raise UnsupportedFieldTypeError(field_type)
