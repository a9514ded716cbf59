"""
Code synthesizer: turns an ordered descriptor list into zod schema text and a
React component source file.

Synthesis is pure and deterministic. It assumes the descriptor set already
passed ``formgen.validator.validate``.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Set
import logging
import re

from .code_ir import (
    Blank, Call, ExprStmt, FunctionDecl, Ident, ImportDecl, JsxAttr,
    JsxElement, JsxSpread, JsxText, LineComment, Module, ObjectLit, Param,
    Return, Str, VarDecl, call, jsx, member_path,
)
from .code_printer import CodePrinter
from .field_kinds import ImportSpec, SynthesisContext, SynthesisOptions, get_field_kind
from .field_model import FieldDescriptor

logger = logging.getLogger(__name__)

DEFAULT_COMPONENT_NAME = "GeneratedForm"

FORM_TYPE = "z.infer<typeof formSchema>"

# Canonical import order; kinds only choose which of these names appear.
IMPORT_ORDER = [
    ("@hookform/resolvers/zod", ("zodResolver",)),
    ("react-hook-form", ("useForm",)),
    ("zod", ()),
    ("next/router", ("useRouter",)),
    None,
    ("@/components/ui/button", ("Button",)),
    ("@/components/ui/card", ("Card", "CardContent", "CardDescription", "CardFooter", "CardHeader", "CardTitle")),
    ("@/components/ui/form", (
        "Form", "FormControl", "FormDescription", "FormField", "FormItem", "FormLabel", "FormMessage",
    )),
    ("@/components/ui/input", ("Input",)),
    ("@/components/ui/textarea", ("Textarea",)),
    ("@/components/ui/checkbox", ("Checkbox",)),
    ("@/components/ui/radio-group", ("RadioGroup", "RadioGroupItem")),
    ("@/components/ui/select", ("Select", "SelectContent", "SelectItem", "SelectTrigger", "SelectValue")),
    ("@/components/ui/calendar", ("Calendar",)),
    ("@/components/ui/popover", ("Popover", "PopoverContent", "PopoverTrigger")),
    ("@/components/ui/command", ("Command", "CommandEmpty", "CommandGroup", "CommandInput", "CommandItem")),
    ("@/lib/utils", ("cn",)),
    ("date-fns", ("format",)),
    ("lucide-react", ("CalendarIcon", "CheckIcon", "ChevronsUpDown")),
]

# Imports every generated component needs regardless of its fields
BASE_IMPORTS = [
    ("@hookform/resolvers/zod", "zodResolver"),
    ("react-hook-form", "useForm"),
    ("@/components/ui/button", "Button"),
    ("@/components/ui/card", "Card"),
    ("@/components/ui/card", "CardContent"),
    ("@/components/ui/card", "CardFooter"),
    ("@/components/ui/card", "CardHeader"),
    ("@/components/ui/card", "CardTitle"),
    ("@/components/ui/form", "Form"),
    ("@/components/ui/form", "FormControl"),
    ("@/components/ui/form", "FormField"),
    ("@/components/ui/form", "FormItem"),
    ("@/components/ui/form", "FormLabel"),
    ("@/components/ui/form", "FormMessage"),
]


@dataclass(frozen=True)
class GeneratedCode:
    """The two emitted artifacts."""
    schema_text: str
    component_text: str


def component_name(form_name: str, default: str = DEFAULT_COMPONENT_NAME) -> str:
    """
    Derive the exported component identifier from the form name.

    Every character outside ``[A-Za-z0-9_]`` is removed; an empty result falls
    back to ``default`` and a leading digit is prefixed with ``Form``.

    Args:
        form_name: Display name of the form
        default: Name used when nothing usable remains

    Returns:
        Valid JavaScript identifier
    """
    name = re.sub(r'[^A-Za-z0-9_]', '', form_name or "")
    if not name:
        return default
    if name[0].isdigit():
        return f"Form{name}"
    return name


def collect_imports(fields: Sequence[FieldDescriptor], ctx: SynthesisContext,
                    form_description: str = "") -> List:
    """
    Compute the import block for the component.

    Args:
        fields: Descriptors being rendered
        ctx: Synthesis context
        form_description: Form subtitle (adds CardDescription when present)

    Returns:
        ImportDecl and Blank items in canonical order
    """
    wanted: Set[ImportSpec] = set(BASE_IMPORTS)
    if ctx.use_router:
        wanted.add(("next/router", "useRouter"))
    if form_description and form_description.strip():
        wanted.add(("@/components/ui/card", "CardDescription"))
    for descriptor in fields:
        wanted.update(get_field_kind(descriptor.type).imports(ctx))
        if descriptor.description and descriptor.description.strip():
            wanted.add(("@/components/ui/form", "FormDescription"))

    known = set()
    for entry in IMPORT_ORDER:
        if entry is not None:
            module, names = entry
            known.update((module, name) for name in names)
    unknown = wanted - known
    if unknown:
        raise ValueError(f"Imports without a canonical position: {sorted(unknown)}")

    items = []
    for entry in IMPORT_ORDER:
        if entry is None:
            items.append(Blank())
            continue
        module, names = entry
        if module == "zod":
            items.append(ImportDecl(module, namespace="z"))
            continue
        used = tuple(name for name in names if (module, name) in wanted)
        if used:
            items.append(ImportDecl(module, used))
    return items


def build_schema(fields: Sequence[FieldDescriptor], ctx: SynthesisContext) -> VarDecl:
    """``const formSchema = z.object({...})`` with one clause per field, in input order."""
    entries = tuple(
        (descriptor.name, get_field_kind(descriptor.type).schema_rule(descriptor, ctx))
        for descriptor in fields
    )
    return VarDecl('formSchema', Call(member_path('z.object'), (ObjectLit(entries, multiline=True),)))


def build_default_values(fields: Sequence[FieldDescriptor], ctx: SynthesisContext) -> ObjectLit:
    return ObjectLit(
        tuple((d.name, get_field_kind(d.type).default_value(d, ctx)) for d in fields),
        multiline=True
    )


def build_card(title: str, form_description: str, fields: Sequence[FieldDescriptor],
               ctx: SynthesisContext) -> JsxElement:
    header = [jsx('CardTitle', JsxText(title), className="text-2xl font-bold")]
    if form_description and form_description.strip():
        header.append(jsx('CardDescription', JsxText(form_description)))

    submit = call('form.handleSubmit', Ident('onSubmit'))
    form = JsxElement(
        'form',
        (JsxAttr('onSubmit', submit), JsxAttr('className', "space-y-8")),
        tuple(get_field_kind(d.type).render(d, ctx) for d in fields)
    )

    return jsx(
        'Card',
        jsx('CardHeader', *header),
        jsx('CardContent', JsxElement('Form', (JsxSpread(Ident('form')),), (form,))),
        jsx('CardFooter', jsx('Button', JsxText("Submit"), type="submit", onClick=submit, className="w-full")),
        className="w-full max-w-2xl mx-auto"
    )


def build_component(form_name: str, form_description: str, fields: Sequence[FieldDescriptor],
                    ctx: SynthesisContext) -> Module:
    """
    Assemble the component module: imports, schema declaration and the exported function.
    """
    name = component_name(form_name)
    title = form_name.strip() if form_name and form_name.strip() else name

    use_form = Call(
        Ident('useForm'),
        (ObjectLit((
            ('resolver', call('zodResolver', Ident('formSchema'))),
            ('defaultValues', build_default_values(fields, ctx)),
        ), multiline=True),),
        type_args=(FORM_TYPE,) if ctx.typescript else ()
    )

    body = []
    if ctx.use_router:
        body.append(VarDecl('router', call('useRouter')))
    body.append(VarDecl('form', use_form))
    body.append(Blank())

    submit_body = [
        LineComment("TODO: Implement form submission"),
        ExprStmt(call('console.log', Ident('values'))),
    ]
    if ctx.use_router:
        submit_body.append(ExprStmt(call('router.push', Str(ctx.options.success_route, '"'))))
    else:
        submit_body.append(LineComment("Navigate to success page"))
    body.append(FunctionDecl(
        'onSubmit',
        (Param('values', FORM_TYPE if ctx.typescript else None),),
        tuple(submit_body)
    ))
    body.append(Blank())
    body.append(Return(build_card(title, form_description, fields, ctx)))

    items = collect_imports(fields, ctx, form_description)
    items += [Blank(), build_schema(fields, ctx), Blank(), FunctionDecl(name, (), tuple(body), exported=True)]
    return Module(tuple(items))


def synthesize(form_name: str, form_description: str, fields: Sequence[FieldDescriptor],
               typescript: bool = True, use_router: bool = True,
               options: Optional[SynthesisOptions] = None) -> GeneratedCode:
    """
    Generate the schema declaration and component source for a form.

    Args:
        form_name: Display name; also the source of the component identifier
        form_description: Optional subtitle shown in the card header
        fields: Validated descriptors, in display order
        typescript: Emit TypeScript generics and annotations
        use_router: Navigate with next/router after submit
        options: Configuration-driven settings (success route, date floor)

    Returns:
        GeneratedCode with the schema text and the full component text

    Raises:
        UnsupportedFieldTypeError: If a descriptor has no registered field kind
    """
    ctx = SynthesisContext(typescript=typescript, use_router=use_router, options=options or SynthesisOptions())
    fields = tuple(fields)
    printer = CodePrinter()

    schema_text = printer.print_module(Module((build_schema(fields, ctx),)))
    component_text = printer.print_module(build_component(form_name, form_description, fields, ctx))

    logger.debug(
        f"Synthesized {component_name(form_name)} with {len(fields)} fields "
        f"(typescript={typescript}, use_router={use_router})"
    )
    return GeneratedCode(schema_text=schema_text, component_text=component_text)


__all__ = [
    'DEFAULT_COMPONENT_NAME',
    'GeneratedCode',
    'SynthesisOptions',
    'build_component',
    'build_schema',
    'collect_imports',
    'component_name',
    'synthesize',
]
