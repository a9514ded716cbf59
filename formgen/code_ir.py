"""
Intermediate representation of the emitted JavaScript/TypeScript.

Field kinds and the synthesizer build these nodes; ``CodePrinter`` turns them
into text. User-supplied strings only ever enter the tree as ``Str``,
``JsxText`` or string-valued ``JsxAttr`` nodes, so escaping happens in exactly
one place.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union


# ----------------------------------------------------------------------
# Expressions
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class Ident:
    name: str


@dataclass(frozen=True)
class Str:
    """String literal. ``quote`` picks the delimiter used when printing."""
    value: str
    quote: str = "'"


@dataclass(frozen=True)
class Num:
    value: float


@dataclass(frozen=True)
class Bool:
    value: bool


@dataclass(frozen=True)
class Member:
    obj: 'Expr'
    prop: str


@dataclass(frozen=True)
class Call:
    callee: 'Expr'
    args: Tuple['Expr', ...] = ()
    type_args: Tuple[str, ...] = ()
    multiline: bool = False


@dataclass(frozen=True)
class New:
    callee: 'Expr'
    args: Tuple['Expr', ...] = ()


@dataclass(frozen=True)
class BinOp:
    op: str
    left: 'Expr'
    right: 'Expr'


@dataclass(frozen=True)
class Not:
    operand: 'Expr'


@dataclass(frozen=True)
class Conditional:
    test: 'Expr'
    then: 'Expr'
    otherwise: 'Expr'


@dataclass(frozen=True)
class ObjectPattern:
    """
    Destructuring pattern such as ``{ field: { value, onChange, ...rest } }``.

    Each entry is ``(key, nested)`` where ``nested`` is None for shorthand.
    """
    entries: Tuple[Tuple[str, Optional['ObjectPattern']], ...]
    rest: Optional[str] = None


@dataclass(frozen=True)
class Param:
    name: Union[str, ObjectPattern]
    annotation: Optional[str] = None


@dataclass(frozen=True)
class Arrow:
    """Arrow function; ``body`` is an expression, a JSX element or a statement block."""
    params: Tuple[Param, ...]
    body: Union['Expr', Tuple['Statement', ...]]


@dataclass(frozen=True)
class ObjectLit:
    entries: Tuple[Tuple[str, 'Expr'], ...] = ()
    multiline: bool = False


@dataclass(frozen=True)
class ArrayLit:
    items: Tuple['Expr', ...] = ()


# ----------------------------------------------------------------------
# JSX
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class JsxAttr:
    """
    JSX attribute.

    ``value`` None prints a bare boolean attribute, a ``str`` prints a string
    attribute and an expression prints an ``{...}`` container.
    """
    name: str
    value: Union[None, str, 'Expr'] = None


@dataclass(frozen=True)
class JsxSpread:
    expr: 'Expr'


@dataclass(frozen=True)
class JsxText:
    text: str


@dataclass(frozen=True)
class JsxExpr:
    expr: 'Expr'


@dataclass(frozen=True)
class JsxElement:
    tag: str
    attrs: Tuple[Union[JsxAttr, JsxSpread], ...] = ()
    children: Tuple[Union['JsxElement', JsxText, JsxExpr], ...] = ()


Expr = Union[
    Ident, Str, Num, Bool, Member, Call, New, BinOp, Not,
    Conditional, Arrow, ObjectLit, ArrayLit, JsxElement,
]

JsxChild = Union[JsxElement, JsxText, JsxExpr]


# ----------------------------------------------------------------------
# Statements and module items
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class VarDecl:
    name: str
    value: Expr
    kind: str = "const"


@dataclass(frozen=True)
class ExprStmt:
    expr: Expr


@dataclass(frozen=True)
class LineComment:
    text: str


@dataclass(frozen=True)
class Return:
    value: Expr


@dataclass(frozen=True)
class Blank:
    pass


@dataclass(frozen=True)
class FunctionDecl:
    name: str
    params: Tuple[Param, ...]
    body: Tuple['Statement', ...]
    exported: bool = False


@dataclass(frozen=True)
class ImportDecl:
    """``import { a, b } from "module"`` or ``import * as ns from "module"``."""
    module: str
    names: Tuple[str, ...] = ()
    namespace: Optional[str] = None


@dataclass(frozen=True)
class Module:
    items: Tuple['ModuleItem', ...]


Statement = Union[VarDecl, ExprStmt, LineComment, Return, Blank, FunctionDecl]
ModuleItem = Union[ImportDecl, Statement]


# ----------------------------------------------------------------------
# Builders
# ----------------------------------------------------------------------

def call(callee: Union[str, Expr], *args: Expr) -> Call:
    """Call an identifier (given as a dotted string) or an expression."""
    return Call(member_path(callee) if isinstance(callee, str) else callee, tuple(args))


def member_path(path: str) -> Expr:
    """Build ``a.b.c`` from a dotted path of identifiers."""
    head, *rest = path.split('.')
    node: Expr = Ident(head)
    for prop in rest:
        node = Member(node, prop)
    return node


def chain(target: Expr, *calls: Union[str, Tuple]) -> Expr:
    """
    Build a method chain.

    Each step is either a method name (called with no arguments) or a tuple of
    ``(method, arg1, arg2, ...)``.

    Example:
        chain(Ident('z'), 'string', 'email') renders as ``z.string().email()``
    """
    node = target
    for step in calls:
        if isinstance(step, str):
            method, args = step, ()
        else:
            method, args = step[0], tuple(step[1:])
        node = Call(Member(node, method), args)
    return node


def jsx(tag: str, *children: JsxChild, **attrs) -> JsxElement:
    """Convenience constructor; keyword attributes keep insertion order."""
    return JsxElement(tag, tuple(JsxAttr(name, value) for name, value in attrs.items()), tuple(children))
