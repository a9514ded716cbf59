"""
Text rendering for the code IR.

The printer is the only place that turns user-controlled strings into source
text. Every expression renderer returns a string whose first line is not
indented and whose following lines carry absolute indentation, so callers can
splice the result after any prefix.
"""

from typing import List, Union
import logging
import math
import re

from .code_ir import (
    Arrow, ArrayLit, BinOp, Blank, Bool, Call, Conditional, ExprStmt,
    FunctionDecl, Ident, ImportDecl, JsxAttr, JsxElement, JsxExpr, JsxSpread,
    JsxText, LineComment, Member, Module, New, Not, Num, ObjectLit,
    ObjectPattern, Param, Return, Str, VarDecl,
)

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r'^[A-Za-z_$][A-Za-z0-9_$]*$')

# Characters that cannot appear verbatim in JSX text or a quoted JSX attribute
_JSX_UNSAFE = set('{}<>&"\\\n\r')

_ESCAPES = {
    '\\': '\\\\',
    '\n': '\\n',
    '\r': '\\r',
    '\t': '\\t',
    '\b': '\\b',
    '\f': '\\f',
    '\v': '\\v',
    '\0': '\\0',
    '\u2028': '\\u2028',
    '\u2029': '\\u2029',
}

# Binary operator precedence, higher binds tighter
_PRECEDENCE = {
    '||': 3,
    '&&': 4,
    '===': 8, '!==': 8, '==': 8, '!=': 8,
    '<': 9, '>': 9, '<=': 9, '>=': 9,
    '+': 11, '-': 11,
    '*': 12, '/': 12, '%': 12,
}


def escape_js_string(value: str, quote: str = "'") -> str:
    """
    Return ``value`` as a quoted JavaScript string literal.

    Backslashes, the chosen quote character, control characters and the
    U+2028/U+2029 line separators are escaped.

    Args:
        value: Raw string
        quote: Delimiter, either ``'`` or ``"``

    Returns:
        Complete literal including the surrounding quotes
    """
    if quote not in ("'", '"'):
        raise ValueError(f"Unsupported quote character: {quote!r}")

    out = []
    for ch in value:
        if ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif ch == quote:
            out.append('\\' + quote)
        elif ord(ch) < 0x20 or ord(ch) == 0x7f:
            out.append(f"\\x{ord(ch):02x}")
        else:
            out.append(ch)
    return quote + ''.join(out) + quote


def is_jsx_safe(text: str) -> bool:
    """True when ``text`` can be emitted verbatim as JSX text or a quoted attribute."""
    if not text or text != text.strip():
        return False
    return not any(ch in _JSX_UNSAFE for ch in text)


def is_identifier(name: str) -> bool:
    return bool(_IDENTIFIER.match(name))


def format_number(value: float) -> str:
    """Render a number the way it would be written by hand (``5`` not ``5.0``)."""
    if isinstance(value, bool) or not math.isfinite(value):
        raise ValueError(f"Cannot emit non-finite or boolean number: {value!r}")
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def format_key(key: str) -> str:
    """Object key, quoted when it is not a valid identifier."""
    return key if is_identifier(key) else escape_js_string(key, "'")


class CodePrinter:
    """
    Render IR nodes to source text.

    Args:
        indent: Indentation unit
        line_width: Width beyond which JSX tags and imports are broken across lines
    """

    def __init__(self, indent: str = "  ", line_width: int = 80):
        self.indent = indent
        self.line_width = line_width

    def _pad(self, level: int) -> str:
        return self.indent * level

    # ------------------------------------------------------------------
    # Modules and statements
    # ------------------------------------------------------------------

    def print_module(self, module: Module) -> str:
        lines: List[str] = []
        for item in module.items:
            if isinstance(item, ImportDecl):
                lines.extend(self.import_decl(item))
            else:
                lines.extend(self.statement(item, 0))
        return '\n'.join(lines).rstrip('\n') + '\n'

    def import_decl(self, node: ImportDecl) -> List[str]:
        source = escape_js_string(node.module, '"')
        if node.namespace:
            return [f"import * as {node.namespace} from {source}"]

        single = f"import {{ {', '.join(node.names)} }} from {source}"
        if len(single) <= self.line_width:
            return [single]
        return (
            ["import {"]
            + [f"{self._pad(1)}{name}," for name in node.names]
            + [f"}} from {source}"]
        )

    def statement(self, node, level: int) -> List[str]:
        pad = self._pad(level)

        if isinstance(node, Blank):
            return [""]
        if isinstance(node, LineComment):
            return [f"{pad}// {node.text}"]
        if isinstance(node, VarDecl):
            return [f"{pad}{node.kind} {node.name} = {self.expr(node.value, level)}"]
        if isinstance(node, ExprStmt):
            return [f"{pad}{self.expr(node.expr, level)}"]
        if isinstance(node, Return):
            if isinstance(node.value, JsxElement):
                return [f"{pad}return ("] + self.jsx(node.value, level + 1) + [f"{pad})"]
            return [f"{pad}return {self.expr(node.value, level)}"]
        if isinstance(node, FunctionDecl):
            prefix = "export " if node.exported else ""
            params = ', '.join(self.param(p) for p in node.params)
            lines = [f"{pad}{prefix}function {node.name}({params}) {{"]
            for inner in node.body:
                lines.extend(self.statement(inner, level + 1))
            lines.append(f"{pad}}}")
            return lines

        raise TypeError(f"Cannot print statement node {type(node).__name__}")

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def expr(self, node, level: int = 0) -> str:
        if isinstance(node, Ident):
            return node.name
        if isinstance(node, Str):
            return escape_js_string(node.value, node.quote)
        if isinstance(node, Num):
            return format_number(node.value)
        if isinstance(node, Bool):
            return "true" if node.value else "false"
        if isinstance(node, Member):
            return f"{self._operand(node.obj, level)}.{node.prop}"
        if isinstance(node, Call):
            return self._call(node, level)
        if isinstance(node, New):
            args = ', '.join(self.expr(a, level) for a in node.args)
            return f"new {self.expr(node.callee, level)}({args})"
        if isinstance(node, BinOp):
            return self._binop(node, level)
        if isinstance(node, Not):
            return f"!{self._operand(node.operand, level)}"
        if isinstance(node, Conditional):
            return self._conditional(node, level)
        if isinstance(node, Arrow):
            return self._arrow(node, level)
        if isinstance(node, ObjectLit):
            return self._object(node, level)
        if isinstance(node, ArrayLit):
            return f"[{', '.join(self.expr(item, level) for item in node.items)}]"
        if isinstance(node, JsxElement):
            lines = self.jsx(node, level + 1)
            if len(lines) == 1:
                return lines[0].strip()
            return "(\n" + '\n'.join(lines) + f"\n{self._pad(level)})"

        raise TypeError(f"Cannot print expression node {type(node).__name__}")

    def _operand(self, node, level: int) -> str:
        """Render a member/call target or unary operand, parenthesized when needed."""
        text = self.expr(node, level)
        if isinstance(node, (BinOp, Conditional, Arrow)):
            return f"({text})"
        return text

    def _call(self, node: Call, level: int) -> str:
        callee = self._operand(node.callee, level)
        if node.type_args:
            callee += f"<{', '.join(node.type_args)}>"
        if not node.multiline:
            return f"{callee}({', '.join(self.expr(a, level) for a in node.args)})"

        pad = self._pad(level + 1)
        args = [f"{pad}{self.expr(a, level + 1)}" for a in node.args]
        return f"{callee}(\n" + ',\n'.join(args) + f"\n{self._pad(level)})"

    def _binop(self, node: BinOp, level: int) -> str:
        precedence = _PRECEDENCE.get(node.op)
        if precedence is None:
            raise ValueError(f"Unsupported operator: {node.op}")

        def side(child, right: bool) -> str:
            text = self.expr(child, level)
            if isinstance(child, (Conditional, Arrow)):
                return f"({text})"
            if isinstance(child, BinOp):
                child_precedence = _PRECEDENCE.get(child.op, 0)
                if child_precedence < precedence or (right and child_precedence == precedence):
                    return f"({text})"
            return text

        return f"{side(node.left, False)} {node.op} {side(node.right, True)}"

    def _conditional(self, node: Conditional, level: int) -> str:
        test = self.expr(node.test, level)
        if isinstance(node.test, (Conditional, Arrow)):
            test = f"({test})"
        then = self.expr(node.then, level)
        if isinstance(node.then, (Conditional, Arrow)):
            then = f"({then})"
        otherwise = self.expr(node.otherwise, level)
        if isinstance(node.otherwise, Arrow):
            otherwise = f"({otherwise})"
        return f"{test} ? {then} : {otherwise}"

    def param(self, node: Param) -> str:
        name = node.name if isinstance(node.name, str) else self.pattern(node.name)
        if node.annotation:
            return f"{name}: {node.annotation}"
        return name

    def pattern(self, node: ObjectPattern) -> str:
        parts = []
        for key, nested in node.entries:
            parts.append(key if nested is None else f"{key}: {self.pattern(nested)}")
        if node.rest:
            parts.append(f"...{node.rest}")
        return f"{{ {', '.join(parts)} }}"

    def _arrow(self, node: Arrow, level: int) -> str:
        head = f"({', '.join(self.param(p) for p in node.params)}) =>"
        body = node.body

        if isinstance(body, tuple):
            lines = [head + " {"]
            for inner in body:
                lines.extend(self.statement(inner, level + 1))
            lines.append(f"{self._pad(level)}}}")
            return '\n'.join(lines)

        if isinstance(body, JsxElement):
            inner = self.jsx(body, level + 1)
            return f"{head} (\n" + '\n'.join(inner) + f"\n{self._pad(level)})"

        text = self.expr(body, level)
        if isinstance(body, ObjectLit):
            text = f"({text})"
        return f"{head} {text}"

    def _object(self, node: ObjectLit, level: int) -> str:
        if not node.entries:
            return "{}"
        if not node.multiline:
            parts = [f"{format_key(k)}: {self.expr(v, level)}" for k, v in node.entries]
            return f"{{ {', '.join(parts)} }}"

        pad = self._pad(level + 1)
        lines = [f"{pad}{format_key(k)}: {self.expr(v, level + 1)}," for k, v in node.entries]
        return "{\n" + '\n'.join(lines) + f"\n{self._pad(level)}}}"

    # ------------------------------------------------------------------
    # JSX
    # ------------------------------------------------------------------

    def attr(self, node: Union[JsxAttr, JsxSpread], level: int) -> str:
        if isinstance(node, JsxSpread):
            return f"{{...{self.expr(node.expr, level)}}}"
        if node.value is None:
            return node.name
        if isinstance(node.value, str):
            if is_jsx_safe(node.value) or node.value == "":
                return f'{node.name}="{node.value}"'
            return f"{node.name}={{{escape_js_string(node.value)}}}"
        return f"{node.name}={{{self.expr(node.value, level)}}}"

    def jsx_child(self, node, level: int) -> List[str]:
        pad = self._pad(level)
        if isinstance(node, JsxElement):
            return self.jsx(node, level)
        if isinstance(node, JsxText):
            if is_jsx_safe(node.text):
                return [f"{pad}{node.text}"]
            return [f"{pad}{{{escape_js_string(node.text)}}}"]
        if isinstance(node, JsxExpr):
            return [f"{pad}{{{self.expr(node.expr, level)}}}"]
        raise TypeError(f"Cannot print JSX child {type(node).__name__}")

    def jsx(self, node: JsxElement, level: int) -> List[str]:
        """
        Render a JSX element as fully indented lines.

        Attributes stay on the tag line while it fits within ``line_width`` and
        no attribute value spans several lines; otherwise each attribute gets
        its own line. A lone short text child is kept inline.
        """
        pad = self._pad(level)
        attrs = [self.attr(a, level + 1) for a in node.attrs]
        inline_attrs = ''.join(f" {a}" for a in attrs)
        closer = " />" if not node.children else ">"
        single = f"{pad}<{node.tag}{inline_attrs}{closer}"
        fits = len(single) <= self.line_width and not any('\n' in a for a in attrs)

        if fits:
            open_lines = [single]
        else:
            open_lines = [f"{pad}<{node.tag}"]
            open_lines += [f"{self._pad(level + 1)}{a}" for a in attrs]
            open_lines.append(f"{pad}/>" if not node.children else f"{pad}>")

        if not node.children:
            return open_lines

        if fits and len(node.children) == 1 and not isinstance(node.children[0], JsxElement):
            child = self.jsx_child(node.children[0], 0)
            if len(child) == 1 and '\n' not in child[0]:
                inline = f"{single}{child[0]}</{node.tag}>"
                if len(inline) <= self.line_width:
                    return [inline]

        lines = list(open_lines)
        for child in node.children:
            lines.extend(self.jsx_child(child, level + 1))
        lines.append(f"{pad}</{node.tag}>")
        return lines


def print_module(module: Module) -> str:
    """Render a module with the default printer settings."""
    return CodePrinter().print_module(module)
