"""Field directive parser.

Turns the raw ``auto_from_attr`` markers of one receiver field into
FieldDirective values. Two payload forms are accepted and may be mixed:

    auto_from_attr('from_field = "nom", from_struct = Model2a')
    auto_from_attr(from_field="nom", from_struct=Model2a)

Attribute-language strings are split on top-level commas with the Python
tokenizer, and every item is parsed with ``ast``; keyword payloads are taken
as Python objects. Every problem on the field is collected before failing.
"""

from __future__ import annotations

import ast
import difflib
import io
import keyword
import tokenize
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Any

from struct_auto_from.core.description import FieldDescription, RawAttribute
from struct_auto_from.core.diagnostics import Diagnostic, DiagnosticAccumulator, Span, fail
from struct_auto_from.core.enums import DirectiveKey
from struct_auto_from.core.expressions import Constant, Expr, Expression

MSG_EXACTLY_ONE = (
    "exactly one of `default_value` or `from_field` "
    "must be specified for an `auto_from_attr` attribute"
)
MSG_DUPLICATE_SENDER = "the same `from` struct may not be used more than once for a given field"
MSG_LITERAL = "unsupported format: literal"

_OPENERS = frozenset("([{")
_CLOSERS = frozenset(")]}")
_MISSING = object()  # bare key with no ``= value``
_SUSPENDING = (ast.Yield, ast.YieldFrom, ast.Await)


@dataclass(frozen=True)
class MetaItem:
    """One ``key = value`` item of a directive occurrence.

    ``value`` is an ``ast.expr`` for attribute-language items (with its text
    in ``source``) and a plain Python object for keyword items.
    """

    key: str
    value: Any
    span: Span
    source: str | None = None


@dataclass(frozen=True)
class FieldDirective:
    """A parsed directive occurrence."""

    default_value: Expression | None = None
    from_field: str | None = None
    from_struct: str | None = None
    span: Span | None = None

    def sender(self, default: str) -> str:
        """Sender this directive applies to: explicit ``from_struct`` or *default*."""
        return self.from_struct or default


# ---------------------------------------------------------------------------
# Attribute-language splitting
# ---------------------------------------------------------------------------


def split_attribute_text(text: str) -> list[tuple[int, str]]:
    """Split *text* on top-level commas.

    Returns ``(offset, item)`` pairs with surrounding whitespace trimmed and
    blank items (e.g. from a trailing comma) dropped.

    Raises:
        SyntaxError: On unbalanced brackets or unterminated strings.
    """
    line_starts = [0]
    for line in text.splitlines(keepends=True):
        line_starts.append(line_starts[-1] + len(line))

    def absolute(pos: tuple[int, int]) -> int:
        row, col = pos
        return line_starts[row - 1] + col

    pieces: list[tuple[int, int]] = []
    depth = 0
    start = 0
    try:
        for tok in tokenize.generate_tokens(io.StringIO(text).readline):
            if tok.type != tokenize.OP:
                continue
            if tok.string in _OPENERS:
                depth += 1
            elif tok.string in _CLOSERS:
                depth -= 1
                if depth < 0:
                    raise SyntaxError(f"unmatched '{tok.string}'")
            elif tok.string == "," and depth == 0:
                pieces.append((start, absolute(tok.start)))
                start = absolute(tok.end)
    except tokenize.TokenError as e:
        raise SyntaxError(str(e.args[0])) from e
    pieces.append((start, len(text)))

    items: list[tuple[int, str]] = []
    for begin, end in pieces:
        raw = text[begin:end]
        stripped = raw.strip()
        if stripped:
            items.append((begin + len(raw) - len(raw.lstrip()), stripped))
    return items


def _parse_item(segment: str, span: Span) -> MetaItem:
    """Parse one ``key = value`` segment."""
    try:
        module = ast.parse(segment, mode="exec")
    except SyntaxError as e:
        raise fail(f"invalid attribute syntax: {e.msg}", span) from None

    if len(module.body) != 1:
        raise fail("expected `key = value`", span)
    stmt = module.body[0]

    if isinstance(stmt, ast.Assign) and len(stmt.targets) == 1:
        target = stmt.targets[0]
        if isinstance(target, ast.Name):
            source = ast.get_source_segment(segment, stmt.value)
            return MetaItem(target.id, stmt.value, span, source)
    elif isinstance(stmt, ast.Expr):
        if isinstance(stmt.value, ast.Constant):
            raise fail(MSG_LITERAL, span)
        if isinstance(stmt.value, ast.Name):
            return MetaItem(stmt.value.id, _MISSING, span)
    raise fail("expected `key = value`", span)


def _collect_items(attribute: RawAttribute, span: Span, acc: DiagnosticAccumulator) -> list[MetaItem]:
    items: list[MetaItem] = []
    for source in attribute.sources:
        if not isinstance(source, str):
            acc.push(Diagnostic(MSG_LITERAL, span))
            continue
        body = source.lstrip()
        indent = len(source) - len(body)
        try:
            segments = split_attribute_text(body)
        except SyntaxError as e:
            acc.push(Diagnostic(f"invalid attribute syntax: {e.msg}", span))
            continue
        for offset, segment in segments:
            item = acc.handle(_parse_item, segment, span.at_offset(indent + offset))
            if item is not None:
                items.append(item)
    for key, value in attribute.keywords.items():
        items.append(MetaItem(key, value, span.at_key(key)))
    return items


# ---------------------------------------------------------------------------
# Value interpretation
# ---------------------------------------------------------------------------


def _identifier(item: MetaItem) -> str:
    value = item.value
    if isinstance(value, ast.Name):
        return value.id
    if isinstance(value, ast.Constant):
        value = value.value
    elif isinstance(value, ast.AST):
        raise fail(f"`{item.key}` expects an identifier", item.span)
    elif isinstance(value, type):
        return value.__name__

    if isinstance(value, str):
        if value.isidentifier() and not keyword.iskeyword(value):
            return value
        raise fail(f"`{value}` is not a valid identifier", item.span)
    raise fail(f"unexpected literal type `{type(value).__name__}`", item.span)


def _suspending_nodes(tree: ast.AST) -> Iterator[ast.AST]:
    """``yield``/``await`` nodes of *tree* that would land in the conversion body."""
    for node in ast.iter_child_nodes(tree):
        if isinstance(node, ast.Lambda):
            continue
        if isinstance(node, _SUSPENDING):
            yield node
        yield from _suspending_nodes(node)


def _check_expression(source: str, span: Span, tree: ast.Expression | None = None) -> str:
    """Validate *source* as an expression usable inside the generated conversion."""
    source = source.strip()
    if tree is None:
        try:
            tree = ast.parse(source, mode="eval")
        except SyntaxError as e:
            raise fail(f"invalid expression `{source}`: {e.msg}", span) from None

    node = next(_suspending_nodes(tree), None)
    if node is not None:
        word = "await" if isinstance(node, ast.Await) else "yield"
        raise fail(f"`{word}` is not allowed in `default_value`", span)

    try:
        compile(tree, "<default_value>", "eval")
    except SyntaxError as e:
        raise fail(f"invalid expression `{source}`: {e.msg}", span) from None
    return source


def _expression(item: MetaItem) -> Expression:
    value = item.value
    if isinstance(value, ast.AST):
        source = item.source or ast.unparse(value)
        return Expr(_check_expression(source, item.span, ast.Expression(body=value)))
    if isinstance(value, Expr):
        return Expr(_check_expression(value.source, item.span))
    return Constant(value)


_INTERPRETERS = {
    DirectiveKey.DEFAULT_VALUE: _expression,
    DirectiveKey.FROM_FIELD: _identifier,
    DirectiveKey.FROM_STRUCT: _identifier,
}


def _unknown_key(item: MetaItem) -> Diagnostic:
    alternatives = [key.value for key in DirectiveKey]
    message = f"unknown field `{item.key}`"
    close = difflib.get_close_matches(item.key, alternatives, n=1)
    if close:
        message += f", did you mean `{close[0]}`?"
    expected = ", ".join(f"`{alt}`" for alt in alternatives)
    return Diagnostic(f"{message} (expected one of {expected})", item.span)


# ---------------------------------------------------------------------------
# Directive construction
# ---------------------------------------------------------------------------


def _build_directive(
    attribute: RawAttribute,
    span: Span,
    senders: Sequence[str],
    acc: DiagnosticAccumulator,
) -> tuple[FieldDirective, bool]:
    """Build one directive; the flag is False when its `from_struct` was rejected."""
    seen: dict[DirectiveKey, MetaItem] = {}
    values: dict[DirectiveKey, Any] = {}

    for item in _collect_items(attribute, span, acc):
        try:
            key = DirectiveKey(item.key)
        except ValueError:
            acc.push(_unknown_key(item))
            continue
        if key in seen:
            acc.push(Diagnostic(f"duplicate field `{key.value}`", item.span))
            continue
        seen[key] = item
        if item.value is _MISSING:
            acc.push(Diagnostic(f"`{key.value}` requires a value", item.span))
            continue
        parsed = acc.handle(_INTERPRETERS[key], item)
        if parsed is not None:
            values[key] = parsed

    from_struct = values.get(DirectiveKey.FROM_STRUCT)
    if from_struct is not None and from_struct not in senders:
        acc.push(
            Diagnostic(
                f"`from_struct` value must be one of {list(senders)!r}",
                seen[DirectiveKey.FROM_STRUCT].span,
            )
        )
        from_struct = None
    sender_known = DirectiveKey.FROM_STRUCT not in seen or from_struct is not None

    has_default = DirectiveKey.DEFAULT_VALUE in values
    has_from_field = DirectiveKey.FROM_FIELD in values
    if has_default and has_from_field:
        acc.push(Diagnostic(MSG_EXACTLY_ONE, seen[DirectiveKey.DEFAULT_VALUE].span))
        acc.push(Diagnostic(MSG_EXACTLY_ONE, seen[DirectiveKey.FROM_FIELD].span))
    elif not has_default and not has_from_field:
        acc.push(Diagnostic(MSG_EXACTLY_ONE, span))

    directive = FieldDirective(
        default_value=values.get(DirectiveKey.DEFAULT_VALUE),
        from_field=values.get(DirectiveKey.FROM_FIELD),
        from_struct=from_struct,
        span=span,
    )
    return directive, sender_known


def parse_field_directives(field: FieldDescription, senders: Sequence[str]) -> list[FieldDirective]:
    """Parse every ``auto_from_attr`` marker of *field*.

    Args:
        field: The receiver field.
        senders: Declared sender identifiers; the first one is the default sender.

    Returns:
        One FieldDirective per marker, in declaration order.

    Raises:
        DiagnosticError: With every problem found on the field.
    """
    acc = DiagnosticAccumulator()
    directives: list[FieldDirective] = []
    covered: set[str] = set()

    for index, attribute in enumerate(field.directive_attributes()):
        span = field.span.at_attribute(index)
        directive, sender_known = _build_directive(attribute, span, senders, acc)

        if sender_known:
            target = directive.sender(senders[0])
            if target in covered:
                acc.push(Diagnostic(MSG_DUPLICATE_SENDER, span))
            covered.add(target)

        directives.append(directive)

    return acc.finish_with(directives)
