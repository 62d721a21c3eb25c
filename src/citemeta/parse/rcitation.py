"""R CITATION file reader.

CITATION files are R source code. This module evaluates the subset of the
language that citation declarations use in practice:

- comments, ``;`` separators, assignments with ``<-``, ``<<-`` and ``=``
- ``if (cond) stmt else stmt`` with ``{ }`` blocks, and the ``!``, ``&&``
  and ``||`` operators
- string, numeric, ``TRUE``/``FALSE``, ``NULL`` and ``NA`` literals
- ``$`` field access, usually on ``meta`` (the package DESCRIPTION fields)
- the calls ``bibentry``, ``citEntry``, ``person``, ``as.person``,
  ``personList``, ``c``, ``list``, ``paste``, ``paste0``, ``sprintf``,
  ``sub``, ``gsub``, ``format``, ``as.character``, ``Sys.Date``,
  ``citHeader``, ``citFooter``, ``textVersion``, ``exists``, ``is.null`` and
  ``packageDescription`` (which returns ``meta``)

Every top-level value that is a bibliographic entry (or a vector of them,
including assignments) is collected in source order, as R's
``readCitationFile`` does.

Errors use R's ``Error in <call> : <reason>`` wording. A ``citation()``
call inside a citation file is self-referential and always fails this way.
"""

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any, NamedTuple

from citemeta.exceptions import CitationSyntaxError
from citemeta.models import ENTRY_FIELDS, BibEntry, Person
from citemeta.parse.names import parse_name, parse_people_string

__all__ = ["parse_rcitation", "tokenize"]

_TOKEN_RE = re.compile(
    r"""
    (?P<ws>[ \t\f\n]+)
    |(?P<comment>\#[^\n]*)
    |(?P<string>"(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*')
    |(?P<number>(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?L?)
    |(?P<name>[A-Za-z.][A-Za-z0-9._]*|`[^`]+`)
    |(?P<op><<-|<-|\|\||&&|[(){},=$;!-])
    """,
    re.VERBOSE | re.DOTALL,
)

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "0": "\0", "\\": "\\", '"': '"', "'": "'"}

_CONSTANTS: dict[str, Any] = {"TRUE": True, "FALSE": False, "NULL": None, "NA": None, "T": True}

_LOGICAL_STRINGS = {
    "TRUE": True,
    "true": True,
    "T": True,
    "True": True,
    "FALSE": False,
    "false": False,
    "F": False,
    "False": False,
}

# bibentry()/citEntry() arguments that are presentation only
_IGNORED_ENTRY_ARGS = frozenset(
    {"textversion", "header", "footer", "mheader", "mfooter", "other", "encoding"}
)


class Token(NamedTuple):
    """Lexical token with its source span."""

    kind: str
    value: str
    line: int
    start: int
    end: int


# ---------------------------------------------------------------------------
# Syntax tree
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Literal:
    value: Any
    line: int


@dataclass(frozen=True)
class Name:
    id: str
    line: int


@dataclass(frozen=True)
class Dollar:
    target: Any
    field: str
    line: int


@dataclass(frozen=True)
class Call:
    func: str
    args: list[tuple[str | None, Any]]
    source: str
    line: int


@dataclass(frozen=True)
class Assign:
    target: str
    value: Any
    line: int


@dataclass(frozen=True)
class Not:
    operand: Any
    line: int


@dataclass(frozen=True)
class Logical:
    op: str
    left: Any
    right: Any
    line: int


@dataclass(frozen=True)
class If:
    test: Any
    body: Any
    orelse: Any
    line: int


@dataclass(frozen=True)
class Block:
    statements: list[Any]
    line: int


# ---------------------------------------------------------------------------
# Lexer and parser
# ---------------------------------------------------------------------------


def _unescape(body: str) -> str:
    out: list[str] = []
    i = 0
    while i < len(body):
        char = body[i]
        if char == "\\" and i + 1 < len(body):
            nxt = body[i + 1]
            if nxt == "u" and re.match(r"[0-9A-Fa-f]{4}", body[i + 2 : i + 6]):
                out.append(chr(int(body[i + 2 : i + 6], 16)))
                i += 6
                continue
            out.append(_ESCAPES.get(nxt, nxt))
            i += 2
            continue
        out.append(char)
        i += 1
    return "".join(out)


def tokenize(text: str) -> list[Token]:
    """Split R source into tokens, dropping whitespace and comments.

    Raises
    ------
    CitationSyntaxError
        On characters outside the supported subset or unterminated strings.
    """
    tokens: list[Token] = []
    pos = 0
    line = 1
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if not match:
            snippet = text[pos : pos + 20].split("\n")[0]
            raise CitationSyntaxError(f"Error: unexpected input {snippet!r} at line {line}", line)
        kind = match.lastgroup or ""
        value = match.group()
        if kind not in ("ws", "comment"):
            tokens.append(Token(kind, value, line, match.start(), match.end()))
        line += value.count("\n")
        pos = match.end()
    return tokens


class _Parser:
    """Recursive-descent parser over a token list."""

    def __init__(self, text: str, tokens: list[Token]) -> None:
        self.text = text
        self.tokens = tokens
        self.pos = 0

    def peek(self) -> Token | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def at_op(self, *ops: str) -> bool:
        tok = self.peek()
        return tok is not None and tok.kind == "op" and tok.value in ops

    def advance(self) -> Token:
        tok = self.peek()
        if tok is None:
            last = self.tokens[-1].line if self.tokens else 1
            raise CitationSyntaxError(f"Error: unexpected end of input at line {last}", last)
        self.pos += 1
        return tok

    def expect_op(self, op: str) -> Token:
        tok = self.advance()
        if tok.kind != "op" or tok.value != op:
            raise CitationSyntaxError(
                f"Error: unexpected {tok.value!r} at line {tok.line}, expected {op!r}", tok.line
            )
        return tok

    def parse_program(self) -> list[Any]:
        statements: list[Any] = []
        while self.peek() is not None:
            if self.at_op(";"):
                self.advance()
                continue
            statements.append(self.parse_statement())
        return statements

    def at_name(self, name: str) -> bool:
        tok = self.peek()
        return tok is not None and tok.kind == "name" and tok.value == name

    def parse_statement(self) -> Any:
        if self.at_name("if"):
            return self.parse_if()
        if self.at_op("{"):
            return self.parse_block()
        expr = self.parse_expr()
        if isinstance(expr, Name) and self.at_op("<-", "<<-", "="):
            self.advance()
            return Assign(expr.id, self.parse_expr(), expr.line)
        return expr

    def parse_if(self) -> If:
        line = self.advance().line
        self.expect_op("(")
        test = self.parse_expr()
        self.expect_op(")")
        body = self.parse_statement()
        orelse = None
        if self.at_name("else"):
            self.advance()
            orelse = self.parse_statement()
        return If(test, body, orelse, line)

    def parse_block(self) -> Block:
        line = self.expect_op("{").line
        statements: list[Any] = []
        while not self.at_op("}"):
            if self.at_op(";"):
                self.advance()
                continue
            statements.append(self.parse_statement())
        self.expect_op("}")
        return Block(statements, line)

    def parse_expr(self) -> Any:
        node = self.parse_and()
        while self.at_op("||"):
            line = self.advance().line
            node = Logical("||", node, self.parse_and(), line)
        return node

    def parse_and(self) -> Any:
        node = self.parse_not()
        while self.at_op("&&"):
            line = self.advance().line
            node = Logical("&&", node, self.parse_not(), line)
        return node

    def parse_not(self) -> Any:
        if self.at_op("!"):
            line = self.advance().line
            return Not(self.parse_not(), line)
        return self.parse_postfix()

    def parse_postfix(self) -> Any:
        node = self.parse_primary()
        while True:
            if self.at_op("(") and isinstance(node, Name):
                node = self.parse_call(node)
            elif self.at_op("$"):
                self.advance()
                tok = self.advance()
                if tok.kind == "name":
                    node = Dollar(node, tok.value.strip("`"), tok.line)
                elif tok.kind == "string":
                    node = Dollar(node, _unescape(tok.value[1:-1]), tok.line)
                else:
                    raise CitationSyntaxError(
                        f"Error: unexpected {tok.value!r} after '$' at line {tok.line}", tok.line
                    )
            else:
                return node

    def parse_primary(self) -> Any:
        tok = self.advance()
        if tok.kind == "string":
            return Literal(_unescape(tok.value[1:-1]), tok.line)
        if tok.kind == "number":
            return Literal(_number(tok.value), tok.line)
        if tok.kind == "name":
            return Name(tok.value.strip("`"), tok.line)
        if tok.kind == "op" and tok.value == "-":
            operand = self.parse_primary()
            if isinstance(operand, Literal) and isinstance(operand.value, (int, float)):
                return Literal(-operand.value, tok.line)
            raise CitationSyntaxError(f"Error: invalid unary minus at line {tok.line}", tok.line)
        if tok.kind == "op" and tok.value == "(":
            inner = self.parse_expr()
            self.expect_op(")")
            return inner
        raise CitationSyntaxError(f"Error: unexpected {tok.value!r} at line {tok.line}", tok.line)

    def parse_call(self, func: Name) -> Call:
        start = self.tokens[self.pos - 1].start
        self.expect_op("(")
        args: list[tuple[str | None, Any]] = []
        while not self.at_op(")"):
            tok = self.peek()
            nxt = self.tokens[self.pos + 1] if self.pos + 1 < len(self.tokens) else None
            name = None
            if (
                tok is not None
                and tok.kind in ("name", "string")
                and nxt is not None
                and nxt.kind == "op"
                and nxt.value == "="
            ):
                name = tok.value.strip("`") if tok.kind == "name" else _unescape(tok.value[1:-1])
                self.pos += 2
            args.append((name, self.parse_expr()))
            if not self.at_op(")"):
                self.expect_op(",")
        end = self.expect_op(")").end
        return Call(func.id, args, self.text[start:end], func.line)


def _number(text: str) -> int | float:
    text = text.rstrip("L")
    if re.fullmatch(r"\d+", text):
        return int(text)
    return float(text)


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------


@dataclass
class _Evaluator:
    """Evaluates parsed statements against a variable environment."""

    meta: Mapping[str, Any] | None
    env: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.env["meta"] = dict(self.meta) if self.meta is not None else None
        self.builtins: dict[str, Callable[[Call, list[tuple[str | None, Any]]], Any]] = {
            "bibentry": self._bibentry,
            "citEntry": self._citentry,
            "person": self._person,
            "as.person": self._as_person,
            "personList": self._combine,
            "c": self._combine,
            "list": self._combine,
            "paste": self._paste,
            "paste0": self._paste0,
            "sprintf": self._sprintf,
            "sub": self._sub,
            "gsub": self._gsub,
            "format": self._format,
            "as.character": self._as_character,
            "Sys.Date": lambda call, args: date.today(),
            "citHeader": lambda call, args: None,
            "citFooter": lambda call, args: None,
            "textVersion": lambda call, args: None,
            "exists": self._exists,
            "is.null": lambda call, args: bool(args) and _is_r_null(args[0][1]),
            "packageDescription": self._package_description,
        }

    def run(self, statements: list[Any]) -> list[BibEntry]:
        entries: list[BibEntry] = []
        for statement in statements:
            value = self.eval(statement)
            if isinstance(value, BibEntry):
                entries.append(value)
            elif isinstance(value, list) and value and all(isinstance(v, BibEntry) for v in value):
                entries.extend(value)
        return entries

    def eval(self, node: Any) -> Any:
        if isinstance(node, Literal):
            return node.value
        if isinstance(node, Name):
            if node.id in self.env:
                return self.env[node.id]
            if node.id in _CONSTANTS:
                return _CONSTANTS[node.id]
            raise CitationSyntaxError(f"Error: object '{node.id}' not found", node.line)
        if isinstance(node, Assign):
            value = self.eval(node.value)
            self.env[node.target] = value
            return value
        if isinstance(node, Dollar):
            target = self.eval(node.target)
            if target is None:
                return None
            if isinstance(target, Mapping):
                return target.get(node.field)
            raise CitationSyntaxError(
                f"Error: $ operator is invalid for atomic vectors at line {node.line}", node.line
            )
        if isinstance(node, Call):
            return self.call(node)
        if isinstance(node, Not):
            return not self.condition(node.operand, node.line)
        if isinstance(node, Logical):
            left = self.condition(node.left, node.line)
            # Short-circuit as R does
            if node.op == "||" and left:
                return True
            if node.op == "&&" and not left:
                return False
            return self.condition(node.right, node.line)
        if isinstance(node, If):
            if self.condition(node.test, node.line):
                return self.eval(node.body)
            return self.eval(node.orelse) if node.orelse is not None else None
        if isinstance(node, Block):
            value = None
            for statement in node.statements:
                value = self.eval(statement)
            return value
        raise TypeError(f"Unknown node: {node!r}")

    def condition(self, node: Any, line: int) -> bool:
        """Evaluate a node to a single logical value."""
        value = self.eval(node)
        if isinstance(value, list):
            if len(value) > 1:
                raise CitationSyntaxError(
                    f"Error: the condition has length > 1 at line {line}", line
                )
            value = value[0] if value else None
        if value is None:
            raise CitationSyntaxError(f"Error: argument is of length zero at line {line}", line)
        if isinstance(value, (bool, int, float)):
            return bool(value)
        if isinstance(value, str) and value in _LOGICAL_STRINGS:
            return _LOGICAL_STRINGS[value]
        raise CitationSyntaxError(
            f"Error: argument is not interpretable as logical at line {line}", line
        )

    def call(self, node: Call) -> Any:
        if node.func == "citation":
            raise CitationSyntaxError(
                f"Error in {node.source} : citation() cannot be called from a CITATION file",
                node.line,
            )
        builtin = self.builtins.get(node.func)
        if builtin is None:
            raise CitationSyntaxError(
                f'Error in {node.func}() : could not find function "{node.func}"', node.line
            )
        args = [(name, self.eval(value)) for name, value in node.args]
        return builtin(node, args)

    # -- entries ------------------------------------------------------------

    def _entry(self, call: Call, type_arg: str, args: list[tuple[str | None, Any]]) -> BibEntry:
        positional = [value for name, value in args if name is None]
        named = {name.lower(): value for name, value in args if name is not None}

        bibtype = named.pop(type_arg.lower(), None)
        if bibtype is None and positional:
            bibtype = positional[0]
        bibtype = _scalar(bibtype)
        if not isinstance(bibtype, str):
            raise CitationSyntaxError(
                f'Error in {call.source} : argument "{type_arg}" is missing, with no default',
                call.line,
            )

        key = _scalar(named.pop("key", None))
        author = _people(named.pop("author", None))
        fields: dict[str, Any] = {}
        extra: dict[str, Any] = {}
        for name, value in named.items():
            if name in _IGNORED_ENTRY_ARGS or value is None:
                continue
            if name == "doi":
                doi = _scalar(value)
                fields[name] = str(doi) if doi is not None else None
            elif name in ENTRY_FIELDS:
                fields[name] = _scalar(value)
            else:
                extra[name] = _people(value) if _is_people(value) else _scalar(value)

        return BibEntry(
            bibtype=bibtype,
            key=str(key) if key is not None else None,
            author=author,
            extra=extra,
            **fields,
        )

    def _bibentry(self, call: Call, args: list[tuple[str | None, Any]]) -> BibEntry:
        return self._entry(call, "bibtype", args)

    def _citentry(self, call: Call, args: list[tuple[str | None, Any]]) -> BibEntry:
        return self._entry(call, "entry", args)

    # -- persons ------------------------------------------------------------

    def _person(self, call: Call, args: list[tuple[str | None, Any]]) -> Person:
        order = ("given", "family", "middle", "email", "role", "comment", "first", "last")
        params: dict[str, Any] = {}
        positional = iter(order)
        for name, value in args:
            key = name if name is not None else next(positional, None)
            if key is not None:
                params[key] = value

        given = _strings(params.get("given") or params.get("first"))
        given += _strings(params.get("middle"))
        family = _scalar(params.get("family") or params.get("last"))
        comment = params.get("comment")
        if isinstance(comment, Mapping):
            comment = {str(k): str(v) for k, v in comment.items()}
        elif comment is not None:
            comment = {"note": str(_scalar(comment))}

        return Person(
            given=tuple(given),
            family=str(family) if family is not None else None,
            email=_scalar(params.get("email")),
            role=tuple(_strings(params.get("role"))),
            comment=comment or {},
        )

    def _as_person(self, call: Call, args: list[tuple[str | None, Any]]) -> list[Person]:
        persons: list[Person] = []
        for _, value in args:
            persons.extend(_people(value))
        return persons

    # -- environment --------------------------------------------------------

    def _exists(self, call: Call, args: list[tuple[str | None, Any]]) -> bool:
        name = _scalar(args[0][1]) if args else None
        if not isinstance(name, str):
            raise CitationSyntaxError(
                f"Error in {call.source} : invalid first argument", call.line
            )
        return name in self.env or name in self.builtins or name in _CONSTANTS

    def _package_description(self, call: Call, args: list[tuple[str | None, Any]]) -> Any:
        # Only the package being read is known: its metadata is ``meta``
        if self.meta is None:
            return None
        fields = dict(self.meta)
        wanted = dict(args).get("fields")
        if wanted is not None:
            return fields.get(str(_scalar(wanted)))
        return fields

    # -- vectors and strings ------------------------------------------------

    def _combine(self, call: Call, args: list[tuple[str | None, Any]]) -> Any:
        if any(name is not None for name, _ in args):
            return {name or str(i + 1): value for i, (name, value) in enumerate(args)}
        combined: list[Any] = []
        for _, value in args:
            if value is None:
                continue
            if isinstance(value, list):
                combined.extend(value)
            else:
                combined.append(value)
        return combined

    def _paste(self, call: Call, args: list[tuple[str | None, Any]], sep: str = " ") -> Any:
        named = {name: value for name, value in args if name is not None}
        sep = _scalar(named.get("sep", sep))
        collapse = _scalar(named.get("collapse"))
        vectors = [_strings(value) for name, value in args if name is None]
        vectors = [v for v in vectors if v]
        if not vectors:
            return "" if collapse is not None else []
        length = max(len(v) for v in vectors)
        pasted = [sep.join(v[i % len(v)] for v in vectors) for i in range(length)]
        if collapse is not None:
            return collapse.join(pasted)
        return pasted[0] if len(pasted) == 1 else pasted

    def _paste0(self, call: Call, args: list[tuple[str | None, Any]]) -> Any:
        return self._paste(call, args, sep="")

    def _sprintf(self, call: Call, args: list[tuple[str | None, Any]]) -> Any:
        values = [_scalar(value) for _, value in args]
        if not values or not isinstance(values[0], str):
            raise CitationSyntaxError(
                f"Error in {call.source} : 'fmt' is not a character vector", call.line
            )
        # A NULL argument gives a zero-length result
        if any(value is None for value in values[1:]):
            return []
        try:
            return values[0] % tuple(values[1:])
        except (TypeError, ValueError) as e:
            raise CitationSyntaxError(f"Error in {call.source} : {e}", call.line) from e

    def _regex_sub(self, call: Call, args: list[tuple[str | None, Any]], count: int) -> Any:
        order = iter(("pattern", "replacement", "x"))
        params: dict[str, Any] = {}
        for name, value in args:
            key = name if name is not None else next(order, None)
            if key is not None:
                params[key] = value
        pattern = _scalar(params.get("pattern"))
        replacement = _scalar(params.get("replacement"))
        if not isinstance(pattern, str) or not isinstance(replacement, str):
            raise CitationSyntaxError(f"Error in {call.source} : invalid pattern", call.line)
        if params.get("fixed") is True:
            pattern = re.escape(pattern)
            replacement = replacement.replace("\\", "\\\\")
        if params.get("ignore.case") is True:
            pattern = f"(?i){pattern}"
        try:
            regex = re.compile(pattern)
        except re.error as e:
            raise CitationSyntaxError(f"Error in {call.source} : {e}", call.line) from e
        values = [regex.sub(replacement, s, count=count) for s in _strings(params.get("x"))]
        return values[0] if len(values) == 1 else values

    def _sub(self, call: Call, args: list[tuple[str | None, Any]]) -> Any:
        return self._regex_sub(call, args, count=1)

    def _gsub(self, call: Call, args: list[tuple[str | None, Any]]) -> Any:
        return self._regex_sub(call, args, count=0)

    def _format(self, call: Call, args: list[tuple[str | None, Any]]) -> Any:
        positional = [value for name, value in args if name is None]
        named = {name: value for name, value in args if name is not None}
        if not positional:
            raise CitationSyntaxError(
                f'Error in {call.source} : argument "x" is missing', call.line
            )
        value = positional[0]
        fmt = named.get("format", positional[1] if len(positional) > 1 else None)
        if isinstance(value, date) and isinstance(fmt, str):
            return value.strftime(fmt)
        strings = _strings(value)
        return strings[0] if len(strings) == 1 else strings

    def _as_character(self, call: Call, args: list[tuple[str | None, Any]]) -> Any:
        strings = [s for _, value in args for s in _strings(value)]
        return strings[0] if len(strings) == 1 else strings


def _scalar(value: Any) -> Any:
    """Collapse a length-one vector to its element; join longer string vectors."""
    if isinstance(value, list):
        if not value:
            return None
        if len(value) == 1:
            return value[0]
        return ", ".join(str(v) for v in value)
    return value


def _is_r_null(value: Any) -> bool:
    return value is None or (isinstance(value, list) and not value)


def _is_people(value: Any) -> bool:
    if isinstance(value, Person):
        return True
    return isinstance(value, list) and bool(value) and all(isinstance(v, Person) for v in value)


def _strings(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, list):
        return [s for v in value for s in _strings(v)]
    if isinstance(value, Mapping):
        return [s for v in value.values() for s in _strings(v)]
    if isinstance(value, bool):
        return ["TRUE" if value else "FALSE"]
    if isinstance(value, Person):
        return [value.display_name()]
    return [str(value)]


def _people(value: Any) -> tuple[Person, ...]:
    if value is None:
        return ()
    if isinstance(value, Person):
        return (value,)
    if isinstance(value, str):
        return tuple(parse_people_string(value))
    if isinstance(value, list):
        people: list[Person] = []
        for item in value:
            if isinstance(item, Person):
                people.append(item)
            elif isinstance(item, str):
                people.append(parse_name(item))
        return tuple(people)
    return ()


def parse_rcitation(text: str, meta: Mapping[str, Any] | None = None) -> list[BibEntry]:
    """Evaluate an R CITATION file and collect its bibliographic entries.

    Parameters
    ----------
    text : str
        File content.
    meta : Mapping[str, Any] | None, optional
        Package metadata bound to ``meta`` (DESCRIPTION fields). ``meta$X``
        evaluates to NULL when the field or the mapping is missing.

    Returns
    -------
    list[BibEntry]
        Entries in source order.

    Raises
    ------
    CitationSyntaxError
        On syntax errors, unknown functions, undefined variables and
        self-referential ``citation()`` calls.
    """
    statements = _Parser(text, tokenize(text)).parse_program()
    return _Evaluator(meta).run(statements)
