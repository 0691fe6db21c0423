"""Template tokenizer.

Scans a path template such as ``/profile/:id/:key?`` into an ordered list
of ``Literal`` and ``Parameter`` tokens. The scanner is a small state
machine over an index cursor::

    LITERAL     plain text accumulates in a buffer
    ESCAPE      ``\\X`` copies ``X`` into the buffer verbatim
    PARAM_NAME  ``:name`` reads ASCII word characters
    GROUP       ``(pattern)`` reads a custom pattern up to ``)``

Each parameter may be followed by one modifier: ``?`` (optional),
``+`` (one or more) or ``*`` (zero or more).
"""

import re
import string
from enum import Enum, auto

from routepath.config import DEFAULT_DELIMITER, DEFAULT_DELIMITERS, PathOptions, resolve_options
from routepath.errors import TemplateSyntaxError
from routepath.tokens import Literal, Parameter, Token

_WORD_CHARS = frozenset(string.ascii_letters + string.digits + "_")
_MODIFIERS = frozenset("+*?")

_ESCAPE_STRING_RE = re.compile(r"([.+*?=^!:${}()\[\]|/\\])")
_ESCAPE_GROUP_RE = re.compile(r"([=!:$/()])")


def escape_string(value: str) -> str:
    """Escape every regex metacharacter in *value*."""
    return _ESCAPE_STRING_RE.sub(r"\\\1", value)


def escape_group(group: str) -> str:
    """Escape the characters that would change the meaning of a custom group."""
    return _ESCAPE_GROUP_RE.sub(r"\\\1", group)


class _State(Enum):
    LITERAL = auto()
    ESCAPE = auto()
    PARAM_NAME = auto()
    GROUP = auto()


class _Scanner:
    """Single-pass scanner. One instance per ``parse()`` call."""

    __slots__ = (
        "_buffer",
        "_default_delimiter",
        "_delimiters",
        "_escaped",
        "_key",
        "_template",
        "_tokens",
    )

    def __init__(self, template: str, options: PathOptions) -> None:
        self._template = template
        self._default_delimiter = options.delimiter or DEFAULT_DELIMITER
        self._delimiters = options.delimiters or DEFAULT_DELIMITERS
        self._tokens: list[Token] = []
        self._buffer = ""
        # An escaped character at the end of the buffer is never a prefix
        self._escaped = False
        self._key = 0

    def run(self) -> list[Token]:
        template = self._template
        size = len(template)
        state = _State.LITERAL
        index = 0
        name_start = 0
        group_start = 0
        name: str | None = None

        while index < size:
            char = template[index]

            if state is _State.LITERAL:
                if char == "\\" and index + 1 < size:
                    state = _State.ESCAPE
                elif char == ":" and index + 1 < size and template[index + 1] in _WORD_CHARS:
                    state = _State.PARAM_NAME
                    name_start = index + 1
                elif char == "(":
                    state = _State.GROUP
                    name = None
                    group_start = index
                elif char == ")":
                    raise TemplateSyntaxError("Unbalanced ')'", template, index)
                else:
                    self._buffer += char
                index += 1

            elif state is _State.ESCAPE:
                self._buffer += char
                self._escaped = True
                state = _State.LITERAL
                index += 1

            elif state is _State.PARAM_NAME:
                if char in _WORD_CHARS:
                    index += 1
                    continue
                name = template[name_start:index]
                if char == "(":
                    state = _State.GROUP
                    group_start = index
                    index += 1
                else:
                    index = self._emit(name, None, index)
                    state = _State.LITERAL

            else:  # _State.GROUP
                if char == "\\":
                    if index + 1 >= size:
                        break
                    index += 2
                elif char == "(":
                    raise TemplateSyntaxError("Nested '(' in parameter group", template, index)
                elif char == ")":
                    pattern = template[group_start + 1 : index]
                    if not pattern:
                        raise TemplateSyntaxError("Empty parameter group", template, group_start)
                    try:
                        re.compile(escape_group(pattern))
                    except re.error as exc:
                        raise TemplateSyntaxError(
                            f"Invalid parameter pattern: {exc}", template, group_start
                        ) from exc
                    index = self._emit(name, pattern, index + 1)
                    state = _State.LITERAL
                else:
                    index += 1

        if state is _State.GROUP:
            raise TemplateSyntaxError("Unterminated parameter group", template, group_start)
        if state is _State.PARAM_NAME:
            self._emit(template[name_start:], None, size)

        self._flush()
        return self._tokens

    def _flush(self) -> None:
        if self._buffer:
            self._tokens.append(Literal(self._buffer))
            self._buffer = ""
            self._escaped = False

    def _emit(self, name: str | None, pattern: str | None, index: int) -> int:
        """Append a parameter token ending at *index*; return the new cursor."""
        template = self._template
        modifier = ""
        if index < len(template) and template[index] in _MODIFIERS:
            modifier = template[index]
            index += 1

        prefix = ""
        if not self._escaped and self._buffer and self._buffer[-1] in self._delimiters:
            prefix = self._buffer[-1]
            self._buffer = self._buffer[:-1]

        self._flush()

        following = template[index] if index < len(template) else None
        delimiter = prefix or self._default_delimiter

        key: str | int
        if name is None:
            key = self._key
            self._key += 1
        else:
            key = name

        self._tokens.append(
            Parameter(
                name=key,
                prefix=prefix,
                delimiter=delimiter,
                optional=modifier in ("?", "*"),
                repeat=modifier in ("+", "*"),
                partial=prefix != "" and following is not None and following != prefix,
                pattern=escape_group(pattern) if pattern else f"[^{escape_string(delimiter)}]+?",
            )
        )
        return index


def parse(template: str, options: PathOptions | None = None) -> list[Token]:
    """Tokenize a path template.

    Examples::

        "/users"            -> [Literal("/users")]
        "/users/:id"        -> [Literal("/users"), Parameter("id", prefix="/")]
        "/files/:path+"     -> [Literal("/files"), Parameter("path", repeat=True)]
        "/(\\d+)"           -> [Parameter(0, prefix="/", pattern="\\d+")]

    Raises ``TemplateSyntaxError`` for unterminated, empty, nested or
    uncompilable parameter groups and for a stray ``)``.
    """
    return _Scanner(template, resolve_options(options)).run()
