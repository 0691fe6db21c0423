"""Token-to-generator compiler.

A ``PathGenerator`` owns a token list plus one precompiled validation regex
per distinct parameter pattern. Generating a path is a single pass over the
tokens; every substituted value is percent-encoded and must fully match
its pattern.

Usage::

    to_path = compile("/users/:id(\\d+)")
    to_path({"id": 42})        # "/users/42"
    to_path({"id": "abc"})     # ValidationError
"""

import math
import re
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any, TypeAlias
from urllib.parse import quote

from routepath.config import PathOptions
from routepath.errors import ValidationError
from routepath.parser import parse
from routepath.tokens import Literal, Parameter, Token

# (value, token) -> encoded segment
Encoder: TypeAlias = Callable[[str, Parameter], str]

# Characters encodeURIComponent leaves alone on top of quote()'s unreserved set
_URI_COMPONENT_SAFE = "!~*'()"


def encode_uri_component(value: str, token: Parameter | None = None) -> str:
    """Percent-encode *value* as a single path segment (UTF-8)."""
    return quote(value, safe=_URI_COMPONENT_SAFE)


def _stringify(value: str | int | float | bool) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        # Integral floats below 1e21 print without exponent or ".0"
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
    return str(value)


def _lookup(params: Mapping[Any, Any] | None, name: str | int) -> Any:
    if not params:
        return None
    value = params.get(name)
    if value is None and isinstance(name, int):
        value = params.get(str(name))
    return value


class PathGenerator:
    """Substitutes parameter values into a compiled template.

    Stateless after construction: one instance can be shared and called
    with different parameter sets from any thread.
    """

    __slots__ = ("_tokens", "_validators")

    def __init__(self, tokens: Iterable[Token]) -> None:
        self._tokens: tuple[Token, ...] = tuple(tokens)
        # Keyed by pattern source; parameters sharing a pattern share a regex
        self._validators: dict[str, re.Pattern[str]] = {
            token.pattern: re.compile(f"(?:{token.pattern})")
            for token in self._tokens
            if isinstance(token, Parameter)
        }

    @property
    def tokens(self) -> tuple[Token, ...]:
        return self._tokens

    def __call__(
        self,
        params: Mapping[Any, Any] | None = None,
        *,
        encode: Encoder | None = None,
        pretty: bool = False,
    ) -> str:
        return self.generate(params, encode=encode, pretty=pretty)

    def __repr__(self) -> str:
        return f"PathGenerator(tokens={list(self._tokens)!r})"

    def generate(
        self,
        params: Mapping[Any, Any] | None = None,
        *,
        encode: Encoder | None = None,
        pretty: bool = False,
    ) -> str:
        """Build a path from *params*.

        ``encode`` replaces the default ``encode_uri_component``. ``pretty``
        is accepted for compatibility and does not change the output.

        Raises ``ValidationError`` when a required parameter is missing, a
        required sequence is empty, or a value does not match its pattern.
        """
        encoder = encode or encode_uri_component
        parts: list[str] = []

        for token in self._tokens:
            if isinstance(token, Literal):
                parts.append(token.text)
                continue

            validator = self._validators[token.pattern]
            value = _lookup(params, token.name)

            if isinstance(value, (list, tuple)):
                parts.extend(self._repeated(token, validator, value, encoder))
                continue

            if isinstance(value, (str, int, float)):
                segment = encoder(_stringify(value), token)
                if not validator.fullmatch(segment):
                    msg = f'Expected "{token.name}" to match "{token.pattern}", but got "{segment}"'
                    raise ValidationError(msg, token.name, pattern=token.pattern, value=segment)
                parts.append(token.prefix + segment)
                continue

            if token.optional:
                # Keep the prefix attached to the literal that follows
                if token.partial:
                    parts.append(token.prefix)
                continue

            expected = "a sequence" if token.repeat else "a string"
            raise ValidationError(f'Expected "{token.name}" to be {expected}', token.name)

        return "".join(parts)

    @staticmethod
    def _repeated(
        token: Parameter,
        validator: re.Pattern[str],
        values: Sequence[Any],
        encoder: Encoder,
    ) -> list[str]:
        if not token.repeat:
            msg = f'Expected "{token.name}" to not repeat, but got a sequence'
            raise ValidationError(msg, token.name)

        if not values:
            if token.optional:
                return []
            raise ValidationError(f'Expected "{token.name}" to not be empty', token.name)

        parts: list[str] = []
        for i, value in enumerate(values):
            segment = encoder(_stringify(value), token)
            if not validator.fullmatch(segment):
                msg = (
                    f'Expected all "{token.name}" to match "{token.pattern}", '
                    f'but got "{segment}"'
                )
                raise ValidationError(msg, token.name, pattern=token.pattern, value=segment)
            parts.append((token.prefix if i == 0 else token.delimiter) + segment)
        return parts


def tokens_to_function(tokens: Iterable[Token]) -> PathGenerator:
    """Compile an already-parsed token list into a ``PathGenerator``."""
    return PathGenerator(tokens)


def compile(template: str, options: PathOptions | None = None) -> PathGenerator:  # noqa: A001
    """Parse and compile *template* into a ``PathGenerator``."""
    return tokens_to_function(parse(template, options))
