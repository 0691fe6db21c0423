"""Token-to-regex compiler.

Turns a token list into one anchored regular expression. Every parameter
becomes exactly one capturing group, in order, so group *i* of a match
corresponds to ``keys[i - 1]``.
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass

from routepath.config import DEFAULT_DELIMITER, DEFAULT_DELIMITERS, PathOptions, resolve_options
from routepath.parser import escape_string, parse
from routepath.tokens import Literal, Parameter, Token

# Capturing groups only: "(" not followed by "?"
_CAPTURE_GROUP_RE = re.compile(r"\((?!\?)")

# Python's "$" also matches before a trailing newline
_END_OF_STRING = r"\Z"


@dataclass(frozen=True, slots=True)
class CompiledMatcher:
    """A template compiled for matching: the regex plus its parameter keys."""

    regex: re.Pattern[str]
    keys: tuple[Parameter, ...]


def _flags(options: PathOptions) -> int:
    return 0 if options.sensitive else re.IGNORECASE


def tokens_to_regexp(
    tokens: Sequence[Token],
    keys: list[Parameter] | None = None,
    options: PathOptions | None = None,
) -> re.Pattern[str]:
    """Compile *tokens* into a regular expression.

    Parameter tokens are appended to *keys* (when given) in group order.
    """
    opts = resolve_options(options)
    delimiter = escape_string(opts.delimiter or DEFAULT_DELIMITER)
    delimiters = opts.delimiters or DEFAULT_DELIMITERS
    ends_with = "|".join([*(escape_string(t) for t in opts.ends_with), _END_OF_STRING])

    route = "^" if opts.start else ""
    is_end_delimited = not tokens
    last = len(tokens) - 1

    for i, token in enumerate(tokens):
        if isinstance(token, Literal):
            route += escape_string(token.text)
            is_end_delimited = i == last and bool(token.text) and token.text[-1] in delimiters
            continue

        capture = token.pattern
        if token.repeat:
            capture = (
                f"(?:{token.pattern})(?:{escape_string(token.delimiter)}(?:{token.pattern}))*"
            )

        if keys is not None:
            keys.append(token)

        prefix = escape_string(token.prefix)
        if token.optional:
            if token.partial:
                route += f"{prefix}({capture})?"
            else:
                route += f"(?:{prefix}({capture}))?"
        else:
            route += f"{prefix}({capture})"

    if opts.end:
        if not opts.strict:
            route += f"(?:{delimiter})?"
        route += _END_OF_STRING if ends_with == _END_OF_STRING else f"(?={ends_with})"
    else:
        if not opts.strict:
            route += f"(?:{delimiter}(?={ends_with}))?"
        if not is_end_delimited:
            route += f"(?={delimiter}|{ends_with})"

    return re.compile(route, _flags(opts))


def regexp_to_regexp(
    pattern: re.Pattern[str],
    keys: list[Parameter] | None = None,
) -> re.Pattern[str]:
    """Pass a pre-built regex through, recording one positional key per group."""
    if keys is None:
        return pattern

    for i, _ in enumerate(_CAPTURE_GROUP_RE.findall(pattern.pattern)):
        keys.append(Parameter(name=i, delimiter=""))

    return pattern


def array_to_regexp(
    paths: Sequence[str | re.Pattern[str]],
    keys: list[Parameter] | None = None,
    options: PathOptions | None = None,
) -> re.Pattern[str]:
    """Join several templates or regexes into one alternation."""
    parts = [path_to_regexp(path, keys, options).pattern for path in paths]
    return re.compile(f"(?:{'|'.join(parts)})", _flags(resolve_options(options)))


def path_to_regexp(
    path: str | re.Pattern[str] | Sequence[str | re.Pattern[str]],
    keys: list[Parameter] | None = None,
    options: PathOptions | None = None,
) -> re.Pattern[str]:
    """Compile a template, a regex, or a list of either into a regex."""
    if isinstance(path, re.Pattern):
        return regexp_to_regexp(path, keys)
    if isinstance(path, str):
        return tokens_to_regexp(parse(path, options), keys, options)
    return array_to_regexp(path, keys, options)


def compile_matcher(template: str, options: PathOptions | None = None) -> CompiledMatcher:
    """Compile *template* into a ``CompiledMatcher``."""
    keys: list[Parameter] = []
    regex = tokens_to_regexp(parse(template, options), keys, options)
    return CompiledMatcher(regex=regex, keys=tuple(keys))
