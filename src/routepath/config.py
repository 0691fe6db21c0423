"""Compilation options.

PathOptions is a frozen dataclass — immutable after creation, shared freely
between the tokenizer and both compilers.
"""

from dataclasses import dataclass, replace
from typing import Any

DEFAULT_DELIMITER = "/"
DEFAULT_DELIMITERS = "./"


@dataclass(frozen=True, slots=True)
class PathOptions:
    """Flags controlling how templates are parsed and compiled.

    All fields have defaults matching express-style routing. Override what
    you need::

        options = PathOptions(sensitive=True, strict=True)
    """

    # Matching
    sensitive: bool = False  # Case-sensitive regex (otherwise re.IGNORECASE)
    strict: bool = False  # Disallow an optional trailing delimiter
    start: bool = True  # Anchor at the start of the string
    end: bool = True  # Anchor at the end of the string

    # Tokenizing
    delimiter: str = DEFAULT_DELIMITER
    delimiters: str = DEFAULT_DELIMITERS  # Characters that may become a parameter prefix

    # Extra terminators accepted in place of end-of-string
    ends_with: tuple[str, ...] = ()

    def with_overrides(self, **changes: Any) -> "PathOptions":
        """Return a copy with *changes* applied."""
        return replace(self, **changes)


DEFAULT_OPTIONS = PathOptions()


def resolve_options(options: PathOptions | None) -> PathOptions:
    """Return *options* or the shared defaults."""
    return DEFAULT_OPTIONS if options is None else options
