"""routepath exception hierarchy.

Shared across the tokenizer, both compilers, and the route wrapper so every
module raises and catches the same types.
"""


class RoutePathError(Exception):
    """Base for all routepath-specific errors."""


class TemplateSyntaxError(RoutePathError, ValueError):
    """Raised when a template cannot be tokenized.

    Unterminated, empty, or nested parameter groups and stray closing
    parentheses are rejected instead of being silently read as text.
    """

    def __init__(self, message: str, template: str, index: int) -> None:
        self.template = template
        self.index = index
        super().__init__(f"{message} at index {index} in {template!r}")


class ValidationError(RoutePathError, TypeError):
    """Raised by a generator when a parameter value cannot be substituted.

    ``param`` is the offending parameter name. ``pattern`` and ``value`` are
    set when a supplied value failed its pattern test.
    """

    def __init__(
        self,
        message: str,
        param: str | int,
        pattern: str | None = None,
        value: str | None = None,
    ) -> None:
        self.param = param
        self.pattern = pattern
        self.value = value
        super().__init__(message)


class InvalidRouteKey(RoutePathError, KeyError):  # noqa: N818 — mirrors KeyError
    """Raised when a route name is not registered in a RoutePaths table."""

    def __init__(self, key: object) -> None:
        self.key = key
        super().__init__(f"Invalid key: {key}")

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message.
        return str(self.args[0])
