"""Process-wide generator cache and the two public entry points.

``generate_path`` compiles each template once and reuses the generator;
``root_path`` returns the static prefix of a template.
"""

import threading
from collections.abc import Mapping
from typing import Any

from routepath.errors import TemplateSyntaxError
from routepath.generator import PathGenerator, compile
from routepath.parser import parse
from routepath.tokens import Literal

DEFAULT_CACHE_LIMIT = 10_000


class GeneratorCache:
    """Fill-once cache of compiled generators keyed by template string.

    Templates are cached until ``limit`` entries exist. After that, new
    templates are compiled on every call and never cached; existing entries
    are never evicted or replaced. Long-running processes with highly
    dynamic template sets lose caching after the first ``limit`` templates,
    which a bounded LRU would avoid.

    Compilation runs outside the lock. When two threads compile the same
    template at once, the first insert wins and both get that generator.
    """

    __slots__ = ("_entries", "_limit", "_lock")

    def __init__(self, limit: int = DEFAULT_CACHE_LIMIT) -> None:
        self._entries: dict[str, PathGenerator] = {}
        self._limit = limit
        self._lock = threading.Lock()

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def full(self) -> bool:
        with self._lock:
            return len(self._entries) >= self._limit

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, template: object) -> bool:
        with self._lock:
            return template in self._entries

    def get(self, template: str) -> PathGenerator:
        """Return the cached generator for *template*, compiling on a miss."""
        with self._lock:
            generator = self._entries.get(template)
        if generator is not None:
            return generator

        generator = compile(template)

        with self._lock:
            existing = self._entries.get(template)
            if existing is not None:
                return existing
            if len(self._entries) < self._limit:
                self._entries[template] = generator
        return generator


generator_cache = GeneratorCache()


def generate_path(template: str = "/", params: Mapping[Any, Any] | None = None) -> str:
    """Generate a concrete path from *template* and *params*.

    The root template ``"/"`` is returned as-is without compiling.
    Raises ``ValidationError`` when *params* do not satisfy the template.
    """
    if template == "/":
        return template
    return generator_cache.get(template)(params or {}, pretty=True)


def root_path(template: str) -> str:
    """Return the leading literal text of *template*.

    Examples::

        "/users/:id"   -> "/users"
        "/about"       -> "/about"
        "/:id"         -> "/:id"      (no leading literal)
    """
    try:
        tokens = parse(template)
    except TemplateSyntaxError:
        return template
    if tokens and isinstance(tokens[0], Literal):
        return tokens[0].text
    return template
