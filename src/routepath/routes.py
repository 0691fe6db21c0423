"""Named route table.

Maps route names to path templates and builds concrete paths from them::

    routes = RoutePaths({
        "home": "/",
        "profile": RouteEntry("/profile/:id", params={"id": ""}),
    })
    routes.path("profile", {"id": 1})            # "/profile/1"
    routes.path("profile", {"id": 1}, "tab=2")   # "/profile/1?tab=2"
    routes.path("profile")                       # "/profile/:id"
    routes.root_path("profile")                  # "/profile"

A template that cannot be filled from the given params, or that does not
compile, falls back to the raw template instead of raising.
"""

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlencode

from routepath.cache import generate_path, root_path
from routepath.errors import InvalidRouteKey, TemplateSyntaxError, ValidationError

logger = logging.getLogger("routepath.routes")

Query = str | Mapping[str, Any]


@dataclass(frozen=True, slots=True)
class RouteEntry:
    """A named route: its template and the parameter shape it documents."""

    value: str
    params: Mapping[str, Any] | None = None


def _coerce_entry(key: str, entry: str | RouteEntry | Mapping[str, Any]) -> RouteEntry:
    if isinstance(entry, RouteEntry):
        return entry
    if isinstance(entry, str):
        return RouteEntry(value=entry)
    if "value" not in entry:
        msg = f"Route {key!r} has no 'value' template"
        raise ValueError(msg)
    return RouteEntry(value=entry["value"], params=entry.get("params"))


def _join_query(path: str, query: Query | None) -> str:
    if not query:
        return path
    if not isinstance(query, str):
        query = urlencode(query, doseq=True)
    return f"{path}?{query}"


class RoutePaths:
    """Immutable lookup table of named path templates."""

    __slots__ = ("_routes",)

    def __init__(self, routes: Mapping[str, str | RouteEntry | Mapping[str, Any]]) -> None:
        self._routes: dict[str, RouteEntry] = {
            key: _coerce_entry(key, entry) for key, entry in routes.items()
        }

    def _entry(self, key: str) -> RouteEntry:
        try:
            return self._routes[key]
        except KeyError:
            raise InvalidRouteKey(key) from None

    @property
    def routes(self) -> dict[str, RouteEntry]:
        """A copy of the table."""
        return dict(self._routes)

    @property
    def keys(self) -> list[str]:
        return list(self._routes)

    def as_list(self) -> list[RouteEntry]:
        return list(self._routes.values())

    def is_route(self, key: object) -> bool:
        return key in self._routes

    def __contains__(self, key: object) -> bool:
        return key in self._routes

    def __len__(self) -> int:
        return len(self._routes)

    def __iter__(self) -> Iterator[str]:
        return iter(self._routes)

    def path(
        self,
        key: str,
        params: Mapping[Any, Any] | None = None,
        query: Query | None = None,
    ) -> str:
        """Return the path for *key*.

        Without *params* the raw template is returned unchanged.
        Raises ``InvalidRouteKey`` if *key* is not registered.
        """
        if params is not None:
            return self.path_params(key, params, query)
        return _join_query(self._entry(key).value, query)

    def path_params(
        self,
        key: str,
        params: Mapping[Any, Any],
        query: Query | None = None,
    ) -> str:
        """Fill the template for *key* with *params*.

        Falls back to the raw template when the params do not satisfy it
        or the template itself does not compile.
        """
        template = self._entry(key).value
        try:
            path = generate_path(template, params)
        except (ValidationError, TemplateSyntaxError) as exc:
            logger.debug("Route %r: falling back to %r: %s", key, template, exc)
            return _join_query(template, query)
        return _join_query(path, query)

    def root_path(self, key: str) -> str:
        """Static prefix of the template for *key* (``/users/:id`` -> ``/users``)."""
        return root_path(self._entry(key).value)
