"""Kida template integration (``pip install routepath[templating]``).

Registers path filters and an optional named-route global on a kida
Environment::

    {{ "/users/:id" | generate_path(id=user.id) }}
    {{ "/users/:id" | root_path }}
    {{ route_path("profile", id=user.id) }}
"""

from collections.abc import Callable
from typing import Any

from kida import Environment

from routepath.cache import generate_path, root_path
from routepath.routes import Query, RoutePaths


def generate_path_filter(template: str, **params: Any) -> str:
    """Fill *template* with keyword params. Raises ``ValidationError``."""
    return generate_path(template, params)


def root_path_filter(template: str) -> str:
    """Static prefix of *template*."""
    return root_path(template)


BUILTIN_FILTERS: dict[str, Callable[..., Any]] = {
    "generate_path": generate_path_filter,
    "root_path": root_path_filter,
}


def route_path_global(routes: RoutePaths) -> Callable[..., str]:
    """Build the ``route_path(key, query=None, **params)`` template global."""

    def route_path(key: str, query: Query | None = None, **params: Any) -> str:
        return routes.path(key, params or None, query)

    return route_path


def register(env: Environment, routes: RoutePaths | None = None) -> Environment:
    """Add routepath filters (and ``route_path`` when *routes* is given) to *env*."""
    env.update_filters(BUILTIN_FILTERS)
    if routes is not None:
        env.add_global("route_path", route_path_global(routes))
    return env
