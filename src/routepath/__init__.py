"""routepath — path-template compiler.

Turns express-style templates like ``/profile/:id/:key?`` into regexes for
matching and into generators that build concrete, validated paths.

Basic usage::

    from routepath import generate_path, root_path

    generate_path("/profile/:id", {"id": 1})   # "/profile/1"
    root_path("/profile/:id")                  # "/profile"

Lower level::

    from routepath import compile, compile_matcher, parse

    tokens = parse("/files/:path+")
    to_path = compile("/files/:path+")
    to_path({"path": ["a", "b"]})              # "/files/a/b"
    compile_matcher("/files/:path+").regex     # re.Pattern

Template filters (``pip install routepath[templating]``)::

    from routepath.templating import register
    register(env)
"""

# Declare free-threading support (PEP 703); the generator cache is lock-guarded
_Py_mod_gil = 0

__version__ = "0.1.0"
__all__ = [
    "CompiledMatcher",
    "GeneratorCache",
    "InvalidRouteKey",
    "Literal",
    "Parameter",
    "PathGenerator",
    "PathOptions",
    "RouteEntry",
    "RoutePathError",
    "RoutePaths",
    "TemplateSyntaxError",
    "Token",
    "ValidationError",
    "compile",
    "compile_matcher",
    "generate_path",
    "parse",
    "path_to_regexp",
    "root_path",
    "tokens_to_function",
    "tokens_to_regexp",
]


# public name -> defining module
_LAZY_IMPORTS: dict[str, str] = {
    "CompiledMatcher": "routepath.matcher",
    "GeneratorCache": "routepath.cache",
    "InvalidRouteKey": "routepath.errors",
    "Literal": "routepath.tokens",
    "Parameter": "routepath.tokens",
    "PathGenerator": "routepath.generator",
    "PathOptions": "routepath.config",
    "RouteEntry": "routepath.routes",
    "RoutePathError": "routepath.errors",
    "RoutePaths": "routepath.routes",
    "TemplateSyntaxError": "routepath.errors",
    "Token": "routepath.tokens",
    "ValidationError": "routepath.errors",
    "compile": "routepath.generator",
    "compile_matcher": "routepath.matcher",
    "generate_path": "routepath.cache",
    "parse": "routepath.parser",
    "path_to_regexp": "routepath.matcher",
    "root_path": "routepath.cache",
    "tokens_to_function": "routepath.generator",
    "tokens_to_regexp": "routepath.matcher",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import routepath`` fast while providing a clean top-level API.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    from importlib import import_module

    return getattr(import_module(module_name), name)
