"""Literal and Parameter frozen dataclasses produced by the tokenizer."""

from dataclasses import dataclass
from typing import TypeAlias


@dataclass(frozen=True, slots=True)
class Literal:
    """Verbatim text, emitted as-is and matched escaped."""

    text: str


@dataclass(frozen=True, slots=True)
class Parameter:
    """A parsed parameter of a path template.

    Named:     ``/:id``       (name="id", prefix="/")
    Unnamed:   ``/(\\d+)``    (name=0, pattern="\\d+")
    Repeated:  ``/:path+``    (repeat=True)
    Optional:  ``/:key?``     (optional=True)
    Partial:   ``/:file.png`` (partial=True, the ``/`` is attached to ``.png``)
    """

    name: str | int
    prefix: str = ""
    delimiter: str = "/"
    optional: bool = False
    repeat: bool = False
    partial: bool = False
    pattern: str = ""


Token: TypeAlias = Literal | Parameter
