"""
Identifier helpers for generated code.

Contract names come from Rust, so they are mostly valid Python already; the
helpers here only repair the cases that are not (keywords, stray characters)
and resolve collisions with names the generated module itself needs. A
collision is always resolved by appending ``_`` until the name is free.
"""

from __future__ import annotations

import keyword
import re
from typing import Collection, Iterable, List

__all__ = ["py_ident", "new_name", "unique_names"]

_INVALID_RE = re.compile(r"[^A-Za-z0-9_]")


def py_ident(name: str, reserved: Collection[str] = ()) -> str:
    """Return ``name`` as a valid Python identifier that is not a keyword or reserved."""
    s = _INVALID_RE.sub("_", name) or "_"
    if s[0].isdigit():
        s = f"_{s}"
    while keyword.iskeyword(s) or s in reserved:
        s = f"{s}_"
    return s


def new_name(name: str, taken: Iterable[str]) -> str:
    """
    Generate a name not already used by one of ``taken`` (e.g. the argument
    names of a message), by appending ``_`` until it is free.
    """
    taken = list(taken)
    while any(t == name for t in taken):
        name = f"{name}_"
    return name


def unique_names(names: Iterable[str], reserved: Collection[str] = ()) -> List[str]:
    """
    Make each name a unique identifier, in order. Earlier names keep their
    spelling; later duplicates (and anything reserved) get ``_`` suffixes.
    """
    seen = set(reserved)
    out: List[str] = []
    for n in names:
        ident = py_ident(n, seen)
        seen.add(ident)
        out.append(ident)
    return out
