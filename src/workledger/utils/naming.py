"""
Naming utilities for WorkLedger.
"""

import re


_FIRST_CAP_RE = re.compile("(.)([A-Z][a-z]+)")
_ALL_CAP_RE = re.compile("([a-z0-9])([A-Z])")
_SAFE_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def camel_to_snake(name: str) -> str:
    step1 = _FIRST_CAP_RE.sub(r"\1_\2", name)
    return _ALL_CAP_RE.sub(r"\1_\2", step1).lower()


def table_name_for(type_tag: type) -> str:
    """
    Storage name for a type tag.

    An inner ``Meta`` class with a ``table`` attribute overrides the default
    ``snake_case`` class name. The result is validated so it can be quoted
    safely into SQL.
    """
    meta = getattr(type_tag, "Meta", None)
    name = getattr(meta, "table", None) or camel_to_snake(type_tag.__name__)
    if not _SAFE_NAME_RE.match(name):
        raise ValueError(f"Unsafe table name {name!r} for {type_tag.__name__}")
    return name
