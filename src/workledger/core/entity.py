"""
Entity introspection used by the unit of work and the bundled gateways.
"""

from __future__ import annotations

from typing import Any, Dict

IDENTITY_FIELD = "_id"
IDENTITY_ACCESSOR = "get_id"

_VALUE_TYPES = (
    str,
    bytes,
    bytearray,
    int,
    float,
    complex,
    bool,
    list,
    tuple,
    dict,
    set,
    frozenset,
)


def is_entity(value: Any) -> bool:
    """
    True for object references the unit of work can track.

    Classes, ``None`` and builtin scalar or container values are rejected.
    """
    if value is None or isinstance(value, type):
        return False
    return not isinstance(value, _VALUE_TYPES)


def type_tag_of(entity: Any) -> type:
    return type(entity)


def natural_identity_of(entity: Any) -> Any:
    accessor = getattr(entity, IDENTITY_ACCESSOR, None)
    if callable(accessor):
        return accessor()
    return getattr(entity, IDENTITY_FIELD, None)


def assign_identity(entity: Any, value: Any) -> None:
    setattr(entity, IDENTITY_FIELD, value)


def to_document(entity: Any) -> Dict[str, Any]:
    """
    Public field values of ``entity`` as a plain dictionary.

    The natural identity is stored next to the document, not inside it.
    """
    to_dict = getattr(entity, "to_dict", None)
    if callable(to_dict):
        data = dict(to_dict())
    else:
        data = {key: value for key, value in vars(entity).items() if not key.startswith("_")}
    data.pop(IDENTITY_FIELD, None)
    return data


class Entity:
    """
    Optional base class for domain objects.

    Keyword arguments become attributes; ``_id`` holds the natural identity
    and stays ``None`` until a store assigns one.
    """

    _id: Any = None

    def __init__(self, _id: Any = None, **fields: Any) -> None:
        self._id = _id
        for name, value in fields.items():
            setattr(self, name, value)

    def get_id(self) -> Any:
        return self._id

    def to_dict(self) -> Dict[str, Any]:
        return {key: value for key, value in vars(self).items() if not key.startswith("_")}

    def __repr__(self) -> str:
        field_parts = ", ".join(f"{key}={value!r}" for key, value in self.to_dict().items())
        if field_parts:
            return f"<{self.__class__.__name__} _id={self._id!r} {field_parts}>"
        return f"<{self.__class__.__name__} _id={self._id!r}>"
