"""
Entity base class and introspection helpers.
"""

from .entity import (
    Entity,
    assign_identity,
    is_entity,
    natural_identity_of,
    to_document,
    type_tag_of,
)

__all__ = [
    "Entity",
    "assign_identity",
    "is_entity",
    "natural_identity_of",
    "to_document",
    "type_tag_of",
]
