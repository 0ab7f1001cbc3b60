"""Test fixtures for automapper tests."""

from .models import (
    Audit,
    ChildDest,
    ChildSource,
    DestParent,
    DestTypeA,
    FrozenDest,
    SourceParent,
    SourceTypeA,
    UserDTO,
    UserModel,
)

__all__ = [
    "Audit",
    "ChildDest",
    "ChildSource",
    "DestParent",
    "DestTypeA",
    "FrozenDest",
    "SourceParent",
    "SourceTypeA",
    "UserDTO",
    "UserModel",
]
