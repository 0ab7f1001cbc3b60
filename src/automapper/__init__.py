"""
automapper.

Map values between two dataclass families with compatible fields, such as
transfer objects and internal domain types, without per-type conversion code.

Programmatic usage::

    from dataclasses import dataclass

    import automapper

    @dataclass
    class UserDTO:
        username: str = ""
        age: int = 0

    @dataclass
    class User:
        name: str = automapper.field("username", default="")
        age: float = 0.0

    user = automapper.map_to_destination(UserDTO("ada", 36), User())
    automapper.map_from_source_map({"age": 37}, user)

CLI usage::

    automapper map user.json myapp.models:User
    automapper convert user.json myapp.dto:UserDTO myapp.models:User
"""

__version__ = "0.1.0"

from .constants import Direction
from .engine import MappingEngine
from .errors import (
    DestNotAddressableError,
    FieldResolutionError,
    MappingError,
    TypeIncompatibleError,
)
from .fields import field
from .mappers.base import MappingContext
from .mapping import map_from_source, map_from_source_map, map_loose, map_to_destination

__all__ = [
    "map_to_destination",
    "map_from_source",
    "map_from_source_map",
    "map_loose",
    "field",
    "Direction",
    "MappingContext",
    "MappingEngine",
    "MappingError",
    "DestNotAddressableError",
    "FieldResolutionError",
    "TypeIncompatibleError",
    "__version__",
]
