from .check import check
from .init import init
from .reload import reload
from .set import set_value
from .wall import wall_set

__all__ = [
    "check",
    "init",
    "reload",
    "set_value",
    "wall_set",
]
