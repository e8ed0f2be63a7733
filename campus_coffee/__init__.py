"""
CampusCoffee

Points of Sale management with import from OpenStreetMap nodes
"""

from .models import Pos, PosType, ErrorResponse
from .repository import PosRepository, InMemoryPosRepository
from .service import PosService
from .errors import ErrorKind, translate

__version__ = "0.1.0"

__all__ = [
    "Pos",
    "PosType",
    "ErrorResponse",
    "PosRepository",
    "InMemoryPosRepository",
    "PosService",
    "ErrorKind",
    "translate",
]
