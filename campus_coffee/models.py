"""
Pydantic models for CampusCoffee data structures
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


# ============================================================
# Point of Sale
# ============================================================

class PosType(str, Enum):
    CAFE = "CAFE"
    VENDING_MACHINE = "VENDING_MACHINE"
    BAKERY = "BAKERY"
    CAFETERIA = "CAFETERIA"


class Pos(BaseModel):
    """A coffee-selling location"""
    # Records handed out by the repository must not be changed in place
    model_config = ConfigDict(frozen=True)

    id: Optional[int] = None  # Assigned by the repository on first save
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    name: str
    description: str = ""
    type: PosType = PosType.CAFE

    street: str
    house_number: str
    postal_code: Optional[str] = None
    city: Optional[str] = None

    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)

    @field_validator("name", "street", "house_number")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be blank")
        return value


# ============================================================
# Error payload
# ============================================================

class ErrorResponse(BaseModel):
    """Body returned to API clients for any failed request"""
    error_code: str
    message: str
    status_code: int
    status_message: str
    timestamp: datetime
    path: str = "unknown"
