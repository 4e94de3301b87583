"""Preference model for locally persisted settings."""
import enum

from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func

from resource_tracker.database import Base


class Theme(str, enum.Enum):
    """Colour theme of the interface."""
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


class Preference(Base):
    """Local preference - stored in database, independent of the signed-in identity."""
    __tablename__ = "preferences"

    id = Column(Integer, primary_key=True, index=True)
    key = Column(String(100), unique=True, index=True, nullable=False)
    value = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now())


# Default preference keys
PREFERENCE_KEYS = {
    "theme": {
        "default": Theme.SYSTEM.value,
        "description": "Colour theme of the interface: light, dark or system"
    }
}
