"""
Base model class for all SQLAlchemy models in the vet-frontdesk package.

Every model mirrors a record owned by the clinic backend. The primary key is
the backend's integer id, never generated locally, and each row remembers
when it was last fetched.

Example:
    >>> from vet_frontdesk.models.base import BaseModel
    >>> from sqlalchemy.orm import Mapped, mapped_column
    >>> from sqlalchemy import String

    >>> class Species(BaseModel):
    ...     __tablename__ = "species"
    ...     name: Mapped[str] = mapped_column(String(100))

    >>> species = Species(id=4, name="Felino")
    >>> species.to_dict()["name"]
    'Felino'
"""

from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, TypeVar

from sqlalchemy import DateTime, Integer
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from ..utils.datetime_utils import get_current_utc

# Type variable for model classes
T = TypeVar("T", bound="BaseModel")


class Base(DeclarativeBase):
    """Base declarative class for all SQLAlchemy models."""


class BaseModel(Base):
    """
    Abstract base model class providing common functionality for all entities.

    Attributes:
        id (int): Identifier assigned by the backend
        fetched_at (datetime): When this copy was loaded from the backend (UTC)

    Note:
        This is an abstract base class and cannot be instantiated directly.
        All concrete models must define a __tablename__ attribute.
    """

    __abstract__ = True

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=False,
    )

    fetched_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=get_current_utc,
    )

    def __repr__(self) -> str:
        """
        Return string representation of the model instance.

        Returns:
            String in format: <ModelName(id=42)>
        """
        return f"<{self.__class__.__name__}(id={self.id})>"

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert model instance to dictionary representation.

        Converts column values to JSON-serializable types:
        - dates, times and datetimes to ISO format strings
        - Decimal values to strings
        - enums to their values

        Returns:
            Dictionary with attribute names as keys and serialized values.
        """
        result: Dict[str, Any] = {}
        for attribute in self.__mapper__.column_attrs:
            value = getattr(self, attribute.key)
            if isinstance(value, (datetime, date, time)):
                result[attribute.key] = value.isoformat()
            elif isinstance(value, Decimal):
                result[attribute.key] = str(value)
            elif isinstance(value, Enum):
                result[attribute.key] = value.value
            else:
                result[attribute.key] = value
        return result

    @classmethod
    def get_table_name(cls) -> str:
        """Get the database table name for this model."""
        return cls.__tablename__

    def update_fields(self, **kwargs) -> None:
        """
        Update multiple fields on the model instance in a single operation.

        Args:
            **kwargs: Field names as keys and new values as values.
                     Only existing model attributes can be updated.

        Raises:
            AttributeError: If any field name doesn't exist on the model.
        """
        for field, value in kwargs.items():
            if hasattr(self, field):
                setattr(self, field, value)
            else:
                raise AttributeError(
                    f"'{self.__class__.__name__}' has no attribute '{field}'"
                )
