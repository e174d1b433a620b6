"""
Column types shared by the entity store models.

SQLite has no exact decimal column, so money and measurements are kept as
their canonical string form and turned back into ``Decimal`` on load.
"""

from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import String, TypeDecorator
from sqlalchemy.engine import Dialect


class ExactDecimal(TypeDecorator):
    """
    Decimal column stored as text.

    Values round-trip without ever passing through a binary float.
    """

    impl = String(40)
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Dialect) -> Optional[str]:
        """Process value when storing to database."""
        if value is None:
            return None
        if not isinstance(value, Decimal):
            value = Decimal(str(value))
        return str(value)

    def process_result_value(self, value: Any, dialect: Dialect) -> Optional[Decimal]:
        """Process value when loading from database."""
        if value is None:
            return None
        return Decimal(value)

    @property
    def python_type(self) -> type:
        return Decimal
