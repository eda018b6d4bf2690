from datetime import datetime, timezone
from enum import Enum as PyEnum
from typing import Optional, Type
from sqlalchemy import BigInteger, Enum, Integer
from sqlmodel import SQLModel

# SQLite only auto-increments INTEGER PRIMARY KEY columns
BigIntId = BigInteger().with_variant(Integer, "sqlite")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to timestamps read back naive (SQLite drops the offset)"""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def enum_column_type(enum_class: Type[PyEnum], name: str) -> Enum:
    """String backed enum type that stores member values, not member names"""
    return Enum(
        enum_class,
        name=name,
        native_enum=False,
        values_callable=lambda members: [member.value for member in members],
        validate_strings=True,
        create_constraint=True,
    )


class BaseModel(SQLModel):
    """Common base for all persisted domain entities"""
    pass
