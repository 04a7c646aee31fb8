"""User ORM — persists the principals that can log in.

Invariants:
    - email is unique and non-nullable
    - password holds a bcrypt hash, never plaintext (hashed by the
      pre-persistence transform in services/resources.py)
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from api_scaffold.db.base import Base, TimestampMixin


class User(TimestampMixin, Base):
    """User entity — a principal with an email/password credential."""
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
