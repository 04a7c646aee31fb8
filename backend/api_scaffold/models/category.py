"""Category ORM — a named grouping with a unique name."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from api_scaffold.db.base import Base, TimestampMixin


class Category(TimestampMixin, Base):
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
