"""ORM Models — SQLAlchemy declarative models for every exposed resource.

Invariants:
    - All models inherit from Base (db/base.py)
    - Every model has an integer id and server-managed timestamps

Design Decisions:
    - One file per entity
    - All models imported here so Base.metadata is complete before create_all
      or alembic autogenerate runs
"""

from api_scaffold.models.user import User  # noqa: F401
from api_scaffold.models.category import Category  # noqa: F401
