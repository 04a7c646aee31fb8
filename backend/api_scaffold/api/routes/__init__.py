"""Route Modules — one file per resource/concern.

Invariants:
    - Each module defines its own APIRouter; the mount prefix and guard come
      from ROUTE_TABLE in main.py
    - Routes never contain business logic (delegate to controllers)
"""
