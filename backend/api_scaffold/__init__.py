"""REST API Scaffold — generic CRUD controllers over SQLAlchemy models with JWT auth.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""
