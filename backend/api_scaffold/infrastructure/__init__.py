"""Infrastructure Layer — database, security primitives, and logging.

Invariants:
    - Infrastructure never imports from api/
    - Third-party failures surface as core/errors.py types
"""
