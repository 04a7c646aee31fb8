"""API Layer — FastAPI routes, the generic REST controller, and error handlers.

Invariants:
    - Routes registered explicitly through ROUTE_TABLE in main.py (no auto-discovery)
    - Every response body is produced by RestRequest
"""
