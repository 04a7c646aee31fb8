"""Pydantic Schemas — attribute validation for persisted resources and auth payloads.

Invariants:
    - Resource schemas list only caller-writable attributes; server-managed
      fields (id, timestamps) are dropped by extra="ignore"
    - Schemas validate at the persistence boundary so the generic controller
      can accept arbitrary JSON objects

Design Decisions:
    - Separate from models: schemas are contracts, models are persistence
"""
