"""Core — framework-free building blocks shared by controllers and persistence.

Invariants:
    - Core never imports FastAPI, SQLAlchemy, or any infrastructure module
    - Functions here never mutate their inputs
"""
