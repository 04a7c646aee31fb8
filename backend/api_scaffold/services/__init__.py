"""Services — resource definitions and pre-persistence transforms.

Invariants:
    - Transforms return new mappings; they never mutate their inputs
"""
