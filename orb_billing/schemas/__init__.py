"""Pydantic Schemas — request bodies, query filters and decoded Orb resources.

Invariants:
    - Schemas validate at the system boundary (caller input, API responses)
    - Domain enums from core/ used for enum fields

Design Decisions:
    - Request models forbid unknown fields; response models ignore them
"""
