"""Services Layer — one resource class per Orb API area.

Invariants:
    - Each method builds exactly one Operation and hands it to the executor or a Pager
    - No retry, logging or decoding logic lives here

Design Decisions:
    - One file per resource for locality (no god client object)
"""
