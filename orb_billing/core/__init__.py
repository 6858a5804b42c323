"""Core Layer — pure request/response logic, no IO, no network.

Invariants:
    - No module in core/ imports from services/ or infrastructure/
    - All functions are pure and deterministic (randomness and clocks are injected)

Design Decisions:
    - Functional core separated from the imperative shell: classification, codec and
      backoff are testable without a transport
"""
