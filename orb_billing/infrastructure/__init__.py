"""Infrastructure Layer — the HTTP exchange, pagination and logging setup.

Invariants:
    - Every network call goes through RequestExecutor (retry/timeout/error mapping)
    - Infrastructure decides when to retry; core decides what is retryable

Design Decisions:
    - Resilient wrapper over a raw httpx.AsyncClient (single responsibility)
"""
