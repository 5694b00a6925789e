"""Database Infrastructure — declarative Base and shared audit columns.

Invariants:
    - Single async engine per process (initialized via init_db)
    - All sessions are async (AsyncSession)

Design Decisions:
    - asyncpg driver for PostgreSQL (ADR: native async, no thread pool overhead)
    - aiosqlite for tests and local runs (same async API, no server)
"""
