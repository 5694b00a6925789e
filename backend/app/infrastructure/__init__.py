"""Infrastructure Layer — persistence, security and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or modules/
    - SQLAlchemy errors surfacing from a session are mapped to DatabaseError

Design Decisions:
    - Thin wrappers over SQLAlchemy and python-jose (ADR: ExMA single responsibility)
"""
