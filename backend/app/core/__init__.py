"""Core Layer — dispatch engine contracts: registry, resolver, binder, gate, envelopes.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Registry, resolver, binder and gate are pure and deterministic
    - Handlers reach IO only through the execution scope protocol

Design Decisions:
    - Functional core separated from imperative shell (ADR: ExMA impureim sandwich)
"""
