"""Services Layer — dispatcher and per-call execution scope.

Invariants:
    - The dispatcher is the only component the transport calls
    - One execution scope (session, identity, repositories) per call

Design Decisions:
    - Handler tables live in modules/, one registration call per module
      (ADR: ExMA no auto-discovery)
"""
