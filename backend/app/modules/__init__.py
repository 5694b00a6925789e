"""Handler Modules — one package per ModuleName, each with an explicit registration table.

Invariants:
    - Every handler is listed in its module's register_* function (no scanning)
    - Modules never import each other

Design Decisions:
    - Registration tables over auto-discovery (ADR: ExMA no convention-over-config)
"""
