"""Pydantic Schemas — parameter and response models for the admin handlers.

Invariants:
    - Schemas validate at system boundary (handler input, handler output)
    - Wire names are PascalCase (PascalModel), Python names snake_case

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence (ADR: DDD boundary)
    - Each parameter model carries its own rules (validation_rules)
"""
