"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses)
    - Request schemas reject unknown fields (extra="forbid")
    - Wire format is camelCase; snake_case names also accepted on input

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
