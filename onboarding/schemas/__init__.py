"""Pydantic Schemas — response contracts for API endpoints.

Invariants:
    - Request payloads are checked by core/validate_payload.py, not by schemas

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence (ADR: DDD boundary)
"""
