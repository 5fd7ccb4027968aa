"""Services Layer — user domain service and the request pipeline.

Invariants:
    - UserService is the only component that causes durable state change
    - The pipeline orchestrates; it never writes

Design Decisions:
    - Collaborators injected through constructors, never looked up globally
"""
