"""Services Layer — business rules orchestrating storage I/O.

Invariants:
    - Services depend on repository protocols, never on SQLAlchemy directly

Design Decisions:
    - One service class per resource
"""
