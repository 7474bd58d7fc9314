"""Infrastructure Layer — database access and cross-cutting concerns.

Invariants:
    - All SQLAlchemy access lives here; services see only the repository protocol
    - Storage failures mapped to core/errors.py types before leaving this layer

Design Decisions:
    - One module per concern: session management, repository, logging
"""
