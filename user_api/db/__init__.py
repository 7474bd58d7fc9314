"""Database Package — SQLAlchemy declarative Base shared by models and migrations.

Invariants:
    - Single async engine per process (initialized via infrastructure/database.init_db)

Design Decisions:
    - asyncpg driver for PostgreSQL (ADR: native async, no thread pool overhead)
"""
