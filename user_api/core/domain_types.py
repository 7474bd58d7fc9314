"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId wraps the opaque storage identifier — never parse it in domain logic

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str-backed id (UUID4 text): path parameters that are not UUIDs simply find
      nothing (404) instead of failing request validation
"""

from typing import NewType

UserId = NewType("UserId", str)
