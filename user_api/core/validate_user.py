"""User Validation — pure field rules for a candidate User before it reaches the service.

Invariants:
    - Pure function of the input: no IO, no mutation
    - Every field is evaluated; one field failing never hides another field's violation
    - Within a field, the first failing rule wins (exactly one violation per invalid field)
    - Messages are fixed strings — clients match on them

Design Decisions:
    - Ordered (predicate, message) table over per-field validators: the rule set reads
      like the table it implements, and adding a rule is a one-line change
    - email-validator for grammar (same engine as pydantic's EmailStr) with every
      deliverability concern off: no DNS lookups, dotless and reserved domains
      (localhost, .local, .test), quoted local parts and domain literals accepted
    - Reserved TLDs are swapped for a neutral label before validation instead of
      editing email_validator.SPECIAL_USE_DOMAIN_NAMES, which is process-wide
    - The candidate value is checked as submitted — no trimming or case folding is
      written back (ADR: emails compared by exact equality)
"""

from dataclasses import dataclass
from typing import Any, Callable, Protocol

from email_validator import (
    SPECIAL_USE_DOMAIN_NAMES, EmailNotValidError, validate_email,
)

NAME_MAX_LENGTH = 255
AGE_MIN = 18
AGE_MAX = 100


class UserCandidate(Protocol):
    """Anything carrying the three writable User fields."""
    name: str | None
    email: str | None
    age: int | None


@dataclass(frozen=True)
class Violation:
    """A single failed rule: which field, and the client-facing message."""
    field: str
    message: str


Rule = tuple[str, Callable[[Any], bool], str]


def _is_blank(value: Any) -> bool:
    return value is None or not str(value).strip()


def _with_neutral_tld(value: str) -> str:
    local, at, domain = value.rpartition("@")
    labels = domain.split(".")
    if at and labels[-1].lower() in SPECIAL_USE_DOMAIN_NAMES:
        labels[-1] = "example"
    return f"{local}{at}{'.'.join(labels)}"


def _is_valid_email(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        validate_email(
            _with_neutral_tld(value),
            check_deliverability=False,
            globally_deliverable=False,
            allow_quoted_local=True,
            allow_domain_literal=True,
        )
    except EmailNotValidError:
        return False
    return True



# Predicates return True when the rule is SATISFIED.
USER_RULES: list[Rule] = [
    ("name", lambda v: not _is_blank(v), "Name is required and cannot be blank"),
    ("name", lambda v: len(v) <= NAME_MAX_LENGTH,
     f"Name must not exceed {NAME_MAX_LENGTH} characters"),
    ("email", lambda v: not _is_blank(v), "Email is required and cannot be blank"),
    ("email", _is_valid_email, "Email must be a valid email address"),
    ("age", lambda v: v is not None, "Age is required"),
    ("age", lambda v: v >= AGE_MIN, f"Age must be at least {AGE_MIN}"),
    ("age", lambda v: v <= AGE_MAX, f"Age must not exceed {AGE_MAX}"),
]


def validate_user(candidate: UserCandidate) -> list[Violation]:
    """Evaluate every rule against the candidate.

    Returns an empty list when the candidate is valid.
    """
    violations: list[Violation] = []
    failed_fields: set[str] = set()
    for field_name, predicate, message in USER_RULES:
        if field_name in failed_fields:
            continue
        if not predicate(getattr(candidate, field_name, None)):
            violations.append(Violation(field_name, message))
            failed_fields.add(field_name)
    return violations


def to_field_errors(violations: list[Violation]) -> dict[str, str]:
    """Collapse violations into the client-facing field -> message map."""
    return {v.field: v.message for v in violations}
