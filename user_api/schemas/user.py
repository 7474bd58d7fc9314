"""User Schemas — Pydantic models for the User API boundary.

Invariants:
    - UserRequest only shapes the payload (types); field rules live in
      core/validate_user.py so every violation is reported at once
    - id in a request body is ignored: identifiers are read-only
    - UserResponse mirrors the stored record {id, name, email, age}

Design Decisions:
    - All request fields Optional: a missing field must become a rule violation
      ("Age is required"), not a Pydantic "field required" error
    - Numbers sent for name/email are coerced to strings; the rule table then
      judges the value (a numeric name is still a name)
    - from_attributes on the response: built straight from ORM rows
"""

from pydantic import BaseModel, ConfigDict, Field


class UserRequest(BaseModel):
    """Create / full-replacement update payload."""
    model_config = ConfigDict(
        extra="ignore",
        coerce_numbers_to_str=True,
        json_schema_extra={
            "examples": [
                {"name": "John Doe", "email": "john.doe@example.com", "age": 30},
            ],
        },
    )

    name: str | None = Field(None, description="Full name of the user")
    email: str | None = Field(
        None, description="Email address of the user (must be unique)",
    )
    age: int | None = Field(None, description="Age of the user (18-100)")


class UserResponse(BaseModel):
    """Stored user as returned to clients."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    age: int


class ErrorResponse(BaseModel):
    """Error envelope shared by every non-2xx response (OpenAPI docs only)."""
    model_config = ConfigDict(populate_by_name=True)

    timestamp: str
    status: int
    error: str
    message: str
    path: str
    field_errors: dict[str, str] | None = Field(None, alias="fieldErrors")
