# server/core/validation.py

from typing import Optional
from pydantic import BaseModel, Field
from pydantic import ValidationError as SchemaError

from core.errors import ValidationError


EMAIL_PATTERN = r".+@.+\..+"


# -------------------------------
# Request Schemas
# -------------------------------

class SignupRequest(BaseModel):
    username: str = Field(..., min_length=3)
    email: str = Field(..., pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=6)


class LoginRequest(BaseModel):
    username: str
    password: str


class ProductIn(BaseModel):
    """
    Full set of product constraints.
    Applied on create and again to the merged document on update.
    """
    name: str = Field(..., min_length=1)
    price: float = Field(..., ge=0, allow_inf_nan=False)
    category: Optional[str] = None
    description: Optional[str] = None


PRODUCT_FIELDS = tuple(ProductIn.model_fields)


# -------------------------------
# Validators
# -------------------------------

def format_schema_error(label: str, exc: SchemaError) -> str:
    problems = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "body"
        problems.append(f"{field}: {error['msg']}")
    return f"{label} validation failed: " + ", ".join(problems)


def _validate(schema, label: str, payload: dict):
    try:
        return schema.model_validate(payload)
    except SchemaError as e:
        raise ValidationError(format_schema_error(label, e)) from e


def validate_signup(payload: dict) -> SignupRequest:
    return _validate(SignupRequest, "User", payload)


def validate_login(payload: dict) -> LoginRequest:
    return _validate(LoginRequest, "Login", payload)


def validate_product(payload: dict) -> dict:
    return _validate(ProductIn, "Product", payload).model_dump()


def validate_product_patch(existing: dict, changes: dict) -> dict:
    """
    Merges the known product fields of `changes` into `existing`
    and re-validates the result as a whole product.
    Unknown keys (including _id and createdAt) are ignored.
    """
    merged = {field: existing.get(field) for field in PRODUCT_FIELDS}
    merged.update({key: value for key, value in changes.items() if key in PRODUCT_FIELDS})
    return validate_product(merged)
