"""User API endpoints."""

from typing import Any

from fastapi import APIRouter, Request

from natours.api.v1.factory import register_crud_routes
from natours.core.exceptions import ValidationError
from natours.core.security import hash_password
from natours.schemas.user import UserCreate, UserUpdate
from natours.services.repository import Repositories

router = APIRouter()

# Stored fields that never leave the server
PRIVATE_FIELDS = {"password", "passwordConfirm"}


async def prepare_user(request: Request, doc: dict[str, Any], repos: Repositories) -> dict[str, Any]:
    """Reject duplicate emails and replace the password with its hash."""
    if await repos.users.find_one(email=doc["email"]) is not None:
        raise ValidationError(
            message="Duplicate field value: email. Please use another value!",
            details=[{"field": "email", "message": "Email already in use"}],
        )
    doc.pop("passwordConfirm", None)
    doc["password"] = hash_password(doc["password"])
    doc["active"] = True
    return doc


def present_user(doc: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in doc.items() if k not in PRIVATE_FIELDS}


register_crud_routes(
    router,
    collection="users",
    resource="User",
    create_schema=UserCreate,
    update_schema=UserUpdate,
    prepare_create=prepare_user,
    present=present_user,
)
