"""Resolve a bearer token into an authenticated principal."""

from dataclasses import dataclass
from enum import Enum

import jwt
from sqlalchemy.orm import Session

from clinic_backend.auth import jwt_handler
from clinic_backend.scheduling.repository import SchedulingRepository


class Role(str, Enum):
    ADMIN = "admin"
    DOCTOR = "doctor"
    PATIENT = "patient"


@dataclass(frozen=True)
class Principal:
    id: int
    email: str
    role: Role


class IdentityError(Exception):
    def __init__(self, detail: str, forbidden: bool = False):
        super().__init__(detail)
        self.detail = detail
        self.forbidden = forbidden


def resolve_principal(token: str, required_role: Role, db: Session) -> Principal:
    try:
        payload = jwt_handler.decode_access_token(token)
    except jwt.ExpiredSignatureError as exc:
        raise IdentityError("Token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise IdentityError("Invalid token") from exc

    email = payload.get("sub")
    principal_id = payload.get("uid")
    if not email or not isinstance(principal_id, int):
        raise IdentityError("Invalid token subject")

    try:
        role = Role(payload.get("role"))
    except ValueError as exc:
        raise IdentityError("Invalid token role") from exc

    if role is not required_role:
        raise IdentityError(f"Only {required_role.value}s can perform this action", forbidden=True)

    if role is Role.DOCTOR and SchedulingRepository.get_doctor(db, principal_id) is None:
        raise IdentityError("Doctor not found")
    if role is Role.PATIENT and SchedulingRepository.get_patient(db, principal_id) is None:
        raise IdentityError("Patient not found")

    return Principal(id=principal_id, email=email, role=role)
