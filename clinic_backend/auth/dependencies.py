from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from clinic_backend.auth.identity import IdentityError, Principal, Role, resolve_principal
from clinic_backend.database import get_db

security = HTTPBearer()


def authenticate(token: str, role: Role, db: Session) -> Principal:
    try:
        return resolve_principal(token, role, db)
    except IdentityError as exc:
        status_code = status.HTTP_403_FORBIDDEN if exc.forbidden else status.HTTP_401_UNAUTHORIZED
        raise HTTPException(status_code=status_code, detail=exc.detail) from exc


def require_role(role: Role):
    def get_current_principal(
        credentials: HTTPAuthorizationCredentials = Depends(security),
        db: Session = Depends(get_db),
    ) -> Principal:
        return authenticate(credentials.credentials, role, db)

    return get_current_principal


require_admin = require_role(Role.ADMIN)
require_doctor = require_role(Role.DOCTOR)
require_patient = require_role(Role.PATIENT)
