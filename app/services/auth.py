import logging
from typing import Any, Dict, List, Optional

from passlib.context import CryptContext
from sqlalchemy import func, null, select
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import AuthenticationError, ValidationError
from app.core.schema_catalog import SchemaCatalog
from app.models.user import UserRole

logger = logging.getLogger(__name__)

# bcrypt reads the $2a$/$2b$ hashes already stored by the existing deployment
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ROLE_ENUM_MISSING_COMPANY = 'Role enum does not include "company" and could not be updated automatically.'


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError) as e:
        logger.warning(f"Password verification failed on malformed hash: {e}")
        return False


def issue_session_token() -> str:
    """
    The token returned by login.

    It is the configured static placeholder, not a verifiable credential:
    it carries no identity, never expires and is not checked by the API.
    """
    return settings.session_token


def resolve_role_value(labels: List[str], preferred: str = UserRole.COMPANY.value) -> str:
    """
    Pick the stored spelling of ``preferred`` from the role enum labels.

    No labels means the column is free text, so ``preferred`` is used as-is.
    """
    if not labels:
        return preferred
    for label in labels:
        if label.lower() == preferred.lower():
            return label
    raise ValidationError(ROLE_ENUM_MISSING_COMPANY)


def _normalize_role(role: Any) -> Optional[str]:
    if role is None:
        return None
    value = role.value if hasattr(role, "value") else role
    return str(value).lower()


def authenticate(
    db: Session,
    catalog: SchemaCatalog,
    email: Optional[str],
    password: Optional[str],
    role: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Check a login attempt and return ``{token, user}``.

    Raises ValidationError when email or password is missing and
    AuthenticationError for an unknown email, a role mismatch or a bad
    password.
    """
    normalized_email = email.strip().lower() if isinstance(email, str) else ""
    if not normalized_email or not password:
        raise ValidationError("Email and password are required.")

    users = catalog.table("User")
    password_column = catalog.resolve("User", "password", "hashedPassword")
    company_column = catalog.resolve("User", "companyId")

    stmt = (
        select(
            users.c.id,
            users.c.email,
            users.c[password_column].label("password") if password_column else null().label("password"),
            users.c.role,
            users.c[company_column].label("companyId") if company_column else null().label("companyId"),
        )
        .where(func.lower(users.c.email) == normalized_email)
        .limit(1)
    )
    user = db.execute(stmt).mappings().first()

    if user is None:
        logger.warning("Failed login: unknown email", extra={"email": normalized_email})
        raise AuthenticationError("Invalid credentials.")

    user_role = _normalize_role(user["role"])
    requested_role = role.lower() if isinstance(role, str) and role else None
    if requested_role and user_role != requested_role:
        logger.warning(
            "Failed login: role mismatch",
            extra={"email": normalized_email, "requested_role": requested_role},
        )
        raise AuthenticationError("Invalid role for this account.")

    if not verify_password(password, user["password"]):
        logger.warning("Failed login: bad password", extra={"email": normalized_email})
        raise AuthenticationError("Invalid credentials.")

    logger.info("Login succeeded", extra={"user_id": user["id"], "role": user_role})
    return {
        "token": issue_session_token(),
        "user": {
            "id": user["id"],
            "email": user["email"],
            "role": user_role,
            "companyId": user["companyId"],
        },
    }
