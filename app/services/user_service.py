"""
app/services/user_service.py

Purpose: User-specific rules on top of the generic document service

- Filter construction for /filter query parameters
- Registration (unique email, bcrypt hash) and login
- Password hashing on create/update
- Public representation (no password hash, string _id)
"""

from typing import Any, Dict, Mapping, Optional

from fastapi.concurrency import run_in_threadpool

from app.core.exceptions import AuthenticationError, ConflictError, StoreError
from app.core.logging import get_logger
from app.core.security import hash_password, verify_password
from app.models.entity import DocumentModel
from app.services.common_service import ServiceResult, add_doc
from utils.constants import ERROR_DUPLICATE_FIELD, MSG_EMAIL_IN_USE, MSG_INVALID_CREDENTIALS, MSG_SERVER_ERROR
from utils.validation_utils import substring_pattern

logger = get_logger(__name__)

SUBSTRING_FIELDS = ("username", "email", "phone", "address")
EXACT_FIELDS = ("role", "status", "userId")


def build_user_filter(params: Mapping[str, Optional[str]]) -> Dict[str, Any]:
    """
    Translates /filter query parameters into a store query.

    username, email, phone and address match case-insensitive substrings
    (address matches any element of the list); role, status and userId
    must match exactly. Missing or empty parameters add no constraint.
    """
    query: Dict[str, Any] = {}

    for field in SUBSTRING_FIELDS:
        value = params.get(field)
        if value:
            query[field] = substring_pattern(value)

    for field in EXACT_FIELDS:
        value = params.get(field)
        if value:
            query[field] = value

    return query


def to_public(doc: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Strips the password hash and makes the store _id JSON friendly.
    """
    if doc is None:
        return None

    public = {key: value for key, value in doc.items() if key != "password"}
    if "_id" in public:
        public["_id"] = str(public["_id"])
    return public


async def prepare_user_payload(data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Returns a copy of the payload with any plaintext password replaced by its hash.
    """
    payload = dict(data)
    if payload.get("password"):
        payload["password"] = await run_in_threadpool(hash_password, payload["password"])
    return payload


async def register(email: str, password: str, phone: Optional[str], model: DocumentModel) -> ServiceResult:
    """
    Registers a new user.

    A registration that races past the email lookup is rejected by the
    unique email index.

    Raises:
        ConflictError: email already registered
        StoreError: email lookup failed
    """
    try:
        existing = await model.find_one({"email": email})
    except Exception as e:
        raise StoreError(MSG_SERVER_ERROR, error=str(e)) from e

    if existing:
        logger.info("Registration rejected, email in use", extra={"email": email})
        raise ConflictError(MSG_EMAIL_IN_USE)

    user_data = {
        "email": email,
        "password": await run_in_threadpool(hash_password, password),
    }
    if phone is not None:
        user_data["phone"] = phone

    result = await add_doc(user_data, model)
    if result.error_code == ERROR_DUPLICATE_FIELD:
        logger.info("Registration rejected, email in use", extra={"email": email})
        raise ConflictError(MSG_EMAIL_IN_USE, error=result.error)

    return result


async def authenticate(email: str, password: str, model: DocumentModel) -> Dict[str, Any]:
    """
    Verifies credentials and returns the user document.

    Unknown email and wrong password fail identically so callers cannot
    tell which one was wrong.

    Raises:
        AuthenticationError: bad credentials
        StoreError: lookup failed
    """
    try:
        user = await model.find_one({"email": email})
    except Exception as e:
        raise StoreError(MSG_SERVER_ERROR, error=str(e)) from e

    stored_hash = user.get("password") if user else None
    if not user or not await run_in_threadpool(verify_password, password, stored_hash):
        logger.info("Login failed", extra={"email": email})
        raise AuthenticationError(MSG_INVALID_CREDENTIALS)

    logger.info("Login succeeded", extra={"email": email, "doc_id": user.get(model.kind.id_field)})
    return user
