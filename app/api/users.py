"""
app/api/users.py

Purpose: User REST endpoints

- Authentication: /register, /login, /logout
- CRUD by natural ID: /create, /get/{id}, /update/{id}, /delete/{id}
- Listing: /getAll and /filter (paginated)
- Maps service results to HTTP status codes and the response envelope
"""

from fastapi import APIRouter, Depends, Query
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from typing import List, Optional

from app.core.config import settings
from app.core.exceptions import (
    ConflictError,
    DuplicateEntryError,
    ResourceNotFoundError,
    StoreError,
    ValidationError,
)
from app.core.logging import get_logger
from app.db.mongo import Database, get_database
from app.models.entity import MongoDocumentModel
from app.models.user import User
from app.schemas.response import ApiResponse
from app.schemas.user import LoginRequest, RegisterRequest, UserCreate, UserUpdate
from app.services import common_service, user_service
from app.services.common_service import ServiceResult
from utils import constants as msg

logger = get_logger(__name__)
router = APIRouter()


def get_user_model(database: Database = Depends(get_database)) -> MongoDocumentModel:
    """Dependency: User document model bound to the process-wide database."""
    return database.model(User)


def respond(status_code: int, message: str, data=None, count: Optional[int] = None, pagination=None) -> JSONResponse:
    body = ApiResponse(message=message, data=data, count=count, pagination=pagination)
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body.model_dump(exclude_none=True)),
    )


def raise_for_write_failure(result: ServiceResult, message: str):
    """Maps a failed create/update/register result to the matching error."""
    if result.error_code == msg.ERROR_DUPLICATE_FIELD:
        raise ConflictError(msg.MSG_EMAIL_IN_USE, error=result.error)
    if result.error_code == msg.ERROR_DUPLICATE_KEY:
        raise DuplicateEntryError(msg.MSG_DUPLICATE_ID, error=result.error)
    if result.error_code in (msg.ERROR_ID_ALLOCATION, msg.ERROR_STORE):
        raise StoreError(message, error=result.error)
    raise ValidationError(message, error=result.error)


# ============================================================
# AUTHENTICATION
# ============================================================

@router.post("/register")
async def register(payload: RegisterRequest, users: MongoDocumentModel = Depends(get_user_model)):
    result = await user_service.register(payload.email, payload.password, payload.phone, users)
    if not result.success:
        raise_for_write_failure(result, msg.MSG_REGISTER_FAILED)

    return respond(201, msg.MSG_REGISTER_SUCCESS, data=user_service.to_public(result.data))


@router.post("/login")
async def login(payload: LoginRequest, users: MongoDocumentModel = Depends(get_user_model)):
    user = await user_service.authenticate(payload.email, payload.password, users)
    return respond(200, msg.MSG_LOGIN_SUCCESS, data=user_service.to_public(user))


@router.post("/logout")
async def logout():
    # Stateless: no server-side session to clear
    return respond(200, msg.MSG_LOGOUT_SUCCESS)


# ============================================================
# USER CRUD
# ============================================================

@router.get("/getAll")
async def get_all_users(users: MongoDocumentModel = Depends(get_user_model)):
    result = await common_service.get_all_docs(users)
    if not result.success:
        raise StoreError(msg.MSG_SERVER_ERROR, error=result.error)

    if not result.data:
        raise ResourceNotFoundError(msg.MSG_NO_USERS, data=[])

    data = [user_service.to_public(doc) for doc in result.data]
    return respond(200, msg.MSG_USERS_RETRIEVED, data=data, count=len(data))


@router.get("/filter")
async def get_users_with_filter(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    username: Optional[str] = None,
    email: Optional[str] = None,
    role: Optional[str] = None,
    status: Optional[str] = None,
    phone: Optional[str] = None,
    address: Optional[str] = None,
    userId: Optional[str] = None,
    users: MongoDocumentModel = Depends(get_user_model),
):
    query = user_service.build_user_filter({
        "username": username,
        "email": email,
        "role": role,
        "status": status,
        "phone": phone,
        "address": address,
        "userId": userId,
    })

    result = await common_service.get_all_with_filter(query, page, limit, users)
    if not result.success:
        raise StoreError(msg.MSG_SERVER_ERROR, error=result.error)

    if not result.data:
        raise ResourceNotFoundError(msg.MSG_NO_USERS_FILTERED, data=[], pagination=result.pagination)

    data: List[dict] = [user_service.to_public(doc) for doc in result.data]
    return respond(200, msg.MSG_USERS_RETRIEVED, data=data, count=len(data), pagination=result.pagination)


@router.post("/create")
async def create_user(payload: UserCreate, users: MongoDocumentModel = Depends(get_user_model)):
    document = await user_service.prepare_user_payload(payload.to_document())
    result = await common_service.add_doc(document, users)
    if not result.success:
        raise_for_write_failure(result, msg.MSG_CREATE_FAILED)

    return respond(201, msg.MSG_USER_CREATED, data=user_service.to_public(result.data))


@router.get("/get/{id}")
async def get_user_by_id(id: str, users: MongoDocumentModel = Depends(get_user_model)):
    result = await common_service.get_doc_by_id(id, users)
    if not result.success:
        raise StoreError(msg.MSG_SERVER_ERROR, error=result.error)

    if result.data is None:
        raise ResourceNotFoundError(msg.MSG_USER_NOT_FOUND)

    return respond(200, msg.MSG_USER_RETRIEVED, data=user_service.to_public(result.data))


@router.put("/update/{id}")
async def update_user(id: str, payload: UserUpdate, users: MongoDocumentModel = Depends(get_user_model)):
    fields = await user_service.prepare_user_payload(payload.to_document())
    result = await common_service.update_doc_by_id(id, fields, users)
    if not result.success:
        raise_for_write_failure(result, msg.MSG_UPDATE_FAILED)

    if result.data is None:
        raise ResourceNotFoundError(msg.MSG_USER_NOT_FOUND)

    return respond(200, msg.MSG_USER_UPDATED, data=user_service.to_public(result.data))


@router.delete("/delete/{id}")
async def delete_user(id: str, users: MongoDocumentModel = Depends(get_user_model)):
    result = await common_service.delete_doc_by_id(id, users)
    if not result.success:
        raise StoreError(msg.MSG_DELETE_FAILED, error=result.error)

    if result.data is None:
        raise ResourceNotFoundError(msg.MSG_USER_NOT_FOUND)

    return respond(200, msg.MSG_USER_DELETED, data=user_service.to_public(result.data))
