"""
app/services/common_service.py

Purpose: Generic CRUD over any entity kind

- Sequential natural-ID allocation (USR00001, USR00002, ...)
- Create / read / update / delete by natural ID
- Filtered, paginated listing
- Every operation returns a ServiceResult; store errors never escape
"""

import math
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, model_validator
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import DuplicateKeyError

from app.core.config import settings
from app.core.exceptions import IdAllocationError
from app.core.logging import get_logger
from app.models.entity import DocumentModel, MAX_SEQUENCE
from app.schemas.response import PageInfo
from utils.constants import (
    ERROR_DUPLICATE_FIELD,
    ERROR_DUPLICATE_KEY,
    ERROR_ID_ALLOCATION,
    ERROR_INVALID_ARGUMENT,
    ERROR_STORE,
)

logger = get_logger(__name__)


class ServiceResult(BaseModel):
    """
    Uniform outcome of a service call.

    success=False always carries an error and no data;
    success=True never carries an error.
    """
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    pagination: Optional[PageInfo] = None

    @model_validator(mode="after")
    def check_envelope(self):
        if self.success and self.error is not None:
            raise ValueError("successful result cannot carry an error")
        if not self.success and (self.error is None or self.data is not None):
            raise ValueError("failed result needs an error and no data")
        return self

    @classmethod
    def ok(cls, data: Any = None, pagination: Optional[PageInfo] = None) -> "ServiceResult":
        return cls(success=True, data=data, pagination=pagination)

    @classmethod
    def fail(cls, error: str, error_code: str = ERROR_STORE) -> "ServiceResult":
        return cls(success=False, error=error, error_code=error_code)


def build_pagination(total_count: int, page: int, limit: int) -> PageInfo:
    """
    Derives page metadata from the filtered total, not the returned page.
    """
    total_pages = math.ceil(total_count / limit)
    return PageInfo(
        currentPage=page,
        totalPages=total_pages,
        totalCount=total_count,
        hasNextPage=page < total_pages,
        hasPrevPage=page > 1,
    )


async def last_allocated_number(model: DocumentModel) -> int:
    """Highest sequence number already present in the collection, 0 if none."""
    id_field = model.kind.id_field
    last_doc = await model.find_one(
        {id_field: {"$regex": model.kind.id_pattern}},
        sort=[(id_field, DESCENDING)],
    )
    if not last_doc:
        return 0
    # Fixed-width zero padding keeps lexicographic order equal to numeric order
    return int(last_doc[id_field][len(model.kind.id_prefix):])


async def generate_unique_id(model: DocumentModel) -> str:
    """
    Allocates the next natural ID for the model's kind.

    Numbers come from an atomic per-kind counter. The first allocation seeds
    the counter from the highest ID already stored, so existing data is never
    re-numbered.

    Raises:
        IdAllocationError: on store failure or when the sequence is exhausted
    """
    try:
        if await model.get_counter() is None:
            last_number = await last_allocated_number(model)
            await model.raise_counter_floor(last_number)
            logger.info(
                f"Seeded {model.kind.id_field} counter at {last_number}",
                extra={"entity": model.kind.name}
            )

        next_number = await model.increment_counter()

    except Exception as e:
        raise IdAllocationError(error=f"Failed to generate unique ID: {e}") from e

    if next_number > MAX_SEQUENCE:
        raise IdAllocationError(
            error=f"{model.kind.name} ID sequence exhausted ({model.kind.id_prefix}{MAX_SEQUENCE})"
        )

    return model.kind.format_id(next_number)


async def is_id_collision(error: DuplicateKeyError, unique_id: str, model: DocumentModel) -> bool:
    """True when the duplicate key is the natural ID rather than another unique field."""
    key_pattern = (error.details or {}).get("keyPattern")
    if key_pattern:
        return model.kind.id_field in key_pattern
    # No keyPattern reported: the ID collided if a document already holds it
    return await model.find_one({model.kind.id_field: unique_id}) is not None


async def add_doc(data: Mapping[str, Any], model: DocumentModel) -> ServiceResult:
    """
    Creates a document with a freshly allocated natural ID.

    An insert that collides on the unique ID index moves the counter past the
    highest stored ID and is retried with a new ID, up to
    ID_ALLOCATION_ATTEMPTS times. A collision on any other unique field is
    returned at once as DUPLICATE_FIELD.
    """
    id_field = model.kind.id_field
    last_error = None

    for attempt in range(1, settings.ID_ALLOCATION_ATTEMPTS + 1):
        try:
            unique_id = await generate_unique_id(model)
        except IdAllocationError as e:
            logger.error(e.error, extra={"entity": model.kind.name})
            return ServiceResult.fail(e.error, ERROR_ID_ALLOCATION)

        document = {**model.kind.defaults(), **data, id_field: unique_id}

        try:
            created = await model.insert_one(document)
            logger.info(f"{model.kind.name} created", extra={"entity": model.kind.name, "doc_id": unique_id})
            return ServiceResult.ok(created)

        except DuplicateKeyError as e:
            context = {"entity": model.kind.name, "doc_id": unique_id}
            try:
                id_collision = await is_id_collision(e, unique_id, model)
                if id_collision:
                    await model.raise_counter_floor(await last_allocated_number(model))
            except Exception as lookup_error:
                logger.error(f"Duplicate key check failed: {lookup_error}", extra=context)
                return ServiceResult.fail(str(lookup_error), ERROR_STORE)

            if not id_collision:
                logger.info(f"{model.kind.name} rejected, duplicate unique field", extra=context)
                return ServiceResult.fail(str(e), ERROR_DUPLICATE_FIELD)

            last_error = str(e)
            logger.warning(
                f"Duplicate {id_field} on insert (attempt {attempt}/{settings.ID_ALLOCATION_ATTEMPTS})",
                extra=context
            )

        except Exception as e:
            logger.error(f"Insert failed: {e}", extra={"entity": model.kind.name})
            return ServiceResult.fail(str(e), ERROR_STORE)

    return ServiceResult.fail(last_error, ERROR_DUPLICATE_KEY)


async def get_all_docs(model: DocumentModel) -> ServiceResult:
    try:
        docs = await model.find({})
        return ServiceResult.ok(docs)
    except Exception as e:
        logger.error(f"List failed: {e}", extra={"entity": model.kind.name})
        return ServiceResult.fail(str(e))


async def get_doc_by_id(doc_id: str, model: DocumentModel) -> ServiceResult:
    """
    Looks a document up by its natural ID. A missing document is a
    successful result with data=None.
    """
    try:
        doc = await model.find_one({model.kind.id_field: doc_id})
        return ServiceResult.ok(doc)
    except Exception as e:
        logger.error(f"Lookup failed: {e}", extra={"entity": model.kind.name, "doc_id": doc_id})
        return ServiceResult.fail(str(e))


async def update_doc_by_id(doc_id: str, data: Mapping[str, Any], model: DocumentModel) -> ServiceResult:
    """
    Partially updates a document. Only supplied fields change; the natural
    ID and the store's _id are never overwritten.

    Returns the document as it is after the update, or data=None if absent.
    """
    fields: Dict[str, Any] = {
        key: value for key, value in data.items()
        if key not in (model.kind.id_field, "_id")
    }

    context = {"entity": model.kind.name, "doc_id": doc_id}

    try:
        if not fields:
            return ServiceResult.ok(await model.find_one({model.kind.id_field: doc_id}))

        updated = await model.find_one_and_update({model.kind.id_field: doc_id}, fields)
        if updated is not None:
            logger.info(f"{model.kind.name} updated: {', '.join(sorted(fields))}", extra=context)
        return ServiceResult.ok(updated)

    except DuplicateKeyError as e:
        logger.info(f"{model.kind.name} update rejected, duplicate unique field", extra=context)
        return ServiceResult.fail(str(e), ERROR_DUPLICATE_FIELD)

    except Exception as e:
        logger.error(f"Update failed: {e}", extra=context)
        return ServiceResult.fail(str(e))


async def delete_doc_by_id(doc_id: str, model: DocumentModel) -> ServiceResult:
    """
    Removes a document. Returns its state before removal, or data=None if absent.
    """
    context = {"entity": model.kind.name, "doc_id": doc_id}

    try:
        deleted = await model.find_one_and_delete({model.kind.id_field: doc_id})
        if deleted is not None:
            logger.info(f"{model.kind.name} deleted", extra=context)
        return ServiceResult.ok(deleted)

    except Exception as e:
        logger.error(f"Delete failed: {e}", extra=context)
        return ServiceResult.fail(str(e))


async def get_all_with_filter(
    filter: Mapping[str, Any],
    page: int,
    limit: int,
    model: DocumentModel,
) -> ServiceResult:
    """
    Runs a pre-built store filter and returns one page of matches.

    Args:
        filter: Store query (see user_service.build_user_filter)
        page: 1-based page number
        limit: Page size
        model: Document model to query

    Returns:
        ServiceResult with the page in data and PageInfo in pagination
    """
    if page < 1 or limit < 1:
        return ServiceResult.fail("page and limit must be positive integers", ERROR_INVALID_ARGUMENT)

    try:
        docs = await model.find(
            filter,
            skip=(page - 1) * limit,
            limit=limit,
            sort=[(model.kind.id_field, ASCENDING)],
        )
        total_count = await model.count(filter)

    except Exception as e:
        logger.error(f"Filtered list failed: {e}", extra={"entity": model.kind.name, "page": page, "limit": limit})
        return ServiceResult.fail(str(e))

    return ServiceResult.ok(docs, pagination=build_pagination(total_count, page, limit))
