"""
Generic document service tests: CRUD by natural ID, listing, pagination
and the never-raise result envelope.
"""
import pytest
from pydantic import ValidationError

from app.services import common_service
from app.services.common_service import ServiceResult, build_pagination
from utils.constants import ERROR_INVALID_ARGUMENT, ERROR_STORE


# ---------------------------------------------------------------------------
# Result envelope
# ---------------------------------------------------------------------------

def test_failed_result_requires_error():
    with pytest.raises(ValidationError):
        ServiceResult(success=False)


def test_failed_result_cannot_carry_data():
    with pytest.raises(ValidationError):
        ServiceResult(success=False, error="boom", data={"userId": "USR00001"})


def test_successful_result_cannot_carry_error():
    with pytest.raises(ValidationError):
        ServiceResult(success=True, error="boom")


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_create_then_get_returns_same_natural_id(users):
    created = await common_service.add_doc({"username": "alice"}, users)
    assert created.success
    user_id = created.data["userId"]

    fetched = await common_service.get_doc_by_id(user_id, users)
    assert fetched.success
    assert fetched.data["userId"] == user_id
    assert fetched.data["username"] == "alice"


@pytest.mark.asyncio
async def test_create_applies_user_defaults(users):
    result = await common_service.add_doc({"email": "d@example.com"}, users)

    assert result.data["role"] == "user"
    assert result.data["status"] == "active"
    assert result.data["address"] == []
    assert result.data["createdAt"] is not None


@pytest.mark.asyncio
async def test_create_keeps_supplied_values_over_defaults(users):
    result = await common_service.add_doc({"role": "admin", "address": ["1 Main St"]}, users)

    assert result.data["role"] == "admin"
    assert result.data["address"] == ["1 Main St"]


@pytest.mark.asyncio
async def test_create_ignores_client_supplied_natural_id(users):
    result = await common_service.add_doc({"userId": "USR77777", "username": "sneaky"}, users)

    assert result.data["userId"] == "USR00001"


@pytest.mark.asyncio
async def test_get_missing_document_is_success_with_no_data(users):
    result = await common_service.get_doc_by_id("USR00042", users)

    assert result.success is True
    assert result.data is None
    assert result.error is None


@pytest.mark.asyncio
async def test_update_merges_only_supplied_fields(users):
    created = await common_service.add_doc({"username": "bob", "phone": "555-0100", "role": "user"}, users)
    user_id = created.data["userId"]

    result = await common_service.update_doc_by_id(user_id, {"role": "admin"}, users)

    assert result.success
    assert result.data["role"] == "admin"
    assert result.data["username"] == "bob"
    assert result.data["phone"] == "555-0100"


@pytest.mark.asyncio
async def test_update_cannot_change_natural_id(users):
    created = await common_service.add_doc({"username": "carol"}, users)
    user_id = created.data["userId"]

    result = await common_service.update_doc_by_id(user_id, {"userId": "USR99999", "username": "caroline"}, users)

    assert result.data["userId"] == user_id
    assert result.data["username"] == "caroline"


@pytest.mark.asyncio
async def test_update_with_empty_payload_returns_current_state(users):
    created = await common_service.add_doc({"username": "dave"}, users)

    result = await common_service.update_doc_by_id(created.data["userId"], {}, users)

    assert result.success
    assert result.data["username"] == "dave"


@pytest.mark.asyncio
async def test_update_missing_document_returns_none(users):
    result = await common_service.update_doc_by_id("USR00404", {"role": "admin"}, users)

    assert result.success
    assert result.data is None


@pytest.mark.asyncio
async def test_delete_returns_pre_delete_state_then_get_finds_nothing(users):
    created = await common_service.add_doc({"username": "erin"}, users)
    user_id = created.data["userId"]

    deleted = await common_service.delete_doc_by_id(user_id, users)
    assert deleted.success
    assert deleted.data["username"] == "erin"

    fetched = await common_service.get_doc_by_id(user_id, users)
    assert fetched.success is True
    assert fetched.data is None


@pytest.mark.asyncio
async def test_delete_missing_document_returns_none(users):
    result = await common_service.delete_doc_by_id("USR00404", users)

    assert result.success
    assert result.data is None


@pytest.mark.asyncio
async def test_ids_are_not_reused_after_delete(users):
    first = await common_service.add_doc({"username": "frank"}, users)
    await common_service.delete_doc_by_id(first.data["userId"], users)

    second = await common_service.add_doc({"username": "grace"}, users)

    assert first.data["userId"] == "USR00001"
    assert second.data["userId"] == "USR00002"


@pytest.mark.asyncio
async def test_get_all_on_empty_collection_is_success(users):
    result = await common_service.get_all_docs(users)

    assert result.success
    assert result.data == []


@pytest.mark.asyncio
async def test_get_all_returns_every_document(users):
    for name in ("a", "b", "c"):
        await common_service.add_doc({"username": name}, users)

    result = await common_service.get_all_docs(users)

    assert sorted(doc["username"] for doc in result.data) == ["a", "b", "c"]


# ---------------------------------------------------------------------------
# Filter + pagination
# ---------------------------------------------------------------------------

def test_build_pagination_last_page():
    page = build_pagination(total_count=25, page=3, limit=10)

    assert page.totalPages == 3
    assert page.hasNextPage is False
    assert page.hasPrevPage is True


def test_build_pagination_empty_result():
    page = build_pagination(total_count=0, page=1, limit=10)

    assert page.totalPages == 0
    assert page.hasNextPage is False
    assert page.hasPrevPage is False


@pytest.mark.asyncio
async def test_filter_pagination_over_25_documents(users):
    for i in range(25):
        await common_service.add_doc({"username": f"user{i}", "role": "user"}, users)

    result = await common_service.get_all_with_filter({"role": "user"}, 3, 10, users)

    assert result.success
    assert len(result.data) == 5
    assert result.pagination.currentPage == 3
    assert result.pagination.totalPages == 3
    assert result.pagination.totalCount == 25
    assert result.pagination.hasNextPage is False
    assert result.pagination.hasPrevPage is True
    assert [doc["userId"] for doc in result.data] == [f"USR000{n}" for n in range(21, 26)]


@pytest.mark.asyncio
async def test_filter_counts_matches_not_page_size(users):
    for i in range(12):
        await common_service.add_doc({"username": f"user{i}", "role": "admin" if i % 2 else "user"}, users)

    result = await common_service.get_all_with_filter({"role": "admin"}, 1, 4, users)

    assert len(result.data) == 4
    assert result.pagination.totalCount == 6
    assert result.pagination.totalPages == 2
    assert result.pagination.hasNextPage is True


@pytest.mark.asyncio
async def test_filter_rejects_non_positive_page(users):
    result = await common_service.get_all_with_filter({}, 0, 10, users)

    assert result.success is False
    assert result.error_code == ERROR_INVALID_ARGUMENT


# ---------------------------------------------------------------------------
# Store failures never escape
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
@pytest.mark.parametrize("call", [
    lambda m: common_service.get_all_docs(m),
    lambda m: common_service.get_doc_by_id("USR00001", m),
    lambda m: common_service.update_doc_by_id("USR00001", {"role": "admin"}, m),
    lambda m: common_service.delete_doc_by_id("USR00001", m),
    lambda m: common_service.get_all_with_filter({}, 1, 10, m),
])
async def test_store_failure_becomes_error_result(call, unreachable_users):
    result = await call(unreachable_users)

    assert result.success is False
    assert result.data is None
    assert result.error_code == ERROR_STORE
    assert "connection refused" in result.error
