"""Tests for the Memory Box API client."""

import httpx
import pytest

from memory_box.client import (
    BUCKETS_PATH,
    DEFAULT_PLATFORM,
    MEMORY_PATH,
    USAGE_PATH,
    MemoryBoxClient,
)
from memory_box.errors import APIError, InvalidParamsError
from memory_box.models import ReferenceData

# -- Headers -----------------------------------------------------------------


async def test_get_carries_bearer_token_only(api, client) -> None:
    api.route("GET", USAGE_PATH, json={"plan": "pro"})

    await client.get_user_stats()

    assert api.last.headers["Authorization"] == "Bearer test-token"
    assert "Content-Type" not in api.last.headers


async def test_write_carries_json_content_type(api, client) -> None:
    api.route("POST", BUCKETS_PATH, json={"id": 4, "name": "Work"})

    await client.create_bucket("Work")

    assert api.last.headers["Authorization"] == "Bearer test-token"
    assert api.last.headers["Content-Type"] == "application/json"


async def test_base_url_trailing_slash_is_ignored(api) -> None:
    api.route("GET", USAGE_PATH, json={})
    c = MemoryBoxClient(
        base_url="https://api.example.com/",
        token="t",
        transport=httpx.MockTransport(api.handler),
    )

    await c.get_user_stats()

    assert str(api.last.url) == "https://api.example.com/api/v2/usage"


# -- save_memory -------------------------------------------------------------


async def test_save_memory_defaults(api, client) -> None:
    api.route("POST", MEMORY_PATH, json={"id": 42, "processing_status": "queued"})

    result = await client.save_memory(text="remember this")

    body = api.last_json()
    assert set(body) == {"text", "bucket_id", "source_type", "reference_data"}
    assert body["text"] == "remember this"
    assert body["bucket_id"] == "General"
    assert body["source_type"] == "llm_plugin"
    assert body["reference_data"]["source"]["platform"] == DEFAULT_PLATFORM
    assert result.id == 42
    assert result.processing_status == "queued"


async def test_save_memory_raw_content_only(api, client) -> None:
    api.route("POST", MEMORY_PATH, json={"id": "m-1"})

    await client.save_memory(raw_content="<html>page</html>", bucket_id="Web")

    body = api.last_json()
    assert "text" not in body
    assert body["raw_content"] == "<html>page</html>"
    assert body["bucket_id"] == "Web"


async def test_save_memory_passes_reference_data_through(api, client) -> None:
    api.route("POST", MEMORY_PATH, json={"id": 1})
    ref = {
        "source": {"platform": "vscode", "title": "t"},
        "context": {"conversation_id": "c-1", "related_memories": ["m-2"]},
    }

    await client.save_memory(text="x", reference_data=ReferenceData.model_validate(ref))

    assert api.last_json()["reference_data"] == ref


async def test_save_memory_requires_content(api, client) -> None:
    with pytest.raises(InvalidParamsError):
        await client.save_memory()
    assert api.requests == []


async def test_save_memory_rejects_both_fields(api, client) -> None:
    with pytest.raises(InvalidParamsError, match="not both"):
        await client.save_memory(text="a", raw_content="b")
    assert api.requests == []


# -- Query parameters --------------------------------------------------------


async def test_search_sends_only_given_params(api, client) -> None:
    api.route("GET", MEMORY_PATH, json={"items": []})

    await client.search_memories("python", limit=5, date_sort=True, sort_order="asc")

    params = dict(api.last.url.params)
    assert params == {
        "query": "python",
        "limit": "5",
        "date_sort": "true",
        "sort_order": "asc",
    }


async def test_search_debug_flag(api, client) -> None:
    api.route("GET", MEMORY_PATH, json={"items": []})

    await client.search_memories("python", debug=True)

    assert api.last.url.params["debug"] == "true"


async def test_get_all_memories_sends_all(api, client) -> None:
    api.route("GET", MEMORY_PATH, json={"items": [{"id": 1, "text": "a"}]})

    result = await client.get_all_memories(offset=10)

    assert api.last.url.params["all"] == "true"
    assert api.last.url.params["offset"] == "10"
    assert len(result.items) == 1


async def test_bucket_memories_uses_bucket_id_param(api, client) -> None:
    api.route("GET", MEMORY_PATH, json={"items": []})

    await client.get_bucket_memories("Work", limit=3)

    assert api.last.url.params["bucketId"] == "Work"
    assert api.last.url.params["limit"] == "3"


async def test_related_memories_default_similarity(api, client) -> None:
    api.route("GET", f"{MEMORY_PATH}/7/related", json={"items": []})

    await client.get_related_memories("7")

    assert api.last.url.params["min_similarity"] == "0.7"


async def test_memory_status_path(api, client) -> None:
    api.route("GET", f"{MEMORY_PATH}/7/status", json={"id": 7, "processing_status": "done"})

    status = await client.get_memory_status("7")

    assert status.processing_status == "done"


# -- Update / delete ---------------------------------------------------------


async def test_update_memory_sends_given_fields(api, client) -> None:
    api.route("PUT", f"{MEMORY_PATH}/9", json={"id": 9})

    await client.update_memory("9", bucket_id="Archive")

    assert api.last.method == "PUT"
    assert api.last_json() == {"bucket_id": "Archive"}


async def test_update_memory_requires_a_field(api, client) -> None:
    with pytest.raises(InvalidParamsError, match="At least one"):
        await client.update_memory("9")
    assert api.requests == []


async def test_update_memory_fills_missing_id(api, client) -> None:
    api.route("PUT", f"{MEMORY_PATH}/9", json={"message": "ok"})

    result = await client.update_memory("9", text="new")

    assert result.id == "9"


async def test_delete_memory_empty_body(api, client) -> None:
    api.route("DELETE", f"{MEMORY_PATH}/9", status_code=204)

    result = await client.delete_memory("9")

    assert result.success


async def test_delete_bucket_force_and_quoting(api, client) -> None:
    api.route("DELETE", f"{BUCKETS_PATH}/My Bucket", json={"message": "gone"})

    result = await client.delete_bucket("My Bucket", force=True)

    assert api.last.url.raw_path.startswith(b"/api/v2/buckets/My%20Bucket")
    assert api.last.url.params["force"] == "true"
    assert result.message == "gone"


async def test_create_bucket_sends_name_as_query(api, client) -> None:
    api.route("POST", BUCKETS_PATH, json={"id": 4})

    bucket = await client.create_bucket("Work")

    assert api.last.url.params["bucket_name"] == "Work"
    assert bucket.name == "Work"


# -- Failures ----------------------------------------------------------------


async def test_http_error_uses_detail(api, client) -> None:
    api.route("GET", USAGE_PATH, json={"detail": "Invalid token"}, status_code=401)

    with pytest.raises(APIError) as exc_info:
        await client.get_user_stats()

    assert exc_info.value.message == "Failed to retrieve usage statistics: Invalid token"
    assert exc_info.value.status_code == 401


async def test_http_error_without_detail(api, client) -> None:
    api.route("GET", BUCKETS_PATH, json={"oops": True}, status_code=500)

    with pytest.raises(APIError, match="Failed to get buckets: HTTP 500"):
        await client.get_buckets()


async def test_transport_error_uses_message(api, client) -> None:
    api.fail("GET", MEMORY_PATH, httpx.ConnectError("Connection refused"))

    with pytest.raises(APIError, match="Failed to search memories: Connection refused"):
        await client.search_memories("q")


async def test_single_attempt_on_failure(api, client) -> None:
    api.route("POST", MEMORY_PATH, json={"detail": "boom"}, status_code=503)

    with pytest.raises(APIError):
        await client.save_memory(text="x")

    assert len(api.requests) == 1


async def test_unexpected_response_shape(api, client) -> None:
    api.route("POST", MEMORY_PATH, json={"no_id": True})

    with pytest.raises(APIError, match="unexpected response"):
        await client.save_memory(text="x")
