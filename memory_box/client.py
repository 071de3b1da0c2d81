"""Memory Box API client.

One coroutine per remote endpoint. Each call makes exactly one HTTP
request; failures are raised as APIError with the API's ``detail``
message when it sent one.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from memory_box import __version__
from memory_box.errors import APIError, InvalidParamsError
from memory_box.models import (
    Bucket,
    BucketList,
    DeleteResult,
    MemoryList,
    MemoryStatus,
    ReferenceData,
    ReferenceSource,
    RelatedMemories,
    SavedMemory,
    SearchResults,
    UsageStats,
)

logger = logging.getLogger(__name__)

MEMORY_PATH = "/api/v2/memory"
BUCKETS_PATH = "/api/v2/buckets"
USAGE_PATH = "/api/v2/usage"

DEFAULT_SOURCE_TYPE = "llm_plugin"
DEFAULT_PLATFORM = "memory_box_mcp"
DEFAULT_MIN_SIMILARITY = 0.7

M = TypeVar("M", bound=BaseModel)


def default_reference_data() -> ReferenceData:
    """Provenance stub attached to memories saved without reference data."""
    return ReferenceData(
        source=ReferenceSource(
            platform=DEFAULT_PLATFORM,
            type=DEFAULT_SOURCE_TYPE,
            version=__version__,
        ),
    )


def _error_detail(exc: httpx.HTTPError) -> str:
    """Pull the most useful message out of a failed request."""
    if isinstance(exc, httpx.HTTPStatusError):
        try:
            body = exc.response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("detail"):
            return str(body["detail"])
        return f"HTTP {exc.response.status_code}"
    return str(exc) or exc.__class__.__name__


def _parse(model: type[M], data: Any, action: str) -> M:
    """Validate a response body into its record type."""
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        msg = f"Failed to {action}: unexpected response from Memory Box API"
        raise APIError(msg) from exc


def _query(**params: Any) -> dict[str, Any]:
    """Drop unset parameters and render booleans the way the API expects."""
    rendered: dict[str, Any] = {}
    for key, value in params.items():
        if value is None:
            continue
        rendered[key] = str(value).lower() if isinstance(value, bool) else value
    return rendered


class MemoryBoxClient:
    """Stateless wrapper around the Memory Box REST API."""

    def __init__(
        self,
        base_url: str,
        token: str,
        default_bucket: str = "General",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.default_bucket = default_bucket
        self._transport = transport

    async def _request(
        self,
        method: str,
        path: str,
        action: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        headers = {"Authorization": f"Bearer {self.token}"}
        if method != "GET":
            headers["Content-Type"] = "application/json"

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, transport=self._transport
            ) as client:
                resp = await client.request(
                    method, path, params=params or None, json=json, headers=headers
                )
                resp.raise_for_status()
        except httpx.HTTPError as exc:
            detail = _error_detail(exc)
            status = exc.response.status_code if isinstance(exc, httpx.HTTPStatusError) else None
            logger.warning("%s %s failed: %s", method, path, detail)
            raise APIError(f"Failed to {action}: {detail}", status_code=status) from exc

        if not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError as exc:
            msg = f"Failed to {action}: response was not valid JSON"
            raise APIError(msg, status_code=resp.status_code) from exc

    # -- Memories -------------------------------------------------------------

    async def save_memory(
        self,
        text: str | None = None,
        raw_content: str | None = None,
        bucket_id: str | None = None,
        source_type: str | None = None,
        reference_data: ReferenceData | None = None,
    ) -> SavedMemory:
        """Store a memory. Exactly one of ``text`` or ``raw_content`` is sent."""
        if text and raw_content:
            msg = "Provide either text or raw_content, not both"
            raise InvalidParamsError(msg)
        if not text and not raw_content:
            msg = "Either text or raw_content is required"
            raise InvalidParamsError(msg)

        body: dict[str, Any] = {"text": text} if text else {"raw_content": raw_content}
        body["bucket_id"] = bucket_id or self.default_bucket
        body["source_type"] = source_type or DEFAULT_SOURCE_TYPE
        body["reference_data"] = (reference_data or default_reference_data()).to_payload()

        data = await self._request("POST", MEMORY_PATH, "save memory", json=body)
        return _parse(SavedMemory, data, "save memory")

    async def search_memories(
        self,
        query: str,
        *,
        bucket_id: str | None = None,
        source_type: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
        debug: bool = False,
        include_reference_data: bool | None = None,
        date_sort: bool | None = None,
        sort_order: str | None = None,
    ) -> SearchResults:
        """Semantic search over stored memories."""
        params = _query(
            query=query,
            bucket_id=bucket_id,
            source_type=source_type,
            limit=limit,
            offset=offset,
            debug=debug or None,
            include_reference_data=include_reference_data,
            date_sort=date_sort,
            sort_order=sort_order,
        )
        data = await self._request("GET", MEMORY_PATH, "search memories", params=params)
        return _parse(SearchResults, data, "search memories")

    async def get_all_memories(
        self,
        *,
        all: bool = True,  # noqa: A002 - mirrors the API parameter
        bucket_id: str | None = None,
        source_type: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
        include_reference_data: bool | None = None,
        date_sort: bool | None = None,
        sort_order: str | None = None,
    ) -> MemoryList:
        params = _query(
            all=all,
            bucket_id=bucket_id,
            source_type=source_type,
            limit=limit,
            offset=offset,
            include_reference_data=include_reference_data,
            date_sort=date_sort,
            sort_order=sort_order,
        )
        data = await self._request("GET", MEMORY_PATH, "get all memories", params=params)
        return _parse(MemoryList, data, "get all memories")

    async def get_bucket_memories(
        self,
        bucket_id: str,
        *,
        limit: int | None = None,
        offset: int | None = None,
        include_reference_data: bool | None = None,
    ) -> MemoryList:
        params = _query(
            bucketId=bucket_id,
            limit=limit,
            offset=offset,
            include_reference_data=include_reference_data,
        )
        data = await self._request("GET", MEMORY_PATH, "get bucket memories", params=params)
        return _parse(MemoryList, data, "get bucket memories")

    async def get_memory_status(self, memory_id: str) -> MemoryStatus:
        path = f"{MEMORY_PATH}/{quote(str(memory_id), safe='')}/status"
        data = await self._request("GET", path, "get memory status")
        return _parse(MemoryStatus, data, "get memory status")

    async def get_related_memories(
        self, memory_id: str, min_similarity: float = DEFAULT_MIN_SIMILARITY
    ) -> RelatedMemories:
        path = f"{MEMORY_PATH}/{quote(str(memory_id), safe='')}/related"
        params = _query(min_similarity=min_similarity)
        data = await self._request("GET", path, "get related memories", params=params)
        return _parse(RelatedMemories, data, "get related memories")

    async def update_memory(
        self,
        memory_id: str,
        *,
        text: str | None = None,
        raw_content: str | None = None,
        bucket_id: str | None = None,
        source_type: str | None = None,
        reference_data: ReferenceData | None = None,
    ) -> SavedMemory:
        """Update the given fields of a memory. At least one field is required."""
        body: dict[str, Any] = _query(
            text=text,
            raw_content=raw_content,
            bucket_id=bucket_id,
            source_type=source_type,
        )
        if reference_data is not None:
            body["reference_data"] = reference_data.to_payload()
        if not body:
            msg = (
                "At least one of text, raw_content, bucket_id, source_type "
                "or reference_data is required"
            )
            raise InvalidParamsError(msg)

        path = f"{MEMORY_PATH}/{quote(str(memory_id), safe='')}"
        data = await self._request("PUT", path, "update memory", json=body)
        if isinstance(data, dict) and "id" not in data:
            data = {**data, "id": memory_id}
        return _parse(SavedMemory, data, "update memory")

    async def delete_memory(self, memory_id: str) -> DeleteResult:
        path = f"{MEMORY_PATH}/{quote(str(memory_id), safe='')}"
        data = await self._request("DELETE", path, "delete memory")
        return _parse(DeleteResult, data or {}, "delete memory")

    # -- Buckets --------------------------------------------------------------

    async def get_buckets(self) -> BucketList:
        data = await self._request("GET", BUCKETS_PATH, "get buckets")
        return _parse(BucketList, data, "get buckets")

    async def create_bucket(self, bucket_name: str) -> Bucket:
        params = _query(bucket_name=bucket_name)
        data = await self._request("POST", BUCKETS_PATH, "create bucket", params=params)
        if isinstance(data, dict) and "name" not in data:
            data = {**data, "name": bucket_name}
        return _parse(Bucket, data, "create bucket")

    async def delete_bucket(self, bucket_name: str, force: bool = False) -> DeleteResult:
        path = f"{BUCKETS_PATH}/{quote(bucket_name, safe='')}"
        params = _query(force=force)
        data = await self._request("DELETE", path, "delete bucket", params=params)
        return _parse(DeleteResult, data or {}, "delete bucket")

    # -- Usage ----------------------------------------------------------------

    async def get_user_stats(self) -> UsageStats:
        data = await self._request("GET", USAGE_PATH, "retrieve usage statistics")
        return _parse(UsageStats, data, "retrieve usage statistics")
