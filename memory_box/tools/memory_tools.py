"""Memory tools — save, search, list, update and delete memories."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal

from pydantic import Field, field_validator

from memory_box.client import DEFAULT_MIN_SIMILARITY
from memory_box.errors import InvalidParamsError
from memory_box.formatting import MEMORY_TYPES, format_memory, format_similarity
from memory_box.models import Memory, MemoryList, ReferenceData, SearchResults
from memory_box.tools.base import ToolParams, ToolResult

if TYPE_CHECKING:
    from memory_box.client import MemoryBoxClient
    from memory_box.tools.registry import ToolRegistry


def _require(value: str | None, label: str) -> str:
    """Reject missing or blank required arguments."""
    if value is None or not str(value).strip():
        msg = f"{label} is required"
        raise InvalidParamsError(msg)
    return value


# ---------------------------------------------------------------------------
# Parameter models
# ---------------------------------------------------------------------------


class SaveMemoryParams(ToolParams):
    text: str | None = Field(
        default=None, description="The memory content to save (use this or raw_content)"
    )
    raw_content: str | None = Field(
        default=None,
        description="Unprocessed content for the server to process (use this or text)",
    )
    bucket_id: str | None = Field(
        default=None, description="The bucket to save the memory to (default: configured bucket)"
    )
    source_type: str | None = Field(
        default=None, description="Source type of the memory (default: 'llm_plugin')"
    )
    reference_data: ReferenceData | None = Field(
        default=None,
        description="Provenance metadata; source.platform is required when supplied",
    )


class _PageParams(ToolParams):
    limit: int | None = Field(
        default=None, description="Maximum number of results to return (1-100)", ge=1, le=100
    )
    offset: int | None = Field(default=None, description="Number of results to skip", ge=0)
    include_reference_data: bool | None = Field(
        default=None, description="Include reference data in the results"
    )


class _SortedPageParams(_PageParams):
    bucket_id: str | None = Field(default=None, description="Only return memories from this bucket")
    source_type: str | None = Field(default=None, description="Only return this source type")
    date_sort: bool | None = Field(default=None, description="Sort results by date")
    sort_order: Literal["asc", "desc"] | None = Field(
        default=None, description="Sort order when date_sort is set: 'asc' or 'desc'"
    )


class SearchMemoriesParams(_SortedPageParams):
    query: str = Field(description="The search query")
    debug: bool = Field(default=False, description="Include debug information in results")


class GetAllMemoriesParams(_SortedPageParams):
    all: bool = Field(default=True, description="Retrieve every memory (default: true)")


class GetBucketMemoriesParams(_PageParams):
    bucket_id: str = Field(description="The bucket to retrieve memories from")


class MemoryIdParams(ToolParams):
    memory_id: str = Field(description="The ID of the memory")


class RelatedMemoriesParams(MemoryIdParams):
    min_similarity: float = Field(
        default=DEFAULT_MIN_SIMILARITY,
        description="Minimum similarity threshold between 0 and 1 (default: 0.7)",
        ge=0,
        le=1,
    )

    @field_validator("min_similarity", mode="before")
    @classmethod
    def _default_non_numeric(cls, value: Any) -> Any:
        if isinstance(value, bool) or value is None:
            return DEFAULT_MIN_SIMILARITY
        try:
            return float(value)
        except (TypeError, ValueError):
            return DEFAULT_MIN_SIMILARITY


class UpdateMemoryParams(MemoryIdParams):
    text: str | None = Field(default=None, description="New memory text")
    raw_content: str | None = Field(default=None, description="New raw content")
    bucket_id: str | None = Field(default=None, description="Move the memory to this bucket")
    source_type: str | None = Field(default=None, description="New source type")
    reference_data: ReferenceData | None = Field(
        default=None, description="Replacement reference data; source.platform is required"
    )


class FormatMemoryParams(ToolParams):
    text: str = Field(description="The text to format")
    type: str = Field(
        default="TECHNICAL",
        description=f"The type of memory ({', '.join(MEMORY_TYPES)}) (default: TECHNICAL)",
    )


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def _numbered(memories: list[Memory], *, with_bucket: bool = False) -> str:
    """Render memories as a numbered list, one blank line between entries."""
    lines = []
    for index, memory in enumerate(memories, start=1):
        parts = [f"{index}."]
        similarity = format_similarity(memory.similarity)
        if similarity:
            parts.append(similarity)
        if with_bucket and memory.bucket_id is not None:
            parts.append(f"[{memory.bucket_id}]")
        parts.append(f"{memory.content} (ID: {memory.id})")
        lines.append(" ".join(parts))
    return "\n\n".join(lines)


def _page_footer(result: MemoryList) -> str:
    if result.total is None:
        return ""
    offset = result.offset or 0
    return f"\n\nShowing {len(result.items)} of {result.total} memories (offset {offset})."


def _render_list(header: str, result: MemoryList, empty: str, *, with_bucket: bool = False) -> str:
    if not result.items:
        return f"{header}\n\n{empty}"
    body = _numbered(result.items, with_bucket=with_bucket)
    return f"{header}\n\n{body}{_page_footer(result)}"


def _render_search(query: str, result: SearchResults, debug: bool) -> str:
    text = _render_list(
        f'Search results for "{query}":', result, "No memories found matching your query."
    )
    if debug and result.debug is not None:
        info = result.debug
        text += "\n\nDebug Information:\n"
        text += f"Query: {info.query or query}\n"
        text += f"Query Terms: {', '.join(info.query_terms)}\n"
        text += f"Threshold: {info.threshold}\n"
        text += f"All Results: {len(info.all_results)}"
    return text


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------


def register_memory_tools(registry: ToolRegistry, client: MemoryBoxClient) -> None:
    """Register the memory tools, bound to *client*."""

    @registry.tool(
        name="save_memory",
        description=(
            "Save a memory to Memory Box. Provide either text or raw_content, "
            "optionally with a bucket, source type and reference data."
        ),
        params_model=SaveMemoryParams,
    )
    async def save_memory(
        text: str | None = None,
        raw_content: str | None = None,
        bucket_id: str | None = None,
        source_type: str | None = None,
        reference_data: ReferenceData | None = None,
    ) -> ToolResult:
        if not text and not raw_content:
            msg = "Text or raw_content is required"
            raise InvalidParamsError(msg)

        result = await client.save_memory(
            text=text,
            raw_content=raw_content,
            bucket_id=bucket_id,
            source_type=source_type,
            reference_data=reference_data,
        )
        lines = [f"Memory saved successfully with ID: {result.id}"]
        if result.processing_status:
            lines.append(f"Processing status: {result.processing_status}")
        lines.append("")
        lines.append(text or raw_content or "")
        return ToolResult(text="\n".join(lines))

    @registry.tool(
        name="search_memories",
        description="Search for memories using semantic search",
        params_model=SearchMemoriesParams,
    )
    async def search_memories(
        query: str,
        bucket_id: str | None = None,
        source_type: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
        debug: bool = False,
        include_reference_data: bool | None = None,
        date_sort: bool | None = None,
        sort_order: str | None = None,
    ) -> ToolResult:
        _require(query, "Query")
        result = await client.search_memories(
            query,
            bucket_id=bucket_id,
            source_type=source_type,
            limit=limit,
            offset=offset,
            debug=debug,
            include_reference_data=include_reference_data,
            date_sort=date_sort,
            sort_order=sort_order,
        )
        return ToolResult(text=_render_search(query, result, debug))

    @registry.tool(
        name="get_all_memories",
        description="Retrieve all memories, optionally filtered and paginated",
        params_model=GetAllMemoriesParams,
    )
    async def get_all_memories(
        all: bool = True,  # noqa: A002 - mirrors the API parameter
        bucket_id: str | None = None,
        source_type: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
        include_reference_data: bool | None = None,
        date_sort: bool | None = None,
        sort_order: str | None = None,
    ) -> ToolResult:
        result = await client.get_all_memories(
            all=all,
            bucket_id=bucket_id,
            source_type=source_type,
            limit=limit,
            offset=offset,
            include_reference_data=include_reference_data,
            date_sort=date_sort,
            sort_order=sort_order,
        )
        text = _render_list("All memories:", result, "No memories found.", with_bucket=True)
        return ToolResult(text=text)

    @registry.tool(
        name="get_bucket_memories",
        description="Get memories from a specific bucket",
        params_model=GetBucketMemoriesParams,
    )
    async def get_bucket_memories(
        bucket_id: str,
        limit: int | None = None,
        offset: int | None = None,
        include_reference_data: bool | None = None,
    ) -> ToolResult:
        _require(bucket_id, "Bucket ID")
        result = await client.get_bucket_memories(
            bucket_id,
            limit=limit,
            offset=offset,
            include_reference_data=include_reference_data,
        )
        text = _render_list(
            f'Memories in bucket "{bucket_id}":', result, "No memories found in this bucket."
        )
        return ToolResult(text=text)

    @registry.tool(
        name="get_related_memories",
        description="Find memories semantically related to an existing memory",
        params_model=RelatedMemoriesParams,
    )
    async def get_related_memories(
        memory_id: str, min_similarity: float = DEFAULT_MIN_SIMILARITY
    ) -> ToolResult:
        _require(memory_id, "Memory ID")
        result = await client.get_related_memories(memory_id, min_similarity=min_similarity)
        text = _render_list(
            f"Memories related to {memory_id}:", result, "No related memories found."
        )
        return ToolResult(text=text)

    @registry.tool(
        name="check_memory_status",
        description="Check the processing status of a memory",
        params_model=MemoryIdParams,
    )
    async def check_memory_status(memory_id: str) -> ToolResult:
        _require(memory_id, "Memory ID")
        status = await client.get_memory_status(memory_id)
        text = f"Memory {memory_id} status: {status.processing_status}"
        if status.error:
            text += f"\nError: {status.error}"
        return ToolResult(text=text)

    @registry.tool(
        name="update_memory",
        description=(
            "Update an existing memory's text, raw content, bucket, source type "
            "or reference data"
        ),
        params_model=UpdateMemoryParams,
    )
    async def update_memory(
        memory_id: str,
        text: str | None = None,
        raw_content: str | None = None,
        bucket_id: str | None = None,
        source_type: str | None = None,
        reference_data: ReferenceData | None = None,
    ) -> ToolResult:
        _require(memory_id, "Memory ID")
        result = await client.update_memory(
            memory_id,
            text=text,
            raw_content=raw_content,
            bucket_id=bucket_id,
            source_type=source_type,
            reference_data=reference_data,
        )
        text_out = f"Memory {result.id} updated successfully"
        if result.processing_status:
            text_out += f"\nProcessing status: {result.processing_status}"
        return ToolResult(text=text_out)

    @registry.tool(
        name="delete_memory",
        description="Delete a memory permanently",
        params_model=MemoryIdParams,
    )
    async def delete_memory(memory_id: str) -> ToolResult:
        _require(memory_id, "Memory ID")
        result = await client.delete_memory(memory_id)
        text = f"Memory {memory_id} deleted successfully"
        if result.message:
            text += f"\n{result.message}"
        return ToolResult(text=text)

    @registry.tool(
        name="format_memory",
        description="Format a text according to the memory formatting conventions without saving",
        params_model=FormatMemoryParams,
    )
    async def format_memory_tool(text: str, type: str = "TECHNICAL") -> ToolResult:  # noqa: A002
        _require(text, "Text")
        return ToolResult(text=f"Formatted memory:\n\n{format_memory(text, type)}")
