"""Request and response records for the Memory Box API."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

# -- Reference data -----------------------------------------------------------
# Provenance metadata is passed through to the API untouched, so these
# models keep any keys they don't declare.


class ReferenceSource(BaseModel):
    """Where a memory came from."""

    model_config = ConfigDict(extra="allow")

    platform: str = Field(description="Platform that produced the memory (required)")
    type: str | None = Field(default=None, description="Source type, e.g. 'llm_plugin'")
    version: str | None = Field(default=None, description="Platform version")
    url: str | None = Field(default=None, description="Source URL")
    title: str | None = Field(default=None, description="Source title")
    additional_metadata: dict[str, Any] | None = Field(
        default=None, description="Free-form extra source metadata"
    )


class ReferenceContext(BaseModel):
    """Conversational context the memory was captured in."""

    model_config = ConfigDict(extra="allow")

    related_memories: list[Any] = Field(
        default_factory=list, description="IDs or summaries of related memories"
    )
    conversation_id: str | None = Field(default=None, description="Conversation identifier")
    message_id: str | None = Field(default=None, description="Message identifier")


class ContentContext(BaseModel):
    """Content surrounding the captured text."""

    model_config = ConfigDict(extra="allow")

    url: str | None = Field(default=None, description="URL of the page the content came from")
    title: str | None = Field(default=None, description="Title of the page or document")
    surrounding_text: str | None = Field(default=None, description="Text around the selection")
    selected_text: str | None = Field(default=None, description="Text the user selected")
    additional_context: dict[str, Any] | None = Field(
        default=None, description="Free-form extra content context"
    )


class ReferenceData(BaseModel):
    """Structured provenance attached to a memory."""

    model_config = ConfigDict(extra="allow")

    source: ReferenceSource = Field(description="Source information; 'platform' is required")
    context: ReferenceContext | None = Field(default=None, description="Conversation context")
    content_context: ContentContext | None = Field(
        default=None, description="Surrounding content context"
    )

    def to_payload(self) -> dict[str, Any]:
        """Serialize for a request body with exactly the fields that were supplied."""
        return self.model_dump(exclude_unset=True)


# -- Memories -----------------------------------------------------------------


class Memory(BaseModel):
    """A stored memory as returned by the API."""

    id: int | str
    text: str | None = None
    raw_content: str | None = None
    bucket_id: int | str | None = None
    source_type: str | None = None
    reference_data: ReferenceData | None = None
    similarity: float | None = None
    processing_status: str | None = None
    created_at: str | None = None

    @property
    def content(self) -> str:
        """The memory's text, falling back to its raw content."""
        return self.text or self.raw_content or ""


class MemoryList(BaseModel):
    """A page of memories."""

    items: list[Memory] = Field(default_factory=list)
    total: int | None = None
    limit: int | None = None
    offset: int | None = None

    @model_validator(mode="before")
    @classmethod
    def _wrap_bare_list(cls, data: Any) -> Any:
        if isinstance(data, list):
            return {"items": data}
        return data


class SearchDebug(BaseModel):
    """Diagnostics returned by a search with ``debug=true``."""

    query: str | None = None
    query_terms: list[str] = Field(default_factory=list)
    threshold: float | None = None
    all_results: list[Any] = Field(default_factory=list)


class SearchResults(MemoryList):
    debug: SearchDebug | None = None


class SavedMemory(BaseModel):
    """Response to a create or update."""

    id: int | str
    processing_status: str | None = None
    message: str | None = None


class MemoryStatus(BaseModel):
    id: int | str | None = None
    processing_status: str = "unknown"
    error: str | None = None
    updated_at: str | None = None


class RelatedMemories(MemoryList):
    pass


# -- Buckets ------------------------------------------------------------------


class Bucket(BaseModel):
    id: int | str | None = None
    name: str
    memory_count: int | None = None
    created_at: str | None = None


class BucketList(BaseModel):
    items: list[Bucket] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _wrap_bare_list(cls, data: Any) -> Any:
        if isinstance(data, list):
            return {"items": data}
        if isinstance(data, dict) and "buckets" in data and "items" not in data:
            return {"items": data["buckets"]}
        return data


class DeleteResult(BaseModel):
    success: bool = True
    message: str | None = None


# -- Usage --------------------------------------------------------------------


class MonthlyUsage(BaseModel):
    store_memory_count: int = 0
    search_memory_count: int = 0
    api_call_count: int = 0
    total_bytes_processed: int = 0


class PlanLimits(BaseModel):
    store_memory_limit: int | None = None
    search_memory_limit: int | None = None
    api_call_limit: int | None = None
    storage_limit_bytes: int | None = None


class OperationCount(BaseModel):
    operation: str
    count: int = 0


class UsageStats(BaseModel):
    """Plan and current-month usage for the authenticated user.

    ``limits`` is only meaningful for non-legacy users.
    """

    plan: str = "unknown"
    is_legacy_user: bool = False
    current_month_usage: MonthlyUsage = Field(default_factory=MonthlyUsage)
    limits: PlanLimits | None = None
    operations_breakdown: list[OperationCount] = Field(default_factory=list)
