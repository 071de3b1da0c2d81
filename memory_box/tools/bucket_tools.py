"""Bucket tools — list, create and delete memory buckets."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import Field

from memory_box.errors import InvalidParamsError
from memory_box.models import Bucket
from memory_box.tools.base import ToolParams, ToolResult

if TYPE_CHECKING:
    from memory_box.client import MemoryBoxClient
    from memory_box.tools.registry import ToolRegistry


class CreateBucketParams(ToolParams):
    bucket_name: str = Field(description="Name of the bucket to create")


class DeleteBucketParams(ToolParams):
    bucket_name: str = Field(description="Name of the bucket to delete")
    force: bool = Field(
        default=False,
        description="Delete the bucket even if it still contains memories (default: false)",
    )


def _format_bucket(index: int, bucket: Bucket) -> str:
    line = f"{index}. {bucket.name}"
    if bucket.memory_count is not None:
        noun = "memory" if bucket.memory_count == 1 else "memories"
        line += f" ({bucket.memory_count} {noun})"
    return line


def _bucket_name(value: str) -> str:
    if not value.strip():
        msg = "Bucket name is required"
        raise InvalidParamsError(msg)
    return value


def register_bucket_tools(registry: ToolRegistry, client: MemoryBoxClient) -> None:
    """Register the bucket tools, bound to *client*."""

    @registry.tool(
        name="get_buckets",
        description="List all memory buckets",
    )
    async def get_buckets() -> ToolResult:
        result = await client.get_buckets()
        if not result.items:
            return ToolResult(text="Buckets:\n\nNo buckets found.")
        lines = [_format_bucket(i, bucket) for i, bucket in enumerate(result.items, start=1)]
        return ToolResult(text="Buckets:\n\n" + "\n".join(lines))

    @registry.tool(
        name="create_bucket",
        description="Create a new memory bucket",
        params_model=CreateBucketParams,
    )
    async def create_bucket(bucket_name: str) -> ToolResult:
        bucket = await client.create_bucket(_bucket_name(bucket_name))
        text = f'Bucket "{bucket.name}" created successfully'
        if bucket.id is not None:
            text += f" with ID: {bucket.id}"
        return ToolResult(text=text)

    @registry.tool(
        name="delete_bucket",
        description=(
            "Delete a memory bucket. Fails if the bucket still holds memories "
            "unless force is true."
        ),
        params_model=DeleteBucketParams,
    )
    async def delete_bucket(bucket_name: str, force: bool = False) -> ToolResult:
        result = await client.delete_bucket(_bucket_name(bucket_name), force=force)
        text = f'Bucket "{bucket_name}" deleted successfully'
        if result.message:
            text += f"\n{result.message}"
        return ToolResult(text=text)
