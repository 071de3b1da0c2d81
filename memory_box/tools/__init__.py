"""Tool framework — builds the registry of Memory Box tools."""

from __future__ import annotations

from typing import TYPE_CHECKING

from memory_box.client import MemoryBoxClient
from memory_box.tools.bucket_tools import register_bucket_tools
from memory_box.tools.memory_tools import register_memory_tools
from memory_box.tools.registry import ToolRegistry
from memory_box.tools.usage_tools import register_usage_tools

if TYPE_CHECKING:
    from memory_box.config import Settings


def create_registry(settings: Settings, client: MemoryBoxClient | None = None) -> ToolRegistry:
    """Build a registry with every tool bound to one API client.

    The client is created from *settings* unless one is passed in.
    """
    if client is None:
        client = MemoryBoxClient(
            base_url=settings.memory_box_api_url,
            token=settings.memory_box_token,
            default_bucket=settings.default_bucket,
        )

    registry = ToolRegistry()
    register_memory_tools(registry, client)
    register_usage_tools(registry, client)
    register_bucket_tools(registry, client)
    return registry


__all__ = ["ToolRegistry", "create_registry"]
