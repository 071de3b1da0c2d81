"""Usage tools — plan and consumption statistics."""

from __future__ import annotations

from typing import TYPE_CHECKING

from memory_box.formatting import format_bytes
from memory_box.models import UsageStats
from memory_box.tools.base import ToolResult

if TYPE_CHECKING:
    from memory_box.client import MemoryBoxClient
    from memory_box.tools.registry import ToolRegistry


def _limit(value: int | None) -> str:
    return "unlimited" if value is None else f"{value} operations"


def render_usage(stats: UsageStats) -> str:
    """Render usage statistics as the plain-text report shown to the agent."""
    usage = stats.current_month_usage
    lines = ["Usage Statistics:", "", f"Current Plan: {stats.plan}"]
    if stats.is_legacy_user:
        lines += ["Status: Legacy User (No Enforced Limits)", ""]
    else:
        lines += ["Status: Standard User", ""]

    lines += [
        "Current Month Usage:",
        f"- Store Memory Operations: {usage.store_memory_count}",
        f"- Search Memory Operations: {usage.search_memory_count}",
        f"- API Calls: {usage.api_call_count}",
        f"- Total Data Processed: {format_bytes(usage.total_bytes_processed)}",
        "",
    ]

    if not stats.is_legacy_user and stats.limits is not None:
        limits = stats.limits
        storage = (
            "unlimited"
            if limits.storage_limit_bytes is None
            else format_bytes(limits.storage_limit_bytes)
        )
        lines += [
            "Plan Limits:",
            f"- Store Memory Limit: {_limit(limits.store_memory_limit)}",
            f"- Search Memory Limit: {_limit(limits.search_memory_limit)}",
            f"- API Call Limit: {_limit(limits.api_call_limit)}",
            f"- Storage Limit: {storage}",
            "",
        ]

    if stats.operations_breakdown:
        lines.append("Operation Breakdown:")
        lines += [f"- {op.operation}: {op.count} operations" for op in stats.operations_breakdown]

    return "\n".join(lines).rstrip("\n")


def register_usage_tools(registry: ToolRegistry, client: MemoryBoxClient) -> None:
    """Register the usage tools, bound to *client*."""

    @registry.tool(
        name="get_usage_stats",
        description="Retrieve user usage statistics and plan information",
    )
    async def get_usage_stats() -> ToolResult:
        stats = await client.get_user_stats()
        return ToolResult(text=render_usage(stats))
