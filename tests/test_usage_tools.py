"""Tests for the usage statistics tool."""

from memory_box.client import USAGE_PATH
from memory_box.models import UsageStats
from memory_box.tools.usage_tools import render_usage

STANDARD_USER = {
    "plan": "pro",
    "is_legacy_user": False,
    "current_month_usage": {
        "store_memory_count": 10,
        "search_memory_count": 25,
        "api_call_count": 40,
        "total_bytes_processed": 1536,
    },
    "limits": {
        "store_memory_limit": 1000,
        "search_memory_limit": 5000,
        "api_call_limit": 10000,
        "storage_limit_bytes": 1048576,
    },
    "operations_breakdown": [
        {"operation": "store_memory", "count": 10},
        {"operation": "search_memory", "count": 25},
    ],
}


def test_render_standard_user() -> None:
    text = render_usage(UsageStats.model_validate(STANDARD_USER))

    assert text == (
        "Usage Statistics:\n"
        "\n"
        "Current Plan: pro\n"
        "Status: Standard User\n"
        "\n"
        "Current Month Usage:\n"
        "- Store Memory Operations: 10\n"
        "- Search Memory Operations: 25\n"
        "- API Calls: 40\n"
        "- Total Data Processed: 1.5 KB\n"
        "\n"
        "Plan Limits:\n"
        "- Store Memory Limit: 1000 operations\n"
        "- Search Memory Limit: 5000 operations\n"
        "- API Call Limit: 10000 operations\n"
        "- Storage Limit: 1 MB\n"
        "\n"
        "Operation Breakdown:\n"
        "- store_memory: 10 operations\n"
        "- search_memory: 25 operations"
    )


def test_render_legacy_user_hides_limits() -> None:
    data = {**STANDARD_USER, "is_legacy_user": True, "operations_breakdown": []}

    text = render_usage(UsageStats.model_validate(data))

    assert "Status: Legacy User (No Enforced Limits)" in text
    assert "Plan Limits:" not in text
    assert "Operation Breakdown:" not in text
    assert text.endswith("- Total Data Processed: 1.5 KB")


def test_render_zero_bytes() -> None:
    text = render_usage(UsageStats.model_validate({"plan": "free"}))

    assert "- Total Data Processed: 0 Bytes" in text


async def test_get_usage_stats_tool(api, registry) -> None:
    api.route("GET", USAGE_PATH, json=STANDARD_USER)

    result = await registry.execute("get_usage_stats", {})

    assert result.success
    assert result.text.startswith("Usage Statistics:\n\nCurrent Plan: pro")


async def test_get_usage_stats_unauthorized(api, registry) -> None:
    api.route("GET", USAGE_PATH, json={"detail": "Invalid token"}, status_code=401)

    result = await registry.execute("get_usage_stats", {})

    assert result.error == "Failed to retrieve usage statistics: Invalid token"
