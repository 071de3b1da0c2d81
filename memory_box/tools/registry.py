"""Tool registry — central catalog for the Memory Box tools."""

from __future__ import annotations

import inspect
import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from mcp.types import INTERNAL_ERROR, INVALID_PARAMS, METHOD_NOT_FOUND
from pydantic import ValidationError

from memory_box.errors import MemoryBoxError
from memory_box.tools.base import ToolParams, ToolResult

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


@dataclass
class ToolDef:
    """Internal representation of a registered tool."""

    name: str
    description: str
    handler: Callable[..., Awaitable[ToolResult]]
    params_model: type[ToolParams] | None = None


class ToolRegistry:
    """Registry of tools, keyed by name.

    Tools are registered with a decorator::

        @registry.tool(
            name="my_tool",
            description="Does a thing",
        )
        async def my_tool() -> ToolResult:
            return ToolResult(text="done")
    """

    def __init__(self) -> None:
        self._tools: dict[str, ToolDef] = {}

    def tool(
        self,
        *,
        name: str,
        description: str,
        params_model: type[ToolParams] | None = None,
    ) -> Callable:
        """Decorator to register an async function as a tool."""

        def decorator(fn: Callable[..., Awaitable[ToolResult]]) -> Callable:
            if not inspect.iscoroutinefunction(fn):
                msg = f"Tool handler '{name}' must be an async function"
                raise TypeError(msg)

            self._tools[name] = ToolDef(
                name=name,
                description=description,
                handler=fn,
                params_model=params_model,
            )
            return fn

        return decorator

    def get(self, name: str) -> ToolDef | None:
        """Look up a tool by name."""
        return self._tools.get(name)

    def get_schemas(self) -> list[dict[str, Any]]:
        """Generate tool catalog entries for all registered tools."""
        return [self._tool_schema(t) for t in self._tools.values()]

    async def execute(self, name: str, arguments: dict[str, Any] | None) -> ToolResult:
        """Execute a tool by name with the given arguments.

        Validates arguments against the params_model if one is defined.
        Known failures come back as an error result with their protocol
        code; unexpected exceptions are logged and reported as internal
        errors.
        """
        tool_def = self.get(name)
        if tool_def is None:
            return ToolResult(error=f"Unknown tool: {name}", code=METHOD_NOT_FOUND)

        arguments = arguments or {}
        logger.info("Tool '%s' called with %s", name, sorted(arguments))
        t0 = time.monotonic()

        try:
            if tool_def.params_model is not None:
                params = tool_def.params_model(**arguments)
                kwargs = {field: getattr(params, field) for field in type(params).model_fields}
            else:
                kwargs = {}
        except ValidationError as exc:
            logger.warning("Tool '%s' rejected arguments: %s", name, exc)
            return ToolResult(error=_validation_message(exc), code=INVALID_PARAMS)

        try:
            result = await tool_def.handler(**kwargs)
        except MemoryBoxError as exc:
            elapsed = time.monotonic() - t0
            logger.warning("Tool '%s' returned error in %.2fs: %s", name, elapsed, exc.message)
            return ToolResult(error=exc.message, code=exc.code)
        except Exception:
            elapsed = time.monotonic() - t0
            logger.exception("Tool '%s' failed in %.2fs", name, elapsed)
            return ToolResult(
                error=f"Tool '{name}' failed. Check logs for details.", code=INTERNAL_ERROR
            )

        elapsed = time.monotonic() - t0
        logger.info("Tool '%s' succeeded in %.2fs", name, elapsed)
        return result

    @staticmethod
    def _tool_schema(tool_def: ToolDef) -> dict[str, Any]:
        """Build a single tool catalog entry."""
        if tool_def.params_model is not None:
            input_schema = tool_def.params_model.model_json_schema()
        else:
            input_schema = {"type": "object", "properties": {}}

        return {
            "name": tool_def.name,
            "description": tool_def.description,
            "input_schema": input_schema,
        }


def _validation_message(exc: ValidationError) -> str:
    """Flatten a pydantic ValidationError into one readable line."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "arguments"
        parts.append(f"{location}: {error['msg']}")
    return "Invalid arguments: " + "; ".join(parts)
