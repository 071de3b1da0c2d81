"""Base types for the tool-calling framework."""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict


@dataclass
class ToolResult:
    """Result of a tool execution.

    Every tool returns one of these. The server turns it into a single
    text content block, or into a protocol error carrying ``code``.
    """

    text: str | None = None
    error: str | None = None
    code: int | None = None

    @property
    def success(self) -> bool:
        return self.error is None

    def to_content(self) -> str:
        """The text block sent back to the agent."""
        if self.error:
            return f"Error: {self.error}"
        return self.text or ""


class ToolParams(BaseModel):
    """Base class for tool parameter models.

    Subclass with Field() definitions. The JSON schema is auto-generated
    via model_json_schema() for the tool catalog.
    """

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)
