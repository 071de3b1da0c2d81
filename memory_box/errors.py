"""Error taxonomy shared by the API client and the tool layer.

Each error carries the JSON-RPC code it is reported under when it crosses
the MCP boundary.
"""

from mcp.types import INTERNAL_ERROR, INVALID_PARAMS, METHOD_NOT_FOUND


class MemoryBoxError(Exception):
    """Base class for failures surfaced to the calling agent."""

    code: int = INTERNAL_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidParamsError(MemoryBoxError):
    """Malformed or missing tool arguments, detected before any request."""

    code = INVALID_PARAMS


class MethodNotFoundError(MemoryBoxError):
    """The requested tool does not exist."""

    code = METHOD_NOT_FOUND


class APIError(MemoryBoxError):
    """Transport failure or non-success response from the Memory Box API."""

    code = INTERNAL_ERROR

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ConfigurationError(MemoryBoxError):
    """Required configuration (e.g. the API token) is missing."""

    code = INTERNAL_ERROR
