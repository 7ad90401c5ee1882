"""
Error types raised by the Stacks tool plugins.

Tools let these propagate unchanged; only the MCP server boundary turns them
into error payloads.
"""

from __future__ import annotations

from typing import Any


class StacksToolError(Exception):
    """Base class for all Stacks tool errors."""


class ValidationError(StacksToolError, ValueError):
    """A tool argument is missing or malformed. Raised before any network call."""

    def __init__(
        self,
        message: str,
        tool_name: str | None = None,
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(message)
        self.tool_name = tool_name
        self.errors = errors or []


class UpstreamRequestError(StacksToolError, RuntimeError):
    """The Stacks API answered with a non-success status or could not be reached."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        status_text: str | None = None,
        url: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.status_text = status_text
        self.url = url


class ConfigurationError(StacksToolError, RuntimeError):
    """Unsupported network, missing wallet settings, or a tool set that cannot be built."""


class TimerNotStartedError(StacksToolError, RuntimeError):
    """PerformanceMonitor.end() was called for a label that was never started."""

    def __init__(self, label: str) -> None:
        super().__init__(f"Timer '{label}' was not started")
        self.label = label
