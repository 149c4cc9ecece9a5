"""Tool handler helpers with error formatting and the confirmation gate."""

from .utils import (
    ToolResult,
    format_json,
    format_list_result,
    format_tool_error,
    text_response,
    wrap_high_risk_tool_handler,
    wrap_tool_handler,
)

__all__ = [
    "ToolResult",
    "format_json",
    "format_list_result",
    "format_tool_error",
    "text_response",
    "wrap_high_risk_tool_handler",
    "wrap_tool_handler",
]
