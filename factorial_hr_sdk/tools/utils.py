"""
Helpers for exposing SDK operations as tool handlers.

Handlers take a dict of arguments and return a ToolResult; errors are
converted into error results instead of propagating.
"""

import json
from typing import Any, Awaitable, Callable, Dict, Optional

from pydantic import BaseModel

from ..errors import OperationCancelledError, get_user_message
from ..models.pagination import PaginatedResponse, format_pagination_info
from ..observability.logging import StructuredLogger
from ..safety.confirmation import ConfirmationManager
from ..safety.policies import get_operation_policy, get_warning_message

logger = StructuredLogger("tools")

ToolResult = Dict[str, Any]
ToolArgs = Dict[str, Any]
ToolHandler = Callable[[ToolArgs], Awaitable[ToolResult]]

# Arguments consumed by the confirmation flow, never forwarded to handlers
CONFIRMATION_ARGS = ("confirmation_token", "cancel")


def text_response(text: str) -> ToolResult:
    return {"content": [{"type": "text", "text": text}]}


def format_tool_error(error: Any) -> ToolResult:
    return {
        "content": [{"type": "text", "text": f"Error: {get_user_message(error)}"}],
        "is_error": True,
    }


def format_json(data: Any, prefix: Optional[str] = None) -> str:
    text = json.dumps(data, indent=2, default=str)
    return f"{prefix}\n\n{text}" if prefix else text


def format_list_result(result: PaginatedResponse, entity_name: str) -> str:
    """Summarize one page of a list operation, e.g. "Found 2 teams (Page 1 of 1 (2 total items)):"."""
    items = [item.model_dump(exclude_none=True) if isinstance(item, BaseModel) else item for item in result.data]
    plural = "" if len(items) == 1 else "s"
    info = format_pagination_info(result.meta)
    return f"Found {len(items)} {entity_name}{plural} ({info}):\n\n{format_json(items)}"


def wrap_tool_handler(handler: ToolHandler) -> ToolHandler:
    """Wrap a handler so that any exception becomes an error result."""
    async def wrapped(args: ToolArgs) -> ToolResult:
        try:
            return await handler(args)
        except Exception as e:
            logger.debug("Tool handler failed", error=get_user_message(e))
            return format_tool_error(e)

    return wrapped


def wrap_high_risk_tool_handler(
    operation_name: str,
    handler: ToolHandler,
    manager: ConfirmationManager,
    describe: Callable[[ToolArgs], Dict[str, Any]]
) -> ToolHandler:
    """
    Gate a handler behind the two-phase confirmation flow.

    Operations whose policy does not require confirmation run directly.
    Otherwise:
    - without ``confirmation_token``, a preview and a token are returned and
      the arguments are stored as the pending payload
    - with ``confirmation_token``, the token is consumed and the handler runs
      with the stored payload
    - with ``cancel: true``, the pending operation is dropped

    Args:
        operation_name: Policy name, e.g. "delete_team"
        handler: The handler performing the write
        manager: Confirmation manager holding pending operations
        describe: Builds the preview fields (operation, entity_type,
            entity_id, entity_name, changes, warnings) from the arguments
    """
    async def gated(args: ToolArgs) -> ToolResult:
        if not get_operation_policy(operation_name).requires_confirmation:
            return await handler(args)

        token = args.get("confirmation_token")

        if args.get("cancel"):
            if token:
                manager.cancel(token, operation_name)
            raise OperationCancelledError(operation_name)

        if token:
            pending = manager.confirm(token, operation_name)
            return await handler(pending.payload)

        payload = {k: v for k, v in args.items() if k not in CONFIRMATION_ARGS}
        preview_fields = dict(describe(payload))
        warning = get_warning_message(operation_name)
        warnings = list(preview_fields.get("warnings") or [])
        if warning:
            warnings.append(warning)
        preview_fields["warnings"] = warnings

        token = manager.create_confirmation(operation_name, payload, preview_fields)
        preview = manager.get_preview(token)

        lines = []
        if warning:
            lines.append(warning)
        lines.append(format_json(preview.model_dump(by_alias=True, exclude_none=True), "Preview:"))
        lines.append(
            f'To proceed, call this tool again with `confirmation_token: "{token}"`. '
            "To abort, pass the same token with `cancel: true`."
        )
        return text_response("\n\n".join(lines))

    return wrap_tool_handler(gated)
