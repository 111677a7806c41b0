"""
Role and part mapping between CodeSense messages and the backend wire format.

The orchestrator speaks requester/model/tool with text, tool_call and
tool_result parts. LiteLLM speaks the OpenAI chat format: user/assistant/tool
roles, ``tool_calls`` on assistant messages and one ``tool`` message per call
id. Only this module knows about the latter.
"""

import json
import logging
from typing import Any

from codesense.providers.models import FunctionCall, Message, Part, Role

logger = logging.getLogger(__name__)

ROLE_TO_BACKEND: dict[Role, str] = {
    Role.REQUESTER: "user",
    Role.MODEL: "assistant",
    Role.TOOL: "tool",
}


def _call_id(call: FunctionCall, message_index: int, part_index: int) -> str:
    """Return the backend id of a tool call, synthesizing one if absent."""
    return call.call_id or f"call_{message_index}_{part_index}"


def _encode_model_message(message: Message, message_index: int) -> dict[str, Any]:
    text = message.text
    encoded: dict[str, Any] = {
        "role": ROLE_TO_BACKEND[Role.MODEL],
        "content": text or None,
    }

    tool_calls = []
    for part_index, part in enumerate(message.parts):
        if part.tool_call is None:
            continue
        tool_calls.append({
            "id": _call_id(part.tool_call, message_index, part_index),
            "type": "function",
            "function": {
                "name": part.tool_call.name,
                "arguments": json.dumps(part.tool_call.arguments),
            },
        })

    if tool_calls:
        encoded["tool_calls"] = tool_calls
    elif encoded["content"] is None:
        encoded["content"] = ""

    return encoded


def _encode_tool_message(
    message: Message,
    previous: Message | None,
    previous_index: int,
) -> list[dict[str, Any]]:
    """
    Encode a tool message as one backend message per answered call id.

    A tool_result part aggregates every call to the same tool, so the full
    payload is attached to the first call id of that name and the remaining
    ids point at it.

    Calls with no matching tool_result are answered as ignored, since the
    backend requires a response for every call id.
    """
    ids_by_name: dict[str, list[str]] = {}
    if previous is not None:
        for part_index, part in enumerate(previous.parts):
            if part.tool_call is None:
                continue
            ids_by_name.setdefault(part.tool_call.name, []).append(
                _call_id(part.tool_call, previous_index, part_index)
            )

    encoded: list[dict[str, Any]] = []
    for part in message.parts:
        if part.tool_result is None:
            continue

        call_ids = ids_by_name.get(part.tool_result.name) or [f"call_{part.tool_result.name}"]
        first, rest = call_ids[0], call_ids[1:]
        encoded.append({
            "role": ROLE_TO_BACKEND[Role.TOOL],
            "tool_call_id": first,
            "name": part.tool_result.name,
            "content": json.dumps(part.tool_result.payload),
        })
        for call_id in rest:
            encoded.append({
                "role": ROLE_TO_BACKEND[Role.TOOL],
                "tool_call_id": call_id,
                "name": part.tool_result.name,
                "content": json.dumps({"merged_into": first}),
            })

    answered = {part.tool_result.name for part in message.parts if part.tool_result is not None}
    for name, call_ids in ids_by_name.items():
        if name in answered:
            continue
        for call_id in call_ids:
            encoded.append({
                "role": ROLE_TO_BACKEND[Role.TOOL],
                "tool_call_id": call_id,
                "name": name,
                "content": json.dumps({"ignored": "unknown tool"}),
            })

    return encoded


def to_backend_messages(messages: list[Message]) -> list[dict[str, Any]]:
    """
    Convert a conversation to LiteLLM-compatible message dicts.

    Args:
        messages: Conversation in CodeSense format.

    Returns:
        Messages in OpenAI chat format.
    """
    encoded: list[dict[str, Any]] = []

    for index, message in enumerate(messages):
        if message.role == Role.MODEL:
            encoded.append(_encode_model_message(message, index))
        elif message.role == Role.TOOL:
            previous = messages[index - 1] if index > 0 else None
            encoded.extend(_encode_tool_message(message, previous, index - 1))
        else:
            encoded.append({"role": ROLE_TO_BACKEND[Role.REQUESTER], "content": message.text})

    return encoded


def _field(obj: Any, name: str) -> Any:
    """Read an attribute from a LiteLLM object or a plain dict."""
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def _decode_arguments(raw: Any) -> dict[str, Any]:
    if isinstance(raw, dict):
        return raw
    if not raw:
        return {}
    try:
        decoded = json.loads(raw)
    except (TypeError, json.JSONDecodeError):
        logger.warning(f"Failed to parse tool arguments as JSON: {raw}")
        return {"raw_input": raw}
    return decoded if isinstance(decoded, dict) else {"raw_input": decoded}


def from_backend_message(message: Any) -> Message:
    """
    Convert a LiteLLM response message to a model Message.

    Args:
        message: ``choices[0].message`` of a LiteLLM response, or its dict form.

    Returns:
        Model message with text and tool_call parts in backend order.
    """
    parts: list[Part] = []

    content = _field(message, "content")
    if isinstance(content, str) and content:
        parts.append(Part.from_text(content))
    elif isinstance(content, list):
        for block in content:
            text = _field(block, "text")
            if text:
                parts.append(Part.from_text(text))

    for tool_call in _field(message, "tool_calls") or []:
        function = _field(tool_call, "function")
        name = _field(function, "name") if function is not None else None
        if not name:
            logger.warning(f"Invalid tool call block: {tool_call}")
            continue
        parts.append(
            Part.from_tool_call(
                name=name,
                arguments=_decode_arguments(_field(function, "arguments")),
                call_id=_field(tool_call, "id"),
            )
        )

    return Message(role=Role.MODEL, parts=tuple(parts))
