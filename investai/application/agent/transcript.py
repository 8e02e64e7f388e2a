"""
Transcript codec: LangChain messages ↔ wire messages.

Wire messages are plain ``{"role": ..., "content": ...}`` dicts exchanged with the
chat client as ``conversationHistory``. Content is either a string or a list of
parts:

    {"type": "text", "text": str}
    {"type": "tool-call", "toolCallId": str, "toolName": str, "input": dict}
    {"type": "tool-result", "toolCallId": str, "toolName": str, "output": Any}

Tool outputs are stored in ToolMessage.content as JSON text and decoded back
into structured data on the way out.
"""

import json
import math
from typing import Any, Iterable

from langchain_core.messages import (
    AIMessage,
    BaseMessage,
    HumanMessage,
    SystemMessage,
    ToolMessage,
)

ROLES = ("system", "user", "assistant", "tool")


def encode_tool_output(output: Any) -> str:
    """Serialise a tool output as strict JSON; NaN and infinities become null."""
    return json.dumps(_finite(output), default=str, allow_nan=False)


def _finite(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {k: _finite(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_finite(v) for v in value]
    return value


def decode_tool_output(content: Any) -> Any:
    if not isinstance(content, str):
        return content
    try:
        return json.loads(content)
    except ValueError:
        return content


def message_text(message: BaseMessage) -> str:
    """Concatenate the text parts of a message's content."""
    content = message.content
    if isinstance(content, str):
        return content
    texts = []
    for part in content:
        if isinstance(part, str):
            texts.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            texts.append(part.get("text", ""))
    return "".join(texts)


def to_wire(message: BaseMessage) -> dict:
    if isinstance(message, SystemMessage):
        return {"role": "system", "content": message_text(message)}
    if isinstance(message, HumanMessage):
        return {"role": "user", "content": message.content}
    if isinstance(message, ToolMessage):
        return {
            "role": "tool",
            "content": [
                {
                    "type": "tool-result",
                    "toolCallId": message.tool_call_id,
                    "toolName": message.name,
                    "output": decode_tool_output(message.content),
                }
            ],
        }
    if isinstance(message, AIMessage):
        text = message_text(message)
        if not message.tool_calls:
            return {"role": "assistant", "content": text}
        parts: list[dict] = [{"type": "text", "text": text}] if text else []
        parts.extend(
            {
                "type": "tool-call",
                "toolCallId": call["id"],
                "toolName": call["name"],
                "input": call["args"],
            }
            for call in message.tool_calls
        )
        return {"role": "assistant", "content": parts}
    raise ValueError(f"Unsupported message type: {type(message).__name__}")


def from_wire(message: dict) -> list[BaseMessage]:
    """Decode one wire message.

    A tool message may carry several tool-result parts and therefore decodes to
    one ToolMessage per part.

    Raises:
        ValueError: on an unknown role or a malformed part.
    """
    role = message.get("role")
    content = message.get("content", "")
    if role not in ROLES:
        raise ValueError(f"Unknown message role: {role!r}")

    if role == "system":
        return [SystemMessage(content=_text_only(content))]
    if role == "user":
        return [HumanMessage(content=_text_only(content))]
    if role == "tool":
        if isinstance(content, str):
            raise ValueError("tool messages must carry tool-result parts")
        return [
            ToolMessage(
                content=encode_tool_output(part.get("output")),
                tool_call_id=_require(part, "toolCallId"),
                name=part.get("toolName"),
            )
            for part in content
            if part.get("type") == "tool-result"
        ]

    if isinstance(content, str):
        return [AIMessage(content=content)]
    tool_calls = [
        {
            "id": _require(part, "toolCallId"),
            "name": _require(part, "toolName"),
            "args": part.get("input") or {},
        }
        for part in content
        if part.get("type") == "tool-call"
    ]
    return [AIMessage(content=_text_only(content), tool_calls=tool_calls)]


def history_from_wire(history: Iterable[dict]) -> list[BaseMessage]:
    messages: list[BaseMessage] = []
    for item in history:
        messages.extend(from_wire(item))
    return messages


def history_to_wire(messages: Iterable[BaseMessage]) -> list[dict]:
    return [to_wire(m) for m in messages]


def _text_only(content: Any) -> str:
    if isinstance(content, str):
        return content
    return "".join(
        part.get("text", "") for part in content if part.get("type") == "text"
    )


def _require(part: dict, key: str) -> Any:
    value = part.get(key)
    if not value:
        raise ValueError(f"{part.get('type')} part is missing {key!r}")
    return value
