"""Data types, limits and prompts shared by the chat client and service."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

MAX_CLIENT_CONNECTION_TIME = 180.0
MAX_CLIENT_IDLE_TIME = 60.0
MAX_CLIENT_IDLE_CONNS = 10

SYSTEM_PROMPT = (
    "你是一个技术高超，思维超群的工程师，你可以解决用户的各种问题。"
    "你会使用一些工具来帮助你解决问题。我接下来会给你提供一些工具，工具里会包含使用工具需要的参数。"
    "在你每次遇到问题时，你需要先进行思考，根据思考结果决定工具的调用，每次回应只能调用一个工具，且不能调用不存在的工具。"
    "当你认为问题已经完美解决时告诉我答案"
)
TOOL_RESPONSE_PROMPT = "工具调用结果："

Handler = Callable[[dict[str, Any]], Any]


class ChatError(Exception):
    """Raised when a chat exchange with the model fails."""


class NoToolCallsError(ChatError):
    """Raised when a reply neither finishes nor asks for a tool."""

    def __init__(self, message: str = "error: no tool calls found in response") -> None:
        super().__init__(message)


@dataclass
class Parameters:
    """JSON-schema description of a tool's arguments."""

    type: str = "object"
    properties: dict[str, Any] = field(default_factory=dict)
    required: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "properties": dict(self.properties),
            "required": list(self.required),
        }


@dataclass
class Tool:
    """A function the model may call, with the handler that runs it."""

    name: str
    description: str
    parameters: Parameters
    handler: Handler = field(compare=False, repr=False)
    type: str = "function"

    def to_dict(self) -> dict[str, Any]:
        """The tool as it is sent to the model; the handler stays local."""
        return {
            "type": self.type,
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters.to_dict(),
            },
        }


@dataclass
class Message:
    """One entry of a conversation."""

    role: str
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}