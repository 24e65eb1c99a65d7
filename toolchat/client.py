"""A conversation with a chat-completions endpoint that can call local tools."""

from __future__ import annotations

import json
import logging
import stat
import urllib.error
import urllib.request
from pathlib import Path
from typing import Any

from toolchat.models import (
    MAX_CLIENT_CONNECTION_TIME,
    SYSTEM_PROMPT,
    TOOL_RESPONSE_PROMPT,
    ChatError,
    Handler,
    Message,
    NoToolCallsError,
    Parameters,
    Tool,
)

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 10 * 1024 * 1024
MAX_CONTEXT_LENGTH = 4096
MAX_TOOLS = 10
CONTENT_TYPE = "application/json"


def read_file(path: str | Path) -> tuple[str, str]:
    """Return the base name and text of a file small enough to attach."""
    file_path = Path(path)
    info = file_path.stat()
    if stat.S_ISDIR(info.st_mode):
        raise ChatError("invalid file path")
    if info.st_size > MAX_FILE_SIZE:
        raise ChatError("exceeded maximum file size (10MB)")
    return file_path.name, file_path.read_bytes().decode("utf-8", errors="replace")


def _decode_json(body: bytes) -> Any:
    try:
        return json.loads(body)
    except (ValueError, UnicodeDecodeError) as exc:
        raise ChatError(f"invalid JSON: {exc}") from exc


class ChatClient:
    """One conversation: its history, attached files and tools.

    Global tools and files are shared containers owned by whoever created the
    client; they are read on every request, so later changes are seen.
    """

    def __init__(
        self,
        model: str,
        host: str,
        key: str = "",
        *,
        global_tools: list[Tool] | None = None,
        global_files: dict[str, str] | None = None,
        timeout: float = MAX_CLIENT_CONNECTION_TIME,
    ) -> None:
        self.model = model
        self.host = host
        self.key = key
        self.timeout = timeout
        self.history: list[Message] = [Message("system", SYSTEM_PROMPT)]
        self.files: dict[str, str] = {}
        self.tools: list[Tool] = []
        self._global_tools = global_tools if global_tools is not None else []
        self._global_files = global_files if global_files is not None else {}
        self._opener = urllib.request.build_opener(urllib.request.ProxyHandler({}))

    def __enter__(self) -> ChatClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # Files

    def add_file(self, path: str | Path) -> None:
        name, content = read_file(path)
        self.files[name] = content

    def erase_file(self, name: str) -> None:
        self.files.pop(name, None)

    def clear_files(self) -> None:
        self.files.clear()

    # Tools

    def add_tool(
        self, name: str, description: str, parameters: Parameters, handler: Handler
    ) -> None:
        """Register a tool; a name already known locally or globally is ignored."""
        if len(self.tools) + len(self._global_tools) > MAX_TOOLS:
            raise ChatError(f"exceeded maximum number of tools ({MAX_TOOLS})")
        if any(tool.name == name for tool in (*self._global_tools, *self.tools)):
            return
        self.tools.append(Tool(name, description, parameters, handler))

    def erase_tool(self, name: str) -> None:
        for index, tool in enumerate(self.tools):
            if tool.name == name:
                del self.tools[index]
                return

    def clear_tools(self) -> None:
        self.tools.clear()

    def use_tool(self, name: str, args: dict[str, Any]) -> str:
        """Run the named tool, global tools first, and return its result as text."""
        for tool in (*self._global_tools, *self.tools):
            if tool.name == name:
                return str(tool.handler(args))
        raise ChatError(f"error: no tool found with name {name}")

    # History

    def add_system_prompt(self, text: str) -> None:
        if len(self.history) > MAX_CONTEXT_LENGTH:
            raise ChatError(f"exceeded maximum context length ({MAX_CONTEXT_LENGTH})")
        self.history.append(Message("system", text))

    def clear_history(self) -> None:
        self.history.clear()

    # Exchange with the model

    def chat(self, text: str) -> str:
        """Send a user message and return the model's final answer."""
        reply = self.send_request(self.build_request(text, "user"))
        try:
            return self.parse_response(reply)
        except NoToolCallsError:
            return ""

    def build_request(self, text: str, role: str) -> bytes:
        """Record a message in the history and encode the full request body."""
        self.history.append(Message(role, text))
        messages = [message.to_dict() for message in self.history]
        for files in (self.files, self._global_files):
            messages.extend(
                {"role": "user", "content": f"file<{name}>: {content}"}
                for name, content in files.items()
            )
        body = {
            "model": self.model,
            "messages": messages,
            "temperature": 0.0,
            "stream": False,
            "tools": [tool.to_dict() for tool in (*self._global_tools, *self.tools)],
        }
        encoded = json.dumps(body, ensure_ascii=False).encode("utf-8")
        logger.debug("request body: %s", encoded)
        return encoded

    def send_request(self, body: bytes) -> bytes:
        """POST a body to the endpoint and return the raw reply, whatever its status."""
        headers = {"Content-Type": CONTENT_TYPE}
        if self.key:
            headers["Authorization"] = f"Bearer {self.key}"
        try:
            request = urllib.request.Request(self.host, data=body, headers=headers, method="POST")
            with self._opener.open(request, timeout=self.timeout) as response:
                return response.read()
        except urllib.error.HTTPError as exc:
            try:
                return exc.read()
            finally:
                exc.close()
        except urllib.error.URLError as exc:
            raise ChatError(f"request failed: {exc.reason}") from exc
        except (ValueError, OSError) as exc:
            raise ChatError(f"request failed: {exc}") from exc

    def parse_response(self, body: bytes) -> str:
        """Read a reply, running requested tools until the model stops."""
        while True:
            data = _decode_json(body)
            if not isinstance(data, dict):
                raise ChatError("invalid response")
            choices = data.get("choices") or []
            if not choices:
                raise ChatError("error: no choices found in response")
            error = data.get("error")
            if error:
                raise ChatError(f"error: {error}")
            choice = choices[0]
            message = choice.get("message") or {}
            content = message.get("content") or ""
            if choice.get("finish_reason") == "stop":
                return content
            calls = message.get("tool_calls") or []
            if not calls:
                raise NoToolCallsError()
            function = calls[0].get("function") or {}
            args = _decode_json(function.get("arguments") or "")
            if args is None:
                args = {}
            if not isinstance(args, dict):
                raise ChatError("tool arguments must be a JSON object")
            self.history.append(Message("assistant", content))
            result = self.use_tool(function.get("name", ""), args)
            body = self.send_request(self.build_request(TOOL_RESPONSE_PROMPT + result, "user"))

    def close(self) -> None:
        """Drop the conversation state and detach from shared tools and files."""
        self.history.clear()
        self.files.clear()
        self.tools.clear()
        self._global_tools = []
        self._global_files = {}