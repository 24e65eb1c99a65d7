"""A service that hands out chat clients sharing global tools and files."""

from __future__ import annotations

import stat
from pathlib import Path

from toolchat.client import MAX_FILE_SIZE, ChatClient
from toolchat.models import ChatError, Handler, Parameters, Tool


class ChatService:
    """Holds the model endpoint plus the tools and files every client sees.

    Clients keep a reference to this service's tool list and file map, so
    changes made here show up in their next request.
    """

    def __init__(self, model: str, host: str, key: str = "") -> None:
        self.model = model
        self.host = host
        self.key = key
        self.tools: list[Tool] = []
        self.files: dict[str, str] = {}
        self.clients: dict[str, ChatClient] = {}

    # Global tools

    def add_global_tool(
        self, name: str, description: str, parameters: Parameters, handler: Handler
    ) -> None:
        self.tools.append(Tool(name, description, parameters, handler))

    def erase_global_tool(self, name: str) -> None:
        for index, tool in enumerate(self.tools):
            if tool.name == name:
                del self.tools[index]
                return

    def clear_global_tools(self) -> None:
        self.tools.clear()

    # Global files

    def add_global_file(self, path: str | Path) -> None:
        """Attach a file, by its base name, to every client's requests."""
        file_path = Path(path)
        info = file_path.stat()
        if stat.S_ISDIR(info.st_mode):
            raise ChatError("invalid file path")
        if info.st_size > MAX_FILE_SIZE:
            raise ChatError("file too large")
        content = file_path.read_bytes().decode("utf-8", errors="replace")
        self.files[file_path.name] = content

    def erase_global_file(self, name: str) -> None:
        self.files.pop(name, None)

    def clear_global_files(self) -> None:
        self.files.clear()

    # Clients

    def new_client(self, tag: str) -> ChatClient:
        """Create a client under a tag, replacing any client with that tag."""
        client = ChatClient(
            self.model,
            self.host,
            self.key,
            global_tools=self.tools,
            global_files=self.files,
        )
        self.clients[tag] = client
        return client

    def erase_client(self, tag: str) -> None:
        client = self.clients.pop(tag, None)
        if client is not None:
            client.close()

    def get_client(self, tag: str) -> ChatClient | None:
        return self.clients.get(tag)