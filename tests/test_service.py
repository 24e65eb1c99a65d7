import json

import pytest

from toolchat.client import MAX_FILE_SIZE
from toolchat.models import SYSTEM_PROMPT, ChatError, Parameters
from toolchat.service import ChatService


def _service():
    return ChatService("qwen3-14b", "http://localhost:1234/v1/chat/completions")


def _params():
    return Parameters(properties={"x": {"type": "number"}}, required=["x"])


def _request(client, text="hi"):
    return json.loads(client.build_request(text, "user").decode("utf-8"))


def test_add_global_tool_appends_in_order():
    service = _service()
    service.add_global_tool("a", "first", _params(), lambda args: "a")
    service.add_global_tool("b", "second", _params(), lambda args: "b")
    assert [tool.name for tool in service.tools] == ["a", "b"]
    assert service.tools[0].description == "first"


def test_erase_global_tool_removes_first_match_only():
    service = _service()
    service.add_global_tool("dup", "one", _params(), lambda args: 1)
    service.add_global_tool("dup", "two", _params(), lambda args: 2)
    service.erase_global_tool("dup")
    assert [tool.description for tool in service.tools] == ["two"]


def test_erase_unknown_global_tool_leaves_list():
    service = _service()
    service.add_global_tool("a", "first", _params(), lambda args: "a")
    service.erase_global_tool("missing")
    assert [tool.name for tool in service.tools] == ["a"]


def test_client_request_lists_global_tools_before_local():
    service = _service()
    service.add_global_tool("global", "g", _params(), lambda args: "g")
    client = service.new_client("tag")
    client.add_tool("local", "l", _params(), lambda args: "l")
    body = _request(client)
    assert [tool["function"]["name"] for tool in body["tools"]] == ["global", "local"]
    assert body["model"] == "qwen3-14b"


def test_clearing_global_tools_is_seen_by_client():
    service = _service()
    service.add_global_tool("global", "g", _params(), lambda args: "g")
    client = service.new_client("tag")
    service.clear_global_tools()
    assert _request(client)["tools"] == []


def test_tool_added_after_client_creation_is_seen():
    service = _service()
    client = service.new_client("tag")
    service.add_global_tool("late", "l", _params(), lambda args: "ran")
    assert client.use_tool("late", {}) == "ran"


def test_client_ignores_local_tool_named_like_global():
    service = _service()
    service.add_global_tool("same", "g", _params(), lambda args: "global")
    client = service.new_client("tag")
    client.add_tool("same", "l", _params(), lambda args: "local")
    assert client.tools == []
    assert client.use_tool("same", {}) == "global"


def test_add_global_file_is_sent_by_client(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("hello", encoding="utf-8")
    service = _service()
    service.add_global_file(path)
    assert service.files == {"notes.txt": "hello"}
    client = service.new_client("tag")
    contents = [message["content"] for message in _request(client)["messages"]]
    assert "file<notes.txt>: hello" in contents


def test_erase_and_clear_global_files(tmp_path):
    first = tmp_path / "a.txt"
    second = tmp_path / "b.txt"
    first.write_text("A", encoding="utf-8")
    second.write_text("B", encoding="utf-8")
    service = _service()
    service.add_global_file(first)
    service.add_global_file(second)
    client = service.new_client("tag")
    service.erase_global_file("a.txt")
    assert service.files == {"b.txt": "B"}
    service.clear_global_files()
    contents = [message["content"] for message in _request(client)["messages"]]
    assert not any(content.startswith("file<") for content in contents)


def test_add_global_file_rejects_directory(tmp_path):
    with pytest.raises(ChatError, match="invalid file path"):
        _service().add_global_file(tmp_path)


def test_add_global_file_rejects_large_file(tmp_path):
    path = tmp_path / "big.bin"
    with path.open("wb") as handle:
        handle.truncate(MAX_FILE_SIZE + 1)
    service = _service()
    with pytest.raises(ChatError, match="file too large"):
        service.add_global_file(path)
    assert service.files == {}


def test_add_global_file_missing_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        _service().add_global_file(tmp_path / "absent.txt")


def test_new_client_starts_with_system_prompt_and_is_registered():
    service = ChatService("model", "http://localhost:1/x", "placeholder")
    client = service.new_client("tag")
    assert [m.to_dict() for m in client.history] == [
        {"role": "system", "content": SYSTEM_PROMPT}
    ]
    assert service.get_client("tag") is client
    assert (client.model, client.host, client.key) == (
        "model",
        "http://localhost:1/x",
        "placeholder",
    )


def test_get_unknown_client_is_none():
    assert _service().get_client("nobody") is None


def test_new_client_with_same_tag_replaces_old():
    service = _service()
    first = service.new_client("tag")
    second = service.new_client("tag")
    assert service.get_client("tag") is second
    assert second is not first


def test_erase_client_closes_and_forgets_it():
    service = _service()
    client = service.new_client("gone")
    kept = service.new_client("kept")
    service.erase_client("gone")
    assert service.get_client("gone") is None
    assert client.history == []
    assert service.get_client("kept") is kept


def test_erase_unknown_client_keeps_others():
    service = _service()
    kept = service.new_client("kept")
    service.erase_client("missing")
    assert list(service.clients) == ["kept"]
    assert service.get_client("kept") is kept