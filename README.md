# toolchat

A small library for holding conversations with a chat-completions endpoint
that speaks the OpenAI request format (a local model server, for instance).
It keeps the message history of each conversation, attaches the contents of
text files to every request, and lets the model call Python functions you
register as tools. When the model asks for a tool, the handler runs, its
result is sent back to the model as a new user message, and the exchange goes
on until the model finishes with `finish_reason` `"stop"`.

It uses only the standard library.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `toolchat.models`: `Parameters`, `Tool`, `Message`, the `ChatError` and
  `NoToolCallsError` exceptions, the system prompt and the timeout constants.
- `toolchat.client`: `ChatClient`, one conversation, and `read_file`.
- `toolchat.service`: `ChatService`, which creates clients and holds tools and
  files shared by all of them.
- `toolchat.demo`: two example tools and the `toolchat-demo` command.

## Example

```python
from toolchat.models import Parameters
from toolchat.service import ChatService


def to_fahrenheit(args):
    celsius = args["celsius"]
    return f"{celsius * 9 / 5 + 32:.2f}"


service = ChatService("qwen3-14b", "http://localhost:1234/v1/chat/completions", "")
dialog = service.new_client("weather")

dialog.add_tool(
    "celsius_to_fahrenheit",
    "Convert a temperature in Celsius to Fahrenheit",
    Parameters(
        type="object",
        properties={"celsius": {"type": "number", "description": "degrees Celsius"}},
        required=["celsius"],
    ),
    to_fahrenheit,
)

dialog.add_file("README.md")
print(dialog.chat("What is 28 degrees Celsius in Fahrenheit?"))

dialog.clear_history()
print(dialog.chat("Hello"))
```

A tool handler receives the arguments the model sent, decoded from JSON into
a dict; whatever it returns is turned into text with `str()`. An exception
raised by a handler propagates out of `chat`.

## How a conversation works

- A new `ChatClient` starts with one system message (`SYSTEM_PROMPT`).
- `chat(text)` appends `text` as a user message and posts a request holding
  the whole history, then one user message `file<name>: content` for each of
  the client's files followed by each shared file, and every shared tool
  followed by the client's own tools. Temperature is `0.0`; streaming is off.
- If the API key is not empty it is sent as `Authorization: Bearer <key>`.
  The reply body is read whatever the HTTP status; system proxy settings are
  not used; the timeout is 180 seconds.
- A reply with no choices, or with an `error` field, raises `ChatError`. A
  reply whose first choice neither stops nor calls a tool makes `chat` return
  an empty string. Only the first tool call of a reply is run; the model's
  text is recorded as an assistant message and the tool result is sent back
  prefixed with `TOOL_RESPONSE_PROMPT`.
- Calling a tool name that is not registered raises `ChatError`.
- The request body is logged at debug level on the `toolchat.client` logger.

A client also works as a context manager; leaving the block calls `close()`.

### Limits

- `add_tool` raises `ChatError` when the client's own tools and the shared
  tools together already number more than ten. Registering a tool whose name
  is already used by a shared or own tool does nothing.
- Files larger than 10 MB, and directories, are refused with `ChatError`.
  Files are keyed by their base name; a second file with the same name
  replaces the first. Contents are decoded as UTF-8, with undecodable bytes
  replaced.
- `add_system_prompt` raises `ChatError` once the history holds more than
  4096 messages.

### Shared tools and files

```python
service.add_global_tool(name, description, parameters, handler)
service.add_global_file("notes.txt")
```

Clients keep a reference to the service's tool list and file map, so changes
made on the service show up in every client's next request. Shared tools are
offered to the model before a client's own tools and are checked first when
the model calls a tool by name. `add_global_tool` does not check for
duplicate names.

| Method | Effect |
| --- | --- |
| `erase_global_tool(name)` / `clear_global_tools()` | remove shared tools |
| `erase_global_file(name)` / `clear_global_files()` | remove shared files |
| `new_client(tag)` | create a client, replacing any client with that tag |
| `get_client(tag)` | the client with that tag, or `None` |
| `erase_client(tag)` | drop the client and call its `close()` |

### Managing a conversation

| Method | Effect |
| --- | --- |
| `add_system_prompt(text)` | append a system message to the history |
| `erase_tool(name)` / `clear_tools()` | remove the client's own tools |
| `erase_file(name)` / `clear_files()` | remove attached files |
| `clear_history()` | forget every message, including the system prompt |
| `close()` | clear history, files and tools, and detach from the shared tools and files |

## Demo

```
toolchat-demo
```

runs a short session against a model server at
`http://localhost:1234/v1/chat/completions`: it attaches `README.md` from the
current directory and asks the model to summarise it. Options:

- `--model` (default `qwen3-14b`), `--host`, `--key` (default empty)
- `--demo file` (default) or `--demo tool`, which registers the example
  `weather_query` and `celsius_to_fahrenheit` tools, asks about the weather,
  then clears the history and says hello.

The command exits with status 1 and prints the error if the exchange fails.

## What it does not do

Replies are not streamed, there is no asynchronous interface, and
conversations are kept in memory only: nothing is saved between runs.