[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "toolchat"
version = "0.1.0"
description = "Conversations with an OpenAI-compatible chat endpoint, with function tools and attached files"
requires-python = ">=3.10"
dependencies = []
keywords = ["llm", "chat", "tool calling", "function calling", "openai-compatible"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
toolchat-demo = "toolchat.demo:main"

[tool.hatch.build.targets.wheel]
packages = ["toolchat"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
