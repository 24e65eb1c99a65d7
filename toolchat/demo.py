"""Example tools and two demonstration conversations with a local model."""

from __future__ import annotations

import argparse
import sys
from typing import Any

from toolchat.models import ChatError, Parameters
from toolchat.service import ChatService

DEFAULT_MODEL = "qwen3-14b"
DEFAULT_HOST = "http://localhost:1234/v1/chat/completions"


def _number(args: dict[str, Any], key: str) -> float | None:
    value = args.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def get_weather(args: dict[str, Any]) -> str:
    """Return made-up weather for a latitude and longitude."""
    latitude = _number(args, "latitude")
    longitude = _number(args, "longitude")
    if latitude is None or longitude is None:
        raise ChatError("缺少有效的经纬度参数")

    print("实际经纬度:", latitude, longitude)
    if latitude > 30 and longitude > 100:
        weather = "晴天，温度28°C，湿度45%"
    elif latitude > 0:
        weather = "多云，温度22°C，湿度60%"
    else:
        weather = "小雨，温度18°C，湿度85%"
    print(f"获取位置 ({latitude:.2f}, {longitude:.2f}) 的天气: {weather}")
    return f"当前天气: {weather}"


def celsius_to_fahrenheit(args: dict[str, Any]) -> str:
    """Convert the "celsius" argument to Fahrenheit."""
    celsius = _number(args, "celsius")
    if celsius is None:
        raise ChatError("缺少有效的摄氏度参数")
    fahrenheit = celsius * 9 / 5 + 32
    print(f"摄氏度: {celsius:.2f}, 华氏度: {fahrenheit:.2f}")
    return f"华氏度: {fahrenheit:.2f}"


def run_tool_demo(service: ChatService) -> tuple[str, str]:
    """Ask for weather with tools available, then greet with a fresh history."""
    client = service.new_client("查询天气")
    client.add_file("README.md")
    client.add_tool(
        "weather_query",
        "查询指定位置的天气情况",
        Parameters(
            type="object",
            properties={
                "latitude": {"type": "number", "description": "latitude"},
                "longitude": {"type": "number", "description": "longitude"},
            },
            required=["latitude", "longitude"],
        ),
        get_weather,
    )
    client.add_tool(
        "celsius_to_fahrenheit",
        "将摄氏度转换为华氏度",
        Parameters(
            type="object",
            properties={"celsius": {"type": "number", "description": "摄氏度"}},
            required=["celsius"],
        ),
        celsius_to_fahrenheit,
    )

    print("\n--- 测试1：查询北京天气 ---")
    first = client.chat("我要查询北京的天气，然后把摄氏度转换成华氏度")
    print(f"模型回复: {first}")

    client.clear_history()

    print("\n--- 测试2：问候 ---")
    second = client.chat("你好")
    print(f"模型回复: {second}")
    return first, second


def run_file_demo(service: ChatService) -> str:
    """Attach README.md and ask the model for a summary."""
    client = service.new_client("文件测试")
    client.add_file("./README.md")
    print("\n--- 测试1：添加文件 ---")
    reply = client.chat("请帮我做个摘要")
    print(f"模型回复: {reply}")
    return reply


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run a demonstration conversation.")
    parser.add_argument("--model", default=DEFAULT_MODEL)
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--key", default="")
    parser.add_argument("--demo", choices=("file", "tool"), default="file")
    options = parser.parse_args(argv)

    service = ChatService(options.model, options.host, options.key)
    demo = run_tool_demo if options.demo == "tool" else run_file_demo
    try:
        demo(service)
    except (ChatError, OSError) as exc:
        print(f"操作失败: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())