from __future__ import annotations

from typing import Any


def build_items(count: int) -> list[dict[str, Any]]:
    return [{"id": i, "name": f"Item {i}", "active": i % 2 == 0} for i in range(count)]


def build_user(posts: int) -> dict[str, Any]:
    return {
        "name": "Ada",
        "role": "admin",
        "posts": [{"title": f"Post {i}", "content": f"Content {i}"} for i in range(posts)],
    }


SMALL_CONTEXT: dict[str, Any] = {"name": "World", "items": build_items(10)}

MEDIUM_CONTEXT: dict[str, Any] = {"user": build_user(10), "items": build_items(50)}

LARGE_CONTEXT: dict[str, Any] = {"user": build_user(50), "items": build_items(200)}
