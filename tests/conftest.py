"""Pytest configuration and fixtures for htmp tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from htmp import Compiler
from htmp.environment import terminal


@pytest.fixture(autouse=True)
def _plain_terminal(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep error messages free of ANSI codes regardless of FORCE_COLOR."""
    monkeypatch.setattr(terminal, "_USE_COLORS", False)


@pytest.fixture
def compiler(tmp_path: Path) -> Compiler:
    """Compiler with formatting off and an empty components root."""
    return Compiler(pretty=False, components_root=str(tmp_path / "components"))


@pytest.fixture
def make_compiler(tmp_path: Path) -> Callable[..., Compiler]:
    """Build a Compiler from inline components and option overrides."""

    def _make(components: dict[str, str] | None = None, **options: object) -> Compiler:
        options.setdefault("pretty", False)
        options.setdefault("components_root", str(tmp_path / "components"))
        return Compiler(components=components or {}, **options)

    return _make


@pytest.fixture
def components_dir(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """Write component files under a temporary root and return the root.

    Keys are paths relative to the root (``"layouts/page.html"``).
    """
    root = tmp_path / "components"

    def _write(files: dict[str, str]) -> Path:
        for relative, source in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(source, encoding="utf-8")
        return root

    return _write


def assert_html_equal(actual: str, expected: str) -> None:
    """Assert two HTML strings are equal, normalizing whitespace.

    Args:
        actual: The compiled output.
        expected: The expected output.
    """
    actual_normalized = " ".join(actual.split())
    expected_normalized = " ".join(expected.split())
    assert actual_normalized == expected_normalized, (
        f"Compiled output mismatch:\n"
        f"  Actual: {actual_normalized!r}\n"
        f"  Expected: {expected_normalized!r}"
    )


def assert_contains(result: str, *expected_parts: str) -> None:
    """Assert compiled output contains all expected parts.

    Args:
        result: The compiled output.
        expected_parts: Strings that should all be present in the result.
    """
    for part in expected_parts:
        assert part in result, (
            f"Compiled output missing expected content:\n"
            f"  Missing: {part!r}\n"
            f"  Actual: {result!r}"
        )
