"""Component loaders for htmp.

Loaders provide component source to the `ComponentRegistry`. They implement
`get_source(name)` returning `(source, filename)` for a dotted component name
and, optionally, `list_components()` for eager preloading.

Built-in Loaders:
- `FileSystemLoader`: Load ``<root>/<a/b>.html`` or ``<root>/<a/b>/index.html``
- `DictLoader`: Load from an in-memory dictionary (testing/embedded)
- `ChoiceLoader`: Try multiple loaders in order (shared component libraries)

Custom Loaders:
Implement the Loader protocol:
    ```python
    class DatabaseLoader:
        def get_source(self, name: str) -> tuple[str, str | None]:
            row = db.query("SELECT source FROM components WHERE name = ?", name)
            if not row:
                raise ComponentNotFoundError(name)
            return row.source, f"db://{name}"

        def list_components(self) -> list[str]:
            return [r.name for r in db.query("SELECT name FROM components")]
    ```

Thread-Safety:
All built-in loaders are safe for concurrent `get_source()` calls. They hold
no mutable state; FileSystemLoader reads each file in one call.

"""

from __future__ import annotations

import os
import re
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from htmp.environment.exceptions import ComponentNotFoundError

_COMPONENT_FILE_RE = re.compile(r"^([\w-]+)\.html$")


@runtime_checkable
class Loader(Protocol):
    def get_source(self, name: str) -> tuple[str, str | None]: ...


class FileSystemLoader:
    """Load components from a directory tree.

    A dotted component name maps onto path segments. ``layouts.page`` is
    looked up as ``<root>/layouts/page.html`` first and then as
    ``<root>/layouts/page/index.html``.

    Attributes:
        root: Directory searched for component files
        encoding: File encoding (default: utf-8)

    Example:
            >>> loader = FileSystemLoader("components/")
            >>> source, filename = loader.get_source("layouts.page")
            >>> print(filename)
            'components/layouts/page.html'

            >>> loader.list_components()
        ['button', 'layouts.page', 'nav']

    Raises:
        ComponentNotFoundError: If neither candidate file exists. Other
            ``OSError``s (permissions, a directory where a file is expected)
            propagate unchanged.

    """

    __slots__ = ("encoding", "root")

    def __init__(self, root: str | Path = "./components", encoding: str = "utf-8"):
        self.root = Path(root)
        self.encoding = encoding

    def candidates(self, name: str) -> list[Path]:
        """Paths tried for ``name``, in order."""
        *dirs, last = name.split(".")
        return [
            self.root.joinpath(*dirs, f"{last}.html"),
            self.root.joinpath(*dirs, last, "index.html"),
        ]

    def get_source(self, name: str) -> tuple[str, str]:
        """Load component source from the filesystem."""
        candidates = self.candidates(name)
        for path in candidates:
            try:
                return path.read_text(self.encoding), str(path)
            except (FileNotFoundError, NotADirectoryError):
                continue
        raise ComponentNotFoundError(name, searched=[str(p) for p in candidates])

    def list_components(self) -> list[str]:
        """List component names under the root, as preloading names them.

        ``a/b.html`` is ``a.b``; ``a/b/index.html`` is ``a.b``; an
        ``index.html`` directly under the root is ``index``. A missing root
        yields an empty list.
        """
        if not self.root.is_dir():
            return []
        names: set[str] = set()
        for dirpath, _dirnames, filenames in os.walk(self.root):
            segments = Path(dirpath).relative_to(self.root).parts
            for filename in filenames:
                match = _COMPONENT_FILE_RE.match(filename)
                if match is None:
                    continue
                stem = match.group(1)
                if stem == "index" and segments:
                    names.add(".".join(segments))
                else:
                    names.add(".".join((*segments, stem)))
        return sorted(names)


class DictLoader:
    """Load components from an in-memory dictionary.

    Useful for tests and for components generated at runtime.

    Example:
            >>> loader = DictLoader({"card": "<div class='card'><yield /></div>"})
            >>> loader.get_source("card")
            ("<div class='card'><yield /></div>", None)

    Raises:
        ComponentNotFoundError: If the name is not in the mapping, with a
            "did you mean" hint when a close name exists

    """

    __slots__ = ("_mapping",)

    def __init__(self, mapping: dict[str, str]):
        self._mapping = mapping

    def get_source(self, name: str) -> tuple[str, None]:
        if name not in self._mapping:
            from difflib import get_close_matches

            available = sorted(self._mapping.keys())
            hint = None
            matches = get_close_matches(name, available, n=1, cutoff=0.6)
            if matches:
                hint = f"Did you mean '{matches[0]}'?"
            elif available:
                hint = f"Available: {', '.join(available[:10])}"
                if len(available) > 10:
                    hint += f" ... ({len(available)} total)"
            raise ComponentNotFoundError(name, hint=hint)
        return self._mapping[name], None

    def list_components(self) -> list[str]:
        return sorted(self._mapping.keys())


class ChoiceLoader:
    """Try multiple loaders in order, returning the first match.

    Lets a project override a subset of a shared component library:
        ```python
        loader = ChoiceLoader([
            FileSystemLoader("components/"),
            FileSystemLoader("vendor/ui-kit/components/"),
        ])
        ```

    Raises:
        ComponentNotFoundError: If no loader can find the component

    """

    __slots__ = ("_loaders",)

    def __init__(self, loaders: Sequence[Loader]):
        self._loaders = list(loaders)

    def get_source(self, name: str) -> tuple[str, str | None]:
        searched: list[str] = []
        for loader in self._loaders:
            try:
                return loader.get_source(name)
            except ComponentNotFoundError as exc:
                searched.extend(exc.searched)
        raise ComponentNotFoundError(name, searched=searched)

    def list_components(self) -> list[str]:
        """Merge component lists from all loaders (deduplicated, sorted)."""
        names: set[str] = set()
        for loader in self._loaders:
            if hasattr(loader, "list_components"):
                names.update(loader.list_components())
        return sorted(names)
