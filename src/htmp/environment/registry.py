"""Component source registry.

Resolves a component name to template source with this precedence:

    1. Overrides passed in ``CompileOptions.components`` (keys kebab-cased)
    2. The in-memory cache, when caching is enabled
    3. The loader; results are cached when caching is enabled

The cache is shared by every compile of one `Compiler`. Writes are plain
dict assignments of deterministic values (the same name always loads the
same source), so concurrent population needs no lock: a duplicate load by a
racing thread stores an equal string.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from htmp.environment.exceptions import ComponentNotFoundError
from htmp.environment.loaders import Loader
from htmp.utils.naming import to_kebab_case

logger = logging.getLogger(__name__)


class ComponentRegistry:
    """Dict-like view over component overrides, cache and loader.

    Supports:
        - registry.get_source("card")
        - "card" in registry
        - registry.preload()
        - registry.clear()

    """

    __slots__ = ("_cache", "_overrides", "cache_enabled", "loader")

    def __init__(
        self,
        overrides: Mapping[str, str] | None = None,
        loader: Loader | None = None,
        cache_enabled: bool = True,
    ):
        self._overrides: dict[str, str] = {
            to_kebab_case(name): source for name, source in (overrides or {}).items()
        }
        self._cache: dict[str, str] = {}
        self.loader = loader
        self.cache_enabled = cache_enabled

    @property
    def overrides(self) -> dict[str, str]:
        return self._overrides.copy()

    def get_source(self, name: str) -> str:
        """Return the template source for ``name``.

        Raises:
            ComponentNotFoundError: If no override, cache entry or loader match exists
        """
        source = self._overrides.get(name)
        if source is not None:
            logger.debug("Component %r loaded from overrides", name)
            return source

        if self.cache_enabled:
            source = self._cache.get(name)
            if source is not None:
                logger.debug("Component %r loaded from cache", name)
                return source

        if self.loader is None:
            raise ComponentNotFoundError(
                name, hint="No component loader configured; pass components= or a loader"
            )

        source, filename = self.loader.get_source(name)
        logger.debug("Component %r loaded from %s", name, filename or "loader")
        if self.cache_enabled:
            self._cache[name] = source
        return source

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        try:
            self.get_source(name)
        except ComponentNotFoundError:
            return False
        return True

    def preload(self) -> int:
        """Cache every component the loader can list; return how many were loaded.

        Loaders without ``list_components()`` are skipped. Preloading fills
        the cache even when ``cache_enabled`` is False, but such entries are
        only consulted once caching is turned on.
        """
        if self.loader is None or not hasattr(self.loader, "list_components"):
            return 0
        names = self.loader.list_components()
        for name in names:
            source, _filename = self.loader.get_source(name)
            self._cache[name] = source
        logger.debug("Preloaded %d components", len(names))
        return len(names)

    def clear(self) -> None:
        """Drop cached sources. Overrides are kept."""
        self._cache = {}

    def cached_names(self) -> list[str]:
        return sorted(self._cache)
