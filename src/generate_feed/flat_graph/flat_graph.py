"""Reconstruct a JSON value graph from its flat, index-referenced encoding.

Every composite cell stores its children as integer indices into one shared
array. Resolving an index always returns the same object instance, so shared
substructures stay shared and self-references do not recurse forever.
"""

import logging
from typing import Any

from generate_feed.errors import ContentNotFoundError, MalformedGraphError

logger = logging.getLogger(__name__)

# Tags that wrap a single referenced value
UNWRAP_TAGS = {"Reactive", "ShallowReactive", "Ref", "ShallowRef"}
EMPTY_TAGS = {"EmptyRef", "EmptyShallowRef"}


class FlatGraph:
    """Resolver over one flat cell array, with a per-instance resolution cache."""

    def __init__(self, cells: list[Any]):
        if not isinstance(cells, list):
            raise MalformedGraphError(f"Expected a cell array, got {type(cells).__name__}")
        self.cells = cells
        self._cache: dict[int, Any] = {}
        self._pending: set[int] = set()

    def resolve(self, index: Any) -> Any:
        """Resolve the cell at `index` into a plain Python value."""
        try:
            return self._resolve(index)
        except RecursionError as e:
            raise MalformedGraphError(f"Graph nested too deeply at index {index}") from e

    def _resolve(self, index: Any) -> Any:
        _check_index(index)
        if index in self._cache:
            return self._cache[index]
        # Negative indices are sentinels (undefined, NaN, holes)
        if index < 0 or index >= len(self.cells):
            return None

        cell = self.cells[index]
        if cell is None:
            return None

        if isinstance(cell, list):
            if cell and isinstance(cell[0], str):
                return self._resolve_tagged(index, cell)
            items: list[Any] = []
            self._cache[index] = items
            for child in cell:
                items.append(self._resolve(child))
            return items

        if isinstance(cell, dict):
            mapping: dict[str, Any] = {}
            self._cache[index] = mapping
            for key, child in cell.items():
                mapping[key] = self._resolve(child)
            return mapping

        return cell

    def _resolve_tagged(self, index: int, cell: list[Any]) -> Any:
        tag = cell[0]

        if tag == "Set":
            members: list[Any] = []
            self._cache[index] = members
            for child in cell[1:]:
                members.append(self._resolve(child))
            return members

        if tag == "Map":
            entries: dict[Any, Any] = {}
            self._cache[index] = entries
            pairs = cell[1:]
            if len(pairs) % 2:
                raise MalformedGraphError(f"Map cell {index} has an odd number of entries")
            for key_index, value_index in zip(pairs[::2], pairs[1::2]):
                key = self._resolve(key_index)
                try:
                    entries[key] = self._resolve(value_index)
                except TypeError as e:
                    raise MalformedGraphError(f"Unhashable Map key in cell {index}") from e
            return entries

        if tag == "Date":
            value = cell[1] if len(cell) > 1 else None
            self._cache[index] = value
            return value

        if tag in EMPTY_TAGS:
            self._cache[index] = None
            return None

        if tag not in UNWRAP_TAGS:
            raise MalformedGraphError(f"Unknown tag {tag!r} in cell {index}")
        if len(cell) != 2:
            raise MalformedGraphError(f"Tagged cell {index} must wrap exactly one index")

        # A wrapper reached again while unwrapping itself has no value yet
        if index in self._pending:
            return None
        self._pending.add(index)
        try:
            value = self._resolve(cell[1])
        finally:
            self._pending.discard(index)
        self._cache[index] = value
        return value


def _check_index(index: Any) -> None:
    if isinstance(index, bool) or not isinstance(index, int):
        raise MalformedGraphError(f"Expected an integer index, got {index!r}")


def find_list_container(cells: list[Any]) -> int:
    """
    Return the index of the cell holding the article list.

    Prefers the first mapping with both `list` and `category` keys, then the
    first mapping with a `list` key.

    Raises:
        ContentNotFoundError: If no mapping has a `list` key
    """
    for i, cell in enumerate(cells):
        if isinstance(cell, dict) and "list" in cell and "category" in cell:
            return i
    for i, cell in enumerate(cells):
        if isinstance(cell, dict) and "list" in cell:
            return i
    raise ContentNotFoundError("Failed to locate content: no cell with a 'list' key")


def load_article_list(cells: list[Any]) -> list[Any]:
    """
    Locate the list container and resolve its `list` value.

    Raises:
        MalformedGraphError: If the cells are not a valid flat graph
        ContentNotFoundError: If no container exists or its list is not a sequence
    """
    graph = FlatGraph(cells)
    container_index = find_list_container(cells)
    container = graph.resolve(container_index)

    articles = container.get("list") if isinstance(container, dict) else None
    if not isinstance(articles, list):
        raise ContentNotFoundError(
            f"Content data structure is invalid: 'list' at cell {container_index} is not an array"
        )

    logger.info("Located %d list entries at cell %d", len(articles), container_index)
    return articles
