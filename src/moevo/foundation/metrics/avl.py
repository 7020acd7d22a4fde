"""
AVL tree used as the ordered index of the hypervolume sweeps.

Keys must be mutually comparable and unique; inserting an existing key
replaces its value. Every update keeps the tree height-balanced, so insert,
remove and the neighbour queries (floor/lower/ceiling/higher) are O(log n).
Iterators walk the tree lazily and must not outlive a structural change.
"""

from __future__ import annotations

from typing import Any, Generic, Iterator, TypeVar

K = TypeVar("K")
V = TypeVar("V")


class _Node(Generic[K, V]):
    __slots__ = ("key", "value", "left", "right", "height")

    def __init__(self, key: K, value: V) -> None:
        self.key = key
        self.value = value
        self.left: _Node[K, V] | None = None
        self.right: _Node[K, V] | None = None
        self.height = 1


def _height(node: _Node | None) -> int:
    return node.height if node is not None else 0


def _update(node: _Node) -> None:
    node.height = 1 + max(_height(node.left), _height(node.right))


def _balance_factor(node: _Node) -> int:
    return _height(node.left) - _height(node.right)


def _rotate_right(node: _Node) -> _Node:
    pivot = node.left
    assert pivot is not None
    node.left = pivot.right
    pivot.right = node
    _update(node)
    _update(pivot)
    return pivot


def _rotate_left(node: _Node) -> _Node:
    pivot = node.right
    assert pivot is not None
    node.right = pivot.left
    pivot.left = node
    _update(node)
    _update(pivot)
    return pivot


def _rebalance(node: _Node) -> _Node:
    _update(node)
    bf = _balance_factor(node)
    if bf > 1:
        assert node.left is not None
        if _balance_factor(node.left) < 0:
            node.left = _rotate_left(node.left)
        return _rotate_right(node)
    if bf < -1:
        assert node.right is not None
        if _balance_factor(node.right) > 0:
            node.right = _rotate_right(node.right)
        return _rotate_left(node)
    return node


class AVLTree(Generic[K, V]):
    """
    Height-balanced binary search tree mapping keys to values.

    Examples:
        >>> tree = AVLTree()
        >>> for x in (3.0, 1.0, 2.0):
        ...     tree.insert(x, f"p{x}")
        >>> tree.floor(2.5)
        (2.0, 'p2.0')
        >>> [k for k, _ in tree.successors(2.0)]
        [2.0, 3.0]
    """

    def __init__(self) -> None:
        self._root: _Node[K, V] | None = None
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def __bool__(self) -> bool:
        return self._size > 0

    def __contains__(self, key: Any) -> bool:
        return self._find(key) is not None

    def __iter__(self) -> Iterator[K]:
        for key, _ in self.items():
            yield key

    def __repr__(self) -> str:
        return f"AVLTree(size={self._size}, height={self.height})"

    @property
    def height(self) -> int:
        return _height(self._root)

    def clear(self) -> None:
        self._root = None
        self._size = 0

    # ------------------------------------------------------------------ updates

    def insert(self, key: K, value: V = None) -> None:  # type: ignore[assignment]
        self._root = self._insert(self._root, key, value)

    def _insert(self, node: _Node[K, V] | None, key: K, value: V) -> _Node[K, V]:
        if node is None:
            self._size += 1
            return _Node(key, value)
        if key < node.key:  # type: ignore[operator]
            node.left = self._insert(node.left, key, value)
        elif node.key < key:  # type: ignore[operator]
            node.right = self._insert(node.right, key, value)
        else:
            node.value = value
            return node
        return _rebalance(node)

    def remove(self, key: K) -> V:
        """Remove ``key`` and return its value. Raises KeyError when absent."""
        found = self._find(key)
        if found is None:
            raise KeyError(key)
        value = found.value
        self._root = self._remove(self._root, key)
        self._size -= 1
        return value

    def discard(self, key: K) -> bool:
        if key not in self:
            return False
        self.remove(key)
        return True

    def _remove(self, node: _Node[K, V] | None, key: K) -> _Node[K, V] | None:
        if node is None:
            return None
        if key < node.key:  # type: ignore[operator]
            node.left = self._remove(node.left, key)
        elif node.key < key:  # type: ignore[operator]
            node.right = self._remove(node.right, key)
        else:
            if node.left is None:
                return node.right
            if node.right is None:
                return node.left
            heir = node.right
            while heir.left is not None:
                heir = heir.left
            node.key, node.value = heir.key, heir.value
            node.right = self._remove(node.right, heir.key)
        return _rebalance(node)

    # ------------------------------------------------------------------ queries

    def _find(self, key: Any) -> _Node[K, V] | None:
        node = self._root
        while node is not None:
            if key < node.key:
                node = node.left
            elif node.key < key:
                node = node.right
            else:
                return node
        return None

    def get(self, key: K, default: Any = None) -> V | Any:
        node = self._find(key)
        return default if node is None else node.value

    def min(self) -> tuple[K, V] | None:
        node = self._root
        if node is None:
            return None
        while node.left is not None:
            node = node.left
        return node.key, node.value

    def max(self) -> tuple[K, V] | None:
        node = self._root
        if node is None:
            return None
        while node.right is not None:
            node = node.right
        return node.key, node.value

    def floor(self, key: Any) -> tuple[K, V] | None:
        """Entry with the largest key <= ``key``."""
        return self._bound_below(key, inclusive=True)

    def lower(self, key: Any) -> tuple[K, V] | None:
        """Entry with the largest key < ``key``."""
        return self._bound_below(key, inclusive=False)

    def ceiling(self, key: Any) -> tuple[K, V] | None:
        """Entry with the smallest key >= ``key``."""
        return self._bound_above(key, inclusive=True)

    def higher(self, key: Any) -> tuple[K, V] | None:
        """Entry with the smallest key > ``key``."""
        return self._bound_above(key, inclusive=False)

    def _bound_below(self, key: Any, *, inclusive: bool) -> tuple[K, V] | None:
        best: _Node[K, V] | None = None
        node = self._root
        while node is not None:
            if node.key < key or (inclusive and not key < node.key):
                best = node
                node = node.right
            else:
                node = node.left
        return None if best is None else (best.key, best.value)

    def _bound_above(self, key: Any, *, inclusive: bool) -> tuple[K, V] | None:
        best: _Node[K, V] | None = None
        node = self._root
        while node is not None:
            if key < node.key or (inclusive and not node.key < key):
                best = node
                node = node.left
            else:
                node = node.right
        return None if best is None else (best.key, best.value)

    # --------------------------------------------------------------- iteration

    def items(self) -> Iterator[tuple[K, V]]:
        """In-order (ascending key) iteration."""
        stack: list[_Node[K, V]] = []
        node = self._root
        while stack or node is not None:
            while node is not None:
                stack.append(node)
                node = node.left
            node = stack.pop()
            yield node.key, node.value
            node = node.right

    def values(self) -> Iterator[V]:
        for _, value in self.items():
            yield value

    def successors(self, key: Any, *, inclusive: bool = True) -> Iterator[tuple[K, V]]:
        """Ascending iteration over the entries with key >= ``key`` (> when not inclusive)."""
        stack: list[_Node[K, V]] = []
        node = self._root
        # seed the stack with the path of nodes that lie at or after ``key``
        while node is not None:
            if key < node.key or (inclusive and not node.key < key):
                stack.append(node)
                node = node.left
            else:
                node = node.right
        while stack:
            node = stack.pop()
            yield node.key, node.value
            child = node.right
            while child is not None:
                stack.append(child)
                child = child.left


__all__ = ["AVLTree"]
