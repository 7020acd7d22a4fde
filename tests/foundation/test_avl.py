from __future__ import annotations

import math

import numpy as np
import pytest

from moevo.foundation.metrics.avl import AVLTree


def _check_balanced(node) -> int:
    if node is None:
        return 0
    left = _check_balanced(node.left)
    right = _check_balanced(node.right)
    assert abs(left - right) <= 1
    assert node.height == 1 + max(left, right)
    if node.left is not None:
        assert node.left.key < node.key
    if node.right is not None:
        assert node.key < node.right.key
    return node.height


def test_empty_tree_queries():
    tree: AVLTree[float, str] = AVLTree()
    assert len(tree) == 0
    assert not tree
    assert tree.min() is None and tree.max() is None
    assert tree.floor(1.0) is None
    assert tree.ceiling(1.0) is None
    assert list(tree.successors(0.0)) == []
    with pytest.raises(KeyError):
        tree.remove(1.0)


def test_insert_replaces_existing_value():
    tree: AVLTree[int, str] = AVLTree()
    tree.insert(1, "a")
    tree.insert(1, "b")
    assert len(tree) == 1
    assert tree.get(1) == "b"


def test_neighbour_queries():
    tree: AVLTree[float, str] = AVLTree()
    for key in (5.0, 1.0, 3.0, 9.0, 7.0):
        tree.insert(key, f"v{key}")
    assert tree.floor(3.0) == (3.0, "v3.0")
    assert tree.floor(4.0) == (3.0, "v3.0")
    assert tree.lower(3.0) == (1.0, "v1.0")
    assert tree.ceiling(6.0) == (7.0, "v7.0")
    assert tree.higher(7.0) == (9.0, "v9.0")
    assert tree.higher(9.0) is None
    assert tree.floor(0.5) is None
    assert tree.min() == (1.0, "v1.0")
    assert tree.max() == (9.0, "v9.0")


def test_successors_are_ascending_from_key():
    tree: AVLTree[int, None] = AVLTree()
    for key in (8, 3, 10, 1, 6, 14, 4, 7, 13):
        tree.insert(key)
    assert [k for k, _ in tree.successors(6)] == [6, 7, 8, 10, 13, 14]
    assert [k for k, _ in tree.successors(6, inclusive=False)] == [7, 8, 10, 13, 14]
    assert [k for k, _ in tree.successors(5)] == [6, 7, 8, 10, 13, 14]
    assert [k for k, _ in tree.successors(15)] == []


def test_tuple_keys():
    tree: AVLTree[tuple[float, int], int] = AVLTree()
    tree.insert((1.0, 2), 2)
    tree.insert((1.0, 0), 0)
    tree.insert((0.5, 5), 5)
    assert list(tree.values()) == [5, 0, 2]


@pytest.mark.parametrize("seed", range(5))
def test_random_inserts_and_removals_stay_balanced(seed):
    rng = np.random.default_rng(seed)
    tree: AVLTree[int, int] = AVLTree()
    reference: dict[int, int] = {}
    for key in rng.integers(0, 500, size=400).tolist():
        tree.insert(key, key * 2)
        reference[key] = key * 2
    for key in rng.choice(list(reference), size=len(reference) // 2, replace=False).tolist():
        assert tree.remove(key) == key * 2
        del reference[key]

    assert len(tree) == len(reference)
    assert list(tree) == sorted(reference)
    height = _check_balanced(tree._root)
    assert height <= 1.45 * math.log2(len(tree) + 2)
    for key in sorted(reference):
        assert key in tree
    assert tree.discard(-1) is False
