import random

import pytest

from kvlab.rbtree import Color, RedBlackTree, main

MAIN_SEQUENCE = [50, 30, 20, 10, 25, 27, 58, 54, 48]


def _black_height(node):
    if node is None:
        return 1
    if node.color is Color.RED:
        for child in (node.left, node.right):
            assert child is None or child.color is Color.BLACK
    for child in (node.left, node.right):
        if child is not None:
            assert child.parent is node
    left = _black_height(node.left)
    right = _black_height(node.right)
    assert left == right
    return left + (1 if node.color is Color.BLACK else 0)


def _check(tree):
    assert tree.root is None or tree.root.color is Color.BLACK
    assert tree.root is None or tree.root.parent is None
    _black_height(tree.root)
    data = [d for d, _ in tree.inorder()]
    assert data == sorted(data)
    assert len(data) == len(tree)


def test_three_ascending_rotate_to_balanced():
    tree = RedBlackTree()
    for value in (1, 2, 3):
        tree.insert(value)
    assert tree.inorder() == [(1, Color.RED), (2, Color.BLACK), (3, Color.RED)]
    assert tree.root.data == 2


def test_main_sequence_keeps_invariants():
    tree = RedBlackTree()
    for value in MAIN_SEQUENCE:
        tree.insert(value)
        _check(tree)
    assert list(tree) == sorted(MAIN_SEQUENCE)


@pytest.mark.parametrize("seed", range(5))
def test_random_inserts_keep_invariants(seed):
    rng = random.Random(seed)
    values = [rng.randrange(1000) for _ in range(300)]
    tree = RedBlackTree()
    for value in values:
        tree.insert(value)
    _check(tree)
    assert list(tree) == sorted(set(values))


@pytest.mark.parametrize("values", [list(range(200)), list(range(200, 0, -1))])
def test_sorted_inserts_stay_shallow(values):
    tree = RedBlackTree()
    for value in values:
        tree.insert(value)
    _check(tree)
    assert _black_height(tree.root) <= 10


def test_duplicates_ignored():
    tree = RedBlackTree()
    for value in (5, 5, 3, 5, 3):
        tree.insert(value)
    assert len(tree) == 2
    assert list(tree) == [3, 5]
    _check(tree)


def test_contains():
    tree = RedBlackTree()
    for value in MAIN_SEQUENCE:
        tree.insert(value)
    assert 27 in tree
    assert 26 not in tree
    assert 100 not in RedBlackTree()


def test_empty_tree():
    tree = RedBlackTree()
    assert tree.inorder() == []
    assert len(tree) == 0


def test_main_output(capsys):
    assert main([]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "Inorder traversal of the constructed tree: "
    body = lines[1:10]
    assert [int(line.split()[1]) for line in body] == sorted(MAIN_SEQUENCE)
    assert all(line.split()[3] in ("RED", "BLACK") for line in body)