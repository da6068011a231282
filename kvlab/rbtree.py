"""Red-black tree supporting insertion and in-order traversal."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterator, Optional, Sequence


class Color(enum.Enum):
    RED = "RED"
    BLACK = "BLACK"


@dataclass(eq=False)
class Node:
    data: int
    color: Color = Color.RED
    parent: Optional["Node"] = field(default=None, repr=False)
    left: Optional["Node"] = field(default=None, repr=False)
    right: Optional["Node"] = field(default=None, repr=False)


class RedBlackTree:
    """Red-black tree of distinct values; duplicate inserts are ignored."""

    def __init__(self):
        self.root: Optional[Node] = None
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def __contains__(self, data) -> bool:
        node = self.root
        while node is not None:
            if data < node.data:
                node = node.left
            elif data > node.data:
                node = node.right
            else:
                return True
        return False

    def __iter__(self) -> Iterator[int]:
        for data, _ in self.inorder():
            yield data

    def insert(self, data) -> None:
        node = Node(data)
        if not self._bst_insert(node):
            return
        self._size += 1
        self._fix_violation(node)

    def inorder(self) -> list[tuple[int, Color]]:
        """Return ``(data, color)`` pairs in ascending order."""
        result = []
        stack: list[Node] = []
        node = self.root
        while stack or node is not None:
            while node is not None:
                stack.append(node)
                node = node.left
            node = stack.pop()
            result.append((node.data, node.color))
            node = node.right
        return result

    def _bst_insert(self, new: Node) -> bool:
        if self.root is None:
            self.root = new
            return True
        node = self.root
        while True:
            if new.data < node.data:
                if node.left is None:
                    node.left = new
                    break
                node = node.left
            elif new.data > node.data:
                if node.right is None:
                    node.right = new
                    break
                node = node.right
            else:
                return False
        new.parent = node
        return True

    def _replace_in_parent(self, old: Node, new: Node) -> None:
        new.parent = old.parent
        if old.parent is None:
            self.root = new
        elif old is old.parent.left:
            old.parent.left = new
        else:
            old.parent.right = new

    def _rotate_left(self, x: Node) -> None:
        y = x.right
        x.right = y.left
        if y.left is not None:
            y.left.parent = x
        self._replace_in_parent(x, y)
        y.left = x
        x.parent = y

    def _rotate_right(self, x: Node) -> None:
        y = x.left
        x.left = y.right
        if y.right is not None:
            y.right.parent = x
        self._replace_in_parent(x, y)
        y.right = x
        x.parent = y

    def _fix_violation(self, pt: Node) -> None:
        while pt is not self.root and pt.color is Color.RED and pt.parent.color is Color.RED:
            parent = pt.parent
            grand = parent.parent
            if parent is grand.left:
                uncle = grand.right
                if uncle is not None and uncle.color is Color.RED:
                    grand.color = Color.RED
                    parent.color = Color.BLACK
                    uncle.color = Color.BLACK
                    pt = grand
                else:
                    if pt is parent.right:
                        self._rotate_left(parent)
                        pt = parent
                        parent = pt.parent
                    grand.color = Color.RED
                    parent.color = Color.BLACK
                    self._rotate_right(grand)
            else:
                uncle = grand.left
                if uncle is not None and uncle.color is Color.RED:
                    grand.color = Color.RED
                    parent.color = Color.BLACK
                    uncle.color = Color.BLACK
                    pt = grand
                else:
                    if pt is parent.left:
                        self._rotate_right(parent)
                        pt = parent
                        parent = pt.parent
                    grand.color = Color.RED
                    parent.color = Color.BLACK
                    self._rotate_left(grand)
        self.root.color = Color.BLACK


def main(argv: Optional[Sequence[str]] = None) -> int:
    tree = RedBlackTree()
    for value in (50, 30, 20, 10, 25, 27, 58, 54, 48):
        tree.insert(value)
    print("Inorder traversal of the constructed tree: ")
    for data, color in tree.inorder():
        print(f"Data: {data} Color: {color.value}")
    print()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())