"""Class hierarchy used for hierarchical softmax predictions."""

from __future__ import annotations

import re
from collections.abc import MutableSequence, Sequence
from dataclasses import dataclass, field

_INT_PREFIX = re.compile(r"[+-]?\d+")


@dataclass
class Tree:
    """A forest of labels; siblings sharing a parent form a softmax group."""

    name: list[str] = field(default_factory=list)
    parent: list[int] = field(default_factory=list)
    child: list[int] = field(default_factory=list)
    group: list[int] = field(default_factory=list)
    leaf: list[bool] = field(default_factory=list)
    group_size: list[int] = field(default_factory=list)
    group_offset: list[int] = field(default_factory=list)

    @property
    def n(self) -> int:
        return len(self.name)

    @property
    def groups(self) -> int:
        return len(self.group_size)

    def change_leaves(self, leaf_list: str) -> int:
        """Mark as leaves only the names listed, one per line, in a file."""
        with open(leaf_list, encoding="utf-8") as handle:
            leaves = {line.rstrip("\n") for line in handle}
        self.leaf = [name in leaves for name in self.name]
        found = sum(self.leaf)
        print(f"Found {found} leaves.")
        return found

    def hierarchy_probability(self, x: Sequence[float], c: int, stride: int) -> float:
        """Product of the predictions along the path from ``c`` to its root."""
        p = 1.0
        while c >= 0:
            p *= x[c * stride]
            c = self.parent[c]
        return p

    def hierarchy_predictions(
        self,
        predictions: MutableSequence[float],
        n: int,
        only_leaves: bool,
        stride: int,
    ) -> MutableSequence[float]:
        """Turn conditional predictions into absolute ones, in place."""
        for j in range(n):
            parent = self.parent[j]
            if parent >= 0:
                predictions[j * stride] *= predictions[parent * stride]
        if only_leaves:
            for j in range(n):
                if not self.leaf[j]:
                    predictions[j * stride] = 0
        return predictions

    def top_prediction(self, predictions: Sequence[float], thresh: float, stride: int) -> int:
        """Descend the tree while the path probability stays above ``thresh``."""
        p = 1.0
        group = 0
        while True:
            best = 0.0
            best_i = 0
            offset = self.group_offset[group]
            for i in range(self.group_size[group]):
                val = predictions[(offset + i) * stride]
                if val > best:
                    best_i = offset + i
                    best = val
            if p * best > thresh:
                p *= best
                group = self.child[best_i]
                if group < 0:
                    return best_i
            elif group == 0:
                return best_i
            else:
                return self.parent[self.group_offset[group]]


def _parse_line(line: str) -> tuple[str, int]:
    tokens = line.split()
    if not tokens:
        return "", -1
    parent = -1
    if len(tokens) > 1:
        match = _INT_PREFIX.match(tokens[1])
        if match:
            parent = int(match.group())
    return tokens[0], parent


def read_tree(filename: str) -> Tree:
    """Read a tree file of ``name parent`` lines, siblings written together."""
    tree = Tree()
    last_parent = -1
    group_size = 0
    groups = 0
    with open(filename, encoding="utf-8") as handle:
        for n, raw in enumerate(handle):
            name, parent = _parse_line(raw.rstrip("\n"))
            tree.parent.append(parent)
            tree.child.append(-1)
            tree.name.append(name)
            if parent != last_parent:
                groups += 1
                tree.group_offset.append(n - group_size)
                tree.group_size.append(group_size)
                group_size = 0
                last_parent = parent
            tree.group.append(groups)
            if parent >= 0:
                if parent >= len(tree.child):
                    raise ValueError(f"line {n + 1}: parent {parent} is not defined yet")
                tree.child[parent] = groups
            group_size += 1
    count = len(tree.name)
    tree.group_offset.append(count - group_size)
    tree.group_size.append(group_size)
    parents = {p for p in tree.parent if p >= 0}
    tree.leaf = [i not in parents for i in range(count)]
    return tree