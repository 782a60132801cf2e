"""Softmax layer state and its backward pass."""

from __future__ import annotations

from collections.abc import MutableSequence

import numpy as np

from .tree import Tree


class SoftmaxLayer:
    """Softmax over ``groups`` equal slices of ``inputs`` values per batch item."""

    def __init__(self, batch: int, inputs: int, groups: int) -> None:
        if groups <= 0 or inputs % groups != 0:
            raise ValueError("inputs must be a multiple of groups")
        print(f"softmax                                        {inputs:4d}")
        self.batch = batch
        self.groups = groups
        self.inputs = inputs
        self.outputs = inputs
        self.temperature = 0.0
        self.noloss = False
        self.spatial = False
        self.softmax_tree: Tree | None = None
        size = inputs * batch
        self.loss = np.zeros(size, dtype=np.float32)
        self.output = np.zeros(size, dtype=np.float32)
        self.delta = np.zeros(size, dtype=np.float32)
        self.cost = 0.0

    def backward(self, net_delta: MutableSequence[float]) -> MutableSequence[float]:
        """Add this layer's delta into ``net_delta`` in place and return it."""
        count = self.inputs * self.batch
        if len(net_delta) < count:
            raise ValueError("net_delta is shorter than the layer's delta")
        if isinstance(net_delta, np.ndarray):
            net_delta[:count] += self.delta[:count]
        else:
            for pos, value in enumerate(self.delta[:count]):
                net_delta[pos] += float(value)
        return net_delta