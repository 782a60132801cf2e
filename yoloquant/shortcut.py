"""Shortcut (residual) layer geometry."""

from __future__ import annotations

import numpy as np


class ShortcutLayer:
    """Adds the output of layer ``index`` (``w2`` x ``h2`` x ``c2``) to a ``w`` x ``h`` x ``c`` input."""

    def __init__(
        self,
        batch: int,
        index: int,
        w: int,
        h: int,
        c: int,
        w2: int,
        h2: int,
        c2: int,
    ) -> None:
        print(
            f"res  {index:3d}                {w2:4d} x{h2:4d} x{c2:4d}   ->  "
            f"{w:4d} x{h:4d} x{c:4d}"
        )
        self.batch = batch
        self.index = index
        self.w = w2
        self.h = h2
        self.c = c2
        self.out_w = w
        self.out_h = h
        self.out_c = c
        self.outputs = w * h * c
        self.inputs = self.outputs
        self.alpha = 0.0
        self.beta = 0.0
        self.delta = np.zeros(self.outputs * batch, dtype=np.float32)
        self.output = np.zeros(self.outputs * batch, dtype=np.float32)

    def resize(self, w: int, h: int) -> None:
        """Change the spatial size; only valid when input and output sizes agree."""
        if self.w != self.out_w or self.h != self.out_h:
            raise ValueError("a shortcut between layers of different sizes cannot be resized")
        self.w = self.out_w = w
        self.h = self.out_h = h
        self.outputs = w * h * self.out_c
        self.inputs = self.outputs
        size = self.outputs * self.batch
        self.delta = np.zeros(size, dtype=np.float32)
        self.output = np.zeros(size, dtype=np.float32)