"""Reorg layer geometry: space-to-depth and its reverse."""

from __future__ import annotations

import numpy as np


class ReorgLayer:
    """Moves ``stride`` x ``stride`` spatial blocks into channels, or back when ``reverse``."""

    def __init__(
        self,
        batch: int,
        w: int,
        h: int,
        c: int,
        stride: int,
        reverse: bool = False,
        flatten: bool = False,
        extra: int = 0,
    ) -> None:
        self.batch = batch
        self.stride = stride
        self.extra = extra
        self.w = w
        self.h = h
        self.c = c
        self.flatten = flatten
        self.reverse = reverse
        self._set_output_shape()
        self.outputs = self.out_h * self.out_w * self.out_c
        self.inputs = h * w * c
        if extra:
            self.out_w = self.out_h = self.out_c = 0
            self.outputs = self.inputs + extra
            print(f"reorg              {self.inputs:4d}   ->  {self.outputs:4d}")
        else:
            print(
                f"reorg              /{stride:2d}  {w:4d} x{h:4d} x{c:4d}   ->  "
                f"{self.out_w:4d} x{self.out_h:4d} x{self.out_c:4d}"
            )
        size = self.outputs * batch
        self.output = np.zeros(size, dtype=np.float32)
        self.delta = np.zeros(size, dtype=np.float32)

    def _set_output_shape(self) -> None:
        area = self.stride * self.stride
        if self.reverse:
            self.out_w = self.w * self.stride
            self.out_h = self.h * self.stride
            self.out_c = self.c // area
        else:
            self.out_w = self.w // self.stride
            self.out_h = self.h // self.stride
            self.out_c = self.c * area

    def resize(self, w: int, h: int) -> None:
        """Change the input size and reallocate the buffers."""
        self.w = w
        self.h = h
        self._set_output_shape()
        self.outputs = self.out_h * self.out_w * self.out_c
        self.inputs = self.outputs
        size = self.outputs * self.batch
        self.output = np.zeros(size, dtype=np.float32)
        self.delta = np.zeros(size, dtype=np.float32)