"""Upsample layer geometry; a negative stride makes it downsample."""

from __future__ import annotations

import numpy as np


class UpsampleLayer:
    """Scales the spatial size by ``stride``, or divides it when ``stride`` is negative."""

    def __init__(
        self,
        batch: int,
        w: int,
        h: int,
        c: int,
        stride: int,
        layer_quant_flag: bool = False,
        quant_stop_flag: bool = False,
        close_quantization: bool = False,
    ) -> None:
        if stride == 0:
            raise ValueError("stride must not be zero")
        self.batch = batch
        self.w = w
        self.h = h
        self.c = c
        self.out_c = c
        self.reverse = stride < 0
        self.stride = abs(stride)
        self.scale = 0.0
        self._set_output_size()
        self.outputs = self.out_w * self.out_h * self.out_c
        self.inputs = w * h * c
        self.close_quantization = close_quantization
        self.layer_quant_flag = layer_quant_flag
        self.quant_stop_flag = quant_stop_flag
        self.activ_scale = 0.0
        self.activ_zero_point = 0
        self.min_activ_value = 0.0
        self.max_activ_value = 0.0
        self._allocate()
        label = "downsample        " if self.reverse else "upsample          "
        print(
            f"{label} {self.stride:2d}x  {w:4d} x{h:4d} x{c:4d}   ->  "
            f"{self.out_w:4d} x{self.out_h:4d} x{self.out_c:4d}"
        )

    @property
    def quantized(self) -> bool:
        """Whether the forward pass runs on quantized activations."""
        return bool(self.layer_quant_flag and not self.close_quantization)

    def _set_output_size(self) -> None:
        if self.reverse:
            self.out_w = self.w // self.stride
            self.out_h = self.h // self.stride
        else:
            self.out_w = self.w * self.stride
            self.out_h = self.h * self.stride

    def _allocate(self) -> None:
        size = self.outputs * self.batch
        self.delta = np.zeros(size, dtype=np.float32)
        self.output = np.zeros(size, dtype=np.float32)
        self.output_uint8_final = np.zeros(size, dtype=np.uint8)

    def resize(self, w: int, h: int) -> None:
        """Change the input size and reallocate the buffers."""
        self.w = w
        self.h = h
        self._set_output_size()
        self.outputs = self.out_w * self.out_h * self.out_c
        self.inputs = self.h * self.w * self.c
        self._allocate()