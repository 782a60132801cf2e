"""Route layer: concatenates the outputs of earlier layers."""

from __future__ import annotations

import sys
from collections.abc import Sequence
from typing import Any

import numpy as np


class RouteLayer:
    """Joins the outputs of the layers listed in ``input_layers``, batch item by batch item."""

    def __init__(
        self,
        batch: int,
        input_layers: Sequence[int],
        input_sizes: Sequence[int],
        layer_quant_flag: bool = False,
        quant_stop_flag: bool = False,
        close_quantization: bool = False,
    ) -> None:
        if len(input_layers) != len(input_sizes):
            raise ValueError("input_layers and input_sizes must have the same length")
        self.batch = batch
        self.input_layers = list(input_layers)
        self.input_sizes = list(input_sizes)
        self.n = len(self.input_layers)
        print("route " + "".join(f" {index}" for index in self.input_layers), file=sys.stderr)

        self.outputs = sum(self.input_sizes)
        self.inputs = self.outputs
        self.out_w = 0
        self.out_h = 0
        self.out_c = 0
        self.close_quantization = close_quantization
        self.layer_quant_flag = layer_quant_flag
        self.quant_stop_flag = quant_stop_flag

        self.delta = np.zeros(self.outputs * batch, dtype=np.float32)
        self.output = np.zeros(self.outputs * batch, dtype=np.float32)
        self.output_uint8_final = np.zeros(self.outputs * batch, dtype=np.uint8)
        self.activ_scale = 0.0
        self.activ_zero_point = 0
        self.min_activ_value = 0.0
        self.max_activ_value = 0.0

    @property
    def quantized(self) -> bool:
        """Whether the forward pass runs on quantized activations."""
        return bool(self.layer_quant_flag and not self.close_quantization)

    def _sources(self, layers: Sequence[Any]):
        offset = 0
        for index, size in zip(self.input_layers, self.input_sizes):
            yield layers[index], size, offset
            offset += size

    def forward(self, layers: Sequence[Any]) -> np.ndarray:
        """Copy each input layer's float output into its slot of ``output``."""
        for source, size, offset in self._sources(layers):
            data = np.asarray(source.output)
            for j in range(self.batch):
                start = offset + j * self.outputs
                self.output[start : start + size] = data[j * size : (j + 1) * size]
        return self.output

    def forward_quant(self, layers: Sequence[Any]) -> np.ndarray:
        """Copy quantized outputs, dequantizing them when this layer ends quantization."""
        for source, size, offset in self._sources(layers):
            data = np.asarray(source.output_uint8_final, dtype=np.uint8)
            for j in range(self.batch):
                start = offset + j * self.outputs
                self.output_uint8_final[start : start + size] = data[j * size : (j + 1) * size]
            if self.quant_stop_flag:
                count = source.out_c * source.out_w * source.out_h
                segment = slice(offset, offset + count)
                values = self.output_uint8_final[segment].astype(np.int32)
                values = values - int(source.activ_zero_point)
                self.output[segment] = values * source.activ_scale
        return self.output_uint8_final

    def backward(self, layers: Sequence[Any]) -> None:
        """Add each slot of ``delta`` into the delta of the layer it came from."""
        for source, size, offset in self._sources(layers):
            target = source.delta
            for j in range(self.batch):
                start = offset + j * self.outputs
                target[j * size : (j + 1) * size] += self.delta[start : start + size]

    def resize(self, layers: Sequence[Any]) -> None:
        """Recompute sizes from the input layers and reallocate the buffers."""
        first = layers[self.input_layers[0]]
        self.out_w = first.out_w
        self.out_h = first.out_h
        self.out_c = first.out_c
        self.outputs = first.outputs
        self.input_sizes[0] = first.outputs
        for i in range(1, self.n):
            following = layers[self.input_layers[i]]
            self.outputs += following.outputs
            self.input_sizes[i] = following.outputs
            if following.out_w == first.out_w and following.out_h == first.out_h:
                self.out_c += following.out_c
            else:
                print(f"{following.out_w} {following.out_h}, {first.out_w} {first.out_h}")
                self.out_h = self.out_w = self.out_c = 0
        self.inputs = self.outputs
        size = self.outputs * self.batch
        self.delta = np.zeros(size, dtype=np.float32)
        self.output = np.zeros(size, dtype=np.float32)
        self.output_uint8_final = np.zeros(size, dtype=np.uint8)