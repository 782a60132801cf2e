"""YOLO detection layer: output layout, class deltas and box decoding."""

from __future__ import annotations

import math
from collections.abc import MutableSequence, Sequence

import numpy as np

from .boxes import Box, Detection, correct_boxes

_COORDS = 4


def get_yolo_box(
    x: Sequence[float],
    biases: Sequence[float],
    n: int,
    index: int,
    i: int,
    j: int,
    lw: int,
    lh: int,
    w: int,
    h: int,
    stride: int,
) -> Box:
    """Decode the box predicted at grid cell ``(i, j)`` with anchor ``n``."""
    return Box(
        x=(i + float(x[index])) / lw,
        y=(j + float(x[index + stride])) / lh,
        w=math.exp(float(x[index + 2 * stride])) * biases[2 * n] / w,
        h=math.exp(float(x[index + 3 * stride])) * biases[2 * n + 1] / h,
    )


def delta_yolo_class(
    output: Sequence[float],
    delta: MutableSequence[float],
    index: int,
    cls: int,
    classes: int,
    stride: int,
) -> float:
    """Write class deltas into ``delta`` and return the output of the true class."""
    if delta[index]:
        delta[index + stride * cls] = 1 - output[index + stride * cls]
        return float(output[index + stride * cls])
    for k in range(classes):
        target = 1.0 if k == cls else 0.0
        delta[index + stride * k] = target - output[index + stride * k]
    return float(output[index + stride * cls])


class YoloLayer:
    """Detection layer predicting ``n`` anchors per grid cell."""

    def __init__(
        self,
        batch: int,
        w: int,
        h: int,
        n: int,
        total: int,
        mask: Sequence[int] | None,
        classes: int,
    ) -> None:
        self.n = n
        self.total = total
        self.batch = batch
        self.w = w
        self.h = h
        self.c = n * (classes + _COORDS + 1)
        self.out_w = w
        self.out_h = h
        self.out_c = self.c
        self.classes = classes
        self.cost = 0.0
        self.biases = np.full(total * 2, 0.5, dtype=np.float32)
        self.mask = list(mask) if mask is not None else list(range(n))
        self.bias_updates = np.zeros(n * 2, dtype=np.float32)
        self.outputs = h * w * n * (classes + _COORDS + 1)
        self.inputs = self.outputs
        self.truths = 90 * (_COORDS + 1)
        self.max_boxes = 0
        self.ignore_thresh = 0.0
        self.truth_thresh = 0.0
        self.map: list[int] | None = None
        self.delta = np.zeros(batch * self.outputs, dtype=np.float32)
        self.output = np.zeros(batch * self.outputs, dtype=np.float32)
        print("yolo")

    def entry_index(self, batch: int, location: int, entry: int) -> int:
        """Flat index of ``entry`` for a location in a batch item."""
        area = self.w * self.h
        anchor, loc = divmod(location, area)
        return (
            batch * self.outputs
            + anchor * area * (_COORDS + self.classes + 1)
            + entry * area
            + loc
        )

    def resize(self, w: int, h: int) -> None:
        """Change the grid size and reallocate the buffers."""
        self.w = w
        self.h = h
        self.outputs = h * w * self.n * (self.classes + _COORDS + 1)
        self.inputs = self.outputs
        self.output = np.zeros(self.batch * self.outputs, dtype=np.float32)
        self.delta = np.zeros(self.batch * self.outputs, dtype=np.float32)

    def num_detections(self, thresh: float) -> int:
        """Number of anchors in the first batch item whose objectness exceeds ``thresh``."""
        return sum(
            1
            for i in range(self.w * self.h)
            for a in range(self.n)
            if self.output[self.entry_index(0, a * self.w * self.h + i, _COORDS)] > thresh
        )

    def avg_flipped(self) -> None:
        """Average the first batch item with the mirrored second one, in place."""
        flip = self.output[self.outputs : 2 * self.outputs].reshape(
            self.classes + _COORDS + 1, self.n, self.h, self.w
        )
        flip[...] = flip[..., ::-1].copy()
        half = self.w // 2
        if half:
            flip[0, :, :, :half] *= -1
            flip[0, :, :, self.w - half :] *= -1
        first = self.output[: self.outputs]
        first[...] = (first + self.output[self.outputs : 2 * self.outputs]) / 2.0

    def detections(
        self,
        w: int,
        h: int,
        netw: int,
        neth: int,
        thresh: float,
        relative: bool,
    ) -> list[Detection]:
        """Decode every anchor whose objectness exceeds ``thresh``."""
        if self.batch == 2:
            self.avg_flipped()
        predictions = self.output
        area = self.w * self.h
        dets: list[Detection] = []
        for i in range(area):
            row, col = divmod(i, self.w)
            for a in range(self.n):
                objectness = float(predictions[self.entry_index(0, a * area + i, _COORDS)])
                if objectness <= thresh:
                    continue
                box_index = self.entry_index(0, a * area + i, 0)
                bbox = get_yolo_box(
                    predictions, self.biases, self.mask[a], box_index,
                    col, row, self.w, self.h, netw, neth, area,
                )
                probs = []
                for k in range(self.classes):
                    class_index = self.entry_index(0, a * area + i, _COORDS + 1 + k)
                    prob = objectness * float(predictions[class_index])
                    probs.append(prob if prob > thresh else 0.0)
                dets.append(
                    Detection(bbox=bbox, classes=self.classes, prob=probs, objectness=objectness)
                )
        correct_boxes(dets, w, h, netw, neth, relative)
        return dets