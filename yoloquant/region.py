"""Region detection layer: output layout, deltas and box decoding."""

from __future__ import annotations

import math
from collections.abc import MutableSequence, Sequence

import numpy as np

from .boxes import Box, Detection, correct_boxes
from .tree import Tree


def get_region_box(
    x: Sequence[float],
    biases: Sequence[float],
    n: int,
    index: int,
    i: int,
    j: int,
    w: int,
    h: int,
    stride: int,
) -> Box:
    """Decode the box predicted at grid cell ``(i, j)`` with anchor ``n``."""
    return Box(
        x=(i + float(x[index])) / w,
        y=(j + float(x[index + stride])) / h,
        w=math.exp(float(x[index + 2 * stride])) * biases[2 * n] / w,
        h=math.exp(float(x[index + 3 * stride])) * biases[2 * n + 1] / h,
    )


def delta_region_mask(
    truth: Sequence[float],
    x: Sequence[float],
    n: int,
    index: int,
    delta: MutableSequence[float],
    stride: int,
    scale: int,
) -> MutableSequence[float]:
    """Write mask coefficient deltas into ``delta`` and return it."""
    for k in range(n):
        pos = index + k * stride
        delta[pos] = scale * (truth[k] - x[pos])
    return delta


def delta_region_class(
    output: Sequence[float],
    delta: MutableSequence[float],
    index: int,
    cls: int,
    classes: int,
    hier: Tree | None,
    scale: float,
    stride: int,
    tag: bool,
) -> float:
    """Write class deltas into ``delta``; return what the class adds to the average."""
    if hier is not None:
        pred = 1.0
        while cls >= 0:
            pred *= float(output[index + stride * cls])
            g = hier.group[cls]
            offset = hier.group_offset[g]
            for k in range(hier.group_size[g]):
                pos = index + stride * (offset + k)
                delta[pos] = scale * (0 - output[pos])
            pos = index + stride * cls
            delta[pos] = scale * (1 - output[pos])
            cls = hier.parent[cls]
        return pred
    if delta[index] and tag:
        pos = index + stride * cls
        delta[pos] = scale * (1 - output[pos])
        return 0.0
    gained = 0.0
    for k in range(classes):
        pos = index + stride * k
        target = 1.0 if k == cls else 0.0
        delta[pos] = scale * (target - output[pos])
        if k == cls:
            gained += float(output[pos])
    return gained


def logit(x: float) -> float:
    """Inverse of the logistic function."""
    return math.log(x / (1.0 - x))


class RegionLayer:
    """Detection layer with ``n`` anchors per cell and optional hierarchy."""

    def __init__(
        self,
        batch: int,
        w: int,
        h: int,
        n: int,
        classes: int,
        coords: int,
    ) -> None:
        self.n = n
        self.batch = batch
        self.w = w
        self.h = h
        self.c = n * (classes + coords + 1)
        self.out_w = w
        self.out_h = h
        self.out_c = self.c
        self.classes = classes
        self.coords = coords
        self.cost = 0.0
        self.biases = np.full(n * 2, 0.5, dtype=np.float32)
        self.bias_updates = np.zeros(n * 2, dtype=np.float32)
        self.outputs = h * w * n * (classes + coords + 1)
        self.inputs = self.outputs
        self.truths = 30 * (coords + 1)
        self.delta = np.zeros(batch * self.outputs, dtype=np.float32)
        self.output = np.zeros(batch * self.outputs, dtype=np.float32)
        self.background = False
        self.softmax = False
        self.softmax_tree: Tree | None = None
        self.temperature = 0.0
        self.thresh = 0.0
        self.bias_match = False
        self.rescore = False
        self.coord_scale = 0.0
        self.object_scale = 0.0
        self.noobject_scale = 0.0
        self.mask_scale = 0.0
        self.class_scale = 0.0
        self.map: list[int] | None = None
        print("detection")

    def entry_index(self, batch: int, location: int, entry: int) -> int:
        """Flat index of ``entry`` for a location in a batch item."""
        area = self.w * self.h
        anchor, loc = divmod(location, area)
        return (
            batch * self.outputs
            + anchor * area * (self.coords + self.classes + 1)
            + entry * area
            + loc
        )

    def resize(self, w: int, h: int) -> None:
        """Change the grid size and reallocate the buffers."""
        self.w = w
        self.h = h
        self.outputs = h * w * self.n * (self.classes + self.coords + 1)
        self.inputs = self.outputs
        self.output = np.zeros(self.batch * self.outputs, dtype=np.float32)
        self.delta = np.zeros(self.batch * self.outputs, dtype=np.float32)

    def _avg_flipped(self) -> None:
        flip = self.output[self.outputs : 2 * self.outputs].reshape(
            self.classes + self.coords + 1, self.n, self.h, self.w
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
        mapping: Sequence[int] | None,
        tree_thresh: float,
        relative: bool,
    ) -> list[Detection]:
        """Decode one detection for every anchor of every cell."""
        if self.batch == 2:
            self._avg_flipped()
        predictions = self.output
        area = self.w * self.h
        dets = [
            Detection(
                classes=self.classes,
                prob=[0.0] * self.classes,
                mask=[0.0] * (self.coords - 4) if self.coords > 4 else None,
            )
            for _ in range(area * self.n)
        ]
        for i in range(area):
            row, col = divmod(i, self.w)
            for a in range(self.n):
                location = a * area + i
                det = dets[location]
                obj_index = self.entry_index(0, location, self.coords)
                box_index = self.entry_index(0, location, 0)
                mask_index = self.entry_index(0, location, 4)
                scale = 1.0 if self.background else float(predictions[obj_index])
                det.bbox = get_region_box(
                    predictions, self.biases, a, box_index, col, row, self.w, self.h, area
                )
                det.objectness = scale if scale > thresh else 0.0
                if det.mask is not None:
                    for k in range(self.coords - 4):
                        det.mask[k] = float(predictions[mask_index + k * area])

                class_index = self.entry_index(0, location, self.coords + (not self.background))
                if self.softmax_tree is not None:
                    view = predictions[class_index:]
                    self.softmax_tree.hierarchy_predictions(view, self.classes, False, area)
                    if mapping:
                        for k in range(min(200, len(mapping))):
                            idx = self.entry_index(0, location, self.coords + 1 + mapping[k])
                            prob = scale * float(predictions[idx])
                            det.prob[k] = prob if prob > thresh else 0.0
                    else:
                        k = self.softmax_tree.top_prediction(view, tree_thresh, area)
                        det.prob[k] = scale if scale > thresh else 0.0
                elif det.objectness:
                    for k in range(self.classes):
                        idx = self.entry_index(0, location, self.coords + 1 + k)
                        prob = scale * float(predictions[idx])
                        det.prob[k] = prob if prob > thresh else 0.0
        correct_boxes(dets, w, h, netw, neth, relative)
        return dets

    def zero_objectness(self) -> None:
        """Set the objectness of every anchor of the first batch item to zero."""
        area = self.w * self.h
        for i in range(area):
            for a in range(self.n):
                self.output[self.entry_index(0, a * area + i, self.coords)] = 0