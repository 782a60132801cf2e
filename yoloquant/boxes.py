"""Bounding boxes, detections and mapping boxes back to image coordinates."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field


@dataclass
class Box:
    """A box given by its centre and its size."""

    x: float = 0.0
    y: float = 0.0
    w: float = 0.0
    h: float = 0.0


@dataclass
class Detection:
    """One predicted box with its objectness and per-class probabilities."""

    bbox: Box = field(default_factory=Box)
    classes: int = 0
    prob: list[float] = field(default_factory=list)
    objectness: float = 0.0
    mask: list[float] | None = None
    sort_class: int = 0


def correct_boxes(
    dets: Sequence[Detection],
    w: int,
    h: int,
    netw: int,
    neth: int,
    relative: bool,
) -> Sequence[Detection]:
    """Undo letterboxing of network coordinates, in place.

    Boxes are left relative to the image when ``relative`` is true and
    are scaled to pixels otherwise.
    """
    if netw / w < neth / h:
        new_w = netw
        new_h = (h * netw) // w
    else:
        new_h = neth
        new_w = (w * neth) // h
    for det in dets:
        b = det.bbox
        x = (b.x - (netw - new_w) / 2.0 / netw) / (new_w / netw)
        y = (b.y - (neth - new_h) / 2.0 / neth) / (new_h / neth)
        bw = b.w * (netw / new_w)
        bh = b.h * (neth / new_h)
        if not relative:
            x *= w
            bw *= w
            y *= h
            bh *= h
        det.bbox = Box(x, y, bw, bh)
    return dets