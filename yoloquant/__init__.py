"""YOLO detection-head decoding, layer geometry, class hierarchies and numeric helpers built on NumPy."""

__version__ = "0.1.0"

__all__ = [
    "boxes",
    "region",
    "reorg",
    "route",
    "shortcut",
    "softmax",
    "tree",
    "upsample",
    "utils",
    "yolo",
]