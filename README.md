# yoloquant

Pieces of YOLO-style object detectors, written against NumPy arrays: the
decoding side of the YOLO and region detection heads, the bookkeeping of the
route, reorg, shortcut, softmax and upsample layers, hierarchical class trees,
and the small array, string and argument helpers they rely on.

## Installation

```
pip install yoloquant
```

The tests need the `test` extra:

```
pip install "yoloquant[test]"
```

## Modules

| Module | Contents |
| --- | --- |
| `yoloquant.utils` | Array statistics (`sum_array`, `mean_array`, `variance_array`, `mse_array`, `mag_array`, `dist_array`, `normalize_array`, ...), argument lookup that removes what it finds from the list (`find_arg`, `find_int_arg`, `find_float_arg`, `find_char_arg`), string and CSV helpers (`strip`, `strip_char`, `split_str`, `parse_csv_line`, `count_fields`, `parse_fields`, `basecfg`, `find_replace`), file readers (`read_map`, `read_file`, `read_intlist`), ranking (`top_k`, `max_index`, `int_index`) and random draws (`rand_uniform`, `rand_int`, `rand_normal`, `rand_scale`, `rand_size_t`, `sample_array`, `random_index_order`) |
| `yoloquant.tree` | `Tree` and `read_tree` for hierarchical class labels: `change_leaves`, `hierarchy_probability`, `hierarchy_predictions` and `top_prediction` |
| `yoloquant.boxes` | `Box`, `Detection` and `correct_boxes`, which maps boxes from letterboxed network coordinates back to the image |
| `yoloquant.yolo` | `YoloLayer` (`entry_index`, `resize`, `num_detections`, `avg_flipped`, `detections`) with `get_yolo_box` and `delta_yolo_class` |
| `yoloquant.region` | `RegionLayer` (`entry_index`, `resize`, `detections`, `zero_objectness`) with `get_region_box`, `delta_region_class`, `delta_region_mask` and `logit` |
| `yoloquant.route` | `RouteLayer`: `forward` concatenates float outputs of earlier layers, `forward_quant` concatenates their uint8 outputs and, when `quant_stop_flag` is set, dequantizes them; `backward` adds deltas back; `resize` recomputes sizes |
| `yoloquant.reorg` | `ReorgLayer`: output shape of space-to-depth (or its reverse) and `resize` |
| `yoloquant.shortcut` | `ShortcutLayer`: residual geometry and `resize`, which refuses layers of different sizes |
| `yoloquant.softmax` | `SoftmaxLayer`: buffers and `backward`, which adds the layer's delta into a given array |
| `yoloquant.upsample` | `UpsampleLayer`: output size for a positive (upsample) or negative (downsample) stride and `resize` |

The layer constructors print a one-line summary of their shape, as network
builders usually do.

## Examples

Argument and array helpers:

```python
from yoloquant.utils import find_int_arg, mean_array, top_k

argv = ["prog", "-thresh", "5", "data.cfg"]
thresh = find_int_arg(argv, "-thresh", 3)   # 5; argv is now ["prog", "data.cfg"]
print(mean_array([1.0, 2.0, 3.0]))          # 2.0
print(top_k([0.1, 0.9, 0.4], 2))            # [1, 2]
```

A class tree is read from a file of `name parent` lines, where the parent is
the line number of an earlier entry or -1, and siblings are written together:

```python
from yoloquant.tree import read_tree

tree = read_tree("labels.tree")
best = tree.top_prediction(predictions, 0.5, 1)   # predictions: one value per node
```

Decoding detections from a YOLO layer whose output has been filled:

```python
from yoloquant.yolo import YoloLayer

layer = YoloLayer(batch=1, w=2, h=2, n=1, total=1, mask=None, classes=2)
layer.output[layer.entry_index(0, 0, 4)] = 0.9   # objectness of cell 0
layer.output[layer.entry_index(0, 0, 5)] = 0.8   # class 0 of cell 0

dets = layer.detections(w=416, h=416, netw=416, neth=416, thresh=0.5, relative=True)
for det in dets:
    print(det.bbox, det.objectness, det.prob)     # one detection, prob about [0.72, 0.0]
```

`RegionLayer.detections` instead returns one `Detection` for every anchor of
every cell, with probabilities below the threshold set to zero.

## What the package does not do

- There is no network: no configuration parsing, weight loading, or running
  of layers in sequence. Route layers are given the list of earlier layers
  by the caller.
- The YOLO and region layers decode outputs but do not compute training
  losses or gradients; there is no training loop.
- The reorg, shortcut and upsample layers track shapes and buffers only;
  they have no forward or backward computation. The softmax layer has a
  backward step but no forward one.
- There is no image loading, drawing or command-line program.