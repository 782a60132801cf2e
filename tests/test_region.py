import math

import numpy as np
import pytest

from yoloquant.region import (
    RegionLayer,
    delta_region_class,
    delta_region_mask,
    get_region_box,
    logit,
)
from yoloquant.tree import Tree


def make_layer(batch=1, w=2, h=2, n=2, classes=3, coords=4):
    return RegionLayer(batch, w, h, n, classes, coords)


def test_layer_sizes():
    layer = make_layer()
    assert layer.outputs == 2 * 2 * 2 * (3 + 4 + 1)
    assert layer.inputs == layer.outputs
    assert layer.c == 2 * (3 + 4 + 1)
    assert layer.truths == 30 * 5
    assert len(layer.output) == layer.outputs
    assert all(b == 0.5 for b in layer.biases)


def test_entry_index_layout():
    layer = make_layer()
    area = layer.w * layer.h
    assert layer.entry_index(0, 0, 0) == 0
    assert layer.entry_index(0, 1, 0) == 1
    assert layer.entry_index(0, area, 0) == area * (layer.coords + layer.classes + 1)
    assert layer.entry_index(0, 0, layer.coords) == layer.coords * area
    assert layer.entry_index(1, 0, 0) == layer.outputs


def test_resize_changes_buffers():
    layer = make_layer()
    layer.resize(3, 5)
    assert layer.outputs == 3 * 5 * 2 * 8
    assert len(layer.output) == layer.outputs
    assert len(layer.delta) == layer.outputs


def test_get_region_box_zero_input():
    x = [0.0] * 8
    biases = [2.0, 4.0]
    box = get_region_box(x, biases, 0, 0, 1, 1, 2, 2, 2)
    assert box.x == pytest.approx(0.5)
    assert box.y == pytest.approx(0.5)
    assert box.w == pytest.approx(1.0)
    assert box.h == pytest.approx(2.0)


def test_logit_inverts_logistic():
    assert logit(0.5) == pytest.approx(0.0)
    for v in (-2.0, 0.3, 1.7):
        assert logit(1 / (1 + math.exp(-v))) == pytest.approx(v)


def test_delta_region_mask():
    x = [0.0, 0.25, 0.0, 0.5]
    delta = [0.0] * 4
    delta_region_mask([1.0, 1.0], x, 2, 1, delta, 2, 2)
    assert delta == [0.0, 1.5, 0.0, 1.0]


def test_delta_region_class_one_hot():
    output = [0.2, 0.5, 0.3]
    delta = [0.0] * 3
    gained = delta_region_class(output, delta, 0, 1, 3, None, 1.0, 1, False)
    assert gained == pytest.approx(0.5)
    assert delta == pytest.approx([-0.2, 0.5, -0.3])


def test_delta_region_class_tagged_touches_only_class():
    output = [0.2, 0.5, 0.3]
    delta = [0.7, 0.0, 0.0]
    gained = delta_region_class(output, delta, 0, 2, 3, None, 1.0, 1, True)
    assert gained == 0.0
    assert delta == pytest.approx([0.7, 0.0, 0.7])


def test_delta_region_class_hierarchy():
    tree = Tree(
        name=["a", "b", "c", "d"],
        parent=[-1, -1, 0, 0],
        child=[1, -1, -1, -1],
        group=[0, 0, 1, 1],
        leaf=[False, True, True, True],
        group_size=[2, 2],
        group_offset=[0, 2],
    )
    output = [0.6, 0.4, 0.5, 0.5]
    delta = [0.0] * 4
    pred = delta_region_class(output, delta, 0, 2, 4, tree, 1.0, 1, False)
    assert pred == pytest.approx(0.6 * 0.5)
    assert delta == pytest.approx([0.4, -0.4, 0.5, -0.5])


def test_detections_threshold_and_probabilities():
    layer = make_layer(w=1, h=1, n=1, classes=2, coords=4)
    layer.output[layer.entry_index(0, 0, 4)] = 0.8
    layer.output[layer.entry_index(0, 0, 5)] = 0.5
    layer.output[layer.entry_index(0, 0, 6)] = 0.1
    dets = layer.detections(1, 1, 1, 1, 0.2, None, 0.5, True)
    assert len(dets) == 1
    det = dets[0]
    assert det.objectness == pytest.approx(0.8)
    assert det.prob[0] == pytest.approx(0.4)
    assert det.prob[1] == 0.0
    assert det.bbox.x == pytest.approx(0.0)
    assert det.bbox.w == pytest.approx(0.5)


def test_detections_below_threshold_are_empty():
    layer = make_layer()
    dets = layer.detections(2, 2, 2, 2, 0.1, None, 0.5, True)
    assert len(dets) == layer.w * layer.h * layer.n
    assert all(d.objectness == 0 for d in dets)
    assert all(p == 0 for d in dets for p in d.prob)


def test_detections_mask_copied_when_coords_exceed_four():
    layer = make_layer(w=1, h=1, n=1, classes=1, coords=6)
    layer.output[layer.entry_index(0, 0, 4)] = 0.3
    layer.output[layer.entry_index(0, 0, 5)] = 0.9
    dets = layer.detections(1, 1, 1, 1, 0.5, None, 0.5, True)
    assert dets[0].mask == pytest.approx([0.3, 0.9])


def test_batch_of_two_averages_items():
    layer = make_layer(batch=2, w=1, h=1, n=1, classes=1, coords=4)
    obj = layer.entry_index(0, 0, 4)
    layer.output[obj] = 0.2
    layer.output[layer.outputs + obj] = 0.6
    dets = layer.detections(1, 1, 1, 1, 0.1, None, 0.5, True)
    assert dets[0].objectness == pytest.approx(0.4)


def test_zero_objectness():
    layer = make_layer()
    layer.output[:] = 1.0
    layer.zero_objectness()
    area = layer.w * layer.h
    for i in range(area):
        for a in range(layer.n):
            assert layer.output[layer.entry_index(0, a * area + i, layer.coords)] == 0
    assert np.count_nonzero(layer.output == 0) == area * layer.n