import pytest

from yoloquant.shortcut import ShortcutLayer


def test_geometry_from_both_inputs():
    layer = ShortcutLayer(3, 5, 4, 6, 8, 2, 3, 16)
    assert (layer.w, layer.h, layer.c) == (2, 3, 16)
    assert (layer.out_w, layer.out_h, layer.out_c) == (4, 6, 8)
    assert layer.outputs == 4 * 6 * 8
    assert layer.inputs == layer.outputs
    assert layer.index == 5
    assert len(layer.output) == layer.outputs * 3
    assert len(layer.delta) == layer.outputs * 3


def test_buffers_start_at_zero():
    layer = ShortcutLayer(2, 1, 3, 3, 2, 3, 3, 2)
    assert not layer.output.any()
    assert not layer.delta.any()


def test_resize_same_size_layer():
    layer = ShortcutLayer(2, 1, 4, 4, 3, 4, 4, 3)
    layer.resize(7, 5)
    assert (layer.w, layer.out_w) == (7, 7)
    assert (layer.h, layer.out_h) == (5, 5)
    assert layer.outputs == 7 * 5 * 3
    assert layer.inputs == layer.outputs
    assert len(layer.output) == layer.outputs * 2
    assert len(layer.delta) == layer.outputs * 2


def test_resize_mismatched_layer_raises():
    layer = ShortcutLayer(1, 0, 4, 4, 3, 8, 8, 3)
    with pytest.raises(ValueError):
        layer.resize(2, 2)


def test_prints_summary(capsys):
    ShortcutLayer(1, 7, 4, 4, 3, 4, 4, 3)
    out = capsys.readouterr().out
    assert out.startswith("res ")
    assert "->" in out