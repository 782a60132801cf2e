import pytest

from yoloquant.reorg import ReorgLayer


def test_forward_shape_moves_space_into_channels():
    layer = ReorgLayer(1, 8, 6, 3, 2)
    assert (layer.out_w, layer.out_h, layer.out_c) == (4, 3, 12)
    assert layer.inputs == 8 * 6 * 3
    assert layer.outputs == layer.inputs


def test_reverse_shape_moves_channels_into_space():
    layer = ReorgLayer(1, 4, 3, 12, 2, reverse=True)
    assert (layer.out_w, layer.out_h, layer.out_c) == (8, 6, 3)
    assert layer.outputs == layer.inputs


@pytest.mark.parametrize("stride", [1, 2, 4])
def test_reverse_undoes_forward_shape(stride):
    forward = ReorgLayer(1, 16, 8, 2, stride)
    back = ReorgLayer(1, forward.out_w, forward.out_h, forward.out_c, stride, reverse=True)
    assert (back.out_w, back.out_h, back.out_c) == (16, 8, 2)


def test_buffers_cover_batch():
    layer = ReorgLayer(3, 4, 4, 2, 2)
    assert len(layer.output) == layer.outputs * 3
    assert len(layer.delta) == layer.outputs * 3


def test_extra_clears_shape():
    layer = ReorgLayer(2, 4, 4, 2, 2, extra=5)
    assert (layer.out_w, layer.out_h, layer.out_c) == (0, 0, 0)
    assert layer.outputs == layer.inputs + 5
    assert len(layer.output) == layer.outputs * 2


def test_printed_summary(capsys):
    ReorgLayer(1, 8, 6, 3, 2)
    line = capsys.readouterr().out.strip()
    assert line == "reorg              / 2     8 x   6 x   3   ->     4 x   3 x  12"


def test_printed_summary_extra(capsys):
    ReorgLayer(1, 2, 2, 1, 2, extra=4)
    line = capsys.readouterr().out.strip()
    assert line == "reorg                 4   ->     8"


def test_resize_updates_shape_and_buffers():
    layer = ReorgLayer(2, 8, 8, 4, 2)
    layer.resize(4, 6)
    assert (layer.w, layer.h) == (4, 6)
    assert (layer.out_w, layer.out_h, layer.out_c) == (2, 3, 16)
    assert layer.inputs == layer.outputs
    assert len(layer.output) == layer.outputs * 2


def test_resize_reverse():
    layer = ReorgLayer(1, 2, 2, 8, 2, reverse=True)
    layer.resize(3, 5)
    assert (layer.out_w, layer.out_h, layer.out_c) == (6, 10, 2)
    assert len(layer.delta) == layer.outputs