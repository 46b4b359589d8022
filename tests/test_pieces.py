from __future__ import annotations

import numpy as np
import pytest

from block_blast.game import (
    PALETTE,
    SHAPE_POOLS,
    InvalidShapeError,
    Piece,
    PieceGenerator,
    Shape,
    ShapePool,
    choose_pool,
    rotate,
)

from helpers import ScriptedRng

ALL_SHAPES = [shape for pool in SHAPE_POOLS.values() for shape in pool]


def test_pool_sizes():
    assert len(SHAPE_POOLS[ShapePool.SMALL]) == 3
    assert len(SHAPE_POOLS[ShapePool.TETROMINO]) == 11
    assert len(SHAPE_POOLS[ShapePool.COMPLEX]) == 4
    assert all(shape.cell_count == 4 for shape in SHAPE_POOLS[ShapePool.TETROMINO])


@pytest.mark.parametrize("shape", ALL_SHAPES, ids=repr)
@pytest.mark.parametrize("clockwise", [True, False])
def test_four_rotations_return_original(shape, clockwise):
    piece = Piece(shape, color=3)
    rotated = piece
    for _ in range(4):
        rotated = rotate(rotated, clockwise)
    assert rotated == piece


def test_rotate_clockwise_mapping():
    piece = Piece.from_rows([[1, 1, 1], [1, 0, 0]], color=2)
    rotated = rotate(piece, clockwise=True)
    assert rotated.shape.to_rows() == [[1, 1], [0, 1], [0, 1]]
    assert (rotated.height, rotated.width) == (3, 2)
    assert rotated.color == 2


def test_rotate_counter_clockwise_mapping():
    piece = Piece.from_rows([[1, 1, 1], [1, 0, 0]], color=6)
    rotated = rotate(piece, clockwise=False)
    assert rotated.shape.to_rows() == [[1, 0], [1, 0], [1, 1]]
    assert rotated.color == 6


def test_rotation_does_not_touch_original():
    piece = Piece.from_rows([[1, 1]])
    rotate(piece)
    assert piece.shape.to_rows() == [[1, 1]]


@pytest.mark.parametrize("rows", [[], [[]], [[1, 0], [1]], [[0, 0], [0, 0]]])
def test_malformed_shapes_rejected(rows):
    with pytest.raises(InvalidShapeError):
        Shape(rows)


def test_shape_is_normalised_to_bool():
    shape = Shape([[2, 0], [0, 7]])
    assert shape.cells.dtype == np.bool_
    assert shape.to_rows() == [[1, 0], [0, 1]]
    assert shape.cell_count == 2
    with pytest.raises(ValueError):
        shape.cells[0, 1] = True


def test_cells_at_offsets_by_anchor():
    piece = Piece.from_rows([[0, 1, 0], [1, 1, 1]])
    assert piece.cells_at(3, 2) == [(3, 3), (4, 2), (4, 3), (4, 4)]


def test_hex_color():
    assert Piece.from_rows([[1]], color=1).hex_color == PALETTE[0]
    assert Piece.from_rows([[1]], color=6).hex_color == PALETTE[5]


@pytest.mark.parametrize(
    "level,r,expected",
    [
        (1, 0.0, ShapePool.SMALL),
        (1, 0.3999, ShapePool.SMALL),
        (1, 0.4, ShapePool.TETROMINO),
        (2, 0.9999, ShapePool.TETROMINO),
        (3, 0.0, ShapePool.SMALL),
        (3, 0.1999, ShapePool.SMALL),
        (3, 0.2, ShapePool.TETROMINO),
        (3, 0.7999, ShapePool.TETROMINO),
        (3, 0.8, ShapePool.COMPLEX),
        (10, 0.9999, ShapePool.COMPLEX),
    ],
)
def test_choose_pool_boundaries(level, r, expected):
    assert choose_pool(level, r) is expected


def test_generate_uses_pool_for_draw():
    gen = PieceGenerator(rng=ScriptedRng(0.85))
    piece = gen.generate(3)
    assert piece.shape == SHAPE_POOLS[ShapePool.COMPLEX][0]
    assert piece.color == 1

    piece = PieceGenerator(rng=ScriptedRng(0.85)).generate(2)
    assert piece.shape == SHAPE_POOLS[ShapePool.TETROMINO][0]


def test_early_levels_never_deal_complex_shapes():
    gen = PieceGenerator(rng=np.random.default_rng(7))
    allowed = SHAPE_POOLS[ShapePool.SMALL] + SHAPE_POOLS[ShapePool.TETROMINO]
    for _ in range(300):
        piece = gen.generate(1)
        assert piece.shape in allowed
        assert 1 <= piece.color <= len(PALETTE)


def test_later_levels_deal_every_pool():
    gen = PieceGenerator(rng=np.random.default_rng(7))
    seen = {piece.shape for piece in gen.generate_set(5, 500)}
    for pool in SHAPE_POOLS.values():
        assert seen & set(pool)


def test_seeded_generators_agree():
    a = PieceGenerator(rng=np.random.default_rng(42)).generate_set(4, 20)
    b = PieceGenerator(rng=np.random.default_rng(42)).generate_set(4, 20)
    assert a == b
