"""
Unit tests for partitioning a layout tree into cell rectangles.
"""

import itertools

import pytest

from photo_grid.core.geometry import Rect, cell_at, content_rect, gap_area, partition
from photo_grid.core.models import Leaf, Split, SplitDirection

H = SplitDirection.HORIZONTAL
V = SplitDirection.VERTICAL


@pytest.fixture
def grid_root():
    return Split("main", V, (
        Split("top", H, (Leaf("cell-1"), Leaf("cell-2"))),
        Split("bottom", H, (Leaf("cell-3"), Leaf("cell-4"))),
    ))


def _uneven_root(r1: float, r2: float, r3: float):
    return Split("a", H, (
        Split("b", V, (Leaf("c1"), Leaf("c2")), ratio=r2),
        Split("d", V, (Leaf("c3"), Split("e", H, (Leaf("c4"), Leaf("c5")), ratio=r3)), ratio=r1),
    ), ratio=r1)


class TestRect:
    """Tests for the Rect value type."""

    def test_inset_when_margin_larger_than_rect_then_clamps_to_zero(self):
        assert Rect(0, 0, 10, 10).inset(8) == Rect(8, 8, 0, 0)

    def test_contains_when_on_right_edge_then_false(self):
        rect = Rect(10, 10, 20, 20)
        assert rect.contains(10, 10)
        assert not rect.contains(30, 15)

    def test_rounded_when_fractional_edges_then_rounds_edges(self):
        assert Rect(10.4, 0.6, 100.2, 50.0).rounded() == (10, 1, 111, 51)


class TestPartition:
    """Tests for partition()."""

    def test_partition_when_single_leaf_then_canvas_minus_margin(self):
        rects = partition(Leaf("cell-1"), 800, 800, gap=10)
        assert rects == {"cell-1": Rect(10, 10, 780, 780)}

    def test_partition_when_grid_with_margin_then_cells_are_385(self, grid_root):
        rects = partition(grid_root, 800, 800, gap=10)

        assert list(rects) == ["cell-1", "cell-2", "cell-3", "cell-4"]
        assert rects["cell-1"] == Rect(10, 10, 385, 385)
        assert rects["cell-2"] == Rect(405, 10, 385, 385)
        assert rects["cell-3"] == Rect(10, 405, 385, 385)
        assert rects["cell-4"] == Rect(405, 405, 385, 385)

    def test_partition_when_grid_without_margin_then_cells_are_395(self, grid_root):
        rects = partition(grid_root, 800, 800, gap=10, margin=0)

        for rect in rects.values():
            assert (rect.width, rect.height) == (395, 395)
        assert rects["cell-4"].x == 405

    def test_partition_when_horizontal_then_children_side_by_side(self):
        root = Split("s", H, (Leaf("left"), Leaf("right")))
        rects = partition(root, 800, 400, gap=0)

        assert rects["left"] == Rect(0, 0, 400, 400)
        assert rects["right"] == Rect(400, 0, 400, 400)

    def test_partition_when_ratio_uneven_then_split_after_gap(self):
        root = Split("s", V, (Leaf("top"), Leaf("bottom")), ratio=0.25)
        rects = partition(root, 400, 420, gap=20, margin=0)

        assert rects["top"].height == pytest.approx(100)
        assert rects["bottom"].y == pytest.approx(120)
        assert rects["bottom"].height == pytest.approx(300)

    def test_partition_when_gap_exceeds_space_then_zero_sized_cells(self):
        root = Split("s", H, (Leaf("a"), Leaf("b")))
        rects = partition(root, 30, 30, gap=40, margin=0)

        assert rects["a"].width == 0
        assert rects["b"].width == 0

    def test_partition_when_negative_gap_then_raises_error(self, grid_root):
        with pytest.raises(ValueError, match="gap must be >= 0"):
            partition(grid_root, 800, 800, gap=-1)

    def test_partition_when_negative_margin_then_raises_error(self, grid_root):
        with pytest.raises(ValueError, match="margin must be >= 0"):
            partition(grid_root, 800, 800, gap=0, margin=-5)

    @pytest.mark.parametrize(
        "ratios, gap, margin",
        list(itertools.product(
            [(0.5, 0.5, 0.5), (0.1, 0.9, 0.33), (0.77, 0.21, 0.6)],
            [0, 1, 10, 37.5],
            [None, 0, 12],
        )),
    )
    def test_partition_when_any_ratio_and_gap_then_area_is_conserved(self, ratios, gap, margin):
        root = _uneven_root(*ratios)
        width, height = 800, 533

        rects = partition(root, width, height, gap=gap, margin=margin)

        leaf_area = sum(rect.area for rect in rects.values())
        inner = content_rect(width, height, gap if margin is None else margin)
        assert leaf_area + gap_area(root, width, height, gap, margin) == pytest.approx(inner.area)

    def test_partition_when_grid_then_cells_do_not_overlap(self, grid_root):
        rects = list(partition(grid_root, 800, 800, gap=10).values())
        for a, b in itertools.combinations(rects, 2):
            overlap_w = min(a.right, b.right) - max(a.x, b.x)
            overlap_h = min(a.bottom, b.bottom) - max(a.y, b.y)
            assert overlap_w <= 0 or overlap_h <= 0


class TestGapArea:
    """Tests for gap_area()."""

    def test_gap_area_when_grid_then_sums_three_strips(self, grid_root):
        # main strip 780x10, two half strips 10x385
        assert gap_area(grid_root, 800, 800, 10) == pytest.approx(7800 + 2 * 3850)

    def test_gap_area_when_single_leaf_then_zero(self):
        assert gap_area(Leaf("x"), 800, 800, 10) == 0


class TestCellAt:
    """Tests for hit-testing."""

    def test_cell_at_when_inside_cell_then_returns_id(self, grid_root):
        rects = partition(grid_root, 800, 800, gap=10)
        assert cell_at(rects, 500, 20) == "cell-2"

    def test_cell_at_when_in_gap_then_none(self, grid_root):
        rects = partition(grid_root, 800, 800, gap=10)
        assert cell_at(rects, 400, 100) is None
        assert cell_at(rects, 5, 5) is None
