"""Unit tests for overlap trimming.

Tests trim() and largest_part() including:
- Trimming against one and several existing polygons
- Multi-part results keep the largest part
- Area floor and full consumption
- Property: results never overlap their inputs and respect the floor
"""

from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from shapely.errors import GEOSException
from shapely.geometry import GeometryCollection, LineString, MultiPolygon, Polygon, box

from mapsketch.geometry.adapter import to_polygon
from mapsketch.geometry.predicates import overlaps
from mapsketch.geometry.primitives import LineStringGeometry, PolygonGeometry
from mapsketch.geometry.trim import MIN_TRIM_AREA, largest_part, trim


def _box(x0: float, y0: float, x1: float, y1: float) -> PolygonGeometry:
    return PolygonGeometry.from_ring([(x0, y0), (x1, y0), (x1, y1), (x0, y1)])


def _area(geometry: PolygonGeometry) -> float:
    polygon = to_polygon(geometry)
    assert polygon is not None
    return float(polygon.area)


class TestLargestPart:
    """Tests for largest_part()."""

    def test_polygon_passes_through(self) -> None:
        """Test a single polygon is returned as is."""
        polygon = box(0, 0, 1, 1)
        assert largest_part(polygon) is polygon

    def test_multipolygon_keeps_largest(self) -> None:
        """Test the largest part of a multipolygon is kept."""
        small, large = box(0, 0, 1, 1), box(5, 5, 8, 8)
        assert largest_part(MultiPolygon([small, large])) == large

    def test_tie_keeps_first(self) -> None:
        """Test equal areas resolve to the first part."""
        first, second = box(0, 0, 1, 1), box(5, 5, 6, 6)
        assert largest_part(MultiPolygon([first, second])) == first

    def test_collection_ignores_non_polygons(self) -> None:
        """Test lines and points in a collection are ignored."""
        part = box(0, 0, 1, 1)
        collection = GeometryCollection([LineString([(3, 3), (4, 4)]), part])
        assert largest_part(collection) == part

    def test_empty_is_none(self) -> None:
        """Test an empty result means nothing is left."""
        assert largest_part(Polygon()) is None

    def test_line_is_none(self) -> None:
        """Test a non-area result means nothing is left."""
        assert largest_part(LineString([(0, 0), (1, 1)])) is None


class TestTrim:
    """Tests for trim()."""

    def test_empty_existing_returns_candidate_shape(self) -> None:
        """Test trimming against nothing keeps the candidate."""
        candidate = _box(0, 0, 2, 2)
        result = trim(candidate, [])
        assert result is not None
        assert _area(result) == pytest.approx(4.0)

    def test_half_overlap_keeps_other_half(self) -> None:
        """Test the shared half is removed."""
        result = trim(_box(1, 0, 3, 2), [_box(0, 0, 2, 2)])
        assert result is not None
        assert _area(result) == pytest.approx(2.0)
        polygon = to_polygon(result)
        assert polygon is not None
        assert polygon.bounds == pytest.approx((2.0, 0.0, 3.0, 2.0))

    def test_result_does_not_overlap_existing(self) -> None:
        """Test the trimmed result no longer overlaps any existing polygon."""
        existing = [_box(0, 0, 2, 2), _box(3, 0, 5, 2)]
        result = trim(_box(1, 1, 4, 3), existing)
        assert result is not None
        assert not any(overlaps(result, e) for e in existing)

    def test_split_keeps_largest_part(self) -> None:
        """Test a candidate cut in two keeps its larger piece."""
        # A vertical bar cuts the candidate into a 1-wide and a 3-wide piece
        result = trim(_box(0, 0, 5, 1), [_box(1, -1, 2, 2)])
        assert result is not None
        assert _area(result) == pytest.approx(3.0)

    def test_fully_covered_is_none(self) -> None:
        """Test a candidate covered by an existing polygon is rejected."""
        assert trim(_box(1, 1, 2, 2), [_box(0, 0, 4, 4)]) is None

    def test_covered_by_union_is_none(self) -> None:
        """Test a candidate covered by several polygons together is rejected."""
        existing = [_box(0, 0, 1, 2), _box(1, 0, 2, 2)]
        assert trim(_box(0.5, 0.5, 1.5, 1.5), existing) is None

    def test_sliver_below_floor_is_none(self) -> None:
        """Test a remainder smaller than the area floor is rejected."""
        # Leaves a 0.005 x 0.01 sliver (area 0.00005)
        result = trim(_box(0, 0, 0.015, 0.01), [_box(0.005, -1, 1, 1)])
        assert result is None

    def test_custom_floor(self) -> None:
        """Test min_area can be tightened or loosened."""
        candidate, existing = _box(0, 0, 2, 1), [_box(1, 0, 3, 1)]
        assert trim(candidate, existing, min_area=2.0) is None
        assert trim(candidate, existing, min_area=0.5) is not None

    def test_existing_linestrings_are_skipped(self) -> None:
        """Test line strings in the existing set are ignored."""
        line = LineStringGeometry(coordinates=((-1, 0.5), (3, 0.5)))
        result = trim(_box(0, 0, 1, 1), [line])
        assert result is not None
        assert _area(result) == pytest.approx(1.0)

    def test_linestring_candidate_is_none(self) -> None:
        """Test a line string candidate cannot be trimmed."""
        line = LineStringGeometry(coordinates=((0, 0), (1, 1)))
        assert trim(line, [_box(0, 0, 1, 1)]) is None

    def test_touching_existing_leaves_candidate(self) -> None:
        """Test an edge-adjacent polygon does not trim the candidate."""
        result = trim(_box(1, 0, 2, 1), [_box(0, 0, 1, 1)])
        assert result is not None
        assert _area(result) == pytest.approx(1.0)

    def test_default_floor(self) -> None:
        """Test the default area floor."""
        assert MIN_TRIM_AREA == 0.0001


class TestTrimFailures:
    """Tests for geometry library errors during trimming."""

    def test_difference_error_is_none(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test a failing difference yields None instead of raising."""

        def _boom(*_: object) -> Polygon:
            raise GEOSException("TopologyException: side location conflict")

        monkeypatch.setattr(Polygon, "difference", _boom)
        assert trim(_box(1, 0, 3, 2), [_box(0, 0, 2, 2)]) is None

    def test_validity_error_is_none(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test a failing validity check yields None instead of raising."""

        def _boom(_: object) -> bool:
            raise GEOSException("IllegalArgumentException")

        monkeypatch.setattr(Polygon, "is_valid", property(_boom))
        assert trim(_box(0, 0, 1, 1), []) is None

    def test_failure_is_logged(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test a swallowed trimming error leaves a warning."""

        def _boom(*_: object) -> Polygon:
            raise GEOSException("TopologyException")

        monkeypatch.setattr(Polygon, "difference", _boom)
        with caplog.at_level("WARNING", logger="mapsketch.geometry.trim"):
            trim(_box(1, 0, 3, 2), [_box(0, 0, 2, 2)])
        assert "Trimming failed" in caplog.text


_coord = st.floats(min_value=-10, max_value=10, allow_nan=False).map(
    lambda v: round(v, 3)
)


@st.composite
def boxes(draw: st.DrawFn) -> PolygonGeometry:
    x0, y0 = draw(_coord), draw(_coord)
    width = draw(st.floats(min_value=0.01, max_value=5).map(lambda v: round(v, 3)))
    height = draw(st.floats(min_value=0.01, max_value=5).map(lambda v: round(v, 3)))
    return _box(x0, y0, x0 + width, y0 + height)


class TestTrimProperties:
    """Property-based tests for trim()."""

    @given(candidate=boxes(), existing=st.lists(boxes(), max_size=4))
    @settings(max_examples=75, deadline=None)
    def test_result_respects_floor_and_never_overlaps(
        self, candidate: PolygonGeometry, existing: list[PolygonGeometry]
    ) -> None:
        """Test any non-None result has enough area and overlaps nothing."""
        result = trim(candidate, existing)
        if result is None:
            return
        assert _area(result) >= MIN_TRIM_AREA
        for other in existing:
            polygon, other_polygon = to_polygon(result), to_polygon(other)
            assert polygon is not None
            assert other_polygon is not None
            shared = polygon.intersection(other_polygon).area
            assert shared == pytest.approx(0.0, abs=1e-9)

    @given(candidate=boxes(), existing=st.lists(boxes(), max_size=3))
    @settings(max_examples=50, deadline=None)
    def test_result_is_within_candidate(
        self, candidate: PolygonGeometry, existing: list[PolygonGeometry]
    ) -> None:
        """Test trimming only ever removes area."""
        result = trim(candidate, existing)
        if result is None:
            return
        assert _area(result) <= _area(candidate) + 1e-9
