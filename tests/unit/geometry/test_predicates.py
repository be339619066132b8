"""Unit tests for the shapely adapter and overlap/enclosure predicates."""

from __future__ import annotations

import pytest
from shapely.errors import GEOSException
from shapely.geometry import Polygon

from mapsketch.geometry import predicates
from mapsketch.geometry.adapter import from_polygon, to_polygon
from mapsketch.geometry.predicates import encloses, overlaps
from mapsketch.geometry.primitives import LineStringGeometry, PolygonGeometry


def _box(x0: float, y0: float, x1: float, y1: float) -> PolygonGeometry:
    return PolygonGeometry.from_ring([(x0, y0), (x1, y0), (x1, y1), (x0, y1)])


class TestAdapter:
    """Tests for conversion to and from shapely."""

    def test_polygon_to_shapely(self) -> None:
        """Test a polygon geometry becomes a shapely Polygon."""
        polygon = to_polygon(_box(0, 0, 2, 1))
        assert isinstance(polygon, Polygon)
        assert polygon.area == pytest.approx(2.0)

    def test_linestring_maps_to_none(self) -> None:
        """Test line strings have no polygon counterpart."""
        line = LineStringGeometry(coordinates=((0, 0), (1, 1)))
        assert to_polygon(line) is None

    def test_from_polygon_keeps_holes(self) -> None:
        """Test interiors survive the conversion back."""
        shell = [(0, 0), (4, 0), (4, 4), (0, 4)]
        hole = [(1, 1), (2, 1), (2, 2), (1, 2)]
        geometry = from_polygon(Polygon(shell, [hole]))
        assert len(geometry.coordinates) == 2
        assert geometry.exterior[0] == geometry.exterior[-1]

    def test_round_trip_preserves_area(self) -> None:
        """Test converting back and forth keeps the shape."""
        box = _box(0, 0, 3, 2)
        polygon = to_polygon(from_polygon(to_polygon(box)))  # type: ignore[arg-type]
        assert polygon is not None
        assert polygon.area == pytest.approx(6.0)


class TestOverlaps:
    """Tests for the overlap predicate."""

    def test_shared_area(self) -> None:
        """Test partially overlapping polygons overlap."""
        assert overlaps(_box(0, 0, 2, 2), _box(1, 1, 3, 3))

    def test_disjoint(self) -> None:
        """Test separate polygons do not overlap."""
        assert not overlaps(_box(0, 0, 1, 1), _box(2, 2, 3, 3))

    def test_shared_edge_is_not_overlap(self) -> None:
        """Test touching along an edge does not count."""
        assert not overlaps(_box(0, 0, 1, 1), _box(1, 0, 2, 1))

    def test_shared_vertex_is_not_overlap(self) -> None:
        """Test touching at a corner does not count."""
        assert not overlaps(_box(0, 0, 1, 1), _box(1, 1, 2, 2))

    def test_containment_is_overlap(self) -> None:
        """Test a contained polygon overlaps its container."""
        assert overlaps(_box(0, 0, 4, 4), _box(1, 1, 2, 2))

    def test_linestring_never_overlaps(self) -> None:
        """Test line strings are never subject to overlap."""
        line = LineStringGeometry(coordinates=((-1, 0.5), (3, 0.5)))
        assert not overlaps(line, _box(0, 0, 1, 1))
        assert not overlaps(_box(0, 0, 1, 1), line)

    def test_is_symmetric(self) -> None:
        """Test overlap does not depend on argument order."""
        a, b = _box(0, 0, 2, 2), _box(1, -1, 3, 1)
        assert overlaps(a, b) == overlaps(b, a)

    def test_library_failure_is_false(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test a geometry library error is treated as no overlap."""

        def _boom(*_: object) -> bool:
            raise GEOSException("TopologyException")

        monkeypatch.setattr(Polygon, "relate_pattern", _boom)
        assert not overlaps(_box(0, 0, 2, 2), _box(1, 1, 3, 3))


class TestEncloses:
    """Tests for the enclosure predicate."""

    def test_inner_inside_outer(self) -> None:
        """Test a strictly contained polygon is enclosed."""
        assert encloses(_box(0, 0, 4, 4), _box(1, 1, 2, 2))
        assert not encloses(_box(1, 1, 2, 2), _box(0, 0, 4, 4))

    def test_boundary_inclusive(self) -> None:
        """Test a polygon sharing the outer boundary is still enclosed."""
        assert encloses(_box(0, 0, 4, 4), _box(0, 0, 2, 4))

    def test_identical_polygons_enclose_each_other(self) -> None:
        """Test coincident polygons enclose in both directions."""
        a, b = _box(0, 0, 1, 1), _box(0, 0, 1, 1)
        assert encloses(a, b)
        assert encloses(b, a)

    def test_partial_overlap_is_not_enclosure(self) -> None:
        """Test partial overlap does not count as enclosure."""
        assert not encloses(_box(0, 0, 2, 2), _box(1, 1, 3, 3))

    def test_linestring_is_never_enclosed(self) -> None:
        """Test line strings never take part in enclosure."""
        line = LineStringGeometry(coordinates=((1, 1), (2, 2)))
        assert not encloses(_box(0, 0, 4, 4), line)

    def test_library_failure_is_false(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test a geometry library error is treated as not enclosed."""

        def _boom(*_: object) -> bool:
            raise GEOSException("TopologyException")

        monkeypatch.setattr(Polygon, "covers", _boom)
        assert not encloses(_box(0, 0, 4, 4), _box(1, 1, 2, 2))

    def test_failure_is_logged(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test swallowed geometry errors leave a warning."""

        def _boom(*_: object) -> bool:
            raise GEOSException("TopologyException")

        monkeypatch.setattr(Polygon, "covers", _boom)
        with caplog.at_level("WARNING", logger=predicates.__name__):
            encloses(_box(0, 0, 4, 4), _box(1, 1, 2, 2))
        assert "treating as not enclosed" in caplog.text
