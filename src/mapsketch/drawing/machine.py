"""Drawing state machine.

Translates pointer events into shapes and hands finished shapes to the
commit pipeline. The machine has three states:

- IDLE: no drawing mode selected, pointer events are ignored
- ARMED: a mode is selected, the next click starts a shape
- ACTIVE: a shape is in progress (anchor placed or points collected)

Circles and rectangles are drawn click, drag, click. Polygons and line
strings collect one vertex per click and end with an explicit finish.
Committing, a rejected commit, cancelling or changing the mode all discard
the in-progress shape. Only a mode change leaves ARMED.
"""

from __future__ import annotations

from enum import Enum

from mapsketch.drawing.outcomes import Outcome, Rejection
from mapsketch.drawing.pipeline import commit_candidate
from mapsketch.drawing.session import DrawingSession
from mapsketch.geometry.primitives import (
    Geometry,
    LineStringGeometry,
    LngLat,
    PolygonGeometry,
    distinct_vertex_count,
)
from mapsketch.geometry.shapes import DEFAULT_CIRCLE_STEPS, circle_ring, rectangle_ring
from mapsketch.geometry.trim import MIN_TRIM_AREA
from mapsketch.render.snapshot import ProvisionalShape, RenderSnapshot, build_snapshot
from mapsketch.store.features import FeatureStore, FeatureType
from mapsketch.utils.logging import (
    clear_correlation_context,
    get_logger,
    set_correlation_context,
)

logger = get_logger(__name__)

MIN_POLYGON_POINTS = 3
MIN_LINESTRING_POINTS = 2


class SessionState(Enum):
    """Drawing machine states."""

    IDLE = "idle"
    ARMED = "armed"
    ACTIVE = "active"


class DrawingStateMachine:
    """Event-driven drawing controller bound to a feature store.

    Usage:
        machine = DrawingStateMachine(store)
        machine.select_mode(FeatureType.RECTANGLE)
        machine.click(LngLat(lng=0, lat=0))      # anchor, now ACTIVE
        machine.move(LngLat(lng=1, lat=1))       # resize preview
        outcome = machine.click(LngLat(lng=1, lat=1))  # Committed or Rejection

    Every handler runs to completion and returns either None (nothing to
    report) or an Outcome.
    """

    def __init__(
        self,
        store: FeatureStore,
        *,
        min_trim_area: float = MIN_TRIM_AREA,
        circle_steps: int = DEFAULT_CIRCLE_STEPS,
    ) -> None:
        """Initialize the machine.

        Args:
            store: Feature store the machine reads and commits to.
            min_trim_area: Smallest acceptable area after trimming.
            circle_steps: Vertex count used to rasterize circles.
        """
        self.store = store
        self.min_trim_area = min_trim_area
        self.circle_steps = circle_steps
        self._session: DrawingSession | None = None

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def mode(self) -> FeatureType | None:
        """Selected drawing mode."""
        return self.store.drawing_state.mode

    @property
    def state(self) -> SessionState:
        """Current machine state."""
        if self.mode is None:
            return SessionState.IDLE
        if self._session is None:
            return SessionState.ARMED
        return SessionState.ACTIVE

    @property
    def session(self) -> DrawingSession | None:
        """The in-progress session, if any."""
        return self._session

    @property
    def provisional_shape(self) -> ProvisionalShape | None:
        """Live preview of the in-progress shape."""
        if self._session is None:
            return None
        return self._session.preview()

    def render_snapshot(self) -> RenderSnapshot:
        """Read-only view of committed features and the live preview."""
        return build_snapshot(self.store.features, self.provisional_shape)

    # -------------------------------------------------------------------------
    # Mode handling
    # -------------------------------------------------------------------------

    def select_mode(self, mode: FeatureType | None) -> None:
        """Select a drawing mode, discarding any in-progress shape.

        Args:
            mode: Mode to arm, or None to deselect.
        """
        self.store.set_drawing_mode(mode)
        self._discard_session()
        logger.debug("Drawing mode selected", selected=mode.value if mode else None)

    def toggle_mode(self, mode: FeatureType) -> None:
        """Select `mode`, or deselect it when it is already selected."""
        self.select_mode(None if self.mode is mode else mode)

    def cancel(self) -> None:
        """Discard the in-progress shape and keep the mode selected."""
        if self._session is not None:
            logger.debug("Drawing cancelled")
        self._discard_session()

    def clear_all(self) -> None:
        """Remove every feature and return to IDLE."""
        self.store.clear()
        self._discard_session()
        logger.info("All features cleared")

    # -------------------------------------------------------------------------
    # Pointer events
    # -------------------------------------------------------------------------

    def click(self, point: LngLat) -> Outcome | None:
        """Handle a single click.

        In ARMED state the click starts a shape (after the capacity check).
        While ACTIVE it finishes a circle/rectangle or adds a polygon or line
        string vertex.

        Returns:
            A capacity Rejection when the shape could not be started, the
            commit Outcome when a circle/rectangle was finished, else None.
        """
        mode = self.mode
        if mode is None:
            return None

        session = self._session
        if session is None:
            return self._start_session(mode, point)

        if session.uses_anchor:
            session.cursor = point
            return self._finish_anchored(session, point)

        session.points.append(point)
        session.cursor = None
        logger.debug("Vertex added", vertices=len(session.points))
        return None

    def move(self, point: LngLat) -> None:
        """Handle pointer movement, updating the live preview while ACTIVE."""
        if self._session is not None:
            self._session.cursor = point

    def finish(self) -> Outcome | None:
        """Handle the finish signal for polygons and line strings.

        Returns:
            None when no polygon/line string is in progress, an
            INSUFFICIENT_VERTICES Rejection (session stays ACTIVE) when too
            few vertices were placed, else the commit Outcome.
        """
        session = self._session
        if session is None or session.uses_anchor:
            return None

        feature_type = session.feature_type
        positions = session.vertex_positions()
        geometry: Geometry
        if feature_type is FeatureType.POLYGON:
            if distinct_vertex_count(positions) < MIN_POLYGON_POINTS:
                return self._reject_vertices(feature_type)
            geometry = PolygonGeometry.from_ring(positions)
        else:
            if len(positions) < MIN_LINESTRING_POINTS:
                return self._reject_vertices(feature_type)
            geometry = LineStringGeometry(coordinates=tuple(positions))

        return self._commit(session, geometry)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _start_session(self, mode: FeatureType, point: LngLat) -> Rejection | None:
        if not self.store.has_capacity(mode):
            maximum = self.store.limits.for_type(mode)
            logger.warning(
                "Capacity reached, draw not started",
                feature_type=mode.value,
                maximum=maximum,
            )
            return Rejection.capacity_exceeded(mode, maximum)

        session = DrawingSession(feature_type=mode)
        if session.uses_anchor:
            session.anchor = point
        else:
            session.points.append(point)
        self._session = session
        self.store.set_is_drawing(True)
        set_correlation_context(session_id=session.session_id, mode=mode.value)
        logger.debug("Drawing started", lng=point.lng, lat=point.lat)
        return None

    def _finish_anchored(self, session: DrawingSession, point: LngLat) -> Outcome:
        anchor = session.anchor
        if anchor is None:  # pragma: no cover - anchored sessions always set it
            raise RuntimeError("anchored session without anchor")

        if session.feature_type is FeatureType.CIRCLE:
            radius = session.radius_m(point)
            if radius <= 0:
                return self._reject_vertices(session.feature_type)
            ring = circle_ring(anchor, radius, self.circle_steps)
        else:
            ring = rectangle_ring(anchor, point)

        if distinct_vertex_count(ring) < MIN_POLYGON_POINTS:
            return self._reject_vertices(session.feature_type)
        return self._commit(session, PolygonGeometry(coordinates=(ring,)))

    def _reject_vertices(self, feature_type: FeatureType) -> Rejection:
        logger.warning("Not enough vertices to finish", feature_type=feature_type.value)
        return Rejection.insufficient_vertices(feature_type)

    def _commit(self, session: DrawingSession, geometry: Geometry) -> Outcome:
        outcome = commit_candidate(
            self.store,
            session.feature_type,
            geometry,
            min_area=self.min_trim_area,
        )
        self._discard_session()
        return outcome

    def _discard_session(self) -> None:
        self._session = None
        self.store.set_is_drawing(False)
        clear_correlation_context()
        if self.mode is not None:
            set_correlation_context(mode=self.mode.value)
