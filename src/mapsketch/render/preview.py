"""PNG preview rendering of a render snapshot.

Stands in for the map surface when working headless (CLI, tests, reports):
committed polygons are filled and outlined in their display color, line
strings are drawn as polylines, and the shape being drawn is outlined on
top. Each feature is labelled with its type at its vertex centroid.

The view is fitted to the extent of everything in the snapshot. Longitude
maps to x and latitude to y (flipped so north is up) with one common scale,
which is a plate carree view rather than a web-mercator one.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from PIL import Image, ImageColor, ImageDraw, ImageFont

from mapsketch.geometry.primitives import LineStringGeometry, LngLat, Position
from mapsketch.geometry.shapes import circle_ring
from mapsketch.render.snapshot import ProvisionalShape, RenderSnapshot
from mapsketch.store.features import FeatureType

logger = logging.getLogger(__name__)

Pixel = tuple[float, float]

_MIN_EXTENT = 1e-9


@dataclass(frozen=True)
class PreviewStyle:
    """Visual styling of the preview image.

    Attributes:
        background: RGBA background color.
        fill_alpha: Alpha (0-255) of polygon fills.
        outline_width: Width of polygon outlines in pixels.
        line_width: Width of line strings in pixels.
        provisional_width: Width of the in-progress shape outline.
        padding: Margin around the fitted extent, as a fraction of it.
        label_color: RGBA color for feature labels (None disables labels).
        font_size: Font size for feature labels.
        strict_font_check: If True, raise error if no TrueType font is found.
    """

    background: tuple[int, int, int, int] = (255, 255, 255, 255)
    fill_alpha: int = 77  # 30% opacity
    outline_width: int = 2
    line_width: int = 3
    provisional_width: int = 2
    padding: float = 0.05
    label_color: tuple[int, int, int, int] | None = (17, 24, 39, 255)
    font_size: int = 12
    strict_font_check: bool = False


@dataclass(frozen=True)
class ViewTransform:
    """Maps lon/lat positions into image pixels."""

    min_lng: float
    max_lat: float
    scale: float
    offset_x: float
    offset_y: float

    @classmethod
    def fit(
        cls,
        positions: Sequence[Position],
        size: tuple[int, int],
        padding: float,
    ) -> ViewTransform:
        """Fit all positions into an image of `size`, keeping aspect ratio."""
        width, height = size
        if not positions:
            return cls(min_lng=0.0, max_lat=0.0, scale=1.0, offset_x=0.0, offset_y=0.0)

        lngs = [p[0] for p in positions]
        lats = [p[1] for p in positions]
        span_lng = max(lngs) - min(lngs)
        span_lat = max(lats) - min(lats)
        pad = max(span_lng, span_lat) * padding
        min_lng, max_lng = min(lngs) - pad, max(lngs) + pad
        min_lat, max_lat = min(lats) - pad, max(lats) + pad

        # A single point or a flat extent still needs a finite scale
        extent_lng = max(max_lng - min_lng, _MIN_EXTENT)
        extent_lat = max(max_lat - min_lat, _MIN_EXTENT)
        scale = min(width / extent_lng, height / extent_lat)
        offset_x = (width - (max_lng - min_lng) * scale) / 2
        offset_y = (height - (max_lat - min_lat) * scale) / 2
        return cls(
            min_lng=min_lng,
            max_lat=max_lat,
            scale=scale,
            offset_x=offset_x,
            offset_y=offset_y,
        )

    def to_pixel(self, position: Position) -> Pixel:
        lng, lat = position
        x = self.offset_x + (lng - self.min_lng) * self.scale
        y = self.offset_y + (self.max_lat - lat) * self.scale
        return (x, y)

    def to_pixels(self, positions: Sequence[Position]) -> list[Pixel]:
        return [self.to_pixel(p) for p in positions]


def provisional_outline(shape: ProvisionalShape) -> tuple[Position, ...]:
    """Positions to draw for an in-progress shape.

    Circles are rasterized from their centre and radius; an empty tuple is
    returned for a circle without radius yet.
    """
    if shape.type is FeatureType.CIRCLE:
        if shape.center is None or not shape.radius_m:
            return ()
        return circle_ring(LngLat.from_tuple(shape.center), shape.radius_m)
    return shape.coordinates


class PreviewRenderer:
    """Renders render snapshots into RGBA images."""

    def __init__(self, style: PreviewStyle | None = None) -> None:
        """Initialize the renderer with optional custom styling.

        Args:
            style: Visual styling configuration. Uses defaults if not provided.
        """
        self.style = style or PreviewStyle()

    def render(
        self,
        snapshot: RenderSnapshot,
        size: tuple[int, int] = (800, 600),
    ) -> Image.Image:
        """Draw a snapshot.

        Args:
            snapshot: Features and live preview to draw.
            size: (width, height) of the output image in pixels.

        Returns:
            RGBA PIL Image.

        Raises:
            ValueError: If size contains non-positive values.
            RuntimeError: If strict_font_check is True and no valid font found.
        """
        if size[0] <= 0 or size[1] <= 0:
            raise ValueError(f"size must be positive, got {size}")

        outline: tuple[Position, ...] = ()
        if snapshot.provisional is not None:
            outline = provisional_outline(snapshot.provisional)

        view = ViewTransform.fit(
            [*snapshot.positions(), *outline], size, self.style.padding
        )

        image = Image.new("RGBA", size, self.style.background)
        # Fills go on their own layer so overlapping alpha blends correctly
        fills = Image.new("RGBA", size, (0, 0, 0, 0))
        fill_draw = ImageDraw.Draw(fills)
        draw = ImageDraw.Draw(image)

        for feature in snapshot.features:
            rgb = ImageColor.getrgb(feature.color)[:3]
            if isinstance(feature.geometry, LineStringGeometry):
                draw.line(
                    view.to_pixels(feature.geometry.coordinates),
                    fill=(*rgb, 204),
                    width=self.style.line_width,
                )
                continue
            exterior = view.to_pixels(feature.geometry.exterior)
            fill_draw.polygon(exterior, fill=(*rgb, self.style.fill_alpha))
            for hole in feature.geometry.holes:
                fill_draw.polygon(view.to_pixels(hole), fill=(0, 0, 0, 0))

        image = Image.alpha_composite(image, fills)
        draw = ImageDraw.Draw(image)

        for feature in snapshot.features:
            if isinstance(feature.geometry, LineStringGeometry):
                continue
            rgb = ImageColor.getrgb(feature.color)[:3]
            for ring in feature.geometry.coordinates:
                draw.line(
                    view.to_pixels(ring),
                    fill=(*rgb, 255),
                    width=self.style.outline_width,
                )

        if len(outline) >= 2 and snapshot.provisional is not None:
            rgb = ImageColor.getrgb(snapshot.provisional.color)[:3]
            draw.line(
                view.to_pixels(outline),
                fill=(*rgb, 255),
                width=self.style.provisional_width,
            )

        if self.style.label_color is not None and snapshot.features:
            font = self._get_font()
            for feature in snapshot.features:
                positions = (
                    feature.geometry.coordinates
                    if isinstance(feature.geometry, LineStringGeometry)
                    else feature.geometry.exterior[:-1]
                )
                self._draw_label(
                    draw,
                    feature.type.value,
                    view.to_pixel(_centroid(positions)),
                    font,
                )

        return image

    def _get_font(self) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
        """Get font for labels, with fallback to default.

        Raises:
            RuntimeError: If strict_font_check is True and no TrueType font found.
        """
        try:
            return ImageFont.truetype("DejaVuSans.ttf", self.style.font_size)
        except OSError:
            try:
                return ImageFont.truetype("Arial.ttf", self.style.font_size)
            except OSError:
                if self.style.strict_font_check:
                    raise RuntimeError(
                        "No TrueType fonts available (DejaVuSans.ttf, Arial.ttf). "
                        "Strict font check is enabled. Install system fonts."
                    ) from None
                logger.warning(
                    "No TrueType fonts available (DejaVuSans.ttf, Arial.ttf). "
                    "Using low-resolution default font."
                )
                return ImageFont.load_default()

    def _draw_label(
        self,
        draw: ImageDraw.ImageDraw,
        text: str,
        position: Pixel,
        font: ImageFont.FreeTypeFont | ImageFont.ImageFont,
    ) -> None:
        """Draw a centred label with a light halo for visibility."""
        x, y = position
        halo = (255, 255, 255, 200)
        for dx, dy in [(1, 1), (-1, -1), (1, -1), (-1, 1)]:
            draw.text((x + dx, y + dy), text, fill=halo, font=font, anchor="mm")
        draw.text(position, text, fill=self.style.label_color, font=font, anchor="mm")


def _centroid(positions: Sequence[Position]) -> Position:
    """Vertex average, good enough to place a label."""
    if not positions:
        return (0.0, 0.0)
    return (
        sum(p[0] for p in positions) / len(positions),
        sum(p[1] for p in positions) / len(positions),
    )
