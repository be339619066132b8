"""Rendering module for mapsketch.

Provides the read-only render snapshot handed to map collaborators and a
PNG preview renderer for headless use.
"""

from mapsketch.render.preview import PreviewRenderer, PreviewStyle, ViewTransform
from mapsketch.render.snapshot import (
    ProvisionalShape,
    RenderedFeature,
    RenderSnapshot,
    build_snapshot,
)

__all__ = [
    "PreviewRenderer",
    "PreviewStyle",
    "ProvisionalShape",
    "RenderSnapshot",
    "RenderedFeature",
    "ViewTransform",
    "build_snapshot",
]
