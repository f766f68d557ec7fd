"""
Rendering Layer - Serializes structured notes (JSON, CSV, Markdown).
"""

from clinote.rendering.renderer import (
    render_notes,
    render_json,
    render_csv_wide,
    render_csv_long,
    render_markdown,
)

__all__ = [
    "render_notes",
    "render_json",
    "render_csv_wide",
    "render_csv_long",
    "render_markdown",
]
