"""Markforge - Deterministic vector geometry for brand marks and wordmarks.

Markforge turns glyph outlines and parametric motif descriptions into
SVG-compatible path outlines, then edits those outlines with even-odd Boolean
cuts and unions to add letter-level devices (notches, seams, ligature bridges).

Example:
    $ markforge motif mark.json -o mark.svg

This will build the motif mark described by mark.json and write a path-only
SVG document.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
