"""
Line change markers for live documents.

Aligns the lines of an edited document with a version-control baseline
and classifies each current line as unchanged, added or modified, for
gutter markers, overview rulers and blame targeting.
"""

__version__ = "1.0.0"
