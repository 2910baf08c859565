"""
PyQt6 user interface: an editor with a change-marker gutter and overview bar.
"""
