"""Textual screens of the World Studio TUI."""
