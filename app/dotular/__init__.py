"""dotular - modular, cross-platform dotfile and machine-state manager."""

__version__ = "0.4.0"
