"""Image file writers and a layout-agnostic text-editing engine."""

__version__ = "0.1.0"