"""warden: watch files and rerun scoped plugins on change."""

__version__ = "0.4.0"
