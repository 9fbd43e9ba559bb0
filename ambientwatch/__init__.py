"""AmbientWatch: terminal dashboard for a local air-quality monitor."""

__version__ = "0.1.0"
