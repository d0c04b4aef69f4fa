"""recogate: resilient client for a remote recommendation API."""

__version__ = "1.0.0"
