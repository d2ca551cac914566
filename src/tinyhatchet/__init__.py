"""tinyhatchet: terminal client for the tinyhatchet log-management service."""

__version__ = "0.4.0"
