"""Error tracking client: capture exceptions, messages and breadcrumbs and post them as JSON to an ingest endpoint."""

__version__ = "0.1.0"
__all__ = ["client", "middleware", "osinfo", "stack", "tracker", "types"]