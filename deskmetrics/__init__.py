"""Read-only metrics, SLA and reporting engine for service-desk dashboards."""

__version__ = "0.1.0"
