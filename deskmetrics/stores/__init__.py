"""Read-only store adapters over the relational and conversation stores."""

from deskmetrics.stores.sources import DataSources, get_data_sources

__all__ = ["DataSources", "get_data_sources"]
