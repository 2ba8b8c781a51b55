"""pagesmith — content ingestion core for a static site generator."""

__version__ = "0.1.0"
