"""Club roster ingestion, enrichment and squad improvement tooling."""

__version__ = "0.1.0"
