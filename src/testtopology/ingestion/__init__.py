"""Ingestion of test sources and call-graph payloads."""
