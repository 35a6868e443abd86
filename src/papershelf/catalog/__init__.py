"""Catalog snapshot, filename parsing and sidecar descriptors."""
