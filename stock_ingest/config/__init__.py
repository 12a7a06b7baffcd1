"""Catalog loading and validation."""
