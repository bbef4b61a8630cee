"""Catalog API - hierarchical product catalog backend."""
