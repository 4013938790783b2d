"""User Manual Catalog API."""
