"""Packaged data resources (contraction tables)."""
