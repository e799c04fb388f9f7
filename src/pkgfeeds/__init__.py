"""Upstream version checks for locally packaged software."""
