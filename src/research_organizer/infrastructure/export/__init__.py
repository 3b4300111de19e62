"""Tabular export of search results."""
