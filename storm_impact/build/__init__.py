"""Aggregation and ranking of outcome measures."""
