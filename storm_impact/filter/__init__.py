"""Splitting of normalized records into health and economic subsets."""
