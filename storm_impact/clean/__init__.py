"""Event type and damage unit normalization."""
