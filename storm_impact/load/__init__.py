"""Reading and typing of the raw Storm Data source."""
