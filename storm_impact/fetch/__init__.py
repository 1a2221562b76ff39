"""Download of the raw Storm Data corpus."""
