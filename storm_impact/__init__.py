"""Storm event impact analysis: which weather events hurt people and property most."""

__version__ = "0.1.0"
