"""certgate: short-lived SSH certificates behind an identity provider."""

__version__ = "0.1.0"
