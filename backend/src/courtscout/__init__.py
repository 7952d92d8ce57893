"""CourtScout: tennis court availability gateway for Israel Tennis Centers."""

__version__ = "0.1.0"
