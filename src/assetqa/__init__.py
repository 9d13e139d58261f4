"""assetqa — UI test suite for the mobile Assets module."""

__version__ = "0.1.0"
