"""ECB daily reference rates: parsing, rebasing and conversion."""

__version__ = "0.1.0"
