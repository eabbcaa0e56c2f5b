"""hostwatch — asynchronous reverse-DNS resolver with live notifications."""

__version__ = "0.1.0"
