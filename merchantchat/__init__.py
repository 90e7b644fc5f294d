"""merchantchat - Merchant assistant agent served over HTTP with interleaved status streaming."""

__version__ = "0.1.0"
