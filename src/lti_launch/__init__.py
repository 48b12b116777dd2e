"""LTI 1.x launch endpoint with OAuth 1.0 HMAC-SHA1 signature verification."""

__version__ = "0.1.0"
