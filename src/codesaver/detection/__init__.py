"""Heading and code-block detection."""
