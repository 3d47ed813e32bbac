"""Fetch a single configured S3 object and return it as text."""

__version__ = "1.0.0"
