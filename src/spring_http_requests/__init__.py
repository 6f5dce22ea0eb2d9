"""Scaffold .http requests from Spring endpoint signatures."""

__version__ = "0.1.0"
