"""Mystic Quest - a terminal treasure hunt with an LLM Oracle."""

__version__ = '0.1.0'
