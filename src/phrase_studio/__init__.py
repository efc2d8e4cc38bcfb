"""Phrase Studio: thumbnail phrase generation behind session gating and usage quotas."""

__version__ = "0.1.0"
