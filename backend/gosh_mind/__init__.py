"""GOSH-MIND - conversation relay backend for the voice/text chat client."""

__version__ = "1.0.0"
