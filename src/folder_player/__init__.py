"""Folder Player - browse a local directory and play its audio files."""

__version__ = "0.1.0"
