"""Decompressors for legacy Microsoft setup files, a DEFLATE inflater and CD-ROM structure readers."""

__version__ = "0.1.0"