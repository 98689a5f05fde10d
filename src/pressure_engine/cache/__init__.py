"""
Cache Module
============

Modification-time keyed cache of analysed recordings.
"""

from pressure_engine.cache.file_cache import FileCache, FrameLoader

__all__ = ["FileCache", "FrameLoader"]
