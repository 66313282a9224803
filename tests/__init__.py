"""Test package for travel-map-lod.

This package contains:
- Unit tests per module (test_normalization.py, test_levels.py, ...)
- End-to-end clustering tests (test_clustering.py)
- Test configuration (conftest.py)
"""
