"""Test suite for modcache.

Test Structure:
- unit/: Unit tests for individual components (io, caching, fetch, config, utils)
- integration/: End-to-end fetch/cache workflows on the real filesystem
- conftest.py: Shared fixtures (fake filesystem, stores, mock HTTP handlers)
"""
