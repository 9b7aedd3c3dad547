"""Unit tests (mocked store)."""
