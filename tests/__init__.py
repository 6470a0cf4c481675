"""Tests for kitpull."""
