"""Command line interface for changelog-py."""
