"""Command line interface for CodeSense."""
