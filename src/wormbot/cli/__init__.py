"""Command line interface for wormbot."""
