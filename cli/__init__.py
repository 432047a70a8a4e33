"""Command line tools for mlpnet."""
