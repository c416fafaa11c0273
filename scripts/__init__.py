"""Developer entrypoints."""
