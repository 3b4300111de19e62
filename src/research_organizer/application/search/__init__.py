"""Reference paper search."""
