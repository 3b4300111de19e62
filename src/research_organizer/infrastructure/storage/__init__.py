"""Local document storage."""
