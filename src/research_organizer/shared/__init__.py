"""Shared utilities: exceptions, settings, run slot and progress events."""
