"""Shared utilities (configuration) for wavewatch."""
