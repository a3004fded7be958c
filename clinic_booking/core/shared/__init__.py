"""Shared utilities used across domains."""
