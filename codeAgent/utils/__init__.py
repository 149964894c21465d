"""Utility modules for codeAgent."""
