"""Bundled data files (theme, qutebrowser templates)."""
