"""Core engine: ledger, path mapping, symlink sync, verify and uninstall."""
