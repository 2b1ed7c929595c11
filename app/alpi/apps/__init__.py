"""Application layer: qutebrowser config and LazyVim bootstrap."""

from alpi.apps.neovim import LazyVimAction, LazyVimResult, bootstrap_lazyvim
from alpi.apps.qutebrowser import QutebrowserResult, configure_qutebrowser

__all__ = [
    "LazyVimAction",
    "LazyVimResult",
    "QutebrowserResult",
    "bootstrap_lazyvim",
    "configure_qutebrowser",
]
