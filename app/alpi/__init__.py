"""alpi - idempotent Arch Linux provisioning for the niri Wayland desktop.

Deploys dotfiles from a git repository as symlinks, records everything it
creates in a state ledger and can verify or reverse a deployment.
"""

__version__ = "0.3.0"
