"""sshman - manage SSH keys and the agents that hold them."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("sshman")
except PackageNotFoundError:  # running from a source checkout
    __version__ = "0.0.0"
