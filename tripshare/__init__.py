"""Tripshare callable functions: plan invitations and membership maintenance."""

from tripshare.version import __version__

__all__ = ["__version__"]
