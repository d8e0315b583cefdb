"""GitHub remote for label sync."""

from ghlabel.github.client import (
    AuthError,
    GitHubLabelClient,
    RemoteError,
    RemoteLabelSource,
    TransportError,
)

__all__ = [
    "AuthError",
    "GitHubLabelClient",
    "RemoteError",
    "RemoteLabelSource",
    "TransportError",
]
