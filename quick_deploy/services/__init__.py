"""Provider API clients for Quick Deploy."""

from quick_deploy.services.fastly import FastlyClient
from quick_deploy.services.github import GitHubClient

__all__ = [
    "FastlyClient",
    "GitHubClient",
]
