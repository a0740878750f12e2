"""
GitHub API adapter.

This package provides integrations for GitHub API interactions.
"""

from src.integrations.github.statuses import FAILED_STATES, GitHubStatusClient

__all__ = [
    "FAILED_STATES",
    "GitHubStatusClient",
]
