"""GitHub REST access shared by the scanner and the issue creator."""

from pubwon.engines.github.client import (
    GitHubAuthError,
    GitHubClient,
    GitHubError,
    GitHubNetworkError,
    GitHubNotFoundError,
    GitHubValidationError,
    RateLimitError,
)

__all__ = [
    "GitHubAuthError",
    "GitHubClient",
    "GitHubError",
    "GitHubNetworkError",
    "GitHubNotFoundError",
    "GitHubValidationError",
    "RateLimitError",
]
