"""Remote sources package - async clients for the third-party APIs."""

from cyberpulse.remote.base import ApiClient
from cyberpulse.remote.ctftime import CtfTimeClient
from cyberpulse.remote.hibp import HibpClient
from cyberpulse.remote.news import NewsApiClient
from cyberpulse.remote.nvd import NvdClient
from cyberpulse.remote.search import GitHubSearchClient, RedditSearchClient

__all__ = [
    "ApiClient",
    "NewsApiClient",
    "HibpClient",
    "NvdClient",
    "CtfTimeClient",
    "GitHubSearchClient",
    "RedditSearchClient",
]
