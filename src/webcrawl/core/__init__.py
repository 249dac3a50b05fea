"""Core crawler components."""

from .fetcher import HttpFetcher, fetch_body
from .protocols import Fetcher, Response

__all__ = ["Fetcher", "Response", "HttpFetcher", "fetch_body"]
