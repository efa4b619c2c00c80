"""
TDX Ingest Service
Pulls tickets from the TDX REST API under a request budget

Components:
- client.py: TDXClient for authenticated, throttled API calls
- rate_limiter.py: TokenBucket that refills once per window
- cli.py: Command-line access to single tickets, feeds and searches
"""

from .client import TDXClient
from .rate_limiter import TokenBucket

__all__ = ["TDXClient", "TokenBucket"]
