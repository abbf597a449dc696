"""Incident service access: query construction and the HTTP client."""

from src.pagerduty.client import ServiceClient
from src.pagerduty.query import build_incidents_query

__all__ = ["ServiceClient", "build_incidents_query"]
