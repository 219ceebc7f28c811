"""Marketplace profile API."""

from .client import MarketplaceApiClient
from .parsing import parse_price, parse_profile, parse_service

__all__ = ["MarketplaceApiClient", "parse_price", "parse_profile", "parse_service"]
