"""HTTP clients for the product-matching service."""

from .base_client import BaseAPIClient
from .product_matching_client import ProductMatchingClient

__all__ = ["BaseAPIClient", "ProductMatchingClient"]
