"""
Adapters layer - External integrations (platform availability API).
"""

from .api_client import AvailabilityApiClient
from .in_memory_gateway import InMemoryAvailabilityGateway

__all__ = ["AvailabilityApiClient", "InMemoryAvailabilityGateway"]
