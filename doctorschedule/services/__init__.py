"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .availability_service import AvailabilityService
from .gateway import (
    AvailabilityGateway,
    OverrideDeleteResult,
    OverrideWriteResult,
    TemplateSaveResult,
)

__all__ = [
    "AvailabilityGateway",
    "AvailabilityService",
    "OverrideDeleteResult",
    "OverrideWriteResult",
    "TemplateSaveResult",
]
