"""
Business logic services.
"""
from poi_gateway.services.sync_service import SyncService, NO_PENDING_OBJECT

__all__ = [
    "SyncService",
    "NO_PENDING_OBJECT",
]
