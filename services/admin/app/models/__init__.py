"""ORM models for every table the admin service reads or writes."""
from app.models.audit import ModerationAuditEntry
from app.models.history import VehicleHistoryEvent
from app.models.marketplace import OwnershipClaim, VehicleListing, VehicleTransfer
from app.models.role import UserRole
from app.models.suspension import UserSuspension
from app.models.vehicle import Document, Vehicle

__all__ = [
    "Document",
    "ModerationAuditEntry",
    "OwnershipClaim",
    "UserRole",
    "UserSuspension",
    "Vehicle",
    "VehicleHistoryEvent",
    "VehicleListing",
    "VehicleTransfer",
]
