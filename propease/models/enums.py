# propease/models/enums.py
from __future__ import annotations
from enum import Enum


class Role(str, Enum):
    ADMIN = "ADMIN"
    EMPLOYEE = "EMPLOYEE"


class ProjectStatus(str, Enum):
    UPCOMING = "UPCOMING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class FlatStatus(str, Enum):
    # VACANT -> BOOKED -> REGISTERED, BOOKED -> VACANT on cancellation
    VACANT = "VACANT"
    BOOKED = "BOOKED"
    REGISTERED = "REGISTERED"


class EnquiryStatus(str, Enum):
    ONGOING = "ONGOING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class FollowUpStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"


class DocumentType(str, Enum):
    FLOOR_PLAN = "FloorPlan"
    BASEMENT_PLAN = "BasementPlan"


class NotificationType(str, Enum):
    ENQUIRY_FOLLOWUP = "ENQUIRY_FOLLOWUP"
    PAYMENT_FOLLOWUP = "PAYMENT_FOLLOWUP"
    DEMAND_LETTER = "DEMAND_LETTER"
