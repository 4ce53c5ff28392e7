# Importing the package registers every table on Base.metadata.
from propease.models.user import User
from propease.models.project import Project, Wing, Floor, Flat
from propease.models.project_info import BankDetail, Amenity, Document, Disbursement
from propease.models.client import Client
from propease.models.enquiry import Enquiry, EnquiryRemark
from propease.models.booking import Booking
from propease.models.follow_up import FollowUp, FollowUpNode
from propease.models.notification import Notification
from propease.models.activity_log import ActivityLog

__all__ = [
    "User",
    "Project",
    "Wing",
    "Floor",
    "Flat",
    "BankDetail",
    "Amenity",
    "Document",
    "Disbursement",
    "Client",
    "Enquiry",
    "EnquiryRemark",
    "Booking",
    "FollowUp",
    "FollowUpNode",
    "Notification",
    "ActivityLog",
]
