# propease/api/v1/views.py
"""
Response shapes shared by several routers. Keys follow the browser
client's camelCase names; ids use each entity's own id key.
"""
from __future__ import annotations

from decimal import Decimal

from propease.core.clock import iso
from propease.services.bookings_service import gst_amount


def _num(value):
    return float(value) if isinstance(value, Decimal) else value


def project_resp(p) -> dict:
    return {
        "projectId": str(p.id),
        "projectName": p.project_name,
        "mahareraNo": p.maharera_no,
        "startDate": iso(p.start_date),
        "completionDate": iso(p.completion_date),
        "status": p.status,
        "progress": p.progress,
        "projectAddress": p.project_address,
        "letterHeadFileURL": p.letter_head_file_url,
        "createdAtIso": iso(p.created_at),
        "updatedAtIso": iso(p.updated_at),
    }


def wing_resp(w) -> dict:
    return {
        "wingId": str(w.id),
        "projectId": str(w.project_id),
        "wingName": w.wing_name,
        "noOfFloors": w.no_of_floors,
        "noOfProperties": w.no_of_properties,
    }


def floor_resp(f) -> dict:
    return {
        "floorId": str(f.id),
        "projectId": str(f.project_id),
        "wingId": str(f.wing_id),
        "floorNo": f.floor_no,
        "floorName": f.floor_name,
        "propertyType": f.property_type,
        "area": _num(f.area),
        "quantity": f.quantity,
    }


def flat_resp(f) -> dict:
    return {
        "propertyId": str(f.id),
        "projectId": str(f.project_id),
        "wingId": str(f.wing_id),
        "floorId": str(f.floor_id),
        "unitNumber": f.unit_number,
        "status": f.status,
        "area": _num(f.area),
        "bhk": f.bhk,
    }


def bank_resp(b) -> dict:
    return {
        "bankDetailId": str(b.id),
        "projectId": str(b.project_id),
        "bankName": b.bank_name,
        "branchName": b.branch_name,
        "contactPerson": b.contact_person,
        "contactNumber": b.contact_number,
        "ifsc": b.ifsc,
    }


def amenity_resp(a) -> dict:
    return {"amenityId": str(a.id), "projectId": str(a.project_id), "amenityName": a.amenity_name}


def document_resp(d) -> dict:
    return {
        "documentId": str(d.id),
        "projectId": str(d.project_id),
        "documentType": d.document_type,
        "documentTitle": d.document_title,
        "documentURL": d.document_url,
    }


def disbursement_resp(d) -> dict:
    return {
        "disbursementId": str(d.id),
        "projectId": str(d.project_id),
        "disbursementTitle": d.disbursement_title,
        "description": d.description,
        "percentage": _num(d.percentage),
    }


def client_resp(c) -> dict:
    return {
        "clientId": str(c.id),
        "clientName": c.client_name,
        "email": c.email,
        "mobileNumber": c.mobile_number,
        "dob": iso(c.dob),
        "city": c.city,
        "address": c.address,
        "occupation": c.occupation,
        "company": c.company,
        "panNo": c.pan_no,
        "aadharNo": c.aadhar_no,
        "createdAtIso": iso(c.created_at),
    }


def enquiry_resp(e) -> dict:
    return {
        "enquiryId": str(e.id),
        "projectId": str(e.project_id),
        "clientId": str(e.client_id),
        "propertyId": str(e.property_id),
        "budget": e.budget,
        "reference": e.reference,
        "referenceName": e.reference_name,
        "status": e.status,
        "createdAtIso": iso(e.created_at),
        "updatedAtIso": iso(e.updated_at),
    }


def remark_resp(r) -> dict:
    return {
        "remarkId": str(r.id),
        "enquiryId": str(r.enquiry_id),
        "body": r.body,
        "author": r.author,
        "createdAtIso": iso(r.created_at),
    }


def booking_resp(b) -> dict:
    return {
        "bookingId": str(b.id),
        "projectId": str(b.project_id),
        "clientId": str(b.client_id),
        "propertyId": str(b.property_id),
        "enquiryId": str(b.enquiry_id) if b.enquiry_id else None,
        "bookingAmount": _num(b.booking_amount),
        "agreementAmount": _num(b.agreement_amount),
        "gstPercentage": _num(b.gst_percentage),
        "gstAmount": _num(gst_amount(b.agreement_amount, b.gst_percentage)),
        "bookingDate": iso(b.booking_date),
        "chequeNo": b.cheque_no,
        "isRegistered": bool(b.is_registered),
        "registrationDate": iso(b.registration_date),
        "isCancelled": bool(b.is_cancelled),
        "cancellationReason": b.cancellation_reason,
        "cancelledAtIso": iso(b.cancelled_at),
        "createdAtIso": iso(b.created_at),
    }


def follow_up_resp(fu, info: dict | None = None) -> dict:
    out = {
        "followUpId": str(fu.id),
        "enquiryId": str(fu.enquiry_id),
        "followUpDate": iso(fu.follow_up_date),
        "followUpTime": fu.follow_up_time,
        "status": fu.status,
        "notes": fu.notes,
        "agentName": fu.agent_name,
        "completedAtIso": iso(fu.completed_at),
        "createdAtIso": iso(fu.created_at),
    }
    if info is not None:
        out.update(info)
    return out


def node_resp(n) -> dict:
    return {
        "followUpNodeId": str(n.id),
        "followUpId": str(n.follow_up_id),
        "followUpDateTime": iso(n.follow_up_date_time),
        "body": n.body,
        "agentName": n.agent_name,
    }


def notification_resp(n) -> dict:
    return {
        "notificationId": str(n.id),
        "notificationType": n.notification_type,
        "title": n.title,
        "message": n.message,
        "refId": n.ref_id,
        "isRead": bool(n.is_read),
        "createdAtIso": iso(n.created_at),
    }


def user_resp(u) -> dict:
    return {
        "userId": str(u.id),
        "username": u.username,
        "fullName": u.full_name,
        "email": u.email,
        "mobileNumber": u.mobile_number,
        "role": u.role,
        "enabled": bool(u.enabled),
    }
