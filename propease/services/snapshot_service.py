# propease/services/snapshot_service.py
"""
Whole-store export/import in the browser client's storage layout.

The document holds one array per entity under fixed keys. Records use the
client's camelCase field names and carry their id under the
entity's own id key (`projectId`, `propertyId` for flats, ...). Soft-deleted
rows are included with `isDeleted: true`. User accounts are never exported.
"""
from __future__ import annotations

import logging
import re
import uuid
from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Mapping, Tuple, Type

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from propease.core import clock
from propease.core.config import get_settings
from propease.core.errors import InvalidInput
from propease.models import (
    ActivityLog, Amenity, BankDetail, Booking, Client, Disbursement, Document, Enquiry,
    EnquiryRemark, Flat, Floor, FollowUp, FollowUpNode, Notification, Project, Wing,
)
from propease.policies.rbac import Principal
from propease.services.activity_service import ActivityAction, record_activity
from propease.services.bookings_service import sync_unit_status
from propease.services.enquiries_service import render_remark_log

log = logging.getLogger(__name__)

# parents before children; import inserts in this order, deletes in reverse
SNAPSHOT_TABLES: Tuple[Tuple[str, Type, str], ...] = (
    ("projects", Project, "projectId"),
    ("clients", Client, "clientId"),
    ("wings", Wing, "wingId"),
    ("floors", Floor, "floorId"),
    ("flats", Flat, "propertyId"),
    ("disbursements", Disbursement, "disbursementId"),
    ("bankDetails", BankDetail, "bankDetailId"),
    ("documents", Document, "documentId"),
    ("amenities", Amenity, "amenityId"),
    ("enquiries", Enquiry, "enquiryId"),
    ("bookings", Booking, "bookingId"),
    ("followUps", FollowUp, "followUpId"),
    ("followUpNodes", FollowUpNode, "followUpNodeId"),
    ("notifications", Notification, "notificationId"),
    ("activityLog", ActivityLog, "activityId"),
)

FIELD_OVERRIDES = {
    "letter_head_file_url": "letterHeadFileURL",
    "document_url": "documentURL",
    "details_json": "details",
}

STAMP_LINE = re.compile(r"^\[(\d{2}/\d{2}/\d{4}, \d{2}:\d{2}:\d{2})\] ?(.*)$")


def _camel(name: str) -> str:
    if name in FIELD_OVERRIDES:
        return FIELD_OVERRIDES[name]
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _export_value(value: Any) -> Any:
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    return value


def _import_value(python_type: type, value: Any) -> Any:
    if value is None or value == "":
        return None
    if python_type is uuid.UUID:
        return value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))
    if python_type is datetime:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if python_type is date:
        return date.fromisoformat(str(value)[:10])
    if python_type is Decimal:
        return Decimal(str(value))
    if python_type is int:
        return int(value)
    if python_type is bool:
        return bool(value)
    return value


def _columns(model) -> List[Tuple[str, Any]]:
    return [(col.key, col) for col in model.__table__.columns]


def parse_remark_log(text: str) -> List[Tuple[datetime | None, str]]:
    """
    Split the legacy "[dd/mm/yyyy, HH:MM:SS] body" log into entries.
    Lines without a stamp continue the previous entry.
    """
    entries: List[Tuple[datetime | None, str]] = []
    for line in (text or "").splitlines():
        match = STAMP_LINE.match(line)
        if match:
            local = datetime.strptime(match.group(1), "%d/%m/%Y, %H:%M:%S")
            entries.append((local, match.group(2)))
        elif entries:
            stamp, body = entries[-1]
            entries[-1] = (stamp, f"{body}\n{line}")
        elif line.strip():
            entries.append((None, line))
    return entries


class SnapshotService:
    def export(self, db: Session) -> Dict[str, Any]:
        data: Dict[str, List[Dict[str, Any]]] = {}
        for key, model, id_key in SNAPSHOT_TABLES:
            rows = db.execute(select(model).order_by(model.created_at, model.id)).scalars().all()
            data[key] = [self._record(db, model, id_key, row) for row in rows]

        return {
            "storageKey": get_settings().snapshot_storage_key,
            "exportedAtIso": clock.iso(clock.utcnow()),
            "data": data,
        }

    def _record(self, db: Session, model, id_key: str, row) -> Dict[str, Any]:
        out: Dict[str, Any] = {id_key: str(row.id)}
        for name, _ in _columns(model):
            if name == "id":
                continue
            out[_camel(name)] = _export_value(getattr(row, name))
        if model is Enquiry:
            remarks = db.execute(
                select(EnquiryRemark)
                .where(EnquiryRemark.enquiry_id == row.id)
                .order_by(EnquiryRemark.created_at, EnquiryRemark.id)
            ).scalars().all()
            out["remark"] = render_remark_log(remarks)
        return out

    def import_(self, db: Session, *, actor: Principal, document: Mapping[str, Any]) -> Dict[str, int]:
        """
        Replace every entity table with the document's contents in one
        transaction. Unit statuses are re-derived from the imported bookings.
        """
        data = document.get("data", document)
        if not isinstance(data, Mapping):
            raise InvalidInput("Snapshot must be a JSON object")

        staged: List[Tuple[str, List[Any]]] = []
        remark_logs: List[Tuple[uuid.UUID, List[Tuple[datetime | None, str]]]] = []
        for key, model, id_key in SNAPSHOT_TABLES:
            records = data.get(key) or []
            if not isinstance(records, list):
                raise InvalidInput(f"{key} must be a list")
            rows = []
            for index, record in enumerate(records):
                row = self._row(model, id_key, key, index, record)
                if model is Enquiry and record.get("remark"):
                    try:
                        entries = parse_remark_log(str(record["remark"]))
                    except ValueError:
                        raise InvalidInput(f"{key}[{index}].remark: invalid timestamp")
                    remark_logs.append((row.id, entries))
                rows.append(row)
            staged.append((key, rows))

        for _, model, _ in reversed(SNAPSHOT_TABLES):
            if model is Enquiry:
                db.execute(delete(EnquiryRemark))
            db.execute(delete(model))

        counts: Dict[str, int] = {}
        try:
            for key, rows in staged:
                db.add_all(rows)
                db.flush()
                counts[key] = len(rows)
            for enquiry_id, entries in remark_logs:
                # stamps have second precision; keep log order on ties
                for position, (stamp, body) in enumerate(entries):
                    db.add(
                        EnquiryRemark(
                            enquiry_id=enquiry_id,
                            body=body,
                            created_at=self._local_to_utc(stamp) + timedelta(microseconds=position),
                        )
                    )
            db.flush()
        except IntegrityError as e:
            db.rollback()
            raise InvalidInput(f"Snapshot is not consistent: {e.orig}")

        for flat in db.execute(select(Flat).where(Flat.is_deleted.is_(False))).scalars().all():
            sync_unit_status(db, flat)

        record_activity(
            db,
            actor=actor,
            action=ActivityAction.SNAPSHOT_IMPORTED,
            entity="snapshot",
            details=counts,
        )
        db.commit()
        log.info("snapshot_imported", extra={"counts": counts})
        return counts

    def _row(self, model, id_key: str, key: str, index: int, record: Any):
        if not isinstance(record, Mapping):
            raise InvalidInput(f"{key}[{index}] must be an object")

        values: Dict[str, Any] = {}
        for name, column in _columns(model):
            source = id_key if name == "id" else _camel(name)
            if source not in record:
                continue
            try:
                values[name] = _import_value(column.type.python_type, record[source])
            except (ValueError, TypeError, InvalidOperation):
                raise InvalidInput(f"{key}[{index}].{source}: invalid value")

        values.setdefault("id", uuid.uuid4())
        if "is_deleted" in values and values["is_deleted"] is None:
            values["is_deleted"] = False
        return model(**values)

    def _local_to_utc(self, stamp: datetime | None) -> datetime:
        if stamp is None:
            return clock.utcnow()
        return clock.from_local(stamp)
