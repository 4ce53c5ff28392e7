# propease/services/projects_service.py
from __future__ import annotations

import logging
import uuid
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from propease.core.config import get_settings
from propease.core.errors import InvalidInput
from propease.core.validation import check, check_percentage_total, is_blank, require
from propease.models.enums import DocumentType, FlatStatus, ProjectStatus
from propease.models.project import Flat, Floor, Project, Wing
from propease.models.project_info import Amenity, BankDetail, Disbursement, Document
from propease.policies.rbac import Principal
from propease.services import store
from propease.services.activity_service import ActivityAction, record_activity

log = logging.getLogger(__name__)

BASIC_REQUIRED = ("project_name", "maharera_no", "start_date", "completion_date")

DEFAULT_PROPERTY_TYPE = "Residential"
DEFAULT_UNIT_AREA = Decimal("1000")
DEFAULT_BHK = "2BHK"
PLACEHOLDER_URL = "/placeholder.svg"

PROJECT_STATUSES = {s.value for s in ProjectStatus}
DOCUMENT_TYPES = {t.value for t in DocumentType}


def floor_name(floor_no: int) -> str:
    """0 -> Ground, 1 -> 1st, 2 -> 2nd, 11 -> 11th, 21 -> 21st."""
    if floor_no == 0:
        return "Ground"
    if 10 <= floor_no % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(floor_no % 10, "th")
    return f"{floor_no}{suffix}"


def spread_units(no_of_properties: int, no_of_floors: int) -> List[int]:
    """
    Units per floor, as even as possible; the remainder goes to the lower
    floors so the total always equals `no_of_properties`.
    """
    base, extra = divmod(no_of_properties, no_of_floors)
    return [base + (1 if i < extra else 0) for i in range(no_of_floors)]


def _positive_int(value: Any, message: str) -> int:
    try:
        n = int(value)
    except (TypeError, ValueError):
        raise InvalidInput(message)
    if n <= 0:
        raise InvalidInput(message)
    return n


def _percentage(value: Any) -> Decimal:
    try:
        pct = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidInput("Please fill all disbursement fields")
    if not pct.is_finite():
        raise InvalidInput("Please fill all disbursement fields")
    if pct <= 0:
        raise InvalidInput("Disbursement percentage must be greater than zero")
    return pct


def _validate_basic(values: Mapping[str, Any], *, partial: bool = False) -> None:
    if partial:
        for name in BASIC_REQUIRED:
            if name in values and is_blank(values[name]):
                raise InvalidInput("Please fill all required fields")
        if "status" in values and values["status"] is None:
            raise InvalidInput("Please fill all required fields")
    else:
        require(values, BASIC_REQUIRED)

    if "maharera_no" in values:
        check("maharera", values["maharera_no"])
    start, end = values.get("start_date"), values.get("completion_date")
    if start and end and end < start:
        raise InvalidInput("Completion date cannot be before start date")
    if values.get("status") is not None and values["status"] not in PROJECT_STATUSES:
        raise InvalidInput(f"Unknown project status: {values['status']}")
    if "progress" in values and values["progress"] is not None:
        try:
            progress = int(values["progress"])
        except (TypeError, ValueError, OverflowError):
            raise InvalidInput("Progress must be between 0 and 100")
        if progress < 0 or progress > 100:
            raise InvalidInput("Progress must be between 0 and 100")


def _validate_wing(wing: Mapping[str, Any]) -> None:
    require(wing, ("wing_name", "no_of_floors", "no_of_properties"), "Please fill all wing fields")
    _positive_int(wing["no_of_floors"], "Number of floors must be a positive number")
    _positive_int(wing["no_of_properties"], "Number of properties must be a positive number")


def _validate_bank(bank: Mapping[str, Any]) -> None:
    require(
        bank,
        ("bank_name", "branch_name", "contact_person", "contact_number"),
        "Please fill all bank fields",
    )
    check("phone", bank["contact_number"])
    check("ifsc", bank.get("ifsc"), optional=True)


def _validate_document(doc: Mapping[str, Any]) -> None:
    if is_blank(doc.get("document_title")):
        raise InvalidInput("Please enter document title")
    if (doc.get("document_type") or DocumentType.FLOOR_PLAN.value) not in DOCUMENT_TYPES:
        raise InvalidInput(f"Unknown document type: {doc.get('document_type')}")


def _validate_disbursements(rows: Sequence[Mapping[str, Any]]) -> List[Decimal]:
    percentages = []
    for row in rows:
        require(row, ("disbursement_title", "percentage"), "Please fill all disbursement fields")
        percentages.append(_percentage(row["percentage"]))
    check_percentage_total(percentages, exact=True)
    return percentages


class ProjectsService:
    # ---------------------------
    # REGISTRATION WIZARD
    # ---------------------------

    def register(
        self,
        db: Session,
        *,
        actor: Principal,
        basic: Mapping[str, Any],
        wings: Sequence[Mapping[str, Any]] = (),
        banks: Sequence[Mapping[str, Any]] = (),
        amenities: Sequence[str] = (),
        documents: Sequence[Mapping[str, Any]] = (),
        disbursements: Sequence[Mapping[str, Any]] = (),
    ) -> Project:
        """
        Create a project with its whole hierarchy in one transaction:
        wings, generated floors and VACANT units, banks, amenities,
        documents and a payment schedule totalling exactly 100%.
        Every section is validated before the first row is written.
        """
        _validate_basic(basic)
        for wing in wings:
            _validate_wing(wing)
        for bank in banks:
            _validate_bank(bank)
        for doc in documents:
            _validate_document(doc)
        percentages = _validate_disbursements(disbursements)

        project = store.projects.add(
            db,
            project_name=basic["project_name"].strip(),
            maharera_no=basic["maharera_no"].strip(),
            start_date=basic["start_date"],
            completion_date=basic["completion_date"],
            status=basic.get("status") or ProjectStatus.UPCOMING.value,
            progress=int(basic.get("progress") or 0),
            project_address=basic.get("project_address"),
            letter_head_file_url=basic.get("letter_head_file_url") or PLACEHOLDER_URL,
        )

        unit_count = 0
        for wing in wings:
            unit_count += len(self._build_wing(db, project.id, wing)[1])
        for bank in banks:
            self._add_bank(db, project.id, bank)
        for name in amenities:
            if not is_blank(name):
                store.amenities.add(db, project_id=project.id, amenity_name=name.strip())
        for doc in documents:
            self._add_document(db, project.id, doc)
        for row, pct in zip(disbursements, percentages):
            store.disbursements.add(
                db,
                project_id=project.id,
                disbursement_title=row["disbursement_title"].strip(),
                description=row.get("description"),
                percentage=pct,
            )

        record_activity(
            db,
            actor=actor,
            action=ActivityAction.PROJECT_REGISTERED,
            entity="project",
            entity_id=str(project.id),
            details={"projectName": project.project_name, "wings": len(wings), "units": unit_count},
        )
        db.commit()

        log.info(
            "project_registered",
            extra={"project_id": str(project.id), "wings": len(wings), "units": unit_count},
        )
        return project

    def _build_wing(
        self, db: Session, project_id: uuid.UUID, wing: Mapping[str, Any]
    ) -> Tuple[Wing, List[Flat]]:
        no_of_floors = int(wing["no_of_floors"])
        no_of_properties = int(wing["no_of_properties"])
        wing_name = wing["wing_name"].strip()

        row = store.wings.add(
            db,
            project_id=project_id,
            wing_name=wing_name,
            no_of_floors=no_of_floors,
            no_of_properties=no_of_properties,
        )

        flats: List[Flat] = []
        for floor_no, quantity in enumerate(spread_units(no_of_properties, no_of_floors)):
            floor = store.floors.add(
                db,
                project_id=project_id,
                wing_id=row.id,
                floor_no=floor_no,
                floor_name=floor_name(floor_no),
                property_type=DEFAULT_PROPERTY_TYPE,
                area=DEFAULT_UNIT_AREA,
                quantity=quantity,
            )
            for n in range(1, quantity + 1):
                flats.append(
                    store.flats.add(
                        db,
                        project_id=project_id,
                        wing_id=row.id,
                        floor_id=floor.id,
                        unit_number=f"{wing_name}-{floor_no}{n}",
                        status=FlatStatus.VACANT.value,
                        area=DEFAULT_UNIT_AREA,
                        bhk=DEFAULT_BHK,
                    )
                )
        return row, flats

    def _add_bank(self, db: Session, project_id: uuid.UUID, bank: Mapping[str, Any]) -> BankDetail:
        ifsc = bank.get("ifsc")
        return store.bank_details.add(
            db,
            project_id=project_id,
            bank_name=bank["bank_name"].strip(),
            branch_name=bank["branch_name"].strip(),
            contact_person=bank["contact_person"].strip(),
            contact_number=bank["contact_number"].strip(),
            ifsc=ifsc.strip() if not is_blank(ifsc) else None,
        )

    def _add_document(self, db: Session, project_id: uuid.UUID, doc: Mapping[str, Any]) -> Document:
        return store.documents.add(
            db,
            project_id=project_id,
            document_type=doc.get("document_type") or DocumentType.FLOOR_PLAN.value,
            document_title=doc["document_title"].strip(),
            document_url=doc.get("document_url") or PLACEHOLDER_URL,
        )

    # ---------------------------
    # PROJECT CRUD
    # ---------------------------

    def list(self, db: Session, *, status: Optional[str] = None) -> List[Project]:
        stmt = store.projects.live()
        if status:
            stmt = stmt.where(Project.status == status)
        return list(db.execute(stmt.order_by(Project.created_at.desc(), Project.id)).scalars().all())

    def get(self, db: Session, project_id: uuid.UUID) -> Project:
        return store.projects.require(db, project_id)

    def update(
        self, db: Session, *, actor: Principal, project_id: uuid.UUID, patch: Mapping[str, Any]
    ) -> Project:
        project = store.projects.require(db, project_id)
        merged = {
            "start_date": project.start_date,
            "completion_date": project.completion_date,
            **patch,
        }
        _validate_basic(merged, partial=True)

        project = store.projects.update(db, project_id, patch)
        record_activity(
            db,
            actor=actor,
            action=ActivityAction.PROJECT_UPDATED,
            entity="project",
            entity_id=str(project.id),
            details={"fields": sorted(patch)},
        )
        db.commit()
        return project

    def delete(self, db: Session, *, actor: Principal, project_id: uuid.UUID) -> Project:
        project = store.projects.soft_delete(db, project_id)
        record_activity(
            db,
            actor=actor,
            action=ActivityAction.PROJECT_DELETED,
            entity="project",
            entity_id=str(project.id),
        )
        db.commit()
        return project

    def unit_counts(self, db: Session, project_id: uuid.UUID) -> Dict[str, int]:
        rows = db.execute(
            select(Flat.status, func.count())
            .where(Flat.project_id == project_id, Flat.is_deleted.is_(False))
            .group_by(Flat.status)
        ).all()
        counts = {s.value: 0 for s in FlatStatus}
        counts.update({status: n for status, n in rows})
        return counts

    # ---------------------------
    # WINGS / FLOORS / FLATS
    # ---------------------------

    def add_wing(
        self, db: Session, *, actor: Principal, project_id: uuid.UUID, wing: Mapping[str, Any]
    ) -> Wing:
        store.projects.require(db, project_id)
        _validate_wing(wing)
        row, flats = self._build_wing(db, project_id, wing)
        record_activity(
            db,
            actor=actor,
            action=ActivityAction.WING_ADDED,
            entity="project",
            entity_id=str(project_id),
            details={"wingName": wing["wing_name"], "units": len(flats)},
        )
        db.commit()
        return row

    def wings(self, db: Session, project_id: uuid.UUID) -> List[Wing]:
        return store.wings.list(db, project_id=project_id, order_by=(Wing.wing_name, Wing.id))

    def floors(self, db: Session, wing_id: uuid.UUID) -> List[Floor]:
        store.wings.require(db, wing_id)
        return store.floors.list(db, wing_id=wing_id, order_by=(Floor.floor_no, Floor.id))

    def flats(
        self,
        db: Session,
        *,
        project_id: Optional[uuid.UUID] = None,
        wing_id: Optional[uuid.UUID] = None,
        floor_id: Optional[uuid.UUID] = None,
        status: Optional[str] = None,
    ) -> List[Flat]:
        return store.flats.list(
            db,
            project_id=project_id,
            wing_id=wing_id,
            floor_id=floor_id,
            status=status,
            order_by=(Flat.unit_number, Flat.id),
        )

    def update_flat(
        self, db: Session, *, actor: Principal, property_id: uuid.UUID, patch: Mapping[str, Any]
    ) -> Flat:
        if "status" in patch:
            raise InvalidInput("Unit status follows its bookings and cannot be set directly.")
        if "unit_number" in patch and is_blank(patch["unit_number"]):
            raise InvalidInput("Please fill all required fields")
        flat = store.flats.update(db, property_id, patch)
        record_activity(
            db,
            actor=actor,
            action=ActivityAction.PROJECT_INFO_UPDATED,
            entity="flat",
            entity_id=str(flat.id),
            details={"fields": sorted(patch)},
        )
        db.commit()
        return flat

    # ---------------------------
    # PROJECT INFO
    # ---------------------------

    def bank_details(self, db: Session, project_id: uuid.UUID) -> List[BankDetail]:
        return store.bank_details.list(db, project_id=project_id)

    def add_bank_detail(
        self, db: Session, *, actor: Principal, project_id: uuid.UUID, bank: Mapping[str, Any]
    ) -> BankDetail:
        store.projects.require(db, project_id)
        _validate_bank(bank)
        row = self._add_bank(db, project_id, bank)
        self._info_updated(db, actor, project_id, "bankDetails")
        db.commit()
        return row

    def amenities(self, db: Session, project_id: uuid.UUID) -> List[Amenity]:
        return store.amenities.list(db, project_id=project_id)

    def replace_amenities(
        self, db: Session, *, actor: Principal, project_id: uuid.UUID, names: Sequence[str]
    ) -> List[Amenity]:
        store.projects.require(db, project_id)
        for row in store.amenities.list(db, project_id=project_id):
            row.is_deleted = True
        rows = [
            store.amenities.add(db, project_id=project_id, amenity_name=name.strip())
            for name in names
            if not is_blank(name)
        ]
        self._info_updated(db, actor, project_id, "amenities")
        db.commit()
        return rows

    def documents(self, db: Session, project_id: uuid.UUID) -> List[Document]:
        return store.documents.list(db, project_id=project_id)

    def upload_document(
        self,
        db: Session,
        *,
        actor: Principal,
        project_id: uuid.UUID,
        document_title: Optional[str],
        document_type: Optional[str],
        filename: Optional[str],
        content: Optional[bytes],
    ) -> Document:
        """
        Store an uploaded plan under `upload_dir/<projectId>/` and record it.
        Without a file the document keeps the placeholder URL.
        """
        store.projects.require(db, project_id)
        doc = {"document_title": document_title, "document_type": document_type or DocumentType.FLOOR_PLAN.value}
        _validate_document(doc)

        if filename and content is not None:
            upload_dir = Path(get_settings().upload_dir)
            stored_name = f"{uuid.uuid4().hex}_{Path(filename).name}"
            target_dir = upload_dir / str(project_id)
            target_dir.mkdir(parents=True, exist_ok=True)
            (target_dir / stored_name).write_bytes(content)
            doc["document_url"] = f"/{upload_dir.name}/{project_id}/{stored_name}"

        row = self._add_document(db, project_id, doc)
        self._info_updated(db, actor, project_id, "documents")
        db.commit()
        return row

    def disbursements(self, db: Session, project_id: uuid.UUID) -> List[Disbursement]:
        return store.disbursements.list(db, project_id=project_id)

    def replace_disbursements(
        self, db: Session, *, actor: Principal, project_id: uuid.UUID, rows: Sequence[Mapping[str, Any]]
    ) -> List[Disbursement]:
        """Replace the whole payment schedule; the new rows must total 100%."""
        store.projects.require(db, project_id)
        percentages = _validate_disbursements(rows)

        for old in store.disbursements.list(db, project_id=project_id):
            old.is_deleted = True
        out = [
            store.disbursements.add(
                db,
                project_id=project_id,
                disbursement_title=row["disbursement_title"].strip(),
                description=row.get("description"),
                percentage=pct,
            )
            for row, pct in zip(rows, percentages)
        ]
        self._info_updated(db, actor, project_id, "disbursements")
        db.commit()
        return out

    def _info_updated(self, db: Session, actor: Principal, project_id: uuid.UUID, section: str) -> None:
        record_activity(
            db,
            actor=actor,
            action=ActivityAction.PROJECT_INFO_UPDATED,
            entity="project",
            entity_id=str(project_id),
            details={"section": section},
        )
