from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from loguru import logger
from pydantic import ValidationError

from models.lead import ActivityKind, Lead, LeadSource, LeadValue, Note, record_activity, utcnow
from models.requests import ActivityIn, LeadImportIn, LeadIn, LeadUpdateIn, NoteIn
from routes.common import owned_or_404
from tools.auth import current_user
from tools.documents import get_document_store

router = APIRouter(prefix="/leads", tags=["leads"])

COLLECTION = "leads"
SORTABLE_FIELDS = {"created_at", "updated_at", "email", "first_name", "last_name", "company", "status", "source"}


def _load(lead_id: str, user: Dict[str, Any]) -> Lead:
    return Lead.from_document(owned_or_404(COLLECTION, lead_id, user, "Lead"))


def _save(lead: Lead) -> Dict[str, Any]:
    lead.updated_at = utcnow()
    return get_document_store().replace(COLLECTION, lead.to_document())


def _email_taken(user_id: str, email: str) -> bool:
    email = email.lower()
    return bool(get_document_store().find(COLLECTION, user_id, where=lambda d: d.get("email", "").lower() == email))


def _lead_stats(docs: List[Dict[str, Any]]) -> Dict[str, Any]:
    scores = [d.get("engagement", {}).get("engagement_score", 0) for d in docs]
    return {
        "total_leads": len(docs),
        "new_leads": sum(1 for d in docs if d.get("status") == "new"),
        "qualified_leads": sum(1 for d in docs if d.get("status") == "qualified"),
        "avg_engagement_score": round(sum(scores) / len(scores), 2) if scores else 0
    }


@router.post("", status_code=201)
def create_lead(payload: LeadIn, user: Dict[str, Any] = Depends(current_user)):
    if _email_taken(user["id"], payload.email):
        raise HTTPException(status_code=400, detail="Lead with this email already exists")

    lead = Lead(user_id=user["id"], **payload.model_dump(exclude_none=True))
    record_activity(lead, ActivityKind.MANUAL_ADD, "Lead manually added to system")
    doc = get_document_store().insert(COLLECTION, lead.to_document())

    logger.info(f"Lead created for user {user['id']}: {lead.id}")
    return {"message": "Lead created successfully", "lead": doc}


@router.get("")
def list_leads(status: Optional[str] = None, stage: Optional[str] = None, source: Optional[str] = None,
               tags: Optional[str] = None, search: Optional[str] = None, page: int = 1, limit: int = 20,
               sort_by: str = "created_at", sort_order: str = "desc",
               user: Dict[str, Any] = Depends(current_user)):
    if sort_by not in SORTABLE_FIELDS:
        raise HTTPException(status_code=422, detail=f"Cannot sort leads by {sort_by}")
    store = get_document_store()
    wanted_tags = {t.strip() for t in tags.split(",") if t.strip()} if tags else set()
    needle = search.lower() if search else None

    def matches(doc: Dict[str, Any]) -> bool:
        if status and doc.get("status") != status:
            return False
        if stage and doc.get("lifecycle", {}).get("stage") != stage:
            return False
        if source and doc.get("source") != source:
            return False
        if wanted_tags and not wanted_tags.intersection(doc.get("tags", [])):
            return False
        if needle:
            fields = (doc.get("first_name"), doc.get("last_name"), doc.get("email"), doc.get("company"))
            return any(needle in (f or "").lower() for f in fields)
        return True

    docs = store.find(COLLECTION, user["id"], where=matches, sort_by=sort_by, descending=sort_order == "desc")
    leads, pagination = store.page(docs, page, limit)
    return {
        "leads": leads,
        "pagination": pagination,
        "stats": _lead_stats(store.find(COLLECTION, user["id"]))
    }


@router.post("/import")
def import_leads(payload: LeadImportIn, user: Dict[str, Any] = Depends(current_user)):
    results = {"imported": 0, "skipped": 0, "errors": []}
    store = get_document_store()

    for item in payload.leads:
        try:
            lead_in = LeadIn.model_validate({"source": LeadSource.IMPORT, **item})
        except ValidationError as e:
            results["errors"].append({"email": item.get("email"), "error": f"{e.error_count()} validation error(s)"})
            continue

        if _email_taken(user["id"], lead_in.email):
            results["skipped"] += 1
            continue

        lead = Lead(user_id=user["id"], **lead_in.model_dump(exclude_none=True))
        record_activity(lead, ActivityKind.IMPORT, "Lead imported from file")
        store.insert(COLLECTION, lead.to_document())
        results["imported"] += 1

    logger.info(f"Lead import for user {user['id']}: {results['imported']} imported, {results['skipped']} skipped")
    return {"message": "Import completed", "results": results}


@router.get("/{lead_id}")
def get_lead(lead_id: str, user: Dict[str, Any] = Depends(current_user)):
    return {"lead": owned_or_404(COLLECTION, lead_id, user, "Lead")}


@router.put("/{lead_id}")
def update_lead(lead_id: str, payload: LeadUpdateIn, user: Dict[str, Any] = Depends(current_user)):
    lead = _load(lead_id, user)
    old_status, old_stage = lead.status, lead.lifecycle.stage

    changes = payload.model_dump(exclude_unset=True)
    new_stage = changes.pop("stage", None)
    for field, value in changes.items():
        if value is None:
            continue
        if field == "value":
            value = LeadValue.model_validate(value)
        setattr(lead, field, value)
    if new_stage:
        lead.lifecycle.stage = new_stage
    lead.lifecycle.last_contact = utcnow()

    if old_status != lead.status:
        record_activity(lead, ActivityKind.STATUS_CHANGE,
                        f"Status changed from {old_status.value} to {lead.status.value}")
    if old_stage != lead.lifecycle.stage:
        record_activity(lead, ActivityKind.STAGE_CHANGE,
                        f"Lifecycle stage changed from {old_stage.value} to {lead.lifecycle.stage.value}")

    return {"message": "Lead updated successfully", "lead": _save(lead)}


@router.delete("/{lead_id}")
def delete_lead(lead_id: str, user: Dict[str, Any] = Depends(current_user)):
    if not get_document_store().delete(COLLECTION, lead_id, user["id"]):
        raise HTTPException(status_code=404, detail="Lead not found")
    return {"message": "Lead deleted successfully"}


@router.post("/{lead_id}/activities")
def add_activity(lead_id: str, payload: ActivityIn, user: Dict[str, Any] = Depends(current_user)):
    lead = _load(lead_id, user)
    record_activity(lead, payload.kind, payload.description, payload.metadata)
    return {"message": "Activity added successfully", "lead": _save(lead)}


@router.post("/{lead_id}/notes")
def add_note(lead_id: str, payload: NoteIn, user: Dict[str, Any] = Depends(current_user)):
    lead = _load(lead_id, user)
    lead.notes.append(Note(content=payload.content, created_by=user["id"]))
    record_activity(lead, ActivityKind.NOTE_ADDED, "Note added to lead")
    return {"message": "Note added successfully", "lead": _save(lead)}
