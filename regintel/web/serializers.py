"""ORM-to-JSON helpers shared by the API routers.

    from regintel.web.serializers import serialize, serialize_list

    serialize(company)                                   # every column
    serialize(company, fields=["id", "name"])            # whitelist
    serialize(company, extra={"stats": {...}})           # merge computed fields
    serialize_list(executives, exclude=["user_id"])
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence

from regintel.companies.database import Company, Executive
from regintel.opportunities.database import CompetitorActivity, Opportunity
from regintel.procurement.database import GovernmentContact, Procurement

# Never leaves the API
HIDDEN_FIELDS = {"password_hash"}


def serialize(
    obj: Any,
    fields: Optional[List[str]] = None,
    exclude: Optional[List[str]] = None,
    extra: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Convert a model instance to a JSON-safe dict (dates become ISO strings)."""
    if fields is None:
        skip = HIDDEN_FIELDS | set(exclude or [])
        fields = [c.key for c in obj.__class__.__table__.columns if c.key not in skip]

    result = {}
    for field in fields:
        value = getattr(obj, field, None)
        if isinstance(value, (date, datetime)):
            value = value.isoformat()
        result[field] = value

    if extra:
        result.update(extra)
    return result


def serialize_list(
    objects: Sequence[Any],
    fields: Optional[List[str]] = None,
    exclude: Optional[List[str]] = None,
) -> List[Dict[str, Any]]:
    return [serialize(obj, fields=fields, exclude=exclude) for obj in objects]


# --- Nested shapes ---

def company_with_executives(company: Company, **extra) -> Dict[str, Any]:
    return serialize(company, extra={
        "executives": serialize_list(company.executives),
        **extra,
    })


def executive_with_company(executive: Executive) -> Dict[str, Any]:
    company = executive.company
    return serialize(executive, extra={
        "company": serialize(company, fields=[
            "id", "name", "last_funding_round", "last_funding_date", "gtm_gap_detected", "pressure_score",
        ]) if company else None,
    })


def activity_with_opportunity(activity: CompetitorActivity) -> Dict[str, Any]:
    return serialize(activity, extra={
        "opportunity": serialize(activity.opportunity, fields=["id", "title", "status"]),
    })


def procurement_with_contacts(procurement: Procurement) -> Dict[str, Any]:
    return serialize(procurement, extra={
        "contacts": serialize_list(
            procurement.contacts, fields=["id", "name", "title", "department", "influence"]
        ),
        "documents": serialize_list(procurement.documents, fields=["id", "title", "doc_type", "url"]),
    })


def contact_with_links(contact: GovernmentContact) -> Dict[str, Any]:
    return serialize(contact, extra={
        "opportunity": serialize(contact.opportunity, fields=["id", "title"]) if contact.opportunity else None,
        "procurements": serialize_list(contact.procurements, fields=["id", "title", "status"]),
    })


def opportunity_detail(opportunity: Opportunity, alerts: Sequence[Any]) -> Dict[str, Any]:
    return serialize(opportunity, extra={
        "competitors": serialize_list(
            sorted(opportunity.competitors, key=lambda a: a.activity_date, reverse=True)
        ),
        "notes": serialize_list(sorted(opportunity.notes, key=lambda n: n.created_at, reverse=True)),
        "documents": serialize_list(opportunity.documents),
        "government_contacts": serialize_list(opportunity.government_contacts),
        "research_tasks": serialize_list(opportunity.research_tasks),
        "alerts": serialize_list(alerts),
    })
