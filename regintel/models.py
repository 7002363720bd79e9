"""
Import every ORM model so Base.metadata and the mapper registry are complete.

Relationships between modules are declared by class name (Company.alerts ->
"Alert", Document.procurement -> "Procurement", ...), so all database modules
must be loaded before the first query. Alembic imports this module too.
"""
from regintel.auth.database import User  # noqa: F401
from regintel.companies.database import Company, Executive  # noqa: F401
from regintel.opportunities.database import (  # noqa: F401
    CompetitorActivity,
    Document,
    Opportunity,
    OpportunityNote,
    ResearchTask,
)
from regintel.procurement.database import GovernmentContact, Procurement, procurement_contacts  # noqa: F401
from regintel.alerts.database import Alert  # noqa: F401
from regintel.briefings.database import Report  # noqa: F401
