"""
Opportunities Module - regulatory opportunities, competitor activity and research tasks.
"""

from regintel.opportunities.database import (
    CompetitorActivity,
    Document,
    Opportunity,
    OpportunityNote,
    ResearchTask,
)
from regintel.opportunities.service import (
    create_competitor_activity,
    create_opportunity,
    get_opportunity,
    rescore_opportunities,
)

__all__ = [
    "CompetitorActivity",
    "Document",
    "Opportunity",
    "OpportunityNote",
    "ResearchTask",
    "create_competitor_activity",
    "create_opportunity",
    "get_opportunity",
    "rescore_opportunities",
]
