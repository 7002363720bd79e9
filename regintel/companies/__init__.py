"""
Companies Module - target companies, their executives and pressure tracking.
"""

from regintel.companies.database import Company, Executive
from regintel.companies.service import (
    create_company,
    create_executive,
    get_company,
    get_executive,
    rescore_companies,
)

__all__ = [
    "Company",
    "Executive",
    "create_company",
    "create_executive",
    "get_company",
    "get_executive",
    "rescore_companies",
]
