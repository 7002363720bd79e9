"""
Procurement Module - public tenders and government contacts.
"""

from regintel.procurement.database import GovernmentContact, Procurement
from regintel.procurement.service import create_contact, create_procurement

__all__ = [
    "GovernmentContact",
    "Procurement",
    "create_contact",
    "create_procurement",
]
