"""
Core enums for RegIntel.

NOTE: These are NOT database models. For SQLAlchemy ORM models, see each module's database.py:
  - Company/Executive → regintel/companies/database.py
  - Opportunity/CompetitorActivity/ResearchTask → regintel/opportunities/database.py
  - Procurement/GovernmentContact → regintel/procurement/database.py
  - Alert → regintel/alerts/database.py
  - Report → regintel/briefings/database.py

Enum values are stored as plain strings in the database columns.
"""
from enum import Enum


class OpportunityStatus(str, Enum):
    IDENTIFIED = "IDENTIFIED"
    RESEARCHING = "RESEARCHING"
    POSITIONING = "POSITIONING"
    PURSUING = "PURSUING"
    WON = "WON"
    LOST = "LOST"
    ARCHIVED = "ARCHIVED"


class Priority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class RevenuePotential(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    VERY_HIGH = "VERY_HIGH"


class MarketGap(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    VERY_HIGH = "VERY_HIGH"


class CompetitionLevel(str, Enum):
    NONE = "NONE"
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    SATURATED = "SATURATED"


class ThreatLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

    @property
    def rank(self) -> int:
        return list(ThreatLevel).index(self)


class ProcurementStatus(str, Enum):
    UPCOMING = "UPCOMING"
    OPEN = "OPEN"
    CLOSED = "CLOSED"
    AWARDED = "AWARDED"
    CANCELLED = "CANCELLED"


ACTIVE_PROCUREMENT_STATUSES = (ProcurementStatus.UPCOMING.value, ProcurementStatus.OPEN.value)


class Influence(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    KEY_DECISION_MAKER = "KEY_DECISION_MAKER"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class AlertType(str, Enum):
    FUNDING_ROUND = "FUNDING_ROUND"
    EXECUTIVE_VULNERABILITY = "EXECUTIVE_VULNERABILITY"
    COMPETITOR_ACTIVITY = "COMPETITOR_ACTIVITY"
    PROCUREMENT_MATCH = "PROCUREMENT_MATCH"
    MARKET_SIGNAL = "MARKET_SIGNAL"


class AlertSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# Severities counted as "high" in briefings and dashboards
HIGH_SEVERITIES = (AlertSeverity.HIGH.value, AlertSeverity.CRITICAL.value)


class RiskFactor(str, Enum):
    PIPELINE_PRESSURE = "pipeline_pressure"
    AD_SPEND_WASTE = "ad_spend_waste"
    BOARD_PRESSURE = "board_pressure"
    NO_GTM_TEAM = "no_gtm_team"
    FOUNDER_LED_SALES = "founder_led_sales"
    RECENT_HIRE = "recent_hire"
    PUBLIC_CRITICISM = "public_criticism"


class ReportType(str, Enum):
    DAILY_BRIEFING = "daily_briefing"
