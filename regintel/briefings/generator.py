import asyncio
import logging
from datetime import date, datetime, timedelta
from typing import Any, Callable, Dict, List, Optional

from regintel.briefings.repository import BriefingRepository
from regintel.core.models import HIGH_SEVERITIES, ThreatLevel
from regintel.core.utils import day_bounds, days_until, utcnow

logger = logging.getLogger(__name__)

LOOKBACK_DAYS = 1
DEADLINE_WINDOW_DAYS = 14

MAX_NEW_OPPORTUNITIES = 5
MAX_COMPETITOR_ACTIVITIES = 10
MAX_UPCOMING_PROCUREMENTS = 5
MAX_EXECUTIVES = 10
MAX_PRESSURED_COMPANIES = 5

EXECUTIVE_WATCH_SCORE = 60
PRESSURED_COMPANY_SCORE = 70

HOT_OPPORTUNITY_SCORE = 80
URGENT_DEADLINE_DAYS = 7
ENGAGE_EXECUTIVE_SCORE = 80
MAX_EXECUTIVE_ACTIONS = 3
MAX_ALERT_ACTIONS = 5
MAX_ACTION_ITEMS = 10

HIGH_THREAT_LEVELS = (ThreatLevel.HIGH.value, ThreatLevel.CRITICAL.value)

FALLBACK_SUMMARY = (
    "No significant activities or alerts today. Continue monitoring for new opportunities."
)


def format_euros_k(amount: Optional[float]) -> str:
    return f"€{(amount or 0) / 1000:,.0f}k"


def vulnerability_change(executive) -> Dict[str, Any]:
    """Direction and size of the executive's last score change."""
    previous = executive.previous_vulnerability_score
    current = executive.vulnerability_score
    if previous is None:
        return {"change_type": "new", "change_amount": current}
    if current > previous:
        change_type = "increase"
    elif current < previous:
        change_type = "decrease"
    else:
        change_type = "unchanged"
    return {"change_type": change_type, "change_amount": abs(current - previous)}


def build_stats(opportunities, activities, procurements, executives, alerts) -> Dict[str, int]:
    return {
        "new_opportunities": len(opportunities),
        "competitor_activities": len(activities),
        "government_updates": len(procurements),
        "executive_alerts": len(executives),
        "total_alerts": len(alerts),
        # Critical alerts count as high priority too
        "high_priority_items": sum(1 for a in alerts if a.severity in HIGH_SEVERITIES),
    }


def build_executive_summary(opportunities, activities, procurements, executives, alerts) -> str:
    sentences = []

    if opportunities:
        total = sum(o.estimated_market_size or 0 for o in opportunities)
        sentences.append(
            f"Today we identified {len(opportunities)} new regulatory opportunities "
            f"with a combined revenue potential of {format_euros_k(total)}."
        )

    high_threat = sum(1 for a in activities if a.threat_level in HIGH_THREAT_LEVELS)
    if high_threat:
        sentences.append(f"{high_threat} high-threat competitor activities require immediate attention.")

    if procurements:
        sentences.append(
            f"{len(procurements)} government procurement deadlines are approaching "
            f"in the next {DEADLINE_WINDOW_DAYS} days."
        )

    if executives:
        sentences.append(
            f"{len(executives)} executives show increased vulnerability, "
            "presenting potential engagement opportunities."
        )

    high_alerts = sum(1 for a in alerts if a.severity in HIGH_SEVERITIES)
    if high_alerts:
        sentences.append(f"{high_alerts} high-priority alerts require immediate action.")

    return " ".join(sentences) if sentences else FALLBACK_SUMMARY


def build_action_items(opportunities, procurements, executives, alerts, now: datetime) -> List[Dict[str, str]]:
    """
    Ranked follow-ups, at most MAX_ACTION_ITEMS.

    Categories are appended in fixed order (hot opportunities, urgent bids,
    executives to engage, high-severity alerts) and the list is truncated at
    the end, so later categories lose out first.
    """
    items = []

    for opp in opportunities:
        if opp.opportunity_score >= HOT_OPPORTUNITY_SCORE:
            description = f"High-scoring opportunity ({opp.opportunity_score}%)"
            if opp.estimated_market_size:
                description += f" with {format_euros_k(opp.estimated_market_size)} potential"
            items.append({
                "priority": "high",
                "title": f"Research opportunity: {opp.title}",
                "description": description,
            })

    for proc in procurements:
        days_left = days_until(proc.submission_deadline, now)
        if days_left is not None and days_left <= URGENT_DEADLINE_DAYS:
            description = f"Deadline in {days_left} days"
            if proc.estimated_value:
                description += f" - {format_euros_k(proc.estimated_value)} value"
            items.append({
                "priority": "high",
                "title": f"Prepare bid: {proc.title}",
                "description": description,
            })

    engage = [e for e in executives if e.vulnerability_score >= ENGAGE_EXECUTIVE_SCORE]
    for executive in engage[:MAX_EXECUTIVE_ACTIONS]:
        items.append({
            "priority": "medium",
            "title": f"Engage with {executive.name}",
            "description": (
                f"{executive.title} at {executive.company.name} - "
                f"vulnerability score {executive.vulnerability_score}%"
            ),
        })

    urgent_alerts = [a for a in alerts if a.severity in HIGH_SEVERITIES]
    for alert in urgent_alerts[:MAX_ALERT_ACTIONS]:
        items.append({
            "priority": "high",
            "title": "Address alert",
            "description": alert.message,
        })

    return items[:MAX_ACTION_ITEMS]


class BriefingGenerator:
    """
    Builds the daily digest for one user and one calendar day.

    Args:
        repository: BriefingRepository (or anything with the same read/save methods).
        clock: Returns the current naive UTC time; used for days-until-deadline.
    """

    def __init__(self, repository: BriefingRepository, clock: Callable[[], datetime] = utcnow):
        self.repository = repository
        self.clock = clock

    async def gather_context(self, user_id: int, target_date: date) -> Dict[str, Any]:
        """Run the six windowed reads concurrently."""
        start, end = day_bounds(target_date)
        lookback = start - timedelta(days=LOOKBACK_DAYS)
        horizon = start + timedelta(days=DEADLINE_WINDOW_DAYS)

        opportunities, activities, procurements, executives, alerts, companies = await asyncio.gather(
            self.repository.new_opportunities(user_id, lookback, end, limit=MAX_NEW_OPPORTUNITIES),
            self.repository.competitor_activities(user_id, lookback, end, limit=MAX_COMPETITOR_ACTIVITIES),
            self.repository.upcoming_procurements(user_id, start, horizon, limit=MAX_UPCOMING_PROCUREMENTS),
            self.repository.vulnerable_executives(
                user_id, lookback, end, min_score=EXECUTIVE_WATCH_SCORE, limit=MAX_EXECUTIVES
            ),
            self.repository.unread_alerts(user_id, lookback, end),
            self.repository.pressured_companies(
                user_id,
                min_pressure=PRESSURED_COMPANY_SCORE,
                min_vulnerability=EXECUTIVE_WATCH_SCORE,
                limit=MAX_PRESSURED_COMPANIES,
            ),
        )
        return {
            "opportunities": opportunities,
            "competitor_activities": activities,
            "procurements": procurements,
            "executives": executives,
            "alerts": alerts,
            "companies": companies,
        }

    def assemble(self, target_date: date, context: Dict[str, Any], now: datetime) -> Dict[str, Any]:
        opportunities = context["opportunities"]
        activities = context["competitor_activities"]
        procurements = context["procurements"]
        executives = context["executives"]
        alerts = context["alerts"]

        return {
            "date": target_date.isoformat(),
            "stats": build_stats(opportunities, activities, procurements, executives, alerts),
            "executive_summary": build_executive_summary(
                opportunities, activities, procurements, executives, alerts
            ),
            "opportunities": [
                {
                    "id": o.id,
                    "title": o.title,
                    "description": o.description,
                    "opportunity_score": o.opportunity_score,
                    "revenue_potential": o.revenue_potential,
                    "estimated_market_size": o.estimated_market_size,
                }
                for o in opportunities
            ],
            "competitor_activities": [
                {
                    "id": a.id,
                    "competitor_name": a.competitor_name,
                    "activity_type": a.activity_type,
                    "activity_date": a.activity_date.isoformat(),
                    "description": a.description,
                    "threat_level": a.threat_level,
                }
                for a in activities
            ],
            "upcoming_deadlines": [
                {
                    "id": p.id,
                    "title": p.title,
                    "region": p.region,
                    "estimated_value": p.estimated_value,
                    "submission_deadline": p.submission_deadline.isoformat(),
                    "days_until": days_until(p.submission_deadline, now),
                }
                for p in procurements
            ],
            "executive_alerts": [
                {
                    "id": e.id,
                    "executive_name": e.name,
                    "title": e.title,
                    "company_name": e.company.name,
                    "vulnerability_score": e.vulnerability_score,
                    **vulnerability_change(e),
                }
                for e in executives
            ],
            "pressured_companies": [
                {
                    "id": c.id,
                    "name": c.name,
                    "pressure_score": c.pressure_score,
                    "vulnerable_executives": [
                        {"id": e.id, "name": e.name, "title": e.title, "vulnerability_score": e.vulnerability_score}
                        for e in c.executives
                    ],
                }
                for c in context["companies"]
            ],
            "action_items": build_action_items(opportunities, procurements, executives, alerts, now),
            "generated_at": now.isoformat(),
        }

    async def generate(self, user_id: int, target_date: date) -> Dict[str, Any]:
        """
        Generate, persist and return the digest for `target_date`.

        Any read or write failure propagates and nothing is stored.
        """
        logger.info(f"Generating daily briefing for user {user_id} on {target_date}")
        context = await self.gather_context(user_id, target_date)
        briefing = self.assemble(target_date, context, self.clock())

        await self.repository.save_report(
            user_id,
            target_date,
            title=f"Daily Briefing - {target_date.isoformat()}",
            content=briefing,
        )
        logger.info(
            f"Briefing for user {user_id} on {target_date}: "
            f"{len(briefing['action_items'])} action items, stats={briefing['stats']}"
        )
        return briefing


def render_markdown(briefing: Dict[str, Any]) -> str:
    """Render a stored digest as a readable Markdown document."""
    stats = briefing.get("stats", {})

    def bullets(lines: List[str]) -> str:
        return "\n".join(f"- {line}" for line in lines) if lines else "_None_"

    action_lines = [
        f"**[{item['priority'].upper()}]** {item['title']}: {item['description']}"
        for item in briefing.get("action_items", [])
    ]
    opportunity_lines = [
        f"{o['title']} (score {o['opportunity_score']})" for o in briefing.get("opportunities", [])
    ]
    competitor_lines = [
        f"{a['competitor_name']}: {a['activity_type']} [{a['threat_level']}]"
        for a in briefing.get("competitor_activities", [])
    ]
    deadline_lines = [
        f"{p['title']} ({p['region']}) in {p['days_until']} days"
        for p in briefing.get("upcoming_deadlines", [])
    ]
    executive_lines = [
        f"{e['executive_name']}, {e['title']} at {e['company_name']}: {e['vulnerability_score']}"
        for e in briefing.get("executive_alerts", [])
    ]

    return f"""# Daily Briefing
**{briefing.get('date')}**

## Executive Summary
{briefing.get('executive_summary', '')}

## Action Items
{bullets(action_lines)}

## At a Glance
- New opportunities: {stats.get('new_opportunities', 0)}
- Competitor activities: {stats.get('competitor_activities', 0)}
- Procurement deadlines: {stats.get('government_updates', 0)}
- Executive alerts: {stats.get('executive_alerts', 0)}
- Unread alerts: {stats.get('total_alerts', 0)} ({stats.get('high_priority_items', 0)} high priority)

## New Opportunities
{bullets(opportunity_lines)}

## Competitor Activity
{bullets(competitor_lines)}

## Upcoming Deadlines
{bullets(deadline_lines)}

## Executives to Watch
{bullets(executive_lines)}
"""
