import pandas as pd
from datetime import timedelta
from typing import List, Optional
from app.models.agent import AgentAnalytics, CONTACT_CHANNELS, INTERACTION_TYPES, VIEW, new_agent_analytics
from app.services.store_service import PropertyStore
from app.utils.clock import as_utc, system_clock
from app.utils.logger import logger

RECENT_FEED_SIZE = 10
DAILY_WINDOW_DAYS = 30

# interaction type -> column in the daily series
DAILY_COLUMNS = {VIEW: "views", "whatsapp": "whatsapp", "email": "email", "phone": "phone"}

def property_inquiries(prop) -> dict:
    inquiries = getattr(prop, "inquiries", None)
    whatsapp = (getattr(inquiries, "whatsapp", 0) or 0) if inquiries else 0
    email = (getattr(inquiries, "email", 0) or 0) if inquiries else 0
    calls = (getattr(inquiries, "calls", 0) or 0) if inquiries else 0
    return {
        "total": whatsapp + email + calls,
        "whatsapp": whatsapp,
        "email": email,
        "calls": calls
    }

def summarize_property(prop) -> dict:
    images = getattr(prop, "images", None) or []
    return {
        "_id": str(prop.id),
        "title": prop.title,
        "location": prop.location,
        "status": prop.status,
        "price": prop.price,
        "thumbnail": images[0].secure_url if images else None,
        "createdAt": getattr(prop, "created_at", None),
        "inquiries": property_inquiries(prop)
    }

def count_by(properties, attr: str) -> dict:
    counts = {}
    for prop in properties:
        key = getattr(prop, attr, None)
        counts[key] = counts.get(key, 0) + 1
    return counts

def iso_timestamp(value) -> str:
    """Millisecond UTC timestamp with a Z suffix, e.g. 2026-10-19T12:00:00.000Z."""
    return as_utc(value).isoformat(timespec="milliseconds").replace("+00:00", "Z")

def total_interactions(analytics: AgentAnalytics) -> dict:
    channels = [getattr(analytics.interactions, name) for name in CONTACT_CHANNELS]
    return {
        "total": sum(c.total for c in channels),
        "unique": sum(c.unique for c in channels)
    }

def recent_interactions(analytics: AgentAnalytics, limit: int = RECENT_FEED_SIZE) -> List[dict]:
    return [
        {
            "_id": str(event.id),
            "type": event.type,
            "timestamp": iso_timestamp(event.timestamp),
            "ip": event.ip,
            "propertyId": event.property_id
        }
        for event in analytics.last_interactions[:limit]
    ]

def daily_analytics(events, now, days: int = DAILY_WINDOW_DAYS) -> List[dict]:
    """
    Count events per UTC calendar day over the trailing window.
    Only days that have at least one event are returned, oldest first.
    """
    if not events:
        return []

    df = pd.DataFrame({
        "type": [e.type for e in events],
        "timestamp": [as_utc(e.timestamp) for e in events]
    })
    df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True)
    df = df[df["timestamp"] > pd.Timestamp(as_utc(now) - timedelta(days=days))].copy()
    if df.empty:
        return []

    df["date"] = df["timestamp"].dt.strftime("%Y-%m-%d")
    counts = pd.crosstab(df["date"], df["type"])
    counts = counts.reindex(columns=list(INTERACTION_TYPES), fill_value=0)
    counts = counts.rename(columns=DAILY_COLUMNS).sort_index()

    return [
        {"date": date, **{column: int(row[column]) for column in counts.columns}}
        for date, row in counts.iterrows()
    ]

async def build_report(
    agent,
    analytics: Optional[AgentAnalytics] = None,
    property_store: Optional[PropertyStore] = None,
    clock=None
):
    """
    Derive the dashboard read-model for an agent.

    `analytics` overrides the agent's stored state (the recorder passes the
    state it just persisted). Nothing here writes to the store.
    """
    property_store = property_store or PropertyStore()
    clock = clock or system_clock
    analytics = analytics or agent.analytics or new_agent_analytics()

    properties = await property_store.find_by_owner(agent.id)

    property_analytics = [summarize_property(p) for p in properties]
    total_property_inquiries = sum(p["inquiries"]["total"] for p in property_analytics)

    logger.debug(f"Built analytics report for agent {agent.id} over {len(properties)} properties")

    return {
        "summary": {
            "profileViews": analytics.profile_views.model_dump(),
            "interactions": analytics.interactions.model_dump(),
            "totalInteractions": total_interactions(analytics),
            "totalProperties": len(properties),
            "totalPropertyInquiries": total_property_inquiries
        },
        "propertyAnalytics": property_analytics,
        "recentInteractions": recent_interactions(analytics),
        "dailyAnalytics": daily_analytics(analytics.last_interactions, clock.now()),
        "propertiesByStatus": count_by(properties, "status")
    }
