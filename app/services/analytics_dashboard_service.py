from typing import Optional
from app.models.agent import new_agent_analytics
from app.services.analytics_service import count_by, property_inquiries
from app.services.store_service import PropertyStore

TOP_PROPERTIES = 5

async def get_dashboard_summary(agent, property_store: Optional[PropertyStore] = None):
    """
    Returns the headline numbers for the agent dashboard:
    - Total views and inquiries (property inquiries + profile contact clicks)
    - Conversion rate (inquiries per profile view)
    - Properties by status and type
    - Top performing properties
    """
    property_store = property_store or PropertyStore()
    analytics = agent.analytics or new_agent_analytics()

    properties = await property_store.find_by_owner(agent.id)

    # 1. Inquiries from the listings themselves
    inquiries = {"whatsapp": 0, "email": 0, "calls": 0}
    for prop in properties:
        counts = property_inquiries(prop)
        for key in inquiries:
            inquiries[key] += counts[key]

    # 2. Plus contact clicks on the agent profile
    inquiries["whatsapp"] += analytics.interactions.whatsapp.total
    inquiries["email"] += analytics.interactions.email.total
    inquiries["calls"] += analytics.interactions.phone.total

    total_views = analytics.profile_views.total
    total_inquiries = sum(inquiries.values())
    conversion_rate = round(total_inquiries / total_views * 100, 1) if total_views > 0 else 0.0

    top_properties = sorted(
        (
            {
                "title": prop.title,
                "totalInquiries": property_inquiries(prop)["total"],
                "views": getattr(prop, "views", 0) or 0
            }
            for prop in properties
        ),
        key=lambda p: p["totalInquiries"],
        reverse=True
    )[:TOP_PROPERTIES]

    return {
        "totalProperties": len(properties),
        "totalViews": total_views,
        "totalInquiries": total_inquiries,
        "conversionRate": conversion_rate,
        "inquiries": inquiries,
        "propertiesByStatus": count_by(properties, "status"),
        "propertiesByType": count_by(properties, "property_type"),
        "topPerformingProperties": top_properties
    }
