from fastapi import APIRouter, Depends
from app.models.agent import Agent
from app.services.analytics_dashboard_service import get_dashboard_summary
from app.services.analytics_service import build_report
from app.services.store_service import PropertyStore, get_property_store
from app.utils.auth import get_current_agent
from app.utils.clock import get_clock
from app.utils.database import ensure_db

router = APIRouter(tags=["Analytics"], dependencies=[Depends(ensure_db)])

@router.get("/users/analytics")
async def get_my_analytics(
    agent: Agent = Depends(get_current_agent),
    property_store: PropertyStore = Depends(get_property_store),
    clock=Depends(get_clock)
):
    return await build_report(agent, property_store=property_store, clock=clock)

@router.get("/analytics/dashboard/summary")
async def get_dashboard_analytics(
    agent: Agent = Depends(get_current_agent),
    property_store: PropertyStore = Depends(get_property_store)
):
    return await get_dashboard_summary(agent, property_store=property_store)
