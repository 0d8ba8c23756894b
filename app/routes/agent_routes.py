from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field
from typing import Optional
from app.services.analytics_service import summarize_property
from app.services.interaction_service import InteractionContext, record_interaction
from app.services.store_service import AgentStore, PropertyStore, get_agent_store, get_property_store
from app.utils.clock import get_clock
from app.utils.database import ensure_db
from app.utils.errors import AgentNotFound

router = APIRouter(prefix="/agents", tags=["Agents"], dependencies=[Depends(ensure_db)])

class TrackInteractionRequest(BaseModel):
    type: Optional[str] = None
    property_id: Optional[str] = Field(None, alias="propertyId")

def get_request_context(request: Request) -> InteractionContext:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        ip = forwarded.split(",")[0].strip()
    else:
        ip = request.client.host if request.client else None

    return InteractionContext(
        ip=ip,
        user_agent=request.headers.get("user-agent"),
        referrer=request.headers.get("referer")
    )

@router.get("/{agent_id}")
async def get_agent(
    agent_id: str,
    agent_store: AgentStore = Depends(get_agent_store),
    property_store: PropertyStore = Depends(get_property_store)
):
    """Public agent profile with the agent's listings."""
    agent = await agent_store.find_by_id(agent_id)
    if not agent:
        raise AgentNotFound(agent_id)

    properties = await property_store.find_by_owner(agent.id)
    return {
        **agent.public_profile(),
        "properties": [summarize_property(p) for p in properties]
    }

@router.post("/{agent_id}/track")
async def track_interaction(
    agent_id: str,
    payload: TrackInteractionRequest,
    context: InteractionContext = Depends(get_request_context),
    agent_store: AgentStore = Depends(get_agent_store),
    property_store: PropertyStore = Depends(get_property_store),
    clock=Depends(get_clock)
):
    """
    Record a profile view or contact click and return the updated analytics.
    """
    return await record_interaction(
        agent_id,
        payload.type,
        property_id=payload.property_id,
        context=context,
        agent_store=agent_store,
        property_store=property_store,
        clock=clock
    )
