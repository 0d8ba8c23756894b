"""
Records profile interactions (views and contact clicks) for an agent.

Repeated events from the same address within DEDUP_WINDOW are treated
differently per type: a repeated view is dropped entirely, while a repeated
contact click is still logged and still counts toward `total`, only `unique`
is held back.
"""
from datetime import timedelta
from typing import Optional
from pydantic import BaseModel
from app.models.agent import AgentAnalytics, InteractionEvent, INTERACTION_TYPES, VIEW, new_agent_analytics
from app.services.analytics_service import build_report
from app.services.store_service import AgentStore, PropertyStore
from app.utils.clock import as_utc, system_clock
from app.utils.errors import AgentNotFound, InvalidInteractionType
from app.utils.logger import logger

DEDUP_WINDOW = timedelta(minutes=60)
MAX_HISTORY = 50

class InteractionContext(BaseModel):
    """Caller metadata taken from the inbound request, all best-effort."""
    ip: Optional[str] = None
    user_agent: Optional[str] = None
    referrer: Optional[str] = None

def validate_interaction_type(interaction_type) -> str:
    if interaction_type not in INTERACTION_TYPES:
        raise InvalidInteractionType(interaction_type)
    return interaction_type

def find_recent_duplicate(events, interaction_type: str, ip: Optional[str], now, window: timedelta = DEDUP_WINDOW):
    for event in events:
        if event.ip == ip and event.type == interaction_type and now - as_utc(event.timestamp) < window:
            return event
    return None

def apply_interaction(
    analytics: AgentAnalytics,
    interaction_type: str,
    now,
    property_id: Optional[str] = None,
    context: Optional[InteractionContext] = None
) -> Optional[AgentAnalytics]:
    """
    Compute the next analytics state for one interaction.
    Returns None for a repeated view, meaning nothing should change.
    The given state is left untouched.
    """
    context = context or InteractionContext()
    duplicate = find_recent_duplicate(analytics.last_interactions, interaction_type, context.ip, now)

    if interaction_type == VIEW and duplicate:
        return None

    next_state = analytics.model_copy(deep=True)
    if interaction_type == VIEW:
        counters = next_state.profile_views
    else:
        counters = getattr(next_state.interactions, interaction_type)

    counters.total += 1
    if duplicate is None:
        counters.unique += 1

    event = InteractionEvent(
        type=interaction_type,
        timestamp=now,
        ip=context.ip,
        property_id=property_id,
        user_agent=context.user_agent,
        referrer=context.referrer
    )
    next_state.last_interactions = [event] + next_state.last_interactions[:MAX_HISTORY - 1]
    return next_state

async def record_interaction(
    agent_id: str,
    interaction_type,
    property_id: Optional[str] = None,
    context: Optional[InteractionContext] = None,
    agent_store: Optional[AgentStore] = None,
    property_store: Optional[PropertyStore] = None,
    clock=None
):
    """
    Load the agent, apply the interaction and persist the new analytics in one
    write, then return the analytics report.

    Two concurrent calls for the same agent can both read the same state and
    the later write wins.
    """
    validate_interaction_type(interaction_type)
    agent_store = agent_store or AgentStore()
    clock = clock or system_clock
    context = context or InteractionContext()

    agent = await agent_store.find_by_id(agent_id)
    if not agent:
        raise AgentNotFound(agent_id)

    current = agent.analytics or new_agent_analytics()
    next_state = apply_interaction(current, interaction_type, clock.now(), property_id, context)

    if next_state is None:
        logger.info(f"Repeated view of agent {agent_id} from {context.ip} ignored")
        return await build_report(agent, analytics=current, property_store=property_store, clock=clock)

    await agent_store.save_analytics(agent, next_state)
    logger.info(f"Recorded {interaction_type} for agent {agent_id}")

    return await build_report(agent, analytics=next_state, property_store=property_store, clock=clock)
