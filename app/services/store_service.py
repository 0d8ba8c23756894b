"""
Persistence boundary for the analytics core.

The recorder and reporter only talk to these two stores, so tests can swap
in in-memory versions without a database.
"""
from datetime import datetime
from typing import List, Optional
from beanie import PydanticObjectId
from pymongo.errors import PyMongoError
from app.models.agent import Agent, AgentAnalytics
from app.models.property import Property
from app.utils.errors import DependencyError
from app.utils.logger import logger

class AgentStore:
    async def find_by_id(self, agent_id: str) -> Optional[Agent]:
        if not PydanticObjectId.is_valid(agent_id):
            return None
        try:
            return await Agent.get(PydanticObjectId(agent_id))
        except PyMongoError as e:
            logger.error(f"Agent lookup failed for {agent_id}: {e}")
            raise DependencyError("Failed to load agent") from e

    async def find_by_api_key_hash(self, api_key_hash: str) -> Optional[Agent]:
        try:
            return await Agent.find_one({"apiKeyHash": api_key_hash})
        except PyMongoError as e:
            logger.error(f"Agent lookup by API key failed: {e}")
            raise DependencyError("Failed to load agent") from e

    async def save_analytics(self, agent: Agent, analytics: AgentAnalytics) -> None:
        """Write the whole analytics sub-document in a single $set."""
        try:
            await agent.set({
                "analytics": analytics.model_dump(by_alias=True),
                "updatedAt": datetime.utcnow(),
            })
        except PyMongoError as e:
            logger.error(f"Saving analytics failed for agent {agent.id}: {e}")
            raise DependencyError("Failed to save analytics") from e

class PropertyStore:
    async def find_by_owner(self, agent_id) -> List[Property]:
        try:
            return await Property.find(Property.user == PydanticObjectId(str(agent_id))).to_list()
        except PyMongoError as e:
            logger.error(f"Property fetch failed for agent {agent_id}: {e}")
            raise DependencyError("Failed to load properties") from e

def get_agent_store() -> AgentStore:
    return AgentStore()

def get_property_store() -> PropertyStore:
    return PropertyStore()
