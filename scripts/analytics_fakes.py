"""In-memory stand-ins for the Mongo-backed stores, shared by the test modules."""
import asyncio
import os
import sys
from datetime import datetime, timezone
from types import SimpleNamespace

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from beanie import PydanticObjectId
from app.models.agent import Agent
from app.models.property import PropertyImage, PropertyInquiries
from app.utils.auth import hash_key

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)

class FakeAgent:
    """Carries the attributes the services read from an Agent document."""
    public_profile = Agent.public_profile

    def __init__(self, analytics=None, api_key=None, full_name="Dana Levi", email="dana@example.com"):
        self.id = PydanticObjectId()
        self.full_name = full_name
        self.email = email
        self.phone = "050-1234567"
        self.whatsapp = "972501234567"
        self.bio = "Residential sales in the north"
        self.license_number = "LIC-1001"
        self.activity_area = "Haifa"
        self.role = "agent"
        self.api_key_hash = hash_key(api_key) if api_key else None
        self.analytics = analytics

class InMemoryAgentStore:
    def __init__(self, *agents, error=None):
        self.agents = {str(a.id): a for a in agents}
        self.saves = []
        self.error = error

    async def find_by_id(self, agent_id):
        # yield so concurrent callers interleave like real I/O
        await asyncio.sleep(0)
        return self.agents.get(str(agent_id))

    async def find_by_api_key_hash(self, api_key_hash):
        return next((a for a in self.agents.values() if a.api_key_hash == api_key_hash), None)

    async def save_analytics(self, agent, analytics):
        await asyncio.sleep(0)
        if self.error:
            raise self.error
        self.saves.append(analytics)
        agent.analytics = analytics

class InMemoryPropertyStore:
    def __init__(self, properties=None, error=None):
        self.properties = properties or []
        self.error = error
        self.calls = 0

    async def find_by_owner(self, agent_id):
        self.calls += 1
        if self.error:
            raise self.error
        return [p for p in self.properties if str(p.user) == str(agent_id)]

def make_property(owner, title="3 room apartment", status="For Sale", inquiries=None,
                  images=None, property_type="apartment", price=1_850_000, views=0):
    return SimpleNamespace(
        id=PydanticObjectId(),
        title=title,
        location="Haifa",
        status=status,
        price=price,
        property_type=property_type,
        images=images if images is not None else [PropertyImage(secure_url=f"https://cdn.example.com/{title}.jpg")],
        user=owner.id,
        inquiries=PropertyInquiries(**inquiries) if inquiries is not None else None,
        views=views,
        created_at=NOW,
    )
