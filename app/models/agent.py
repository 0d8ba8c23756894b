from datetime import datetime
from typing import List, Optional
from beanie import Document, PydanticObjectId
from pydantic import BaseModel, ConfigDict, Field

VIEW = "view"
CONTACT_CHANNELS = ("whatsapp", "email", "phone")
INTERACTION_TYPES = (VIEW,) + CONTACT_CHANNELS

class CounterPair(BaseModel):
    total: int = Field(default=0, ge=0)
    unique: int = Field(default=0, ge=0)

class ChannelCounters(BaseModel):
    whatsapp: CounterPair = Field(default_factory=CounterPair)
    email: CounterPair = Field(default_factory=CounterPair)
    phone: CounterPair = Field(default_factory=CounterPair)

class InteractionEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: PydanticObjectId = Field(default_factory=PydanticObjectId, alias="_id")
    type: str
    timestamp: datetime
    ip: Optional[str] = None
    property_id: Optional[str] = Field(None, alias="propertyId")
    user_agent: Optional[str] = Field(None, alias="userAgent")
    referrer: Optional[str] = None

class AgentAnalytics(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    profile_views: CounterPair = Field(default_factory=CounterPair, alias="profileViews")
    interactions: ChannelCounters = Field(default_factory=ChannelCounters)
    last_interactions: List[InteractionEvent] = Field(default_factory=list, alias="lastInteractions")

def new_agent_analytics() -> AgentAnalytics:
    """Zero state: every channel present with both counters at 0."""
    return AgentAnalytics()

class Agent(Document):
    full_name: str = Field(alias="fullName")
    email: str
    phone: Optional[str] = None
    whatsapp: Optional[str] = None
    bio: Optional[str] = None
    license_number: Optional[str] = Field(None, alias="licenseNumber")
    activity_area: Optional[str] = Field(None, alias="activityArea")
    role: str = Field(default="agent") # agent, admin
    api_key_hash: Optional[str] = Field(None, alias="apiKeyHash")
    is_approved: bool = Field(default=False, alias="isApproved")
    analytics: Optional[AgentAnalytics] = None
    created_at: datetime = Field(default_factory=datetime.utcnow, alias="createdAt")
    updated_at: datetime = Field(default_factory=datetime.utcnow, alias="updatedAt")

    class Settings:
        name = "users"
        indexes = ["email", "apiKeyHash"]

    def public_profile(self) -> dict:
        """Profile fields that are safe to show on the agent's public page."""
        return {
            "_id": str(self.id),
            "fullName": self.full_name,
            "email": self.email,
            "phone": self.phone,
            "whatsapp": self.whatsapp,
            "bio": self.bio,
            "licenseNumber": self.license_number,
            "activityArea": self.activity_area,
            "role": self.role,
        }
