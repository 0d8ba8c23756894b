from datetime import datetime
from typing import List, Optional
from beanie import Document, PydanticObjectId
from pydantic import BaseModel, Field

class PropertyImage(BaseModel):
    secure_url: Optional[str] = None
    public_id: Optional[str] = Field(None, alias="publicId")

class PropertyInquiries(BaseModel):
    whatsapp: int = 0
    email: int = 0
    calls: int = 0

class Property(Document):
    """A listing owned by an agent. Inquiry counters are maintained by the listing pages."""
    title: str
    location: str
    price: float
    status: str # For Sale, For Rent
    property_type: Optional[str] = Field(None, alias="propertyType")
    images: List[PropertyImage] = Field(default=[])
    user: PydanticObjectId # owning agent
    inquiries: Optional[PropertyInquiries] = None
    views: int = 0
    created_at: datetime = Field(default_factory=datetime.utcnow, alias="createdAt")
    updated_at: datetime = Field(default_factory=datetime.utcnow, alias="updatedAt")

    class Settings:
        name = "properties"
        indexes = ["user", "status"]
