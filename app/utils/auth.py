import hashlib
from fastapi import Depends, Security, HTTPException, status
from fastapi.security.api_key import APIKeyHeader
from app.models.agent import Agent
from app.services.store_service import AgentStore, get_agent_store

API_KEY_NAME = "x-api-key"
api_header = APIKeyHeader(name=API_KEY_NAME, auto_error=False)

def hash_key(key: str) -> str:
    return hashlib.sha256(key.encode()).hexdigest()

async def get_current_agent(
    api_key: str = Security(api_header),
    agent_store: AgentStore = Depends(get_agent_store)
) -> Agent:
    """
    FastAPI dependency to validate API key and return the Agent.
    """
    if not api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="API Key missing"
        )

    agent = await agent_store.find_by_api_key_hash(hash_key(api_key))

    if not agent:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API Key"
        )

    return agent
