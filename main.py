import os
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv
from contextlib import asynccontextmanager

# Load environment variables
load_dotenv()

from app.models.agent import Agent
from app.routes import agent_routes, analytics_routes
from app.utils.database import ensure_beanie_initialized, is_initialized
from app.utils.errors import AnalyticsError, DependencyError
from app.utils.logger import logger

@asynccontextmanager
async def lifespan(app: FastAPI):
    await ensure_beanie_initialized()
    yield

app = FastAPI(title="Real Estate Analytics Backend", version="1.0.0", lifespan=lifespan)

# CORS configuration
origins = os.getenv("CORS_ORIGINS", "*").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(AnalyticsError)
async def analytics_error_handler(request: Request, exc: AnalyticsError):
    if isinstance(exc, DependencyError):
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}", exc_info=exc)
        return JSONResponse(status_code=exc.status_code, content={"error": "Internal server error"})
    logger.warning(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"{request.method} {request.url.path} crashed: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})

# Include Routers
app.include_router(agent_routes.router)
app.include_router(analytics_routes.router)

@app.get("/health")
async def health_check():
    try:
        # Check if initialized
        if not is_initialized():
            await ensure_beanie_initialized()

        # Try a simple query
        await Agent.count()
        db_status = "connected"
    except Exception as e:
        db_status = f"error: {str(e)}"

    return {
        "status": "ok" if "error" not in db_status else "degraded",
        "message": "Real Estate Analytics Backend is running",
        "database": db_status,
        "initialized": is_initialized()
    }

@app.get("/")
async def root():
    return {"message": "Welcome to the Real Estate Analytics API"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=int(os.getenv("PORT", 3000)), reload=True)
