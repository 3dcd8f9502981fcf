"""
Kiosk Check-In Backend - FastAPI application
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from kiosk_backend import __version__
from kiosk_backend.config import get_settings
from kiosk_backend.routes import tickets, llm, health
from kiosk_backend.middleware import BodySizeLimitMiddleware, LoggingMiddleware
from kiosk_backend.utils.logger import get_logger

settings = get_settings()
logger = get_logger(__name__)

app = FastAPI(
    title="Kiosk Check-In Backend",
    description="Creates RepairShopr tickets from kiosk check-ins and proxies LLM calls",
    version=__version__
)

# Middleware runs bottom-up: the last one added sees the request first
# 1. CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 2. Body size limit
app.add_middleware(BodySizeLimitMiddleware, max_bytes=settings.max_body_bytes)

# 3. Logging
app.add_middleware(LoggingMiddleware)

app.include_router(health.router)
app.include_router(tickets.router)
app.include_router(llm.router)

if not settings.crm_configured:
    logger.warning("Missing REPAIRSHOPR_SUBDOMAIN or REPAIRSHOPR_API_KEY, check-ins will fail")


@app.get("/")
async def root():
    return {"message": "Kiosk Check-In Backend", "version": __version__}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.fastapi_host, port=settings.fastapi_port)
