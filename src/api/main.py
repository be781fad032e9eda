"""
FastAPI application - Main entry point
"""

from dotenv import load_dotenv

load_dotenv()

import logging
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from src.api.prices_router import error_handler, router as prices_router
from src.error_handler import PriceRelayError

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Slab Price Relay",
    description="Market prices and confidence ratings for graded collectibles by certificate number",
    version="1.0.0",
)

app.include_router(prices_router)
app.include_router(prices_router, prefix="/api/v1")


@app.exception_handler(PriceRelayError)
async def price_relay_error_handler(request: Request, exc: PriceRelayError):
    status_code, body = error_handler.handle_exception(exc, context={"path": request.url.path})
    return PlainTextResponse(body, status_code=status_code)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    status_code, body = error_handler.handle_exception(exc, context={"path": request.url.path})
    return PlainTextResponse(body, status_code=status_code)


# ============================================================================
# ENDPOINTS
# ============================================================================
@app.get("/", tags=["Health"])
async def root():
    """Health check endpoint."""
    return {"service": "Slab Price Relay", "status": "healthy", "version": "1.0.0", "timestamp": datetime.now().isoformat()}


@app.get("/health", tags=["Health"])
async def health_check():
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}


# ============================================================================
# STARTUP/SHUTDOWN EVENTS
# ============================================================================
@app.on_event("startup")
async def startup_event():
    """Initialize on startup"""
    logger.info("Starting Slab Price Relay...")


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown"""
    logger.info("Shutting down Slab Price Relay...")
