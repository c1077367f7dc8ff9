"""
Cart Service Application

Durable cart resource for signed-in users of the booking site. Carts are
kept per account and reached with a bearer token.
"""

import os
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

from .routes import cart_router
from .security.auth import DEFAULT_SECRET, get_jwt_secret

# Load environment variables
load_dotenv(os.path.join(os.path.dirname(__file__), "..", "config", ".env"))

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Cart service starting up...")
    if get_jwt_secret() == DEFAULT_SECRET:
        logger.warning("CART_JWT_SECRET not set - using the development secret")
    yield
    logger.info("Cart service shutting down...")


# Create FastAPI app
app = FastAPI(
    title="Cart Service",
    description="Account carts for campsite, activity and equipment bookings",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CART_ALLOWED_ORIGINS", "http://localhost:3000").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(cart_router)


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "cart-service"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "cart_backend.main:app",
        host=os.getenv("CART_HOST", "0.0.0.0"),
        port=int(os.getenv("CART_PORT", "8001")),
        reload=True,
    )
