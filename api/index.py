"""
Storefront - Main FastAPI Application

Single entry point for the cart and checkout API (Vercel serverless function).
"""
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.routers import cart_router


# Comma-separated; the storefront site and local dev by default
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.environ.get("ALLOWED_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]


app = FastAPI(
    title="Storefront Cart API",
    description="Shopping cart, totals and checkout",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE"],
    allow_headers=["*"],
)

app.include_router(cart_router)


# ==================== HEALTH CHECK ====================

@app.get("/api/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok", "service": "storefront"}
