"""
app/api/routers package marker.
"""

from app.api.routers.brand_intel import router as brand_intel_router

__all__ = [
    "brand_intel_router",
]
