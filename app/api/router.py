from fastapi import APIRouter

from app.routers import commissions, health

api_router = APIRouter()

api_router.include_router(health.router, tags=["Health"])
api_router.include_router(commissions.router, prefix="/commissions", tags=["Commissions"])
