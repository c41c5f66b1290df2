from __future__ import annotations

from fastapi import APIRouter

from tutormarket.api.v1.endpoints import addresses, categories, courses, health, meetings, users

api_router = APIRouter()
api_router.include_router(health.router, tags=["system"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(addresses.router, prefix="/addresses", tags=["addresses"])
api_router.include_router(categories.router, prefix="/categories", tags=["categories"])
api_router.include_router(courses.router, prefix="/courses", tags=["courses"])
api_router.include_router(meetings.router, prefix="/meetings", tags=["meetings"])
