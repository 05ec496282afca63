"""
API v1 router
"""

from fastapi import APIRouter

from impostor.api.v1.endpoints import health, rooms, words

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(rooms.router, prefix="/rooms", tags=["rooms"])
api_router.include_router(words.router, prefix="/words", tags=["words"])
