"""Redisbox API Router - aggregates all API routes."""

from fastapi import APIRouter

from app.api import redis_databases

# Main API router - all routes will be prefixed with /api
api_router = APIRouter(prefix="/api")

api_router.include_router(redis_databases.router)
