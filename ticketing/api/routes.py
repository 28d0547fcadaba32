from fastapi import APIRouter
from ticketing.api import sync_api
from ticketing.health import health_check_routes


api_router = APIRouter()


api_router.include_router(sync_api.sync_router, tags=["Sync"])
api_router.include_router(health_check_routes, tags=['Container health'])
