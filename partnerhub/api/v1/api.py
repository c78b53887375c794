from fastapi import APIRouter

from partnerhub.health_scoring import api as health_score
from partnerhub.search import api as search

api_router = APIRouter()

api_router.include_router(health_score.router, tags=["health-score"])
api_router.include_router(search.router, prefix="/search", tags=["search"])
