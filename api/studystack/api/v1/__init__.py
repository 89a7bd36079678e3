"""
API v1 router aggregation.
"""
from fastapi import APIRouter
from studystack.api.v1.endpoints import hierarchy, cards, reviews, blanks

api_router = APIRouter()

# Include all endpoint routers
# Note: Each router already defines its own prefix, so we don't add another one here
api_router.include_router(hierarchy.router)
api_router.include_router(cards.router)
api_router.include_router(reviews.router)
api_router.include_router(blanks.router)
