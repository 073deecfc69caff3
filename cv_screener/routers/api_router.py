from fastapi import APIRouter
from cv_screener.routers import analyze, results, keyword_lists

# Centralized API router hub
# Routers are aggregated here, and main.py only imports this single hub.
api_router = APIRouter()

api_router.include_router(analyze.router, tags=["Analysis"])
api_router.include_router(results.router, tags=["Results"])
api_router.include_router(keyword_lists.router, tags=["Keyword Lists"])
