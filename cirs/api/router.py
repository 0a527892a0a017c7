"""Central router that includes all sub-routers."""

from fastapi import APIRouter

from cirs.api.pages import router as pages_router
from cirs.api.reports import router as reports_router

api_router = APIRouter()
api_router.include_router(pages_router)
api_router.include_router(reports_router)
