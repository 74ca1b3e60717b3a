"""
Dashboard router — headline counters for the landing page.
"""

from fastapi import APIRouter, Depends

from madrasah.core.dependencies import repository
from madrasah.repositories.dashboard import DashboardRepository
from madrasah.utils.response import success_response

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])


@router.get("/stats")
async def get_dashboard_stats(repo: DashboardRepository = Depends(repository(DashboardRepository))):
    """Active students per department, staff head count, this month's income and expense."""
    return success_response(data=repo.stats())
