"""
Reports router — six-month income/expense, fee and salary trends, with export.
"""

from typing import Literal

from fastapi import APIRouter, Depends

from madrasah.core.dependencies import repository
from madrasah.repositories.dashboard import DashboardRepository
from madrasah.utils.export import export_response
from madrasah.utils.response import success_response

router = APIRouter(prefix="/api/reports", tags=["Reports"])

TREND_COLUMNS = [
    ("month", "মাস"),
    ("income", "আয়"),
    ("expense", "ব্যয়"),
    ("net", "নিট"),
    ("fees", "ফি আদায়"),
    ("salaries", "বেতন প্রদান"),
]


@router.get("")
async def get_reports(repo: DashboardRepository = Depends(repository(DashboardRepository))):
    return success_response(data=repo.reports())


@router.get("/export")
async def export_reports(
    format: Literal["csv", "json"] = "csv",
    repo: DashboardRepository = Depends(repository(DashboardRepository)),
):
    data = repo.reports()
    # the three series share the same six months in the same order
    rows = [
        {**trend, "fees": fee["amount"], "salaries": salary["amount"]}
        for trend, fee, salary in zip(data["monthly_trends"], data["fee_collection"], data["salary_payments"])
    ]
    return export_response(rows, TREND_COLUMNS, format, "monthly_report")
