"""
Salaries router — payment history with month/year filters, stats, new payment, slip PDF.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends

from madrasah.core.dependencies import first_row, not_found, repository
from madrasah.core.enums import MONTHS
from madrasah.repositories.salaries import SalaryRepository
from madrasah.schemas.common import generated_id
from madrasah.schemas.salaries import SalaryPaymentForm
from madrasah.services.aggregation import search_rows
from madrasah.utils.export import pdf_response, salary_slip_pdf
from madrasah.utils.response import success_response

router = APIRouter(prefix="/api/salaries", tags=["Salaries"])

ALL_MONTHS = "সকল"
SEARCH_FIELDS = ("staff.name", "staff.staff_id", "payment_id")


@router.get("")
async def list_salary_payments(
    search: Optional[str] = None,
    month: Optional[str] = None,
    year: Optional[int] = None,
    repo: SalaryRepository = Depends(repository(SalaryRepository)),
):
    """Defaults to the current month and year; ``month=সকল`` lists the whole year."""
    today = date.today()
    month = month or MONTHS[today.month - 1]
    year = year or today.year

    rows = search_rows(repo.list(), search, SEARCH_FIELDS)
    rows = [
        r for r in rows
        if r.get("year") == year and (month == ALL_MONTHS or r.get("month") == month)
    ]
    return success_response(data={
        "payments": rows,
        "stats": repo.stats(MONTHS[today.month - 1], today.year),
    })


@router.get("/{row_id}")
async def get_salary_payment(row_id: str, repo: SalaryRepository = Depends(repository(SalaryRepository))):
    payment = repo.get_payment(row_id)
    if not payment:
        raise not_found("Salary payment")
    return success_response(data=payment)


@router.post("")
async def create_salary_payment(
    body: SalaryPaymentForm,
    repo: SalaryRepository = Depends(repository(SalaryRepository)),
):
    payment = first_row(repo.create(body.to_record(generated_id("SAL"))), "Salary payment")
    return success_response(data=payment, message="বেতন প্রদান সফলভাবে রেকর্ড করা হয়েছে")


@router.get("/{row_id}/slip")
async def salary_slip(row_id: str, repo: SalaryRepository = Depends(repository(SalaryRepository))):
    payment = repo.get_payment(row_id)
    if not payment:
        raise not_found("Salary payment")
    content = salary_slip_pdf(payment, repo.ctx.settings.PDF_FONT_PATH)
    return pdf_response(content, f"salary_slip_{payment.get('payment_id', row_id)}.pdf")
