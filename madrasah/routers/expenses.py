"""
Expenses router — windowed list, batch grouping, category stats, single and
batch entry, deletes, export.
"""

from typing import Literal, Optional

from fastapi import APIRouter, Depends

from madrasah.core.dependencies import first_row, repository
from madrasah.core.enums import WindowFilter
from madrasah.repositories.expenses import ExpenseRepository
from madrasah.schemas.expenses import BulkExpenseForm, ExpenseForm
from madrasah.services.aggregation import group_expense_batches, search_rows
from madrasah.services.stats import expense_stats
from madrasah.utils.export import export_response
from madrasah.utils.response import success_response

router = APIRouter(prefix="/api/expenses", tags=["Expenses"])

SEARCH_FIELDS = ("title", "expense_id", "category", "batch_name")
EXPORT_COLUMNS = [
    ("expense_date", "তারিখ"),
    ("expense_id", "আইডি"),
    ("title", "শিরোনাম"),
    ("category", "ক্যাটাগরি"),
    ("amount", "পরিমাণ"),
    ("description", "বিবরণ"),
]


@router.get("")
async def list_expenses(
    window: WindowFilter = WindowFilter.MONTHLY,
    search: Optional[str] = None,
    repo: ExpenseRepository = Depends(repository(ExpenseRepository)),
):
    """Rows in the window, the same rows grouped into batches, and the window's stats."""
    expenses = search_rows(repo.list(window), search, SEARCH_FIELDS)
    return success_response(data={
        "expenses": expenses,
        "groups": group_expense_batches(expenses),
        "stats": expense_stats(expenses),
    })


@router.get("/stats")
async def get_expense_stats(
    window: WindowFilter = WindowFilter.MONTHLY,
    repo: ExpenseRepository = Depends(repository(ExpenseRepository)),
):
    return success_response(data=repo.stats(window))


@router.get("/export")
async def export_expenses(
    window: WindowFilter = WindowFilter.MONTHLY,
    format: Literal["csv", "json"] = "csv",
    repo: ExpenseRepository = Depends(repository(ExpenseRepository)),
):
    return export_response(repo.list(window), EXPORT_COLUMNS, format, "expenses")


@router.post("")
async def create_expense(body: ExpenseForm, repo: ExpenseRepository = Depends(repository(ExpenseRepository))):
    expense = first_row(repo.create(body.to_record()), "Expense")
    return success_response(data=expense, message="খরচ সফলভাবে যোগ করা হয়েছে")


@router.post("/batch")
async def create_expense_batch(
    body: BulkExpenseForm,
    repo: ExpenseRepository = Depends(repository(ExpenseRepository)),
):
    batch_id, rows = repo.create_batch(body.to_records)
    return success_response(
        data={"batch_id": batch_id, "count": len(rows), "total": body.total, "items": rows},
        message=f"{len(rows)}টি খরচ যোগ করা হয়েছে",
    )


@router.delete("/batch/{batch_id}")
async def delete_expense_batch(batch_id: str, repo: ExpenseRepository = Depends(repository(ExpenseRepository))):
    rows = repo.delete_batch(batch_id)
    first_row(rows, "Expense batch")
    return success_response(data={"count": len(rows)}, message="ব্যাচ মুছে ফেলা হয়েছে")


@router.delete("/{row_id}")
async def delete_expense(row_id: str, repo: ExpenseRepository = Depends(repository(ExpenseRepository))):
    first_row(repo.delete(row_id), "Expense")
    return success_response(message="খরচ মুছে ফেলা হয়েছে")
