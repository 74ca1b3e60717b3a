"""
Accounting router — income/expense ledger with per-type category breakdown.
"""

from typing import Literal, Optional

from fastapi import APIRouter, Depends

from madrasah.core.dependencies import first_row, repository
from madrasah.core.enums import TransactionType, WindowFilter
from madrasah.repositories.transactions import TransactionRepository
from madrasah.schemas.transactions import TransactionForm
from madrasah.services.aggregation import search_rows
from madrasah.services.stats import transaction_stats
from madrasah.utils.export import export_response
from madrasah.utils.response import success_response

router = APIRouter(prefix="/api/accounting", tags=["Accounting"])

SEARCH_FIELDS = ("title", "transaction_id", "category")
EXPORT_COLUMNS = [
    ("transaction_date", "তারিখ"),
    ("transaction_id", "আইডি"),
    ("title", "শিরোনাম"),
    ("type", "ধরন"),
    ("category", "ক্যাটাগরি"),
    ("amount", "পরিমাণ"),
    ("description", "বিবরণ"),
]


@router.get("/transactions")
async def list_transactions(
    window: WindowFilter = WindowFilter.MONTHLY,
    type: Optional[TransactionType] = None,
    search: Optional[str] = None,
    repo: TransactionRepository = Depends(repository(TransactionRepository)),
):
    transactions = repo.list(window)
    stats = transaction_stats(transactions)
    rows = search_rows(transactions, search, SEARCH_FIELDS)
    if type:
        rows = [t for t in rows if t.get("type") == type.value]
    return success_response(data={
        "transactions": rows,
        "stats": {
            **stats,
            "income_count": sum(1 for t in transactions if t.get("type") == TransactionType.INCOME.value),
            "expense_count": sum(1 for t in transactions if t.get("type") == TransactionType.EXPENSE.value),
        },
    })


@router.get("/transactions/export")
async def export_transactions(
    window: WindowFilter = WindowFilter.MONTHLY,
    format: Literal["csv", "json"] = "csv",
    repo: TransactionRepository = Depends(repository(TransactionRepository)),
):
    return export_response(repo.list(window), EXPORT_COLUMNS, format, "transactions")


@router.post("/transactions")
async def create_transaction(
    body: TransactionForm,
    repo: TransactionRepository = Depends(repository(TransactionRepository)),
):
    transaction = first_row(repo.create(body.to_record()), "Transaction")
    return success_response(data=transaction, message="লেনদেন সফলভাবে যোগ করা হয়েছে")


@router.delete("/transactions/{row_id}")
async def delete_transaction(
    row_id: str,
    repo: TransactionRepository = Depends(repository(TransactionRepository)),
):
    first_row(repo.delete(row_id), "Transaction")
    return success_response(message="লেনদেন মুছে ফেলা হয়েছে")
