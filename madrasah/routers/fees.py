"""
Fees router — fee structures, payments, monthly collection figures, receipts.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends

from madrasah.core.dependencies import first_row, not_found, repository
from madrasah.core.enums import WindowFilter
from madrasah.repositories.fees import FeeRepository
from madrasah.schemas.fees import FeePaymentForm, FeeStructureForm, FeeStructureUpdate
from madrasah.services.aggregation import filter_by_window, sum_amounts
from madrasah.utils.export import fee_receipt_pdf, pdf_response
from madrasah.utils.response import success_response

router = APIRouter(prefix="/api/fees", tags=["Fees"])


# ===== STRUCTURES =====

@router.get("/structures")
async def list_fee_structures(repo: FeeRepository = Depends(repository(FeeRepository))):
    structures = repo.list_structures()
    return success_response(data={
        "structures": structures,
        "active": sum(1 for s in structures if s.get("is_active")),
    })


@router.post("/structures")
async def create_fee_structure(body: FeeStructureForm, repo: FeeRepository = Depends(repository(FeeRepository))):
    structure = first_row(repo.create_structure(body.to_record()), "Fee structure")
    return success_response(data=structure, message="ফি কাঠামো যোগ করা হয়েছে")


@router.patch("/structures/{row_id}")
async def update_fee_structure(
    row_id: str,
    body: FeeStructureUpdate,
    repo: FeeRepository = Depends(repository(FeeRepository)),
):
    changes = body.model_dump(exclude_unset=True, mode="json")
    structure = first_row(repo.update_structure(row_id, changes), "Fee structure")
    return success_response(data=structure, message="ফি কাঠামো আপডেট করা হয়েছে")


@router.delete("/structures/{row_id}")
async def delete_fee_structure(row_id: str, repo: FeeRepository = Depends(repository(FeeRepository))):
    first_row(repo.delete_structure(row_id), "Fee structure")
    return success_response(message="ফি কাঠামো মুছে ফেলা হয়েছে")


# ===== PAYMENTS =====

@router.get("/payments")
async def list_fee_payments(
    student_id: Optional[str] = None,
    repo: FeeRepository = Depends(repository(FeeRepository)),
):
    payments = repo.list_payments(student_id)
    this_month = filter_by_window(payments, WindowFilter.MONTHLY, "payment_date")
    return success_response(data={
        "payments": payments,
        "this_month": {"count": len(this_month), "total": sum_amounts(this_month)},
    })


@router.post("/payments")
async def record_fee_payment(body: FeePaymentForm, repo: FeeRepository = Depends(repository(FeeRepository))):
    payment = first_row(repo.record_payment(body.to_record()), "Fee payment")
    return success_response(data=payment, message="ফি পেমেন্ট রেকর্ড করা হয়েছে")


@router.get("/payments/{row_id}/receipt")
async def fee_receipt(row_id: str, repo: FeeRepository = Depends(repository(FeeRepository))):
    payment = repo.get_payment(row_id)
    if not payment:
        raise not_found("Fee payment")
    content = fee_receipt_pdf(payment, repo.ctx.settings.PDF_FONT_PATH)
    stamp = payment.get("receipt_number") or date.today().isoformat()
    return pdf_response(content, f"fee_receipt_{stamp}.pdf")
