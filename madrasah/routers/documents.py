"""
Documents router — upload to storage, list/search, delete.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from madrasah.core.dependencies import first_row, repository
from madrasah.core.enums import DocumentCategory
from madrasah.repositories.documents import DocumentRepository
from madrasah.schemas.notices import DocumentForm
from madrasah.services.aggregation import search_rows
from madrasah.utils.response import success_response

router = APIRouter(prefix="/api/documents", tags=["Documents"])


@router.get("")
async def list_documents(
    search: Optional[str] = None,
    repo: DocumentRepository = Depends(repository(DocumentRepository)),
):
    documents = repo.list()
    counts = {c.name.lower(): sum(1 for d in documents if d.get("category") == c.value) for c in DocumentCategory}
    return success_response(data={
        "documents": search_rows(documents, search, ("title", "category")),
        "counts": {"total": len(documents), **counts},
    })


@router.post("")
async def upload_document(
    title: str = Form(..., min_length=1, max_length=200),
    category: DocumentCategory = Form(...),
    description: Optional[str] = Form(None),
    file: UploadFile = File(...),
    repo: DocumentRepository = Depends(repository(DocumentRepository)),
):
    form = DocumentForm(title=title, category=category, description=description)
    content = await file.read()
    rows = repo.upload(file.filename or "upload", content, file.content_type, form.to_record)
    return success_response(data=first_row(rows, "Document"), message="ডকুমেন্ট আপলোড হয়েছে")


@router.delete("/{row_id}")
async def delete_document(row_id: str, repo: DocumentRepository = Depends(repository(DocumentRepository))):
    first_row(repo.delete(row_id), "Document")
    return success_response(message="ডকুমেন্ট মুছে ফেলা হয়েছে")
