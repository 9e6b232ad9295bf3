"""
Document Inventory API Endpoints
Track which supporting documents a company has on hand.
"""

from uuid import UUID

from fastapi import APIRouter
from sqlalchemy import select

from backend.api.deps import AsyncSessionDep
from backend.api.utils.lookups import get_company_or_404
from backend.models import DocumentInventory
from backend.schemas.profile import DocumentList, DocumentResponse, DocumentUpdate

router = APIRouter(prefix="/api/companies/{company_id}/documents", tags=["Documents"])


@router.get(
    "",
    response_model=DocumentList,
    summary="List documents",
    description="List a company's document inventory, ordered by document type.",
)
async def list_documents(
    company_id: UUID,
    db: AsyncSessionDep,
) -> DocumentList:
    await get_company_or_404(db, company_id)

    result = await db.execute(
        select(DocumentInventory)
        .where(DocumentInventory.company_id == company_id)
        .order_by(DocumentInventory.doc_type)
    )
    documents = result.scalars().all()

    return DocumentList(documents=[DocumentResponse.model_validate(doc) for doc in documents])


@router.put(
    "",
    response_model=DocumentResponse,
    summary="Save document",
    description="Create or replace the inventory entry for one document type.",
)
async def save_document(
    company_id: UUID,
    document_data: DocumentUpdate,
    db: AsyncSessionDep,
) -> DocumentResponse:
    """
    Upsert one document inventory entry, keyed by document type.

    The entry is replaced as a whole: omitted ``available`` is stored as
    false and omitted ``notes`` / ``expires_at`` are cleared.
    """
    await get_company_or_404(db, company_id)

    result = await db.execute(
        select(DocumentInventory).where(
            DocumentInventory.company_id == company_id,
            DocumentInventory.doc_type == document_data.doc_type,
        )
    )
    document = result.scalar_one_or_none()

    if not document:
        document = DocumentInventory(company_id=company_id, doc_type=document_data.doc_type)
        db.add(document)

    document.available = document_data.available
    document.notes = document_data.notes
    document.expires_at = document_data.expires_at

    await db.flush()
    await db.refresh(document)

    return DocumentResponse.model_validate(document)
