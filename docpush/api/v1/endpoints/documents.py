"""
Published documentation endpoints.

Read-only access to the documentation tree, document content and
revision history.
"""

from fastapi import APIRouter, Query

from docpush.api.dependencies import DocumentServiceDep
from docpush.core.logging import get_logger
from docpush.schemas.document import DocumentResponse, HistoryResponse, TreeResponse

logger = get_logger(__name__)
router = APIRouter()


@router.get("/tree", response_model=TreeResponse)
async def get_tree(document_service: DocumentServiceDep) -> TreeResponse:
    """
    Get the documentation tree.

    Returns:
        Every file and directory under the documentation root
    """
    return TreeResponse(tree=await document_service.get_tree())


# Declared before the catch-all content route so ".../history" is not read as a path
@router.get("/{path:path}/history", response_model=HistoryResponse)
async def get_history(path: str, document_service: DocumentServiceDep) -> HistoryResponse:
    """Get the most recent revisions of a document."""
    history = await document_service.get_history(path)
    return HistoryResponse(path=path, history=history)


@router.get("/{path:path}", response_model=DocumentResponse)
async def get_document(
    path: str,
    document_service: DocumentServiceDep,
    ref: str | None = Query(None, description="Branch or commit (defaults to the base branch)"),
) -> DocumentResponse:
    """
    Get a document's content.

    Args:
        path: Document path relative to the documentation root
        ref: Optional branch or commit

    Returns:
        Document content and fingerprint
    """
    document = await document_service.get_content(path, ref)
    return DocumentResponse(
        path=document.path, content=document.content, fingerprint=document.fingerprint
    )
