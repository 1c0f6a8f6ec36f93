"""
Type Editor Backend — Document Service
=======================================

What:  CRUD statements for the `documents` table.
Who:   Called by the /api/documents route handlers.
How:   Each operation issues one statement (plus a read-back where the
       response needs the stored row) on the request's session. The session
       dependency commits after the handler returns.

Error Handling:
    - Missing rows become NotFoundError (→ 404)
    - SQLAlchemy failures become DatabaseError (→ 500), details logged only
"""

import logging
from typing import List

from sqlalchemy import delete, desc, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from type_editor.database import utc_now
from type_editor.exceptions import DatabaseError, NotFoundError
from type_editor.models.document import Document
from type_editor.schemas.document import DocumentCreate, DocumentResponse

logger = logging.getLogger(__name__)


class DocumentService:
    """
    Business logic layer for document operations.

    Stateless: the session is passed into every call, so one instance is
    shared by all requests.
    """

    async def list_documents(self, db: AsyncSession) -> List[DocumentResponse]:
        """
        All documents, most recently updated first. No pagination or filter.

        Query plan:
            SELECT * FROM documents ORDER BY updated_at DESC, id DESC
            → idx_documents_updated_at
        """
        try:
            result = await db.execute(
                select(Document).order_by(desc(Document.updated_at), desc(Document.id))
            )
            return [DocumentResponse.model_validate(doc) for doc in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error("Database error listing documents: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve documents. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def create_document(self, db: AsyncSession, payload: DocumentCreate) -> DocumentResponse:
        """Insert a document and return the stored row with its generated id."""
        try:
            document = Document(title=payload.title)
            db.add(document)
            await db.flush()  # Assigns the id without committing
            await db.refresh(document)
            logger.info("Document created: %s", document.id)
            return DocumentResponse.model_validate(document)
        except SQLAlchemyError as e:
            logger.error("Database error creating document: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the document. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def get_document(self, db: AsyncSession, document_id: int) -> DocumentResponse:
        """
        Retrieve a single document.

        Raises:
            NotFoundError: No row with this id (→ 404)
            DatabaseError: Query execution failed (→ 500)
        """
        try:
            result = await db.execute(
                select(Document)
                .where(Document.id == document_id)
                .execution_options(populate_existing=True)
            )
            document = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching document %s: %s", document_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the document. Please try again.",
                context={"document_id": document_id},
            )

        if document is None:
            raise NotFoundError(resource="document", resource_id=str(document_id))

        return DocumentResponse.model_validate(document)

    async def update_document(
        self,
        db: AsyncSession,
        document_id: int,
        payload: DocumentCreate,
    ) -> DocumentResponse:
        """
        Overwrite the title, refresh updated_at, and return the stored row.

        The UPDATE's affected-row count is not inspected: updating a missing
        id is a no-op, and the read-back that follows reports NotFoundError.
        """
        try:
            await db.execute(
                update(Document)
                .where(Document.id == document_id)
                .values(title=payload.title, updated_at=utc_now())
            )
        except SQLAlchemyError as e:
            logger.error("Database error updating document %s: %s", document_id, str(e))
            raise DatabaseError(
                message="Could not update the document. Please try again.",
                context={"document_id": document_id},
            )

        document = await self.get_document(db, document_id)
        logger.info("Document updated: %s", document_id)
        return document

    async def delete_document(self, db: AsyncSession, document_id: int) -> None:
        """
        Delete a document. Its nodes and their content go with it through the
        ON DELETE CASCADE foreign keys.

        Not existence-checked: deleting an unknown id succeeds.
        """
        try:
            await db.execute(delete(Document).where(Document.id == document_id))
            logger.info("Document deleted: %s", document_id)
        except SQLAlchemyError as e:
            logger.error("Database error deleting document %s: %s", document_id, str(e))
            raise DatabaseError(
                message="Could not delete the document. Please try again.",
                context={"document_id": document_id},
            )


# ── Singleton Instance ────────────────────────────────────────────────────
document_service = DocumentService()
