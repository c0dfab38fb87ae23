"""Persistence layer for attachment catalog records."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..db.db_models import AttachmentModel, utcnow
from ..exceptions import ensure_found, handle_sqlalchemy_errors
from ..media.media_models import AttachmentRecord


class AttachmentRepository:
    """Insert attachments and attach derivative metadata to them."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def insert_attachment(
        self,
        *,
        guid: str,
        mime_type: str,
        title: str,
        file_path: str,
        content: str = "",
        status: str = "inherit",
    ) -> AttachmentRecord:
        now = utcnow()
        with handle_sqlalchemy_errors(entity="attachment"):
            with self._session_factory() as session:
                model = AttachmentModel(
                    guid=guid,
                    mime_type=mime_type,
                    title=title,
                    content=content,
                    status=status,
                    file_path=file_path,
                    created_at=now,
                    updated_at=now,
                )
                session.add(model)
                session.commit()
                return self._to_domain(model)

    def update_metadata(self, attachment_id: int, metadata: dict[str, Any]) -> AttachmentRecord:
        with handle_sqlalchemy_errors(entity="attachment"):
            with self._session_factory() as session:
                model = session.get(AttachmentModel, attachment_id)
                ensure_found(model, entity="attachment", identifier=attachment_id)
                model.metadata_json = json.dumps(metadata)
                model.updated_at = utcnow()
                session.commit()
                return self._to_domain(model)

    def get_attachment(self, attachment_id: int) -> AttachmentRecord:
        with self._session_factory() as session:
            model = session.get(AttachmentModel, attachment_id)
            ensure_found(model, entity="attachment", identifier=attachment_id)
            return self._to_domain(model)

    def count(self) -> int:
        with self._session_factory() as session:
            return session.scalar(select(func.count()).select_from(AttachmentModel)) or 0

    @staticmethod
    def _to_domain(model: AttachmentModel) -> AttachmentRecord:
        return AttachmentRecord(
            id=model.id,
            guid=model.guid,
            mime_type=model.mime_type,
            title=model.title,
            content=model.content,
            status=model.status,
            file_path=model.file_path,
            metadata=json.loads(model.metadata_json) if model.metadata_json else None,
            created_at=model.created_at,
        )
