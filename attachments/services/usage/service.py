"""
Attachment Usage Service

Keeps the usage link table in sync with the records that use attachments.
"""

import enum
import logging
import mimetypes
import os
from typing import Optional, Union

from django.core.files.uploadedfile import UploadedFile
from django.db.models import QuerySet

from attachments.models import Attachment, AttachmentUsage

logger = logging.getLogger(__name__)


class UsageResult(enum.Enum):
    """Outcome of a usage mutation."""

    SKIPPED = 'skipped'
    REGISTERED = 'registered'
    REMOVED = 'removed'


class AttachmentUsageService:
    """
    Service for managing attachment usage links.

    Mutations never raise for an unsaved owner or a missing attachment: they
    return UsageResult.SKIPPED without touching the database, so they are
    safe to call from model lifecycle hooks.

    Example:
        >>> service = get_usage_service()
        >>> service.add_usage(attachment, article.pk, 'blog.Article')
        <UsageResult.REGISTERED: 'registered'>
    """

    def _resolve_attachment(self, attachment: Union[Attachment, int, None]) -> Optional[Attachment]:
        if attachment is None:
            return None

        if isinstance(attachment, Attachment):
            if attachment.pk is None:
                logger.warning(
                    f"Attachment {attachment.original_name!r} is not saved yet, usage change skipped"
                )
                return None
            return attachment

        resolved = Attachment.objects.filter(pk=attachment).first()
        if resolved is None:
            logger.warning(f"Attachment {attachment} not found, usage change skipped")
        return resolved

    def add_usage(
        self,
        attachment: Union[Attachment, int],
        owner_id: Union[int, str, None],
        owner_type: str,
    ) -> UsageResult:
        """
        Register that an owner uses an attachment.

        Args:
            attachment: Attachment instance or its id
            owner_id: Primary key of the owner (None for unsaved owners)
            owner_type: Owner type tag

        Returns:
            UsageResult.REGISTERED, or UsageResult.SKIPPED if the owner id or
            attachment could not be resolved
        """
        if owner_id is None:
            logger.debug(f"Owner {owner_type} has no key yet, usage registration skipped")
            return UsageResult.SKIPPED

        attachment = self._resolve_attachment(attachment)
        if attachment is None:
            return UsageResult.SKIPPED

        _, created = AttachmentUsage.objects.get_or_create(
            attachment=attachment,
            model_id=str(owner_id),
            model_type=owner_type,
        )
        if created:
            logger.info(f"Attachment {attachment.pk} now used by {owner_type}#{owner_id}")
        return UsageResult.REGISTERED

    def remove_usage(
        self,
        attachment: Union[Attachment, int],
        owner_id: Union[int, str, None],
        owner_type: str,
    ) -> UsageResult:
        """
        Revoke an owner's usage of an attachment.

        Deleting a usage that does not exist is not an error.

        Returns:
            UsageResult.REMOVED, or UsageResult.SKIPPED if the owner id or
            attachment could not be resolved
        """
        if owner_id is None:
            logger.debug(f"Owner {owner_type} has no key yet, usage removal skipped")
            return UsageResult.SKIPPED

        attachment = self._resolve_attachment(attachment)
        if attachment is None:
            return UsageResult.SKIPPED

        deleted, _ = AttachmentUsage.objects.filter(
            attachment=attachment,
            model_id=str(owner_id),
            model_type=owner_type,
        ).delete()
        logger.info(
            f"Removed {deleted} usage(s) of attachment {attachment.pk} by {owner_type}#{owner_id}"
        )
        return UsageResult.REMOVED

    def usages_for(self, owner_id: Union[int, str, None], owner_type: str) -> QuerySet:
        """Usage rows of a single owner."""
        if owner_id is None:
            return AttachmentUsage.objects.none()
        return AttachmentUsage.objects.filter(model_id=str(owner_id), model_type=owner_type)

    def attachments_for(self, owner_id: Union[int, str, None], owner_type: str) -> QuerySet:
        """Attachments used by a single owner."""
        if owner_id is None:
            return Attachment.objects.none()
        return Attachment.objects.filter(
            usages__model_id=str(owner_id),
            usages__model_type=owner_type,
        ).distinct()

    def get_uploaded_file_extension(self, upload) -> Optional[str]:
        """
        Resolve the extension of an uploaded file.

        Uses the client file name first, then the declared content type.

        Args:
            upload: UploadedFile instance

        Returns:
            Lowercase extension without leading dot, or None
        """
        if not isinstance(upload, UploadedFile):
            return None

        _, ext = os.path.splitext(os.path.basename(upload.name or ''))
        if not ext and upload.content_type:
            ext = mimetypes.guess_extension(upload.content_type.split(';')[0].strip()) or ''

        ext = ext.lstrip('.').lower()
        return ext or None


_usage_service = None


def get_usage_service() -> AttachmentUsageService:
    """Return the process-wide usage service."""
    global _usage_service
    if _usage_service is None:
        _usage_service = AttachmentUsageService()
    return _usage_service
