"""
Capability mixin for models that use attachments.
"""

from collections.abc import Iterable
from typing import List, Optional, Set, Union

from django.core.exceptions import FieldDoesNotExist
from django.db.models import QuerySet

from attachments.models import Attachment, AttachmentUsage
from attachments.services.usage import UsageResult, get_usage_service


class HasAttachments:
    """
    Mixin for Django models whose fields reference attachments.

    Subclasses list the fields holding attachment ids (or Attachment
    instances, or iterables of either) in get_attachable_fields(). The
    owner type tag defaults to the model label; set usage_model_type to pin
    it to a custom tag, and map that tag in ATTACHMENTS_MORPH_MAP so usages
    can be resolved back to the owner.

    Example:
        >>> class Article(HasAttachments, models.Model):
        ...     cover_id = models.PositiveIntegerField(null=True)
        ...
        ...     def get_attachable_fields(self):
        ...         return ['cover_id']
    """

    usage_model_type: Optional[str] = None

    def get_attachable_fields(self) -> List[str]:
        raise NotImplementedError(
            f"{type(self).__name__} must define get_attachable_fields()"
        )

    def resolve_usage_owner_type(self) -> str:
        if self.usage_model_type is not None:
            return self.usage_model_type
        return self._meta.label

    def resolve_usage_owner_id(self):
        return self.pk

    def usage_records(self) -> QuerySet:
        """Usage rows recorded for this instance."""
        if self.resolve_usage_owner_id() is None:
            return AttachmentUsage.objects.none()
        return get_usage_service().usages_for(
            self.resolve_usage_owner_id(),
            self.resolve_usage_owner_type(),
        )

    def attachments(self) -> QuerySet:
        """Attachments used by this instance."""
        if self.resolve_usage_owner_id() is None:
            return Attachment.objects.none()
        return get_usage_service().attachments_for(
            self.resolve_usage_owner_id(),
            self.resolve_usage_owner_type(),
        )

    def register_usage(self, attachment: Union[Attachment, int]) -> UsageResult:
        return get_usage_service().add_usage(
            attachment,
            self.resolve_usage_owner_id(),
            self.resolve_usage_owner_type(),
        )

    def revoke_usage(self, attachment: Union[Attachment, int]) -> UsageResult:
        return get_usage_service().remove_usage(
            attachment,
            self.resolve_usage_owner_id(),
            self.resolve_usage_owner_type(),
        )

    def attachment_can_download(self, user, attachment: Attachment) -> bool:
        """
        Fallback check for private attachment downloads.

        Owners that expose attachments to users override this.
        """
        return False

    def _attachable_attname(self, name: str) -> str:
        try:
            field = self._meta.get_field(name)
        except FieldDoesNotExist:
            return name
        # Foreign keys are read by id so the related row is never fetched
        if field.many_to_one or (field.one_to_one and field.concrete):
            return field.attname
        return name

    def attachable_attnames(self) -> List[str]:
        """Attribute names holding the raw values of the attachable fields."""
        return [self._attachable_attname(name) for name in self.get_attachable_fields()]

    def collect_attachment_ids(self) -> Set[int]:
        """
        Gather attachment ids currently referenced by the attachable fields.

        Returns:
            Set of attachment primary keys
        """
        ids = set()
        for name in self.attachable_attnames():
            value = getattr(self, name, None)
            if value is None or value == '':
                continue
            if isinstance(value, (str, bytes, Attachment)) or not isinstance(value, Iterable):
                value = [value]
            for item in value:
                if isinstance(item, Attachment):
                    item = item.pk
                if item is None or item == '':
                    continue
                ids.add(int(item))
        return ids
