import logging

from django.apps import apps
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils.translation import gettext_lazy as _

from attachments import conf

logger = logging.getLogger(__name__)


class Attachment(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_attachments',
    )
    original_name = models.CharField(max_length=500)
    content_type = models.CharField(max_length=255, blank=True)
    size_bytes = models.BigIntegerField(default=0)
    sha256 = models.CharField(max_length=64, blank=True, db_index=True)
    storage_path = models.CharField(max_length=1000, blank=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = _('Attachment')
        verbose_name_plural = _('Attachments')

    def __str__(self):
        return f"{self.original_name} (ID: {self.id})"


class AttachmentUsage(models.Model):
    """
    Records that an attachment is in use by an owner record.

    The owner is identified by an opaque id and a type tag instead of a
    content type, so override tags survive renames of the owning model.
    """

    attachment = models.ForeignKey(Attachment, on_delete=models.CASCADE, related_name='usages')
    model_id = models.CharField(max_length=255)
    model_type = models.CharField(max_length=255)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=['attachment', 'model_id', 'model_type'],
                name='unique_attachment_usage',
            )
        ]
        indexes = [
            models.Index(fields=['model_type', 'model_id'], name='attachment_usage_owner_idx'),
        ]
        ordering = ['attachment']
        verbose_name = _('Attachment usage')
        verbose_name_plural = _('Attachment usages')

    def __str__(self):
        return f"{self.attachment_id} -> {self.model_type}#{self.model_id}"

    @property
    def model(self):
        """
        Resolve the owner instance this usage points to.

        Returns:
            Owner model instance, or None if the type or row cannot be resolved
        """
        model_cls = resolve_owner_model(self.model_type)
        if model_cls is None:
            return None
        try:
            return model_cls._default_manager.filter(pk=self.model_id).first()
        except (ValueError, ValidationError):
            return None


def resolve_owner_model(model_type: str):
    """
    Find the model class behind an owner type tag.

    Morph map entries win over plain "app_label.ModelName" labels.
    """
    label = conf.morph_map().get(model_type, model_type)
    try:
        return apps.get_model(label)
    except (LookupError, ValueError):
        logger.debug(f"Unknown attachment owner type: {model_type}")
        return None
