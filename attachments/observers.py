"""
Signal wiring that keeps attachment usages in sync with owner records.

Observers are connected explicitly with observe(), or for every installed
HasAttachments model on app start when ATTACHMENTS_AUTO_OBSERVE is enabled.

Only attachments that came from the attachable fields are revoked on save:
usages registered by hand through HasAttachments.register_usage() stay in
place until they are revoked or the owner is deleted.
"""

import logging

from django.db import transaction
from django.db.models.signals import post_delete, post_init, post_save

logger = logging.getLogger(__name__)

SNAPSHOT_ATTR = '_attachment_ids_snapshot'


class AttachmentObserver:
    """Reconciles usage rows when owners are loaded, saved or deleted."""

    def loaded(self, instance):
        """Remember the attachment ids the instance referenced when loaded."""
        deferred = instance.get_deferred_fields()
        if any(name in deferred for name in instance.attachable_attnames()):
            setattr(instance, SNAPSHOT_ATTR, None)
            return
        setattr(instance, SNAPSHOT_ATTR, instance.collect_attachment_ids())

    def saved(self, instance, created=False):
        """
        Register attachments newly referenced by the instance and revoke
        the ones its attachable fields no longer reference.
        """
        if created:
            previous = set()
        else:
            previous = getattr(instance, SNAPSHOT_ATTR, None) or set()

        referenced = instance.collect_attachment_ids()
        recorded = set(
            instance.usage_records().values_list('attachment_id', flat=True)
        )

        for attachment_id in referenced - recorded:
            instance.register_usage(attachment_id)
        for attachment_id in (previous - referenced) & recorded:
            instance.revoke_usage(attachment_id)

        setattr(instance, SNAPSHOT_ATTR, referenced)

    def deleted(self, instance):
        """Revoke every usage held by the instance."""
        attachment_ids = list(instance.usage_records().values_list('attachment_id', flat=True))
        for attachment_id in attachment_ids:
            instance.revoke_usage(attachment_id)


_observer = AttachmentObserver()


def _on_loaded(sender, instance, **kwargs):
    try:
        _observer.loaded(instance)
    except Exception as e:
        setattr(instance, SNAPSHOT_ATTR, None)
        logger.error(
            f"Failed to read attachment fields of {sender.__name__} (pk={instance.pk}): {e}",
            exc_info=True
        )


def _on_saved(sender, instance, created=False, raw=False, **kwargs):
    # Fixture loading must not create rows as a side effect
    if raw:
        return
    try:
        with transaction.atomic():
            _observer.saved(instance, created=created)
    except Exception as e:
        # Log error but don't break the save operation
        logger.error(
            f"Failed to sync attachment usages for {sender.__name__} (pk={instance.pk}): {e}",
            exc_info=True
        )


def _on_deleted(sender, instance, **kwargs):
    try:
        with transaction.atomic():
            _observer.deleted(instance)
    except Exception as e:
        logger.error(
            f"Failed to clear attachment usages for {sender.__name__} (pk={instance.pk}): {e}",
            exc_info=True
        )


def observe(model_cls):
    """
    Connect the attachment observer to a model class.

    Connecting the same model twice has no effect.
    """
    uid = f"attachments_observer:{model_cls._meta.label}"
    post_init.connect(_on_loaded, sender=model_cls, dispatch_uid=f"{uid}:loaded", weak=False)
    post_save.connect(_on_saved, sender=model_cls, dispatch_uid=f"{uid}:saved", weak=False)
    post_delete.connect(_on_deleted, sender=model_cls, dispatch_uid=f"{uid}:deleted", weak=False)
    return model_cls
