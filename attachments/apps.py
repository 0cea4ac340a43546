import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class AttachmentsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'attachments'
    verbose_name = 'Attachments'

    def ready(self):
        """Boot the extension presets and wire observers for owner models."""
        from attachments import conf
        from attachments.mixins import HasAttachments
        from attachments.observers import observe
        from attachments.validators.presets import default_presets

        default_presets.boot()

        if not conf.auto_observe():
            return

        for model in self.apps.get_models():
            if issubclass(model, HasAttachments):
                observe(model)
                logger.debug(f"Observing {model._meta.label} for attachment usages")
