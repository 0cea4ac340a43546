"""
Owner models used by the attachments test suite.
"""

from django.db import models

from attachments.mixins import HasAttachments


class Article(HasAttachments, models.Model):
    title = models.CharField(max_length=200)
    cover_id = models.PositiveIntegerField(null=True, blank=True)
    gallery_ids = models.JSONField(default=list, blank=True)

    def get_attachable_fields(self):
        return ['cover_id', 'gallery_ids']


class Post(HasAttachments, models.Model):
    usage_model_type = 'post'

    slug = models.SlugField(primary_key=True)
    file = models.ForeignKey(
        'attachments.Attachment',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
    )

    def get_attachable_fields(self):
        return ['file']
