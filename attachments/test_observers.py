"""
Tests for attachment usage synchronisation on save and delete
"""

from django.db.models.signals import post_delete, post_save
from django.test import TestCase

from attachments.models import Attachment, AttachmentUsage
from attachments.observers import AttachmentObserver, observe
from testapp.models import Article, Post


class AttachmentObserverTestCase(TestCase):
    """Test usage reconciliation driven by model signals."""

    def setUp(self):
        self.cover = Attachment.objects.create(original_name='cover.png', size_bytes=10)
        self.photo = Attachment.objects.create(original_name='photo.jpg', size_bytes=10)
        self.other = Attachment.objects.create(original_name='other.gif', size_bytes=10)

    def used_ids(self, owner):
        return set(owner.usage_records().values_list('attachment_id', flat=True))

    def test_create_registers_usages(self):
        article = Article.objects.create(
            title='Hello',
            cover_id=self.cover.id,
            gallery_ids=[self.photo.id],
        )

        self.assertEqual(self.used_ids(article), {self.cover.id, self.photo.id})

    def test_update_reconciles_usages(self):
        article = Article.objects.create(
            title='Hello',
            cover_id=self.cover.id,
            gallery_ids=[self.photo.id],
        )

        article.cover_id = self.other.id
        article.gallery_ids = []
        article.save()

        self.assertEqual(self.used_ids(article), {self.other.id})
        self.assertFalse(self.cover.usages.exists())
        self.assertFalse(self.photo.usages.exists())

    def test_delete_revokes_usages(self):
        article = Article.objects.create(title='Hello', cover_id=self.cover.id)
        article_id = article.pk

        article.delete()

        self.assertFalse(
            AttachmentUsage.objects.filter(model_type='testapp.Article', model_id=str(article_id)).exists()
        )

    def test_custom_owner_type(self):
        post = Post.objects.create(slug='hello-world', file=self.cover)

        usage = AttachmentUsage.objects.get()
        self.assertEqual(usage.model_type, 'post')
        self.assertEqual(usage.model_id, 'hello-world')
        self.assertEqual(self.used_ids(post), {self.cover.id})

    def test_missing_attachment_id_is_skipped(self):
        with self.assertLogs('attachments.services.usage.service', level='WARNING'):
            article = Article.objects.create(title='Hello', gallery_ids=[99999])

        self.assertFalse(article.usage_records().exists())

    def test_failure_does_not_break_save(self):
        with self.assertLogs('attachments.observers', level='ERROR'):
            article = Article.objects.create(title='Hello', gallery_ids=['not-an-id'])

        self.assertTrue(Article.objects.filter(pk=article.pk).exists())
        self.assertFalse(AttachmentUsage.objects.exists())

    def test_observe_is_idempotent(self):
        observe(Article)
        observe(Article)

        self.assertTrue(post_save.has_listeners(Article))
        self.assertTrue(post_delete.has_listeners(Article))

        article = Article.objects.create(title='Hello', cover_id=self.cover.id)
        self.assertEqual(article.usage_records().count(), 1)

    def test_observer_can_be_called_directly(self):
        article = Article.objects.create(title='Hello')
        AttachmentUsage.objects.all().delete()
        article.cover_id = self.cover.id

        AttachmentObserver().saved(article)

        self.assertEqual(self.used_ids(article), {self.cover.id})


class ManualUsageTestCase(TestCase):
    """Test that saves only reconcile ids coming from attachable fields."""

    def setUp(self):
        self.cover = Attachment.objects.create(original_name='cover.png', size_bytes=10)
        self.manual = Attachment.objects.create(original_name='manual.pdf', size_bytes=10)

    def test_manual_usage_survives_unrelated_save(self):
        article = Article.objects.create(title='Hello')
        article.register_usage(self.manual)

        article.title = 'Renamed'
        article.save()

        self.assertTrue(article.usage_records().filter(attachment=self.manual).exists())

    def test_manual_usage_survives_save_of_reloaded_instance(self):
        article = Article.objects.create(title='Hello', cover_id=self.cover.id)
        article.register_usage(self.manual)

        reloaded = Article.objects.get(pk=article.pk)
        reloaded.title = 'Renamed'
        reloaded.save()

        self.assertEqual(
            set(reloaded.usage_records().values_list('attachment_id', flat=True)),
            {self.cover.id, self.manual.id},
        )

    def test_field_change_on_reloaded_instance_revokes_old_id(self):
        article = Article.objects.create(title='Hello', cover_id=self.cover.id)
        article.register_usage(self.manual)

        reloaded = Article.objects.get(pk=article.pk)
        reloaded.cover_id = None
        reloaded.save()

        self.assertEqual(
            list(reloaded.usage_records().values_list('attachment_id', flat=True)),
            [self.manual.id],
        )

    def test_loading_does_not_fetch_related_attachment(self):
        Post.objects.create(slug='hello', file=self.cover)

        with self.assertNumQueries(1):
            post = Post.objects.get(pk='hello')

        self.assertEqual(post.collect_attachment_ids(), {self.cover.id})

    def test_deferred_attachable_field(self):
        article = Article.objects.create(title='Hello', cover_id=self.cover.id)

        deferred = Article.objects.defer('cover_id').get(pk=article.pk)
        deferred.title = 'Renamed'
        deferred.save(update_fields=['title'])

        self.assertTrue(article.usage_records().filter(attachment=self.cover).exists())
