"""
Tests for the HasAttachments mixin
"""

from django.contrib.auth import get_user_model
from django.test import TestCase

from attachments.mixins import HasAttachments
from attachments.models import Attachment, AttachmentUsage
from attachments.services.usage import UsageResult
from testapp.models import Article, Post

User = get_user_model()


class OwnerResolutionTestCase(TestCase):
    """Test owner id and type resolution."""

    def test_type_defaults_to_model_label(self):
        self.assertEqual(Article(title='A').resolve_usage_owner_type(), 'testapp.Article')

    def test_type_override(self):
        self.assertEqual(Post(slug='hello').resolve_usage_owner_type(), 'post')

    def test_owner_id(self):
        article = Article.objects.create(title='A')
        self.assertEqual(article.resolve_usage_owner_id(), article.pk)
        self.assertIsNone(Article(title='B').resolve_usage_owner_id())

    def test_attachable_fields_are_required(self):
        class Bare(HasAttachments):
            pass

        with self.assertRaises(NotImplementedError):
            Bare().get_attachable_fields()


class UsageRegistrationTestCase(TestCase):
    """Test registering and revoking usages through the owner."""

    def setUp(self):
        self.attachment = Attachment.objects.create(original_name='photo.jpg', size_bytes=10)
        self.article = Article.objects.create(title='Hello')

    def test_register_usage(self):
        result = self.article.register_usage(self.attachment)

        self.assertEqual(result, UsageResult.REGISTERED)
        usage = self.article.usage_records().get()
        self.assertEqual(usage.attachment, self.attachment)
        self.assertEqual(usage.model_type, 'testapp.Article')
        self.assertEqual(usage.model_id, str(self.article.pk))

    def test_register_usage_by_id(self):
        self.article.register_usage(self.attachment.id)
        self.assertEqual(list(self.article.attachments()), [self.attachment])

    def test_revoke_usage(self):
        self.article.register_usage(self.attachment)

        result = self.article.revoke_usage(self.attachment)

        self.assertEqual(result, UsageResult.REMOVED)
        self.assertFalse(self.article.usage_records().exists())

    def test_unsaved_owner_is_skipped(self):
        article = Article(title='Draft')

        with self.assertNumQueries(0):
            self.assertEqual(article.register_usage(self.attachment), UsageResult.SKIPPED)
            self.assertEqual(article.revoke_usage(self.attachment), UsageResult.SKIPPED)

        self.assertFalse(AttachmentUsage.objects.exists())
        self.assertFalse(article.attachments().exists())

    def test_unsaved_owner_has_no_usage_records(self):
        AttachmentUsage.objects.create(attachment=self.attachment, model_id='None', model_type='testapp.Article')

        with self.assertNumQueries(0):
            self.assertEqual(list(Article(title='Draft').usage_records()), [])

    def test_unsaved_attachment_is_skipped(self):
        draft = Attachment(original_name='a.pdf', size_bytes=1)

        with self.assertLogs('attachments.services.usage.service', level='WARNING'):
            self.assertEqual(self.article.register_usage(draft), UsageResult.SKIPPED)
            self.assertEqual(self.article.revoke_usage(draft), UsageResult.SKIPPED)

        self.assertFalse(self.article.usage_records().exists())

    def test_owners_do_not_share_usages(self):
        other = Article.objects.create(title='Other')
        self.article.register_usage(self.attachment)

        self.assertFalse(other.usage_records().exists())
        self.assertFalse(other.attachments().exists())

    def test_attachment_can_download_defaults_to_false(self):
        user = User.objects.create_user(username='reader', password='testpass123')
        self.assertFalse(self.article.attachment_can_download(user, self.attachment))


class CollectAttachmentIdsTestCase(TestCase):
    """Test gathering referenced attachment ids from attachable fields."""

    def test_scalar_and_list_fields(self):
        article = Article(title='A', cover_id=3, gallery_ids=[4, '5', 3])
        self.assertEqual(article.collect_attachment_ids(), {3, 4, 5})

    def test_empty_fields(self):
        article = Article(title='A', cover_id=None, gallery_ids=[])
        self.assertEqual(article.collect_attachment_ids(), set())

    def test_foreign_key_field(self):
        attachment = Attachment.objects.create(original_name='a.pdf', size_bytes=1)
        post = Post(slug='hello', file=attachment)
        self.assertEqual(post.collect_attachment_ids(), {attachment.pk})
