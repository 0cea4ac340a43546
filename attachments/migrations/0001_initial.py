from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Attachment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('original_name', models.CharField(max_length=500)),
                ('content_type', models.CharField(blank=True, max_length=255)),
                ('size_bytes', models.BigIntegerField(default=0)),
                ('sha256', models.CharField(blank=True, db_index=True, max_length=64)),
                ('storage_path', models.CharField(blank=True, max_length=1000)),
                ('created_by', models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name='created_attachments',
                    to=settings.AUTH_USER_MODEL,
                )),
            ],
            options={
                'verbose_name': 'Attachment',
                'verbose_name_plural': 'Attachments',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='AttachmentUsage',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('model_id', models.CharField(max_length=255)),
                ('model_type', models.CharField(max_length=255)),
                ('attachment', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='usages',
                    to='attachments.attachment',
                )),
            ],
            options={
                'verbose_name': 'Attachment usage',
                'verbose_name_plural': 'Attachment usages',
                'ordering': ['attachment'],
                'indexes': [models.Index(fields=['model_type', 'model_id'], name='attachment_usage_owner_idx')],
            },
        ),
        migrations.AddConstraint(
            model_name='attachmentusage',
            constraint=models.UniqueConstraint(fields=('attachment', 'model_id', 'model_type'), name='unique_attachment_usage'),
        ),
    ]
