"""
Management command to delete usage rows whose owner no longer exists.
"""

from django.core.management.base import BaseCommand

from attachments.models import AttachmentUsage


class Command(BaseCommand):
    help = 'Delete AttachmentUsage rows whose owner record cannot be resolved'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be deleted without making changes',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']

        usages = AttachmentUsage.objects.select_related('attachment')
        total_count = usages.count()

        if total_count == 0:
            self.stdout.write(self.style.SUCCESS('No attachment usages to check.'))
            return

        self.stdout.write(f'Checking {total_count} attachment usages...')

        orphans = [usage for usage in usages if usage.model is None]

        for usage in orphans:
            if dry_run:
                self.stdout.write(
                    f'  Would delete usage of attachment {usage.attachment_id} '
                    f'({usage.attachment.original_name}) by {usage.model_type}#{usage.model_id}'
                )
            else:
                usage.delete()

        if dry_run:
            self.stdout.write(self.style.WARNING(
                f'DRY RUN: Would have deleted {len(orphans)} orphaned usages. '
                f'Run without --dry-run to apply changes.'
            ))
        else:
            self.stdout.write(self.style.SUCCESS(
                f'Successfully deleted {len(orphans)} orphaned attachment usages.'
            ))
