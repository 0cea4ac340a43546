from django.contrib import admin

from .models import Attachment, AttachmentUsage


class AttachmentUsageInline(admin.TabularInline):
    model = AttachmentUsage
    extra = 0
    readonly_fields = ['model_type', 'model_id']
    can_delete = False


@admin.register(Attachment)
class AttachmentAdmin(admin.ModelAdmin):
    list_display = ['created_at', 'original_name', 'get_file_size', 'created_by', 'get_usage_count']
    list_filter = ['created_at']
    search_fields = ['original_name', 'sha256']
    readonly_fields = ['created_at', 'sha256', 'get_file_size', 'storage_path']
    inlines = [AttachmentUsageInline]

    fieldsets = (
        (None, {'fields': ('original_name', 'content_type')}),
        ('Storage', {'fields': ('storage_path', 'get_file_size', 'sha256')}),
        ('Metadata', {'fields': ('created_at', 'created_by')}),
    )

    def get_file_size(self, obj):
        if obj.size_bytes:
            # Convert bytes to human-readable format
            size = obj.size_bytes
            for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
                if size < 1024.0 or unit == 'TB':
                    return f"{size:.2f} {unit}"
                size /= 1024.0
        return "-"
    get_file_size.short_description = 'File Size'

    def get_usage_count(self, obj):
        return obj.usages.count()
    get_usage_count.short_description = 'Usages'


@admin.register(AttachmentUsage)
class AttachmentUsageAdmin(admin.ModelAdmin):
    list_display = ['attachment', 'model_type', 'model_id']
    list_filter = ['model_type']
    search_fields = ['attachment__original_name', 'model_id']
    raw_id_fields = ['attachment']
