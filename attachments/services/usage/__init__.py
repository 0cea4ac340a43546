"""
Attachment Usage Service

Registers and revokes the usage of attachments by owner records, and
resolves extensions of uploaded files.
"""

from .service import AttachmentUsageService, UsageResult, get_usage_service

__all__ = [
    'AttachmentUsageService',
    'UsageResult',
    'get_usage_service',
]
