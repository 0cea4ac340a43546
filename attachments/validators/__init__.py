from .presets import ExtensionPresetTable, default_presets
from .rules import AttachmentUploadExtension

__all__ = [
    'AttachmentUploadExtension',
    'ExtensionPresetTable',
    'default_presets',
]
