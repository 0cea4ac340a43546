"""
Settings accessors for the attachments app.

All settings are optional:

    ATTACHMENTS_AUTO_OBSERVE = True
    ATTACHMENTS_MORPH_MAP = {'post': 'blog.Post'}
    ATTACHMENTS_EXTENSION_PRESETS = {'archives': ['zip', '7z']}
"""

from typing import Dict, List

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured


def auto_observe() -> bool:
    """Whether HasAttachments models are observed automatically on app start."""
    return bool(getattr(settings, 'ATTACHMENTS_AUTO_OBSERVE', True))


def morph_map() -> Dict[str, str]:
    """
    Owner type tags mapped to model labels.

    Returns:
        Dict of tag -> "app_label.ModelName"

    Raises:
        ImproperlyConfigured: If the setting is not a mapping of strings
    """
    value = getattr(settings, 'ATTACHMENTS_MORPH_MAP', None) or {}
    if not isinstance(value, dict):
        raise ImproperlyConfigured('ATTACHMENTS_MORPH_MAP must be a dict')
    for tag, label in value.items():
        if not isinstance(tag, str) or not isinstance(label, str):
            raise ImproperlyConfigured(
                f"ATTACHMENTS_MORPH_MAP entries must be strings, got {tag!r}: {label!r}"
            )
    return value


def extra_presets() -> Dict[str, List[str]]:
    """
    Additional extension presets declared by the project.

    Raises:
        ImproperlyConfigured: If a preset is not a list of strings
    """
    value = getattr(settings, 'ATTACHMENTS_EXTENSION_PRESETS', None) or {}
    if not isinstance(value, dict):
        raise ImproperlyConfigured('ATTACHMENTS_EXTENSION_PRESETS must be a dict')

    presets = {}
    for name, extensions in value.items():
        if isinstance(extensions, str):
            extensions = [extensions]
        if not isinstance(extensions, (list, tuple)) or not all(isinstance(ext, str) for ext in extensions):
            raise ImproperlyConfigured(
                f"Extension preset '{name}' must be a list of strings"
            )
        presets[name] = [ext.lstrip('.') for ext in extensions]
    return presets
