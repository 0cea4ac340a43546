"""
Named sets of file extensions used by upload validation rules.
"""

import logging
import threading
from typing import Dict, Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)

PRESET_ALL_PERMITTED = 'all'
PRESET_IMAGES = 'images'
PRESET_IMAGES_OTHER = 'images-extended'
PRESET_MEDIA_VIDEO = 'media-video'
PRESET_MEDIA_AUDIO = 'media-audio'
PRESET_DOCUMENTS_ALL = 'docs'
PRESET_DOCUMENTS_TEXT = 'docs-doc'
PRESET_DOCUMENTS_TABLES = 'docs-xls'
PRESET_DOCUMENTS_PRESENTATIONS = 'docs-ppt'
PRESET_DOCUMENTS_OTHER = 'docs-other'

DEFAULT_PRESETS = {
    PRESET_IMAGES: ['jpg', 'jpeg', 'png', 'gif'],
    PRESET_IMAGES_OTHER: ['tif'],
    PRESET_DOCUMENTS_TEXT: ['doc', 'docx', 'rtf', 'odt', 'pdf'],
    PRESET_DOCUMENTS_TABLES: ['xls', 'xlsx', 'ods'],
    PRESET_DOCUMENTS_PRESENTATIONS: ['ppt', 'pptx'],
    PRESET_DOCUMENTS_OTHER: ['xml', 'txt'],  # not part of PRESET_DOCUMENTS_ALL
    PRESET_DOCUMENTS_ALL: [],
    PRESET_MEDIA_VIDEO: ['mp4', 'mpg'],
    PRESET_MEDIA_AUDIO: ['aac', 'ogg', 'mp3', 'mp4'],
    PRESET_ALL_PERMITTED: [],
}


def unique(extensions: Iterable[str]) -> List[str]:
    """Drop duplicates, keeping first occurrence order."""
    return list(dict.fromkeys(extensions))


class ExtensionPresetTable:
    """
    Preset name -> extensions lookup with two composite presets.

    'docs' and 'all' are computed by boot(), exactly once per table. Boot is
    serialized by a lock, so concurrent first use in threaded servers sees
    either the unbooted table (and waits) or the finished one.
    """

    def __init__(self, presets: Optional[Dict[str, List[str]]] = None, load_settings: bool = True):
        self._declared = {
            name: list(extensions)
            for name, extensions in (presets if presets is not None else DEFAULT_PRESETS).items()
        }
        self._presets: Dict[str, Tuple[str, ...]] = {}
        self._load_settings = load_settings
        self._booted = False
        self._lock = threading.Lock()

    @property
    def is_booted(self) -> bool:
        return self._booted

    def boot(self) -> None:
        """Compute the composite presets. Repeated calls are no-ops."""
        if self._booted:
            return

        with self._lock:
            if self._booted:
                return

            declared = {name: list(exts) for name, exts in self._declared.items()}
            if self._load_settings:
                declared.update(self._settings_presets())
            declared.setdefault(PRESET_DOCUMENTS_ALL, [])
            declared.setdefault(PRESET_ALL_PERMITTED, [])

            # Collect office document extensions
            declared[PRESET_DOCUMENTS_ALL] = unique(
                declared[PRESET_DOCUMENTS_ALL]
                + declared.get(PRESET_DOCUMENTS_TEXT, [])
                + declared.get(PRESET_DOCUMENTS_TABLES, [])
                + declared.get(PRESET_DOCUMENTS_PRESENTATIONS, [])
            )

            # Collect all permitted extensions
            declared[PRESET_ALL_PERMITTED] = unique(
                ext for extensions in declared.values() for ext in extensions
            )

            self._presets = {name: tuple(unique(exts)) for name, exts in declared.items()}
            self._booted = True
            logger.debug(f"Booted {len(self._presets)} extension presets")

    def _settings_presets(self) -> Dict[str, List[str]]:
        from django.conf import settings

        if not settings.configured:
            return {}

        from attachments import conf

        return conf.extra_presets()

    def get(self, name: str) -> Tuple[str, ...]:
        """
        Extensions of a preset.

        Unknown preset names yield an empty tuple.
        """
        self.boot()
        return self._presets.get(name, ())

    def names(self) -> List[str]:
        self.boot()
        return list(self._presets)

    def __contains__(self, name) -> bool:
        self.boot()
        return name in self._presets


default_presets = ExtensionPresetTable()
