"""
Validation rule for attachment uploads.

Validates the extension of the uploaded file against an allow-list built
from explicit extensions and named presets.
"""

from typing import Iterable, Optional, Tuple, Union

from django.core.exceptions import ValidationError
from django.core.files.uploadedfile import UploadedFile
from django.utils.translation import gettext as _

from attachments.services.usage import get_usage_service

from . import presets as preset_names
from .presets import ExtensionPresetTable, default_presets

ExtensionsArg = Union[str, Iterable[str]]


def _as_list(value: Optional[ExtensionsArg]) -> list:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return list(value)


class AttachmentUploadExtension:
    """
    Accepts uploads whose extension is in the permitted set.

    The permitted set is widened in place by the with_* methods, which
    return the rule itself so calls can be chained:

        >>> rule = AttachmentUploadExtension('csv').with_images().with_documents()
        >>> rule.passes(request.FILES['file'])
        True

    The rule is also a Django validator: calling it raises ValidationError
    for rejected files.
    """

    code = 'attachment_extension_invalid'

    def __init__(
        self,
        extensions: ExtensionsArg = (),
        presets: ExtensionsArg = (),
        preset_table: Optional[ExtensionPresetTable] = None,
    ):
        """
        Args:
            extensions: Permitted extensions without leading dot
            presets: Preset names whose extensions are permitted as well
            preset_table: Preset lookup to use instead of the default table
        """
        self.preset_table = preset_table or default_presets
        self.preset_table.boot()
        self._extensions = {}
        self.with_extensions(extensions)
        self._add_extensions_from_presets(presets)

    @property
    def extensions(self) -> Tuple[str, ...]:
        return tuple(sorted(self._extensions))

    def passes(self, value) -> bool:
        """
        Check whether the value is an upload with a permitted extension.

        Never raises; anything that is not an UploadedFile, or whose
        extension cannot be resolved, fails.
        """
        if not isinstance(value, UploadedFile):
            return False

        ext = get_usage_service().get_uploaded_file_extension(value)
        if not isinstance(ext, str):
            return False

        return ext in self._extensions

    def message(self) -> str:
        return self._message_template() % {'extensions': self.extensions_as_string()}

    def _message_template(self) -> str:
        return _('The file must have one of the following extensions: %(extensions)s.')

    def extensions_as_string(self) -> str:
        return ', '.join(f'.{ext}' for ext in sorted(self._extensions))

    def __call__(self, value):
        if not self.passes(value):
            raise ValidationError(
                self._message_template(),
                code=self.code,
                params={'extensions': self.extensions_as_string()},
            )

    def with_extensions(self, extensions: ExtensionsArg) -> 'AttachmentUploadExtension':
        for ext in _as_list(extensions):
            self._extensions.setdefault(ext, None)
        return self

    def with_images(self) -> 'AttachmentUploadExtension':
        return self._add_extensions_from_presets(preset_names.PRESET_IMAGES)

    def with_images_extended(self) -> 'AttachmentUploadExtension':
        return self._add_extensions_from_presets([
            preset_names.PRESET_IMAGES,
            preset_names.PRESET_IMAGES_OTHER,
        ])

    def with_videos(self) -> 'AttachmentUploadExtension':
        return self._add_extensions_from_presets(preset_names.PRESET_MEDIA_VIDEO)

    def with_audios(self) -> 'AttachmentUploadExtension':
        return self._add_extensions_from_presets(preset_names.PRESET_MEDIA_AUDIO)

    def with_documents(self) -> 'AttachmentUploadExtension':
        return self._add_extensions_from_presets(preset_names.PRESET_DOCUMENTS_ALL)

    def with_documents_extended(self) -> 'AttachmentUploadExtension':
        """Office documents plus xml and txt."""
        return self._add_extensions_from_presets([
            preset_names.PRESET_DOCUMENTS_ALL,
            preset_names.PRESET_DOCUMENTS_OTHER,
        ])

    def with_documents_text(self) -> 'AttachmentUploadExtension':
        return self._add_extensions_from_presets(preset_names.PRESET_DOCUMENTS_TEXT)

    def with_documents_tables(self) -> 'AttachmentUploadExtension':
        return self._add_extensions_from_presets(preset_names.PRESET_DOCUMENTS_TABLES)

    def with_documents_presentations(self) -> 'AttachmentUploadExtension':
        return self._add_extensions_from_presets(preset_names.PRESET_DOCUMENTS_PRESENTATIONS)

    def _add_extensions_from_presets(self, presets: ExtensionsArg) -> 'AttachmentUploadExtension':
        for name in _as_list(presets):
            self.with_extensions(self.preset_table.get(name))
        return self

    def deconstruct(self):
        # Widening calls made after construction must survive in migrations
        path = f'{self.__class__.__module__}.{self.__class__.__name__}'
        return path, (), {'extensions': list(self.extensions)}

    def __eq__(self, other):
        return (
            isinstance(other, AttachmentUploadExtension)
            and set(self._extensions) == set(other._extensions)
        )

    # The permitted set changes in place, so rules are not hashable
    __hash__ = None
