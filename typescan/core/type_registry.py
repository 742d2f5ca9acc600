# typescan/core/type_registry.py

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping, Optional

logger = logging.getLogger(__name__)

# --- Known Categories ---
# Categories are plain strings. These are the ones we know about up front;
# further categories are derived at runtime from MIME top-level types
# (e.g. "image/png" -> "Image").
DIRECTORY = "Directory"
DOCUMENT = "Document"
ARCHIVE = "Archive"
AUDIO = "Audio"
VIDEO = "Video"
PROGRAM = "Program"
OTHER = "Other"


@dataclass(frozen=True)
class FileType:
    """An immutable (category, label) pair, e.g. ("Audio", "MP3 Audio")."""
    category: str
    label: str

    def __post_init__(self):
        if not self.category:
            raise ValueError("A FileType category can never be empty.")


def _freeze(table: Dict[str, FileType]) -> Mapping[str, FileType]:
    return MappingProxyType(dict(table))


# Formats the standard MIME resolver does not know about (app-specific or legacy).
_EXTENSION_TABLE = {
    ".pages": FileType(DOCUMENT, "Pages document"),
    ".asd": FileType(AUDIO, "Ableton Analysis File"),
    ".srt": FileType(DOCUMENT, "Subtitle File"),
    ".txt": FileType(DOCUMENT, "Plain Text"),
}

# Keyed by MIME top-level type, then by subtype.
_MIME_TABLE = {
    "application": {
        "pdf": FileType(DOCUMENT, "PDF Document"),
        "x-tar": FileType(ARCHIVE, "Tarball"),
        "x-apple-diskimage": FileType(PROGRAM, "Apple Disk Image"),
        "zip": FileType(ARCHIVE, "Zipball"),
        "x-subrip": FileType(DOCUMENT, "Subtitle File"),
    },
    "audio": {
        "mpeg": FileType(AUDIO, "MP3 Audio"),
        "mid": FileType(AUDIO, "MIDI Synth Audio"),
        "x-wav": FileType(AUDIO, "WAV Audio"),
        "x-flac": FileType(AUDIO, "FLAC High-Definition"),
        "ogg": FileType(AUDIO, "OGG Audio"),
    },
    "video": {
        "x-msvideo": FileType(VIDEO, "AVI Video"),
        "x-matroska": FileType(VIDEO, "Matroska High-Definition Video"),
        "mp4": FileType(VIDEO, "MP4 Video"),
    },
}


class TypeRegistry:
    """
    Read-only lookup tables mapping extensions and MIME types to a FileType.

    A registry is never mutated after construction. Use `with_overrides` to
    derive a new registry with extra or replaced entries.
    """

    def __init__(
            self,
            extensions: Mapping[str, FileType],
            mime: Mapping[str, Mapping[str, FileType]],
    ):
        self.extensions: Mapping[str, FileType] = _freeze(
            {ext.lower(): ftype for ext, ftype in extensions.items()}
        )
        self.mime: Mapping[str, Mapping[str, FileType]] = MappingProxyType(
            {top.lower(): _freeze(subtypes) for top, subtypes in mime.items()}
        )

    def lookup_extension(self, extension: str) -> FileType:
        """
        Looks up an extension such as '.txt'. Misses fall back to (Other, extension).

        Table keys are stored lower-case and the lookup is exact, so '.TXT'
        is a miss and comes back as (Other, '.TXT').
        """
        known = self.extensions.get(extension)
        if known is None:
            return FileType(OTHER, extension)
        return known

    def lookup_mime(self, top_level: str, subtype: str) -> FileType:
        """
        Looks up a MIME type that has already been split into its two halves.

        A top-level type we hold a table for resolves through that table, with
        misses falling back to (Other, subtype). Any other top-level type gets
        a category synthesized from its own name, e.g. "image/png" becomes
        ("Image", "PNG").
        """
        bucket: Optional[Mapping[str, FileType]] = self.mime.get(top_level)
        if bucket is None:
            category = top_level.title()
            # Directory is reserved for folders.
            if category == DIRECTORY:
                return FileType(OTHER, subtype)
            return FileType(category, subtype.upper())

        known = bucket.get(subtype)
        if known is None:
            return FileType(OTHER, subtype)
        return known

    def with_overrides(
            self,
            extensions: Optional[Mapping[str, FileType]] = None,
            mime: Optional[Mapping[str, Mapping[str, FileType]]] = None,
    ) -> "TypeRegistry":
        """Returns a new registry with the given entries layered over this one."""
        merged_ext = dict(self.extensions)
        merged_ext.update({ext.lower(): ftype for ext, ftype in (extensions or {}).items()})

        merged_mime = {top: dict(subtypes) for top, subtypes in self.mime.items()}
        for top, subtypes in (mime or {}).items():
            merged_mime.setdefault(top.lower(), {}).update(subtypes)

        logger.debug(
            f"Derived registry with {len(merged_ext)} extension rules "
            f"and {len(merged_mime)} MIME buckets."
        )
        return TypeRegistry(merged_ext, merged_mime)


DEFAULT_REGISTRY = TypeRegistry(_EXTENSION_TABLE, _MIME_TABLE)
