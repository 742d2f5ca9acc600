# typescan/core/classifier.py

import logging
import mimetypes
import os
from typing import Callable, Optional, Tuple

from .type_registry import DEFAULT_REGISTRY, FileType, TypeRegistry

logger = logging.getLogger(__name__)

# Given an extension such as '.mp3', returns a MIME type string or None.
MimeResolver = Callable[[str], Optional[str]]


def file_extension(filename: str) -> str:
    """
    Returns the extension of a file name, dot included.

    The extension starts at the last '.' of the base name:
    'song.mp3' -> '.mp3', 'a.tar.gz' -> '.gz', 'README' -> ''.
    """
    base = os.path.basename(filename)
    dot = base.rfind('.')
    if dot < 0:
        return ""
    return base[dot:]


def system_mime_type(extension: str) -> Optional[str]:
    """
    Resolves an extension through the platform's standard MIME registry.

    This is a plain extension lookup, not a file-name guess: compression
    suffixes such as '.gz' resolve to their own MIME type and '.tgz' is not
    rewritten to '.tar.gz'. The exact spelling is tried before the
    lower-cased one, first in the standard table, then in the common
    (non-standard) one.
    """
    if not extension or extension == '.':
        return None
    if not mimetypes.inited:
        mimetypes.init()

    for table in (mimetypes.types_map, mimetypes.common_types):
        mime = table.get(extension) or table.get(extension.lower())
        if mime:
            return mime
    return None


def no_mime_type(extension: str) -> Optional[str]:
    """A resolver that never matches, leaving everything to the extension table."""
    return None


def split_mime(mime: str) -> Optional[Tuple[str, str]]:
    """
    Splits 'audio/mpeg; charset=x' into ('audio', 'mpeg').

    Returns None for anything that is not a well-formed 'top/sub' pair so
    callers can treat it exactly like an unresolvable extension.
    """
    essence = mime.split(';', 1)[0].strip().lower()
    top_level, sep, subtype = essence.partition('/')
    if not sep or not top_level or not subtype:
        return None
    return top_level, subtype


class Classifier:
    """
    Resolves a file name to a FileType.

    MIME detection from the extension is tried first because it is broadly
    standardized. Only when it finds nothing do we consult the bespoke
    extension table, whose own fallback is (Other, extension). Because of
    this order, an extension known to both is always classified by MIME.
    """

    def __init__(
            self,
            registry: TypeRegistry = DEFAULT_REGISTRY,
            mime_resolver: MimeResolver = system_mime_type,
    ):
        self.registry = registry
        self.mime_resolver = mime_resolver

    def classify(self, filename: str) -> FileType:
        extension = file_extension(filename)
        mime = self.mime_resolver(extension) if extension else None
        parts = split_mime(mime) if mime else None

        if parts is None:
            if mime:
                logger.debug(f"Ignoring malformed MIME type '{mime}' for '{filename}'.")
            ftype = self.registry.lookup_extension(extension)
            logger.debug(f"'{filename}' classified by extension table as {ftype}.")
            return ftype

        ftype = self.registry.lookup_mime(*parts)
        logger.debug(f"'{filename}' classified by MIME type '{mime}' as {ftype}.")
        return ftype


def classify(
        filename: str,
        registry: TypeRegistry = DEFAULT_REGISTRY,
        mime_resolver: MimeResolver = system_mime_type,
) -> FileType:
    """Convenience wrapper around `Classifier.classify`."""
    return Classifier(registry, mime_resolver).classify(filename)
