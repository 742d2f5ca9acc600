# typescan/core/aggregator.py

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Union

# rich already formats byte counts for its own progress bars; we reuse its
# decimal formatter so sizes read like "1.2 kB".
from rich.filesize import decimal

from .classifier import Classifier, MimeResolver, file_extension, system_mime_type
from .directory_scanner import PathLike, clean_name, scan
from .type_registry import DEFAULT_REGISTRY, DIRECTORY, FileType, TypeRegistry

# The main application configures the handlers; this module only emits events.
logger = logging.getLogger(__name__)


# --- Scanned Entries ---

@dataclass(frozen=True)
class FileEntry:
    """
    One visible entry of a scanned directory.

    Files carry their resolved FileType, their extension and a human-readable
    size. Directories carry no FileType at all; their category is always
    'Directory'.
    """
    name: str
    is_directory: bool
    type: Optional[FileType] = None
    extension: str = ""
    size_bytes: int = 0
    size_display: str = ""

    @property
    def category(self) -> str:
        if self.is_directory:
            return DIRECTORY
        return self.type.category


# --- The Two Bucket Shapes ---
# A category holds exactly one of these. Which one is decided by the category
# alone: Directory gets a flat list, everything else is grouped by type label.

@dataclass
class DirectoryList:
    """The Directory category: a flat list in scan order."""
    entries: List[FileEntry] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.entries)


@dataclass
class TypedBucket:
    """Any other category: entries grouped by type label, each list in scan order."""
    by_label: Dict[str, List[FileEntry]] = field(default_factory=dict)

    def __len__(self) -> int:
        return sum(len(entries) for entries in self.by_label.values())


Bucket = Union[DirectoryList, TypedBucket]


class GroupedResult:
    """
    Category -> bucket mapping produced by a directory scan.

    The shape of a bucket is fixed by its category: Directory always holds a
    DirectoryList, every other category always holds a TypedBucket. Buckets
    and labels are created on first use. Nothing here sorts; entries keep
    the order in which they were added.
    """

    def __init__(self):
        self.buckets: Dict[str, Bucket] = {}

    def add_directory(self, entry: FileEntry):
        bucket = self.buckets.setdefault(DIRECTORY, DirectoryList())
        bucket.entries.append(entry)

    def add_file(self, entry: FileEntry):
        bucket = self.buckets.setdefault(entry.type.category, TypedBucket())
        bucket.by_label.setdefault(entry.type.label, []).append(entry)

    def directories(self) -> List[FileEntry]:
        bucket = self.buckets.get(DIRECTORY)
        return list(bucket.entries) if bucket else []

    def labels(self, category: str) -> Dict[str, List[FileEntry]]:
        """The label -> entries map of a category, or {} for Directory and unknown categories."""
        bucket = self.buckets.get(category)
        if not isinstance(bucket, TypedBucket):
            return {}
        return bucket.by_label

    def flatten(self) -> List[FileEntry]:
        """Every entry in the result, directories first, then each category's labels."""
        flat = self.directories()
        for bucket in self.buckets.values():
            if isinstance(bucket, TypedBucket):
                for entries in bucket.by_label.values():
                    flat.extend(entries)
        return flat

    def total(self) -> int:
        return sum(len(bucket) for bucket in self.buckets.values())

    def __getitem__(self, category: str) -> Bucket:
        return self.buckets[category]

    def __contains__(self, category: object) -> bool:
        return category in self.buckets

    def __iter__(self) -> Iterator[str]:
        return iter(self.buckets)

    def __len__(self) -> int:
        return len(self.buckets)


# --- The Public Entry Point ---

def process_directory(
        path: PathLike,
        registry: TypeRegistry = DEFAULT_REGISTRY,
        mime_resolver: MimeResolver = system_mime_type,
) -> GroupedResult:
    """
    Scans one directory (non-recursively) and groups its visible entries.

    Directories go into the flat Directory list. Files are classified and
    filed under their category and type label. A file whose type label is
    empty (e.g. a name without any extension) is classified but left out of
    the result.

    Args:
        path: The directory to scan.
        registry: The lookup tables to classify with (built-ins by default).
        mime_resolver: Maps an extension to a MIME type, or None.

    Returns:
        A fresh GroupedResult. Nothing is cached between calls.

    Raises:
        OSError: The directory could not be listed. This happens before any
            entry is classified, so there is never a partial result.
    """
    entries = scan(path)
    classifier = Classifier(registry, mime_resolver)
    result = GroupedResult()

    for raw in entries:
        # Folders are never classified; they only need to be listed.
        if raw.is_directory:
            result.add_directory(FileEntry(name=raw.name, is_directory=True))
            continue

        ftype = classifier.classify(clean_name(raw.name))
        entry = FileEntry(
            name=raw.name,
            is_directory=False,
            type=ftype,
            extension=file_extension(raw.name),
            size_bytes=raw.size,
            size_display=decimal(raw.size),
        )
        # An empty label has nowhere to be filed under.
        if not ftype.label:
            logger.debug(f"Dropping '{raw.name}': its type has no label.")
            continue
        result.add_file(entry)

    logger.info(
        f"Grouped {result.total()} of {len(entries)} visible entries "
        f"into {len(result)} categories: {', '.join(sorted(result))}"
    )
    return result
