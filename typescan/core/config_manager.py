# typescan/core/config_manager.py

import json
import logging
from pathlib import Path
from typing import Any, Dict

from .type_registry import DEFAULT_REGISTRY, DIRECTORY, FileType, TypeRegistry

logger = logging.getLogger(__name__)

SUPPORTED_CONFIG_VERSION = "1.0"


def _parse_rule(key: str, details: Any) -> FileType:
    """Turns one {"category": ..., "label": ...} object into a FileType."""
    if not isinstance(details, dict):
        raise ValueError(f"Rule for '{key}' must be an object with 'category' and 'label'.")

    category = details.get("category")
    label = details.get("label", "")
    if not isinstance(category, str) or not category:
        raise ValueError(f"Rule for '{key}' needs a non-empty 'category' string.")
    if category == DIRECTORY:
        raise ValueError(f"Rule for '{key}': the '{DIRECTORY}' category is reserved for folders.")
    if not isinstance(label, str):
        raise ValueError(f"Rule for '{key}' has a non-string 'label'.")
    return FileType(category, label)


def parse_knowledge_base(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validates a knowledge-base document and returns its extension and MIME rules.

    Expected layout:
        {"_metadata": {"version": "1.0"},
         "extensions": {".psd": {"category": "Image", "label": "Photoshop Document"}},
         "mime": {"application": {"x-7z-compressed": {"category": "Archive", "label": "7-Zip"}}}}
    """
    if not isinstance(data, dict):
        raise ValueError("Knowledge base must be a JSON object.")

    # A file without "_metadata" is taken to be written for the current version.
    metadata = data.get("_metadata", {})
    if not isinstance(metadata, dict):
        raise ValueError("'_metadata' must be a JSON object.")
    version_str = str(metadata.get("version", SUPPORTED_CONFIG_VERSION))
    try:
        version = float(version_str)
    except ValueError:
        raise ValueError(f"Unreadable config version: '{version_str}'.") from None
    if version < float(SUPPORTED_CONFIG_VERSION):
        raise ValueError(
            f"Unsupported config version: '{version_str}'. "
            f"This application requires version {SUPPORTED_CONFIG_VERSION} or newer.")

    ext_rules = data.get("extensions", {})
    mime_rules = data.get("mime", {})
    if not isinstance(ext_rules, dict) or not isinstance(mime_rules, dict):
        raise ValueError("'extensions' and 'mime' must both be JSON objects.")

    extensions = {}
    for ext, details in ext_rules.items():
        if not ext.startswith('.'):
            raise ValueError(f"Extension rule '{ext}' must start with '.'.")
        extensions[ext.lower()] = _parse_rule(ext, details)

    mime = {}
    for top_level, subtypes in mime_rules.items():
        if not isinstance(subtypes, dict):
            raise ValueError(f"MIME bucket '{top_level}' must map subtypes to rules.")
        mime[top_level.lower()] = {
            subtype.lower(): _parse_rule(f"{top_level}/{subtype}", details)
            for subtype, details in subtypes.items()
        }

    return {"version": version_str, "extensions": extensions, "mime": mime}


def load_registry(config_path: Path | None = None, base: TypeRegistry = DEFAULT_REGISTRY) -> TypeRegistry:
    """
    Builds the registry to classify with: the built-in tables, plus the rules
    of an optional JSON knowledge base layered on top.
    """
    if config_path is None:
        return base

    logger.info(f"Loading knowledge base from: {config_path}")
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        rules = parse_knowledge_base(data)
    except (OSError, ValueError) as e:
        logger.critical(f"Error loading knowledge base '{config_path}': {e}", exc_info=True)
        raise

    logger.info(
        f"Loaded {len(rules['extensions'])} extension rules and "
        f"{sum(len(s) for s in rules['mime'].values())} MIME rules "
        f"from knowledge base version {rules['version']}.")
    return base.with_overrides(extensions=rules["extensions"], mime=rules["mime"])
