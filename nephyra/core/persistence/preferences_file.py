"""
Preference file persistence — read/write for PreferenceRecord.

Preferences are stored as YAML in ``<config_dir>/preferences.yml`` so
users can edit them by hand. Writes are atomic (write to temp file,
then rename).

Both directions are best-effort: a missing, unreadable or malformed
file loads as an empty record, and a failed save is logged and
reported through the return value, never raised.
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path

import yaml
from pydantic import ValidationError

from nephyra.core.models.preferences import PreferenceRecord

logger = logging.getLogger(__name__)

PREFERENCES_FILE = "preferences.yml"


def default_preferences_path(config_dir: Path) -> Path:
    """Get the preference file path inside a config directory."""
    return config_dir / PREFERENCES_FILE


def load_preferences(path: Path) -> PreferenceRecord:
    """Load the preference record from a YAML file.

    Args:
        path: Path to the preferences file.

    Returns:
        PreferenceRecord. Absent or malformed files give a fresh record.
    """
    if not path.is_file():
        logger.info("No preferences at %s — using defaults", path)
        return PreferenceRecord()

    try:
        raw = path.read_text(encoding="utf-8")
        data = yaml.safe_load(raw)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Cannot read preferences %s: %s — using defaults", path, e)
        return PreferenceRecord()
    except yaml.YAMLError as e:
        logger.warning("Corrupt preferences %s: %s — using defaults", path, e)
        return PreferenceRecord()

    if data is None:
        return PreferenceRecord()

    if not isinstance(data, dict):
        logger.warning(
            "Expected a YAML mapping in %s, got %s — using defaults",
            path, type(data).__name__,
        )
        return PreferenceRecord()

    try:
        record = PreferenceRecord.model_validate(data)
    except ValidationError as e:
        logger.warning("Invalid preferences in %s: %s — using defaults", path, e)
        return PreferenceRecord()

    logger.debug("Loaded preferences from %s", path)
    return record


def save_preferences(record: PreferenceRecord, path: Path) -> bool:
    """Save the preference record (atomic write).

    Args:
        record: The record to save.
        path: Target path for the preferences file.

    Returns:
        True if the file was written, False otherwise.
    """
    data = record.model_dump(mode="json")
    content = yaml.safe_dump(data, default_flow_style=False, sort_keys=False)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        _fd, tmp_path = tempfile.mkstemp(
            dir=path.parent,
            prefix=".preferences_",
            suffix=".tmp",
        )
        tmp = Path(tmp_path)
        try:
            with open(_fd, "w", encoding="utf-8") as fh:
                fh.write(content)
            tmp.replace(path)
        except Exception:
            tmp.unlink(missing_ok=True)
            raise
    except OSError as e:
        logger.warning("Failed to save preferences to %s: %s", path, e)
        return False

    logger.debug("Preferences saved to %s", path)
    return True
