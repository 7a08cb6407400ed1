"""
Preference store — persisted overrides layered over live detection.

The store is loaded once at the top of a run, merged into the detected
context, and saved once at the end. Scoring never touches the file.
"""

from __future__ import annotations

import logging
from pathlib import Path

from nephyra.core.models.context import Context, DetectedContext, GpuType
from nephyra.core.models.preferences import PreferenceRecord
from nephyra.core.persistence.preferences_file import load_preferences, save_preferences
from nephyra.core.services.context_detect import DEFAULT_USE_CASE

logger = logging.getLogger(__name__)


def merge_context(record: PreferenceRecord, detected: DetectedContext) -> Context:
    """Fuse persisted preferences with detected facts.

    Absent ``gpu_type`` and empty ``use_cases`` in the record are filled
    from detection. The record is updated in place so the next save makes
    detected values sticky; calling this again yields the same Context.
    """
    if record.gpu_type is None and detected.gpu_type is not None:
        record.gpu_type = detected.gpu_type
        logger.debug("Seeding preferred gpu_type=%s from detection", detected.gpu_type)

    if not record.use_cases:
        record.use_cases = sorted(detected.use_cases) or [DEFAULT_USE_CASE]
        logger.debug("Seeding preferred use_cases=%s from detection", record.use_cases)

    return Context(
        current_kernel=detected.current_kernel,
        package_manager=detected.package_manager,
        gpu_type=record.gpu_type,
        use_cases=set(record.use_cases),
        has_nvidia_driver=detected.has_nvidia_driver,
        has_audio_hardware=detected.has_audio_hardware,
        problematic_kernels=set(record.problematic_kernels),
        preferred_kernel=record.preferred_kernel,
    )


class PreferenceStore:
    """A preference record bound to its file.

    Args:
        path: Location of the preferences file.
        record: Pre-loaded record. If None, ``load()`` must be called.
    """

    def __init__(self, path: Path, record: PreferenceRecord | None = None):
        self.path = path
        self.record = record if record is not None else PreferenceRecord()

    @classmethod
    def open(cls, path: Path) -> PreferenceStore:
        """Create a store and load its record from ``path``."""
        store = cls(path)
        store.load()
        return store

    def load(self) -> PreferenceRecord:
        self.record = load_preferences(self.path)
        return self.record

    def save(self) -> bool:
        return save_preferences(self.record, self.path)

    def merge(self, detected: DetectedContext) -> Context:
        return merge_context(self.record, detected)

    # ── Editing ─────────────────────────────────────────────────

    def set_gpu_type(self, gpu_type: GpuType | None) -> None:
        self.record.gpu_type = gpu_type

    def set_use_cases(self, use_cases: list[str]) -> None:
        """Replace use-cases, dropping blanks and duplicates (order kept)."""
        cleaned: list[str] = []
        for tag in use_cases:
            tag = tag.strip().lower()
            if tag and tag not in cleaned:
                cleaned.append(tag)
        self.record.use_cases = cleaned

    def set_preferred_kernel(self, name: str | None) -> None:
        self.record.preferred_kernel = name or None

    def mark_problematic(self, name: str) -> bool:
        """Add ``name`` to the denylist. Returns False if already there."""
        if name in self.record.problematic_kernels:
            return False
        self.record.problematic_kernels.append(name)
        return True

    def unmark_problematic(self, name: str) -> bool:
        """Remove ``name`` from the denylist. Returns False if absent."""
        if name not in self.record.problematic_kernels:
            return False
        self.record.problematic_kernels.remove(name)
        return True

    def reset(self) -> None:
        self.record = PreferenceRecord()
