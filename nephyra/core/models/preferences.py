"""
PreferenceRecord — the user's persisted overrides.

Serialized to ``preferences.yml`` under the user's config directory.
Once ``gpu_type`` or ``use_cases`` is set here it wins over live
detection on every later run, until the file is edited or reset.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from nephyra.core.models.context import GpuType


class PreferenceRecord(BaseModel):
    """Persisted user preferences. All fields default to "unset"."""

    preferred_kernel: str | None = None
    gpu_type: GpuType | None = None
    use_cases: list[str] = Field(default_factory=list)
    problematic_kernels: list[str] = Field(default_factory=list)
