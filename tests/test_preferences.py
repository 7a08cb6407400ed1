"""
Tests for the preference store — file persistence and context merge.
"""

from pathlib import Path

import yaml

from nephyra.core.models.context import DetectedContext, GpuType, PackageManager
from nephyra.core.models.preferences import PreferenceRecord
from nephyra.core.persistence.preferences_file import (
    default_preferences_path,
    load_preferences,
    save_preferences,
)
from nephyra.core.services.preferences import PreferenceStore, merge_context


class TestPreferencesFile:
    """Tests for preference file persistence."""

    def test_save_and_load(self, tmp_path: Path):
        path = tmp_path / "preferences.yml"
        record = PreferenceRecord(
            preferred_kernel="linux-lts",
            gpu_type=GpuType.AMD,
            use_cases=["gaming", "dev"],
            problematic_kernels=["linux-zen"],
        )

        assert save_preferences(record, path) is True
        loaded = load_preferences(path)
        assert loaded == record
        assert loaded.use_cases == ["gaming", "dev"]

    def test_file_layout(self, tmp_path: Path):
        path = tmp_path / "preferences.yml"
        save_preferences(PreferenceRecord(gpu_type=GpuType.INTEL, use_cases=["server"]), path)

        data = yaml.safe_load(path.read_text())
        assert data["gpu_type"] == "intel"
        assert data["use_cases"] == ["server"]
        assert data["preferred_kernel"] is None
        assert data["problematic_kernels"] == []

    def test_load_missing_returns_defaults(self, tmp_path: Path):
        record = load_preferences(tmp_path / "nope.yml")
        assert record == PreferenceRecord()

    def test_load_corrupt_returns_defaults(self, tmp_path: Path):
        path = tmp_path / "preferences.yml"
        path.write_text("gpu_type: [unclosed\n  - : :")
        assert load_preferences(path) == PreferenceRecord()

    def test_load_non_mapping_returns_defaults(self, tmp_path: Path):
        path = tmp_path / "preferences.yml"
        path.write_text("- amd\n- gaming\n")
        assert load_preferences(path) == PreferenceRecord()

    def test_load_invalid_gpu_returns_defaults(self, tmp_path: Path):
        path = tmp_path / "preferences.yml"
        path.write_text("gpu_type: voodoo\nuse_cases: [dev]\n")
        assert load_preferences(path) == PreferenceRecord()

    def test_load_empty_file(self, tmp_path: Path):
        path = tmp_path / "preferences.yml"
        path.write_text("")
        assert load_preferences(path) == PreferenceRecord()

    def test_load_hand_edited_partial(self, tmp_path: Path):
        path = tmp_path / "preferences.yml"
        path.write_text("use_cases:\n  - audio\n")
        record = load_preferences(path)
        assert record.use_cases == ["audio"]
        assert record.gpu_type is None

    def test_save_creates_directories(self, tmp_path: Path):
        path = tmp_path / "deep" / "nested" / "preferences.yml"
        assert save_preferences(PreferenceRecord(), path) is True
        assert path.is_file()

    def test_save_failure_is_reported_not_raised(self, tmp_path: Path):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        assert save_preferences(PreferenceRecord(), blocker / "preferences.yml") is False

    def test_save_leaves_no_temp_files(self, tmp_path: Path):
        save_preferences(PreferenceRecord(), tmp_path / "preferences.yml")
        assert list(tmp_path.glob(".preferences_*.tmp")) == []

    def test_default_path(self, tmp_path: Path):
        assert default_preferences_path(tmp_path) == tmp_path / "preferences.yml"


class TestMergeContext:
    """Tests for layering preferences over detection."""

    def test_empty_record_seeded_from_detection(self):
        record = PreferenceRecord()
        detected = DetectedContext(gpu_type=GpuType.AMD, use_cases={"gaming", "dev"})

        ctx = merge_context(record, detected)

        assert ctx.gpu_type == GpuType.AMD
        assert ctx.use_cases == {"gaming", "dev"}
        assert record.gpu_type == GpuType.AMD
        assert record.use_cases == ["dev", "gaming"]

    def test_empty_detection_gives_desktop(self):
        ctx = merge_context(PreferenceRecord(), DetectedContext(use_cases=set()))
        assert ctx.use_cases == {"desktop"}

    def test_record_overrides_detection(self):
        record = PreferenceRecord(gpu_type=GpuType.INTEL, use_cases=["server"])
        detected = DetectedContext(gpu_type=GpuType.NVIDIA, use_cases={"gaming"})

        ctx = merge_context(record, detected)

        assert ctx.gpu_type == GpuType.INTEL
        assert ctx.use_cases == {"server"}

    def test_undetected_gpu_stays_unset(self):
        record = PreferenceRecord()
        ctx = merge_context(record, DetectedContext(gpu_type=None))
        assert ctx.gpu_type is None
        assert record.gpu_type is None

    def test_live_only_fields_always_detected(self):
        record = PreferenceRecord(gpu_type=GpuType.AMD, use_cases=["audio"])
        detected = DetectedContext(
            current_kernel="6.9.7-arch1-1",
            package_manager=PackageManager.PACMAN,
            has_nvidia_driver=True,
            has_audio_hardware=True,
        )
        ctx = merge_context(record, detected)
        assert ctx.current_kernel == "6.9.7-arch1-1"
        assert ctx.package_manager == PackageManager.PACMAN
        assert ctx.has_nvidia_driver is True
        assert ctx.has_audio_hardware is True

    def test_denylist_and_preferred_from_record(self):
        record = PreferenceRecord(problematic_kernels=["zen", "rt"], preferred_kernel="linux-lts")
        ctx = merge_context(record, DetectedContext())
        assert ctx.problematic_kernels == {"zen", "rt"}
        assert ctx.preferred_kernel == "linux-lts"

    def test_merge_is_idempotent(self):
        record = PreferenceRecord()
        detected = DetectedContext(gpu_type=GpuType.AMD, use_cases={"gaming"})
        first = merge_context(record, detected)
        second = merge_context(record, detected)
        assert first == second


class TestPreferenceStore:
    """Tests for the store wrapper."""

    def test_detected_values_become_sticky(self, tmp_path: Path):
        path = tmp_path / "preferences.yml"

        first = PreferenceStore.open(path)
        first.merge(DetectedContext(gpu_type=GpuType.AMD, use_cases={"gaming"}))
        assert first.save() is True

        second = PreferenceStore.open(path)
        ctx = second.merge(DetectedContext(gpu_type=GpuType.NVIDIA, use_cases={"server"}))
        assert ctx.gpu_type == GpuType.AMD
        assert ctx.use_cases == {"gaming"}

    def test_reset_reenables_detection(self, tmp_path: Path):
        store = PreferenceStore(tmp_path / "preferences.yml", PreferenceRecord(gpu_type=GpuType.AMD))
        store.reset()
        ctx = store.merge(DetectedContext(gpu_type=GpuType.INTEL))
        assert ctx.gpu_type == GpuType.INTEL

    def test_set_use_cases_cleans_input(self, tmp_path: Path):
        store = PreferenceStore(tmp_path / "p.yml")
        store.set_use_cases(["Dev", " gaming ", "", "dev"])
        assert store.record.use_cases == ["dev", "gaming"]

    def test_mark_and_unmark(self, tmp_path: Path):
        store = PreferenceStore(tmp_path / "p.yml")
        assert store.mark_problematic("linux-zen") is True
        assert store.mark_problematic("linux-zen") is False
        assert store.record.problematic_kernels == ["linux-zen"]
        assert store.unmark_problematic("linux-zen") is True
        assert store.unmark_problematic("linux-zen") is False
        assert store.record.problematic_kernels == []

    def test_preferred_kernel_blank_clears(self, tmp_path: Path):
        store = PreferenceStore(tmp_path / "p.yml")
        store.set_preferred_kernel("linux-lts")
        assert store.record.preferred_kernel == "linux-lts"
        store.set_preferred_kernel("")
        assert store.record.preferred_kernel is None
