"""Tests for core data models."""

from pathlib import Path

import pytest
from pydantic import TypeAdapter, ValidationError

from pcomp.core.models import (
    Compressed,
    Failed,
    JobOutcome,
    RunPolicy,
    RunSummary,
)


class TestRunPolicy:
    """Tests for RunPolicy validation."""

    def test_run_policy_creation(self, policy):
        """Test that a complete mapping produces a populated policy."""
        assert policy.jpeg_quality == 85.0
        assert policy.worker_count == 2
        assert policy.recurse_subdirectories is False
        assert policy.overwrite_in_place is False
        assert policy.preserve_metadata is False
        assert policy.worker_mode == "thread"
        assert policy.resize.long_side_target == 50
        assert policy.sharpen.sigma == 1.0
        assert policy.brighten.delta == 10
        assert policy.contrast.delta == 10.0

    def test_run_policy_is_immutable(self, policy):
        """Test that policy fields cannot be reassigned."""
        with pytest.raises(ValidationError):
            policy.general.worker_count = 8
        with pytest.raises(ValidationError):
            policy.resize = policy.resize

    @pytest.mark.parametrize("quality", [0, -1, 100.5, float("inf"), float("nan")])
    def test_run_policy_rejects_quality_out_of_range(self, policy_data, quality):
        data = policy_data(general={"jpeg_quality": quality})
        with pytest.raises(ValidationError):
            RunPolicy.model_validate(data)

    def test_run_policy_accepts_quality_of_100(self, policy_data):
        data = policy_data(general={"jpeg_quality": 100})
        assert RunPolicy.model_validate(data).jpeg_quality == 100.0

    def test_run_policy_rejects_zero_workers(self, policy_data):
        data = policy_data(general={"worker_count": 0})
        with pytest.raises(ValidationError):
            RunPolicy.model_validate(data)

    def test_run_policy_rejects_non_positive_resize_target(self, policy_data):
        data = policy_data(resize={"long_side_target": 0})
        with pytest.raises(ValidationError):
            RunPolicy.model_validate(data)

    def test_run_policy_requires_every_field(self, policy_data):
        """Test that no default is substituted for a missing required field."""
        data = policy_data()
        del data["sharpen"]["threshold"]
        with pytest.raises(ValidationError, match="threshold"):
            RunPolicy.model_validate(data)

    def test_run_policy_requires_every_section(self, policy_data):
        data = policy_data()
        del data["contrast"]
        with pytest.raises(ValidationError, match="contrast"):
            RunPolicy.model_validate(data)

    def test_run_policy_rejects_unknown_keys(self, policy_data):
        data = policy_data(general={"colour": "blue"})
        with pytest.raises(ValidationError):
            RunPolicy.model_validate(data)

    def test_run_policy_accepts_legacy_key_names(self):
        """Test that the historical key names still load."""
        data = {
            "general": {
                "jpeg_quality": 70.0,
                "num_threads": 3,
                "read_sub_dir": True,
                "overwrite_existing_files": True,
                "keep_original_exif": True,
            },
            "resize": {"enable": True, "long_side_length": 1200},
            "sharpen": {"enable": False, "sigma": 0.5, "threshold": 1},
            "brighten": {"enable": True, "setting": -5},
            "contrast": {"enable": True, "setting": 12.5},
        }
        policy = RunPolicy.model_validate(data)
        assert policy.worker_count == 3
        assert policy.recurse_subdirectories is True
        assert policy.overwrite_in_place is True
        assert policy.preserve_metadata is True
        assert policy.resize.enabled is True
        assert policy.resize.long_side_target == 1200
        assert policy.brighten.delta == -5
        assert policy.contrast.delta == 12.5

    def test_run_policy_worker_mode(self, policy_data):
        data = policy_data(general={"worker_mode": "process"})
        assert RunPolicy.model_validate(data).worker_mode == "process"

        data = policy_data(general={"worker_mode": "fibers"})
        with pytest.raises(ValidationError):
            RunPolicy.model_validate(data)


class TestJobOutcome:
    """Tests for the Compressed/Failed outcome union."""

    def test_compressed_outcome(self):
        outcome = Compressed(
            file_name="a.jpg",
            source_path=Path("/tmp/a.jpg"),
            output_path=Path("/tmp/compressed/a.jpg"),
            ratio_percent=42,
        )
        assert outcome.status == "compressed"
        assert outcome.duration == 0.0

    def test_failed_outcome(self):
        outcome = Failed(
            file_name="b.png",
            source_path=Path("/tmp/b.png"),
            error_kind="unsupported_format",
            message="nope",
        )
        assert outcome.status == "failed"
        assert outcome.error_kind == "unsupported_format"

    def test_outcome_discriminator(self):
        adapter = TypeAdapter(JobOutcome)
        outcome = adapter.validate_python(
            {
                "status": "failed",
                "file_name": "c.jpg",
                "source_path": "/tmp/c.jpg",
                "error_kind": "codec",
                "message": "bad data",
            }
        )
        assert isinstance(outcome, Failed)

    def test_run_summary_defaults(self):
        summary = RunSummary()
        assert summary.total == 0
        assert summary.outcomes == []
