"""Tests for defaults and JSON job files."""

import json

import pytest

from ibllut.config import (
    DEFAULT_LUT_SIZE, DEFAULT_MAP_SIZE, DEFAULT_SAMPLE_COUNT, ConfigError, TableJob,
    container_for, default_size, job_from_dict, load_jobs,
)
from ibllut.export.formats import TexelFormat
from ibllut.raster.tables import TableKind
from ibllut.validation import RangeValidationError


class TestDefaults:
    def test_default_sizes(self):
        assert default_size(TableKind.ENVIRONMENT_BRDF) == DEFAULT_LUT_SIZE
        assert default_size(TableKind.HAMMERSLEY_Y) == DEFAULT_SAMPLE_COUNT
        assert default_size(TableKind.EQUIRECT_TO_EYE) == DEFAULT_MAP_SIZE

    def test_container_for(self):
        assert container_for(None, None) == "dds"
        assert container_for("table.BIN", None) == "bin"
        assert container_for("table", None) == "dds"
        assert container_for("table.dds", "png") == "png"

    def test_unknown_container(self):
        with pytest.raises(ConfigError, match="Unknown container"):
            container_for("table.exr", None)


class TestTableJob:
    def test_file_name_defaults_to_kind(self):
        job = TableJob(TableKind.EYE_TO_CUBE_UNWRAP, 16, container="png")
        assert job.file_name == "eye_to_cube_unwrap.png"

    def test_mapping_descriptor_has_no_samples(self):
        desc = TableJob(TableKind.EYE_TO_EQUIRECT, 16, 8).descriptor()
        assert desc.sample_count is None
        assert desc.shape == (8, 16, 2)

    def test_brdf_descriptor(self):
        desc = TableJob(TableKind.ENVIRONMENT_BRDF, 32, samples=64).descriptor()
        assert desc.sample_count == 64
        assert desc.shape == (32, 32, 2)


class TestJobFromDict:
    def test_minimal_entry(self):
        job = job_from_dict({"kind": "environment_brdf"})
        assert job.kind is TableKind.ENVIRONMENT_BRDF
        assert job.width == DEFAULT_LUT_SIZE
        assert job.samples == DEFAULT_SAMPLE_COUNT
        assert job.format is TexelFormat.FLOAT32
        assert job.container == "dds"
        assert job.file_name == "environment_brdf.dds"

    def test_full_entry(self):
        job = job_from_dict({
            "kind": "equirect_to_eye", "width": 64, "height": 32, "channels": 3,
            "format": "unorm8", "output": "eye.bin",
        })
        assert (job.width, job.height, job.channels) == (64, 32, 3)
        assert job.format is TexelFormat.UNORM8
        assert job.container == "bin"
        assert job.file_name == "eye.bin"

    def test_hammersley_width_is_sample_count(self):
        job = job_from_dict({"kind": "hammersley_y", "width": 64})
        assert job.samples == 64
        assert job.descriptor().shape == (1, 64, 1)

    def test_hammersley_width_and_samples_disagree(self):
        job = job_from_dict({"kind": "hammersley_y", "width": 64, "samples": 128})
        with pytest.raises(RangeValidationError):
            job.descriptor()

    def test_hammersley_samples_only(self):
        job = job_from_dict({"kind": "hammersley_y", "samples": 32})
        assert job.width == 32

    @pytest.mark.parametrize("entry,message", [
        ({"width": 8}, "missing 'kind'"),
        ({"kind": "irradiance"}, "Unknown table kind"),
        ({"kind": "environment_brdf", "format": "bc6h"}, "Unknown texel format"),
        ({"kind": "environment_brdf", "mips": 3}, "Unknown table field"),
        ({"kind": "environment_brdf", "output": "lut.exr"}, "Unknown container"),
        (["environment_brdf"], "must be an object"),
    ])
    def test_invalid_entries(self, entry, message):
        with pytest.raises(ConfigError, match=message):
            job_from_dict(entry)


class TestLoadJobs:
    def test_load(self, tmp_path):
        path = tmp_path / "jobs.json"
        path.write_text(json.dumps({
            "output_dir": "out",
            "tables": [
                {"kind": "environment_brdf", "width": 16, "samples": 32},
                {"kind": "eye_to_cube_unwrap", "width": 8},
            ],
        }))
        output_dir, jobs = load_jobs(path)
        assert output_dir == tmp_path / "out"
        assert [j.kind for j in jobs] == [TableKind.ENVIRONMENT_BRDF, TableKind.EYE_TO_CUBE_UNWRAP]
        assert jobs[0].samples == 32

    def test_no_output_dir(self, tmp_path):
        path = tmp_path / "jobs.json"
        path.write_text('{"tables": []}')
        assert load_jobs(path) == (None, [])

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_jobs(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "jobs.json"
        path.write_text("{tables: ")
        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_jobs(path)

    def test_tables_must_be_list(self, tmp_path):
        path = tmp_path / "jobs.json"
        path.write_text('{"tables": 3}')
        with pytest.raises(ConfigError, match="'tables' list"):
            load_jobs(path)
