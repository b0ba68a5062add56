"""Tests for YAML configuration and cell file persistence."""

import pytest
import yaml

from rowlegal.config import (
    CELL_FILE_VERSION,
    DEFAULT_CONFIG,
    CellFile,
    PipelineConfig,
    load_config,
    read_cell_file,
    read_cells,
    write_cells,
    write_config,
)
from rowlegal.errors import ConfigError
from rowlegal.layout.abstraction import Point, Rectangle


class TestPipelineConfig:
    """Tests for configuration defaults and file round trips."""

    def test_defaults_match_reference_run(self):
        assert DEFAULT_CONFIG.boundary == Rectangle.from_xywh(0, 0, 300000, 300000)
        assert DEFAULT_CONFIG.grid == Point(1.0, 200.0)
        assert DEFAULT_CONFIG.library == "reference"
        assert DEFAULT_CONFIG.cell_count == 100000
        assert DEFAULT_CONFIG.row_count == 1500
        assert DEFAULT_CONFIG.input_svg == "0-input.svg"
        assert DEFAULT_CONFIG.legalized_svg == "1-legalized.svg"

    def test_templates_use_grid(self):
        config = PipelineConfig(grid=Point(2.0, 10.0))
        assert config.templates()[0].size == Point(40.0, 10.0)

    def test_round_trip(self, tmp_path):
        config = PipelineConfig(
            boundary=Rectangle.from_xywh(0, 0, 1000, 400),
            grid=Point(1.0, 20.0),
            library="narrow",
            cell_count=250,
            seed=17,
            max_workers=2,
        )
        path = write_config(config, tmp_path / "pipeline.yaml")
        assert load_config(path) == config

    def test_partial_file_uses_defaults(self, tmp_path):
        path = tmp_path / "pipeline.yaml"
        path.write_text("cell_count: 10\nseed: 3\nunknown_key: ignored\n")
        config = load_config(path)
        assert config.cell_count == 10
        assert config.seed == 3
        assert config.grid == DEFAULT_CONFIG.grid

    def test_empty_file_is_default(self, tmp_path):
        path = tmp_path / "pipeline.yaml"
        path.write_text("")
        assert load_config(path) == PipelineConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "pipeline.yaml"
        path.write_text("grid: [1, 2\n")
        with pytest.raises(ConfigError, match="invalid YAML"):
            load_config(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "pipeline.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(path)

    def test_bad_value(self, tmp_path):
        path = tmp_path / "pipeline.yaml"
        path.write_text("grid:\n  x: 1\n")
        with pytest.raises(ConfigError, match="invalid configuration value"):
            load_config(path)

    def test_zero_grid_rejected(self, tmp_path):
        path = tmp_path / "pipeline.yaml"
        path.write_text(yaml.dump({"grid": {"x": 0.0, "y": 200.0}, "cell_count": 5}))
        with pytest.raises(ConfigError, match="non-zero"):
            load_config(path)

    def test_non_utf8_file(self, tmp_path):
        path = tmp_path / "pipeline.yaml"
        path.write_bytes(b"\xff\xfe\x00grid")
        with pytest.raises(ConfigError, match="UTF-8"):
            load_config(path)

    def test_unknown_library(self, tmp_path):
        path = tmp_path / "pipeline.yaml"
        path.write_text("library: imaginary\n")
        with pytest.raises(ConfigError, match="Unknown shape library"):
            load_config(path)


class TestCellFiles:
    """Tests for saving and loading cell sets."""

    def test_round_trip(self, tmp_path, overlapping_row, unit_grid, small_boundary):
        path = write_cells(tmp_path / "cells.yaml", overlapping_row, unit_grid, small_boundary)
        assert read_cells(path) == overlapping_row

        data = yaml.safe_load(path.read_text())
        assert data["version"] == CELL_FILE_VERSION
        assert data["grid"] == {"x": 1.0, "y": 10.0}
        assert len(data["cells"]) == 3

    def test_empty_cell_list(self, tmp_path):
        path = write_cells(tmp_path / "cells.yaml", [])
        assert read_cells(path) == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            read_cells(tmp_path / "cells.yaml")

    def test_missing_cells_key(self, tmp_path):
        path = tmp_path / "cells.yaml"
        path.write_text("version: 1\n")
        with pytest.raises(ConfigError, match="'cells'"):
            read_cells(path)

    def test_newer_version_rejected(self, tmp_path):
        path = tmp_path / "cells.yaml"
        path.write_text(f"version: {CELL_FILE_VERSION + 1}\ncells: []\n")
        with pytest.raises(ConfigError, match="unsupported"):
            read_cells(path)

    def test_bad_entry(self, tmp_path):
        path = tmp_path / "cells.yaml"
        path.write_text("cells:\n  - x: 1\n    y: 2\n")
        with pytest.raises(ConfigError, match="invalid cell entry"):
            read_cells(path)

    def test_non_utf8_file(self, tmp_path):
        path = tmp_path / "cells.yaml"
        path.write_bytes(b"\xff\xfe\x00cells")
        with pytest.raises(ConfigError, match="UTF-8"):
            read_cells(path)


class TestRecordedSettings:
    """Tests for the grid and boundary stored alongside a cell set."""

    def test_recorded_settings_read_back(self, tmp_path, overlapping_row,
                                         unit_grid, small_boundary):
        path = write_cells(tmp_path / "cells.yaml", overlapping_row, unit_grid, small_boundary)
        cell_file = read_cell_file(path)
        assert cell_file.cells == overlapping_row
        assert cell_file.grid == unit_grid
        assert cell_file.boundary == small_boundary

    def test_absent_settings_are_none(self, tmp_path, overlapping_row):
        cell_file = read_cell_file(write_cells(tmp_path / "cells.yaml", overlapping_row))
        assert cell_file.grid is None
        assert cell_file.boundary is None
        assert cell_file.apply_to(DEFAULT_CONFIG) == DEFAULT_CONFIG
        assert cell_file.mismatches(DEFAULT_CONFIG) == []

    def test_apply_to_replaces_grid_and_boundary(self, unit_grid, small_boundary):
        cell_file = CellFile(cells=[], grid=unit_grid, boundary=small_boundary)
        config = cell_file.apply_to(PipelineConfig(cell_count=7))
        assert config.grid == unit_grid
        assert config.boundary == small_boundary
        assert config.cell_count == 7
        assert config.row_count == 5

    def test_mismatches(self, unit_grid, small_boundary):
        cell_file = CellFile(cells=[], grid=unit_grid, boundary=small_boundary)
        assert cell_file.mismatches(DEFAULT_CONFIG) == ["grid", "boundary"]
        same = PipelineConfig(grid=unit_grid, boundary=small_boundary)
        assert cell_file.mismatches(same) == []

    def test_zero_recorded_grid_rejected(self, tmp_path):
        path = tmp_path / "cells.yaml"
        path.write_text("grid:\n  x: 1.0\n  y: 0.0\ncells: []\n")
        with pytest.raises(ConfigError, match="non-zero"):
            read_cell_file(path)
