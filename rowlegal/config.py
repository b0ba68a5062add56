"""
Pipeline configuration and cell-set persistence.

Both are stored as YAML. A configuration file looks like:

```yaml
boundary:
  x: 0.0
  y: 0.0
  width: 300000.0
  height: 300000.0
grid:
  x: 1.0
  y: 200.0
library: reference
cell_count: 100000
seed: 42
max_workers: 1
input_svg: 0-input.svg
legalized_svg: 1-legalized.svg
```

Keys that are missing fall back to the defaults below; unknown keys are
ignored. Cell files carry a version, the grid and boundary they were
generated for, and the list of cells.
"""

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union
import logging

import yaml

from .errors import ConfigError
from .layout.abstraction import Point, Rectangle
from .layout.library import ShapeLibrary, get_library
from .placement.legalizer import row_count_for

logger = logging.getLogger(__name__)

# Cell file version for format compatibility
CELL_FILE_VERSION = 1


@dataclass
class PipelineConfig:
    """Constants for one generate-and-legalize run."""
    boundary: Rectangle = field(
        default_factory=lambda: Rectangle.from_xywh(0.0, 0.0, 300000.0, 300000.0)
    )
    grid: Point = field(default_factory=lambda: Point(1.0, 200.0))
    library: str = "reference"
    cell_count: int = 100000
    seed: Optional[int] = None
    max_workers: int = 1
    input_svg: str = "0-input.svg"
    legalized_svg: str = "1-legalized.svg"

    @property
    def row_count(self) -> int:
        return row_count_for(self.boundary, self.grid)

    def shape_library(self) -> ShapeLibrary:
        return get_library(self.library)

    def templates(self) -> Tuple[Rectangle, ...]:
        return self.shape_library().templates(self.grid)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "boundary": self.boundary.to_dict(),
            "grid": {"x": self.grid.x, "y": self.grid.y},
            "library": self.library,
            "cell_count": self.cell_count,
            "seed": self.seed,
            "max_workers": self.max_workers,
            "input_svg": self.input_svg,
            "legalized_svg": self.legalized_svg,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PipelineConfig":
        """Create from dictionary, filling missing keys with defaults."""
        config = cls()
        updates: Dict[str, Any] = {}
        try:
            if "boundary" in data:
                updates["boundary"] = Rectangle.from_dict(data["boundary"])
            if "grid" in data:
                grid = data["grid"]
                updates["grid"] = Point(float(grid["x"]), float(grid["y"]))
                if updates["grid"].x == 0 or updates["grid"].y == 0:
                    raise ConfigError(f"grid pitch must be non-zero in x and y, got {grid}")
            if "library" in data:
                updates["library"] = str(data["library"])
            if "cell_count" in data:
                updates["cell_count"] = int(data["cell_count"])
            if "seed" in data:
                updates["seed"] = None if data["seed"] is None else int(data["seed"])
            if "max_workers" in data:
                updates["max_workers"] = int(data["max_workers"])
            for key in ("input_svg", "legalized_svg"):
                if key in data:
                    updates[key] = str(data[key])
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ConfigError(f"invalid configuration value: {e}") from e
        return replace(config, **updates)


DEFAULT_CONFIG = PipelineConfig()


def _read_yaml(path: Path) -> Any:
    try:
        return yaml.safe_load(path.read_text(encoding="utf-8"))
    except UnicodeDecodeError as e:
        raise ConfigError(f"not a UTF-8 text file: {e}", path) from e
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML: {e}", path) from e


def _write_yaml(data: Dict[str, Any], path: Path):
    content = yaml.dump(
        data,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def load_config(path: Union[str, Path]) -> PipelineConfig:
    """
    Load a pipeline configuration file.

    Args:
        path: Path to the YAML file

    Returns:
        PipelineConfig with defaults for missing keys

    Raises:
        ConfigError: If the file is missing or malformed
    """
    path = Path(path)
    if not path.exists():
        raise ConfigError("configuration file not found", path)

    data = _read_yaml(path)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("configuration must be a mapping", path)

    config = PipelineConfig.from_dict(data)
    # Fail early on unknown library names
    config.shape_library()
    logger.debug(f"Loaded configuration: {path}")
    return config


def write_config(config: PipelineConfig, path: Union[str, Path]) -> Path:
    """Write a pipeline configuration file."""
    path = Path(path)
    _write_yaml(config.to_dict(), path)
    logger.info(f"Saved configuration: {path}")
    return path


def write_cells(
    path: Union[str, Path],
    cells: Sequence[Rectangle],
    grid: Optional[Point] = None,
    boundary: Optional[Rectangle] = None,
) -> Path:
    """
    Write a cell set to YAML.

    Args:
        path: Destination file
        cells: Cells in the order they should be read back
        grid: Grid the cells belong to, recorded for reference
        boundary: Canvas the cells belong to, recorded for reference
    """
    path = Path(path)
    data: Dict[str, Any] = {"version": CELL_FILE_VERSION}
    if grid is not None:
        data["grid"] = {"x": grid.x, "y": grid.y}
    if boundary is not None:
        data["boundary"] = boundary.to_dict()
    data["cells"] = [cell.to_dict() for cell in cells]

    _write_yaml(data, path)
    logger.info(f"Saved cell file: {path} ({len(cells)} cells)")
    return path


@dataclass
class CellFile:
    """Contents of a cell file."""
    cells: List[Rectangle] = field(default_factory=list)
    grid: Optional[Point] = None  # grid recorded at write time, if any
    boundary: Optional[Rectangle] = None  # boundary recorded at write time, if any

    def apply_to(self, config: PipelineConfig) -> PipelineConfig:
        """Config with grid and boundary replaced by the recorded ones."""
        updates: Dict[str, Any] = {}
        if self.grid is not None:
            updates["grid"] = self.grid
        if self.boundary is not None:
            updates["boundary"] = self.boundary
        return replace(config, **updates)

    def mismatches(self, config: PipelineConfig) -> List[str]:
        """Names of recorded settings that differ from ``config``."""
        names = []
        if self.grid is not None and self.grid != config.grid:
            names.append("grid")
        if self.boundary is not None and self.boundary != config.boundary:
            names.append("boundary")
        return names


def read_cell_file(path: Union[str, Path]) -> CellFile:
    """
    Read a cell file written by ``write_cells``, including its recorded
    grid and boundary.

    Raises:
        ConfigError: If the file is missing, malformed or of a newer version
    """
    path = Path(path)
    if not path.exists():
        raise ConfigError("cell file not found", path)

    data = _read_yaml(path)
    if not isinstance(data, dict) or "cells" not in data:
        raise ConfigError("cell file must be a mapping with a 'cells' list", path)

    try:
        version = int(data.get("version", CELL_FILE_VERSION))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"invalid cell file version: {e}", path) from e
    if version > CELL_FILE_VERSION:
        raise ConfigError(f"unsupported cell file version {version}", path)

    try:
        cells = [Rectangle.from_dict(entry) for entry in data["cells"] or []]
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise ConfigError(f"invalid cell entry: {e}", path) from e

    # Recorded settings go through the same validation as a config file
    recorded = {key: data[key] for key in ("grid", "boundary") if key in data}
    try:
        settings = PipelineConfig.from_dict(recorded)
    except ConfigError as e:
        raise ConfigError(str(e), path) from e

    logger.debug(f"Loaded {len(cells)} cells from {path}")
    return CellFile(
        cells=cells,
        grid=settings.grid if "grid" in recorded else None,
        boundary=settings.boundary if "boundary" in recorded else None,
    )


def read_cells(path: Union[str, Path]) -> List[Rectangle]:
    """Read only the cells of a cell file."""
    return read_cell_file(path).cells
