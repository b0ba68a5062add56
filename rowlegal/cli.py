#!/usr/bin/env python3
"""
RowLegal CLI

Command-line interface for generating and legalizing standard-cell rows.

Usage:
    rowlegal run [options]
    rowlegal generate -o <cells.yaml> [options]
    rowlegal legalize <cells.yaml> [options]
    rowlegal check <cells.yaml> [options]
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

from . import __version__
from .errors import RowLegalError

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(verbose: bool = False):
    """Configure root logging for command-line use."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
    )


def load_pipeline_config(args):
    """Load the configuration file (if any) and apply command-line overrides."""
    from .config import DEFAULT_CONFIG, load_config

    config_path: Optional[str] = getattr(args, 'config', None)
    config = load_config(config_path) if config_path else replace(DEFAULT_CONFIG)

    overrides = {}
    if getattr(args, 'count', None) is not None:
        overrides['cell_count'] = args.count
    if getattr(args, 'seed', None) is not None:
        overrides['seed'] = args.seed
    if getattr(args, 'workers', None) is not None:
        overrides['max_workers'] = args.workers
    if getattr(args, 'library', None) is not None:
        overrides['library'] = args.library
    return replace(config, **overrides)


def load_cells_with_config(args):
    """
    Load a cell file and the configuration to process it with.

    Without --config the grid and boundary recorded in the cell file are used;
    with --config a differing recorded setting is logged as a warning.
    """
    from .config import read_cell_file

    config = load_pipeline_config(args)
    cell_file = read_cell_file(args.cells)
    if getattr(args, 'config', None):
        for name in cell_file.mismatches(config):
            logger.warning(
                "%s recorded in %s differs from %s; using the configuration",
                name, args.cells, args.config,
            )
    else:
        config = cell_file.apply_to(config)
    return config, cell_file.cells


def print_summary(result):
    """Print legalization statistics."""
    print(f"  Input cells:   {result.input_cells}")
    print(f"  Legal cells:   {len(result.cells)}")
    print(f"  Rows used:     {result.rows_used}")
    print(f"  Cells moved:   {result.cells_moved}")
    print(f"  Max shift:     {result.max_displacement:g}")
    if result.dropped_cells:
        print(f"  Dropped cells: {result.dropped_cells} (outside every row)")


def cmd_run(args):
    """Generate a cell set, legalize it and write both as SVG."""
    from .layout.generator import CellGenerator
    from .placement.legalizer import RowLegalizer, LegalizerConfig
    from .output.svg import write_svg

    config = load_pipeline_config(args)
    output_dir = Path(args.output_dir)
    legalizer = RowLegalizer(
        config.grid,
        config.boundary,
        LegalizerConfig(max_workers=config.max_workers),
    )

    print(f"Generating {config.cell_count} cells (library: {config.library})...")
    generator = CellGenerator(config.boundary, config.templates(), seed=config.seed)
    cells = generator.generate(config.cell_count)
    input_path = write_svg(output_dir / config.input_svg, config.boundary, cells)
    print(f"  Input:     {input_path}")

    print(f"Legalizing into {legalizer.row_count} rows...")
    result = legalizer.legalize(cells)
    legal_path = write_svg(output_dir / config.legalized_svg, config.boundary, result.cells)
    print(f"  Legalized: {legal_path}")
    print_summary(result)
    return 0


def cmd_generate(args):
    """Generate a cell set and save it as YAML."""
    from .layout.generator import CellGenerator
    from .config import write_cells
    from .output.svg import write_svg

    config = load_pipeline_config(args)
    generator = CellGenerator(config.boundary, config.templates(), seed=config.seed)
    cells = generator.generate(config.cell_count)

    path = write_cells(args.output, cells, config.grid, config.boundary)
    print(f"Generated {len(cells)} cells: {path}")
    if args.svg:
        print(f"SVG: {write_svg(args.svg, config.boundary, cells)}")
    return 0


def cmd_legalize(args):
    """Legalize a saved cell set."""
    from .config import write_cells
    from .placement.legalizer import RowLegalizer, LegalizerConfig
    from .output.svg import write_svg

    config, cells = load_cells_with_config(args)
    print(f"Loaded {len(cells)} cells from {args.cells}")

    legalizer = RowLegalizer(
        config.grid,
        config.boundary,
        LegalizerConfig(max_workers=config.max_workers),
    )
    result = legalizer.legalize(cells)
    print_summary(result)

    if args.dry_run:
        return 0

    if args.output:
        output_path = Path(args.output)
    else:
        source = Path(args.cells)
        output_path = source.with_name(f"{source.stem}.legal{source.suffix or '.yaml'}")
    write_cells(output_path, result.cells, config.grid, config.boundary)
    print(f"Saved to: {output_path}")

    if args.svg:
        print(f"SVG: {write_svg(args.svg, config.boundary, result.cells)}")
    return 0


def cmd_check(args):
    """Check a saved cell set for row overlaps and grid alignment."""
    from .validation.legality import LegalityChecker

    config, cells = load_cells_with_config(args)

    checker = LegalityChecker(config.grid, config.boundary)
    legal, issues = checker.check(cells)

    for issue in issues[:args.max_issues]:
        print(f"  [{issue.severity.upper()}] {issue.category}: {issue.message}")
    if len(issues) > args.max_issues:
        print(f"  ... and {len(issues) - args.max_issues} more")

    status = "LEGAL" if legal else "ILLEGAL"
    print(f"{status}: {len(cells)} cells, {len(issues)} issues")
    return 0 if legal else 1


def _add_config_arguments(parser):
    parser.add_argument('--config', help='YAML pipeline configuration file')
    parser.add_argument('-v', '--verbose', action='store_true', help='Verbose output')


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="RowLegal - Standard-Cell Row Legalization",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Generate, legalize and write 0-input.svg / 1-legalized.svg
  rowlegal run --seed 1
  rowlegal run --count 5000 --output-dir out/

  # Step by step
  rowlegal generate -o cells.yaml --count 1000 --seed 7
  rowlegal legalize cells.yaml -o legal.yaml --svg legal.svg
  rowlegal check legal.yaml
        """,
    )

    parser.add_argument('--version', action='version', version=f'rowlegal {__version__}')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Run command
    run_parser = subparsers.add_parser('run', help='Generate and legalize, writing SVGs')
    _add_config_arguments(run_parser)
    run_parser.add_argument('--count', type=int, help='Number of cells (default: 100000)')
    run_parser.add_argument('--seed', type=int, help='Random seed')
    run_parser.add_argument('--library', help='Shape library name (default: reference)')
    run_parser.add_argument('--workers', type=int, help='Threads for row legalization')
    run_parser.add_argument('--output-dir', default='.', help='Directory for SVG files')

    # Generate command
    generate_parser = subparsers.add_parser('generate', help='Generate a cell set')
    _add_config_arguments(generate_parser)
    generate_parser.add_argument('-o', '--output', required=True, help='Output cell file (YAML)')
    generate_parser.add_argument('--count', type=int, help='Number of cells (default: 100000)')
    generate_parser.add_argument('--seed', type=int, help='Random seed')
    generate_parser.add_argument('--library', help='Shape library name (default: reference)')
    generate_parser.add_argument('--svg', help='Also write an SVG of the cells')

    # Legalize command
    legalize_parser = subparsers.add_parser('legalize', help='Legalize a cell set')
    _add_config_arguments(legalize_parser)
    legalize_parser.add_argument('cells', help='Cell file (YAML)')
    legalize_parser.add_argument('-o', '--output', help='Output cell file path')
    legalize_parser.add_argument('--svg', help='Also write an SVG of the legalized cells')
    legalize_parser.add_argument('--workers', type=int, help='Threads for row legalization')
    legalize_parser.add_argument('--dry-run', action='store_true', help="Don't save results")

    # Check command
    check_parser = subparsers.add_parser('check', help='Check a cell set for legality')
    _add_config_arguments(check_parser)
    check_parser.add_argument('cells', help='Cell file (YAML)')
    check_parser.add_argument('--max-issues', type=int, default=20,
                              help='Maximum issues to print (default: 20)')

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(args.verbose)

    # Dispatch command
    commands = {
        'run': cmd_run,
        'generate': cmd_generate,
        'legalize': cmd_legalize,
        'check': cmd_check,
    }

    try:
        return commands[args.command](args)
    except RowLegalError as e:
        print(f"Error: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
