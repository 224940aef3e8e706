"""Command line front end: generate maps and query paths."""

import argparse
from pathlib import Path
from typing import List, Optional

import structlog
from pydantic import ValidationError

from .config import MapGeneratorSettings, settings
from .core.hex_grid import HexGrid, MapSizeError
from .core.map_format import MapFormatError, load_map, save_map
from .core.map_generator import HexMapGenerator
from .core.pathfinding import HexPathfinder
from .core.units import HexUnit
from .logging_config import configure_logging

logger = structlog.get_logger()


def _new_grid() -> HexGrid:
    return HexGrid(settings.chunk_size_x, settings.chunk_size_z)


def cmd_generate(args) -> int:
    if args.width > settings.max_map_width or args.height > settings.max_map_height:
        print(f"Map size {args.width}x{args.height} exceeds the configured maximum "
              f"{settings.max_map_width}x{settings.max_map_height}")
        return 2

    options = {"region_count": args.regions, "land_percentage": args.land}
    if args.seed is not None:
        options.update(use_fixed_seed=True, seed=args.seed)
    try:
        generator_settings = MapGeneratorSettings(**options)
    except ValidationError as e:
        print(f"Invalid generator settings: {e}")
        return 2
    generator = HexMapGenerator(_new_grid(), generator_settings)

    try:
        report = generator.generate_map(args.width, args.height)
    except MapSizeError as e:
        print(str(e))
        return 2

    out = Path(args.out) if args.out else Path(settings.maps_dir) / f"map_{report.seed}.map"
    save_map(out, generator.grid)

    print(f"Map {report.width}x{report.height} seed {report.seed} written to {out}")
    print(f"  land cells: {report.land_cells} (budget left {report.land_budget_remaining})")
    print(f"  rivers: {report.river_count} (budget left {report.river_budget_remaining})")
    return 0


def cmd_path(args) -> int:
    grid = _new_grid()
    try:
        load_map(args.map, grid)
    except (MapFormatError, MapSizeError) as e:
        print(f"Cannot load {args.map}: {e}")
        return 2

    start = grid.offset_index(*args.from_cell) if _in_bounds(grid, args.from_cell) else None
    end = grid.offset_index(*args.to_cell) if _in_bounds(grid, args.to_cell) else None
    if start is None or end is None:
        print("Start and target must lie on the map")
        return 2

    if args.speed <= 0:
        print("Speed must be positive")
        return 2
    logger.debug("Finding path", start=start, end=end, speed=args.speed)
    path = HexPathfinder(grid).find_path(start, end, args.speed)
    if path is None:
        print("No path")
        return 1

    print(f"Path of {len(path)} cells, cost {path.cost}, {path.turn_count} turns")
    for cell, distance, turn in zip(path.cells, path.distances, path.turns):
        x, z = grid.coordinates(cell).to_offset()
        print(f"  ({x}, {z})  distance {distance}  turn {turn}")
    return 0


def _in_bounds(grid: HexGrid, cell: List[int]) -> bool:
    x, z = cell
    return 0 <= x < grid.cell_count_x and 0 <= z < grid.cell_count_z


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="hexmap", description="Hex map generator")
    ap.add_argument("--log-level", default=settings.log_level)
    ap.add_argument("--log-format", default=settings.log_format, choices=["console", "json"])
    sub = ap.add_subparsers()

    ap_gen = sub.add_parser("generate", help="Generate a map and save it")
    ap_gen.add_argument("--width", type=int, default=settings.default_map_width)
    ap_gen.add_argument("--height", type=int, default=settings.default_map_height)
    ap_gen.add_argument("--seed", type=int, default=None, help="Fixed seed (random if omitted)")
    ap_gen.add_argument("--regions", type=int, default=1, help="Number of regions (1-4)")
    ap_gen.add_argument("--land", type=int, default=50, help="Land percentage")
    ap_gen.add_argument("--out", default=None, help="Output map file")
    ap_gen.set_defaults(func=cmd_generate)

    ap_path = sub.add_parser("path", help="Find a path on a saved map")
    ap_path.add_argument("map")
    ap_path.add_argument("--from", dest="from_cell", nargs=2, type=int, required=True, metavar=("X", "Z"))
    ap_path.add_argument("--to", dest="to_cell", nargs=2, type=int, required=True, metavar=("X", "Z"))
    ap_path.add_argument("--speed", type=int, default=HexUnit.MOVEMENT_POINTS)
    ap_path.set_defaults(func=cmd_path)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    configure_logging(args.log_level, args.log_format)
    if not hasattr(args, "func"):
        ap.print_help()
        return 1
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
