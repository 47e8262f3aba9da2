"""
Command-line interface.

Usage:
    cubepath analyze --dims 3x3x3 --start 0,0,0
    cubepath generate --dims 4x4x4 --start 0,0,0 --mode complete --plot out/path.png
    cubepath play --dims 3x3x3 --start 0,0,0 --speed 0.25
    cubepath sweep --sizes 3x3x3 2x3x4 --starts feasible --workers 4
"""

import argparse
import json
import sys
import time
from pathlib import Path
from typing import List, Optional, Tuple

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config import EngineConfig, load_config
from .construction import MODES, STRATEGIES
from .core.feasibility import analyze
from .core.grid import Grid, build_grid, parse_cell
from .diagnostics import DiagnosticsSink
from .errors import CubePathError
from .pipeline.generator import generate_path
from .pipeline.sweep import START_SETS, generate_sweep_tasks, run_sweep, summarize_sweep
from .playback.engine import PlaybackEngine
from .playback.reveal import reveal_from_config

console = Console()


def parse_dims(text: str) -> Tuple[int, int, int]:
    """Parse ``"WxHxD"`` (or a single ``"N"`` for a cube)."""
    parts = [p for p in text.lower().replace("*", "x").split("x") if p]
    try:
        values = [int(p) for p in parts]
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid dimensions: {text!r}") from None
    if len(values) == 1:
        values = values * 3
    if len(values) != 3:
        raise argparse.ArgumentTypeError(f"Expected WxHxD, got {text!r}")
    return values[0], values[1], values[2]


def _positive_float(text: str) -> float:
    try:
        value = float(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid number: {text!r}") from None
    if value <= 0:
        raise argparse.ArgumentTypeError(f"Expected a positive number, got {text!r}")
    return value


def _cell_arg(text: str):
    try:
        return parse_cell(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _load(args) -> EngineConfig:
    config = load_config(args.config)
    if getattr(args, "verbose", False):
        config.diagnostics.echo = True
        config.diagnostics.level = "debug"
    return config


def _make_sink(config: EngineConfig) -> DiagnosticsSink:
    return DiagnosticsSink(
        "cubepath",
        level=config.diagnostics.level,
        echo=config.diagnostics.echo,
    )


def _grid(args, config: EngineConfig) -> Grid:
    return build_grid(*args.dims, spacing=config.grid.spacing)


# ---------- Commands ----------

def cmd_analyze(args) -> int:
    config = _load(args)
    grid = _grid(args, config)
    verdict = analyze(grid, args.start)

    table = Table(title="Feasibility", show_header=True, box=box.ROUNDED)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Grid", f"{grid.width}×{grid.height}×{grid.depth}")
    table.add_row("Start", str(tuple(args.start)))
    table.add_row("Even cells", str(verdict.color_counts["even"]))
    table.add_row("Odd cells", str(verdict.color_counts["odd"]))
    table.add_row("Start color", verdict.start_color)
    table.add_row("Required color", verdict.required_color or "any")
    table.add_row("Can generate", "yes" if verdict.can_generate else "no")
    table.add_row("Message", verdict.message)
    console.print(table)
    return 0 if verdict.can_generate else 1


def cmd_generate(args) -> int:
    config = _load(args)
    grid = _grid(args, config)
    sink = _make_sink(config)

    result = generate_path(
        grid,
        args.start,
        mode=args.mode,
        strategy=args.strategy,
        seed=args.seed,
        config=config,
        sink=sink,
    )

    status = "[bold green]complete[/bold green]" if result.complete else "[yellow]partial[/yellow]"
    console.print(Panel.fit(
        f"[bold]Grid:[/bold] {grid.width}×{grid.height}×{grid.depth}   "
        f"[bold]Start:[/bold] {tuple(result.path[0])}\n"
        f"[bold]Mode:[/bold] {result.mode}   [bold]Strategy:[/bold] {result.strategy}   "
        f"[bold]Seed:[/bold] {result.seed}\n"
        f"[bold]Coverage:[/bold] {result.coverage_label} ({status})   "
        f"[bold]Time:[/bold] {result.elapsed_sec * 1000:.1f} ms",
        title="[bold cyan]Path Generation[/bold cyan]",
        border_style="cyan",
    ))

    if result.issues:
        issues = Table(title="Issues", show_header=True, box=box.SIMPLE)
        issues.add_column("Code", style="yellow")
        issues.add_column("Message")
        for issue in result.issues:
            issues.add_row(issue.code, issue.message)
        console.print(issues)

    if args.show_path:
        console.print(" → ".join(f"({c.x},{c.y},{c.z})" for c in result.path))

    if args.json:
        out = Path(args.json)
        out.parent.mkdir(parents=True, exist_ok=True)
        with open(out, "w", encoding="utf-8") as f:
            json.dump(result.to_dict(), f, indent=2)
        console.print(f"[dim]Result saved to: {out}[/dim]")

    if args.plot:
        from .visualization import plot_path
        saved = plot_path(grid, result.path, args.plot, title=f"{result.mode} / {result.strategy}")
        console.print(f"[dim]Plot saved to: {saved}[/dim]")

    if args.mode == "complete" and not result.complete:
        return 1
    return 0


def cmd_play(args) -> int:
    config = _load(args)
    grid = _grid(args, config)
    result = generate_path(grid, args.start, mode=args.mode, seed=args.seed, config=config)

    playback = config.playback
    if args.speed is not None:
        playback.speed = args.speed

    if args.reveal:
        steps = 0
        delay_ms = 0.0
        for step in reveal_from_config(result.path, playback):
            steps += 1
            delay_ms = step.delay_ms
            if args.realtime:
                time.sleep(step.delay_ms / 1000.0)
        console.print(f"[dim]Revealed {len(result.path)} cells in {steps} steps at {delay_ms:.1f} ms/step[/dim]")

    engine = PlaybackEngine.from_config(grid, result.path, playback)
    if not engine.start():
        console.print("[yellow]Path is too short to play back[/yellow]")
        return 1

    frame_time = 1.0 / max(1, playback.frame_rate)
    ticks = 0
    last_segment = -1
    while engine.is_playing:
        frame = engine.tick(frame_time if args.elapsed else None)
        ticks += 1
        if frame.segment_index != last_segment or frame.completed:
            last_segment = frame.segment_index
            x, y, z = frame.position
            console.print(
                f"[dim]tick {ticks:>5}[/dim]  segment {frame.segment_index + 1}/{len(result.path) - 1}"
                f"  pos=({x:+.2f}, {y:+.2f}, {z:+.2f})"
                + ("  [bold green]done[/bold green]" if frame.completed else "")
            )
        if args.realtime:
            time.sleep(frame_time)

    console.print(f"Played {len(result.path)} cells in {ticks} ticks")
    return 0


def cmd_sweep(args) -> int:
    config = _load(args)
    tasks = generate_sweep_tasks(
        args.sizes,
        starts=args.starts,
        modes=args.modes,
        strategy=args.strategy,
        seeds=args.seeds,
        base_seed=args.base_seed,
    )
    console.print(f"[bold]Sweep:[/bold] {len(tasks)} tasks on {args.workers} worker(s)")
    t0 = time.time()
    results = run_sweep(tasks, config=config, workers=args.workers)
    rows = summarize_sweep(results)

    table = Table(title="Coverage", show_header=True, box=box.ROUNDED)
    table.add_column("Grid", style="cyan")
    table.add_column("Mode")
    table.add_column("Runs", justify="right")
    table.add_column("Feasible", justify="right")
    table.add_column("Complete", justify="right", style="green")
    table.add_column("Mean cov.", justify="right")
    table.add_column("Min cov.", justify="right")
    table.add_column("Mean time", justify="right", style="dim")
    for row in rows:
        table.add_row(
            row["dims"],
            row["mode"],
            str(row["runs"]),
            str(row["feasible"]),
            str(row["complete"]),
            f"{row['mean_coverage'] * 100:.1f}%",
            f"{row['min_coverage'] * 100:.1f}%",
            f"{row['mean_runtime_sec'] * 1000:.1f} ms",
        )
    console.print(table)
    console.print(f"[dim]Total time: {time.time() - t0:.2f}s[/dim]")

    if args.json:
        out = Path(args.json)
        out.parent.mkdir(parents=True, exist_ok=True)
        with open(out, "w", encoding="utf-8") as f:
            json.dump({"summary": rows, "results": [r.to_dict() for r in results]}, f, indent=2)
        console.print(f"[dim]Results saved to: {out}[/dim]")

    if args.plot:
        from .visualization import plot_coverage
        saved = plot_coverage(rows, args.plot)
        console.print(f"[dim]Plot saved to: {saved}[/dim]")
    return 0


# ---------- Parser ----------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cubepath",
        description="Hamiltonian and self-avoiding paths on 3-D lattice grids",
    )
    parser.add_argument("--config", default=None, help="YAML configuration file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Echo diagnostics events")
    sub = parser.add_subparsers(dest="command", required=True)

    def add_grid_args(p, with_start=True):
        p.add_argument("--dims", type=parse_dims, required=True, help="Grid size as WxHxD")
        if with_start:
            p.add_argument("--start", type=_cell_arg, required=True, help="Start cell as x,y,z")

    p = sub.add_parser("analyze", help="Parity feasibility of a start cell")
    add_grid_args(p)
    p.set_defaults(func=cmd_analyze)

    p = sub.add_parser("generate", help="Generate a path")
    add_grid_args(p)
    p.add_argument("--mode", choices=MODES, default="complete")
    p.add_argument("--strategy", choices=STRATEGIES, default="auto")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--json", default=None, help="Write the result as JSON")
    p.add_argument("--plot", default=None, help="Save a 3-D plot (PNG/SVG/PDF)")
    p.add_argument("--show-path", action="store_true", help="Print every cell")
    p.set_defaults(func=cmd_generate)

    p = sub.add_parser("play", help="Generate a path and simulate its playback")
    add_grid_args(p)
    p.add_argument("--mode", choices=MODES, default="complete")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--speed", type=_positive_float, default=None, help="Segment fraction per tick")
    p.add_argument("--elapsed", action="store_true", help="Advance by frame time instead of speed")
    p.add_argument("--realtime", action="store_true", help="Sleep between frames")
    p.add_argument("--reveal", action="store_true", help="Draw the path in before playing it")
    p.set_defaults(func=cmd_play)

    p = sub.add_parser("sweep", help="Coverage over many grids and starts")
    p.add_argument("--sizes", type=parse_dims, nargs="+", required=True)
    p.add_argument("--starts", choices=START_SETS, default="feasible")
    p.add_argument("--modes", choices=MODES, nargs="+", default=["complete"])
    p.add_argument("--strategy", choices=STRATEGIES, default="auto")
    p.add_argument("--seeds", type=int, default=1)
    p.add_argument("--base-seed", type=int, default=0)
    p.add_argument("--workers", type=int, default=1)
    p.add_argument("--json", default=None)
    p.add_argument("--plot", default=None, help="Save a coverage bar chart")
    p.set_defaults(func=cmd_sweep)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return args.func(args)
    except CubePathError as e:
        console.print(f"[bold red]✗ {e}[/bold red]")
        return 2


if __name__ == "__main__":
    sys.exit(main())
