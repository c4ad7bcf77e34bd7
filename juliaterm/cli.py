from __future__ import annotations

import argparse
import logging
import subprocess
import sys
import threading
from typing import Optional

from juliaterm.config import load_config, normalise_config
from juliaterm.pipeline import RunSummary, play, record_sequence
from juliaterm.terminal import TerminalSession, install_cancel_handlers, restore_handlers
from juliaterm.util.logging_setup import configure_logging, get_logger
from juliaterm.util.manifest import build_manifest, manifest_path_for, write_manifest

def _git_commit() -> Optional[str]:
    try:
        r = subprocess.run(["git", "rev-parse", "HEAD"], capture_output=True, text=True, check=True)
        return r.stdout.strip()
    except (OSError, subprocess.CalledProcessError):
        return None

def _seed(text: str) -> int:
    return int(text, 0)

def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="juliaterm", description="Animated Julia set in the terminal with reproducible runs.")
    p.add_argument("--config", type=str, default=None, help="Path to config JSON. If omitted, built-in defaults are used.")
    p.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG","INFO","WARNING","ERROR"], help="Log level.")
    p.add_argument("--log-file", type=str, default="juliaterm.log", help="Log file path (rotating). Set empty to disable file logging.")
    sub = p.add_subparsers(dest="cmd", required=True)

    pl = sub.add_parser("play", help="Animate in the terminal until q or Ctrl+C.")
    pl.add_argument("--max-iters", type=int, default=None, help="Iteration cap per cell.")
    pl.add_argument("--fps", type=float, default=None, help="Target frame rate.")
    pl.add_argument("--seed", type=_seed, default=None, help="Random walk seed (decimal or 0x hex).")

    r = sub.add_parser("record", help="Render a fixed-dt sequence of frames to a file.")
    r.add_argument("--output", type=str, required=True, help="Output .ans file.")
    r.add_argument("--frames", type=int, default=None, help="Number of frames (defaults to config.record_frames).")
    r.add_argument("--width", type=int, default=None, help="Grid width in cells.")
    r.add_argument("--height", type=int, default=None, help="Grid height in cells.")
    r.add_argument("--dt", type=float, default=None, help="Time step per frame (defaults to config.record_dt).")
    r.add_argument("--max-iters", type=int, default=None, help="Iteration cap per cell.")
    r.add_argument("--seed", type=_seed, default=None, help="Random walk seed (decimal or 0x hex).")
    r.add_argument("--no-progress", action="store_true", help="Hide the progress bar.")
    r.add_argument("--no-manifest", action="store_true", help="Skip writing the JSON run manifest.")

    return p

def _report(summary: RunSummary) -> None:
    print(f"Exited. Frames: {summary.frames} Time: {summary.seconds:.2f}s Avg FPS: {summary.avg_fps:.2f}")

def _run_play(args, cfg) -> int:
    cancel = threading.Event()
    previous = install_cancel_handlers(cancel)
    try:
        with TerminalSession():
            summary = play(cfg=cfg, cancel=cancel)
    finally:
        restore_handlers(previous)
    _report(summary)
    return 0

def _run_record(args, cfg) -> int:
    logger = get_logger()
    cancel = threading.Event()
    previous = install_cancel_handlers(cancel)
    try:
        summary = record_sequence(cfg=cfg, output=args.output, frames=args.frames, dt=args.dt,
                                  progress=not args.no_progress, cancel=cancel)
    finally:
        restore_handlers(previous)

    if not args.no_manifest:
        path = manifest_path_for(args.output)
        manifest = build_manifest(config=cfg, output=args.output, frames=summary.frames,
                                  directives=summary.directives, git_commit=_git_commit())
        write_manifest(path, manifest)
        logger.info("Run manifest written: %s", path)
    _report(summary)
    return 0

def main(argv: Optional[list] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    log_level = getattr(logging, args.log_level.upper(), logging.INFO)
    log_file = args.log_file if args.log_file and args.log_file.strip() else None
    # Console logging would scribble over the frame while playing.
    listener = configure_logging(level=log_level, console=args.cmd != "play", log_file=log_file)
    logger = get_logger()

    try:
        cfg = load_config(args.config)
        overrides = {
            "max_iters": args.max_iters,
            "seed": args.seed,
            "target_fps": getattr(args, "fps", None),
            "width": getattr(args, "width", None),
            "height": getattr(args, "height", None),
        }
        cfg = normalise_config({**cfg, **{k: v for k, v in overrides.items() if v is not None}})

        if args.cmd == "play":
            return _run_play(args, cfg)
        if args.cmd == "record":
            return _run_record(args, cfg)

        raise RuntimeError("Unknown command.")
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        print(f"juliaterm: {e}", file=sys.stderr)
        return 2
    except OSError:
        logger.exception("Output failed")
        return 1
    finally:
        listener.stop()

if __name__ == "__main__":
    sys.exit(main())
