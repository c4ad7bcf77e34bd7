from __future__ import annotations

import os
import sys
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, TextIO, Tuple

from tqdm import tqdm

from juliaterm.animator import Animator
from juliaterm.config import animator_config
from juliaterm.pacing import FramePacer
from juliaterm.renderers.ansi import render
from juliaterm.terminal import CLEAR_LINE, HOME, move_to, poll_quit_key, terminal_size
from juliaterm.util.logging_setup import get_logger


@dataclass(frozen=True)
class RunSummary:
    frames: int
    seconds: float
    avg_fps: float
    directives: int


def _ensure_parent(path: str) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)


def status_line(parameter: complex, frame: int, fps: float) -> str:
    return (f"Julia anim | c=({parameter.real:+.3f},{parameter.imag:+.3f}) | "
            f"Frame {frame} | FPS {fps:.1f} (q/Ctrl+C to quit)")


def play(
    *,
    cfg: Dict[str, Any],
    cancel: threading.Event,
    out: TextIO = sys.stdout,
    inp: TextIO = sys.stdin,
    size: Callable[[], Tuple[int, int]] = terminal_size,
    pacer: Optional[FramePacer] = None,
) -> RunSummary:
    """
    Interactive loop: one frame per tick until ``cancel`` is set or a quit
    key is read. The bottom terminal row is kept for the status line.
    Write errors on ``out`` propagate to the caller.
    """
    logger = get_logger()
    pacer = pacer or FramePacer(cfg["target_fps"])
    animator = Animator(animator_config(cfg), seed=cfg["seed"])
    max_iters = int(cfg["max_iters"])

    logger.info("Play start max_iters=%s fps=%s seed=%#x base=%s radius=%s",
                max_iters, cfg["target_fps"], cfg["seed"], cfg["base"], cfg["radius"])

    start = pacer.now()
    directives = 0
    pacer.tick()
    while not cancel.is_set():
        dt = pacer.tick()
        frame_start = pacer.now()

        if poll_quit_key(inp):
            cancel.set()
            break

        cols, rows = size()
        height = max(rows - 1, 0)
        c = animator.step(dt)

        out.write(HOME)
        directives += render(c, cols, height, max_iters, out)

        fps = pacer.metrics.record(pacer.now() - frame_start)
        out.write(move_to(max(rows - 1, 0), 0) + CLEAR_LINE + status_line(c, pacer.metrics.frames, fps))
        out.flush()

        pacer.pace(pacer.now() - frame_start)

    total = pacer.now() - start
    frames = pacer.metrics.frames
    avg = frames / total if total > 0 else 0.0
    logger.info("Play stopped frames=%s seconds=%.2f avg_fps=%.2f", frames, total, avg)
    return RunSummary(frames=frames, seconds=total, avg_fps=avg, directives=directives)


def record_sequence(
    *,
    cfg: Dict[str, Any],
    output: str,
    frames: Optional[int] = None,
    dt: Optional[float] = None,
    progress: bool = True,
    cancel: Optional[threading.Event] = None,
    clock: Callable[[], float] = time.perf_counter,
) -> RunSummary:
    """
    Render ``frames`` frames headlessly with a fixed ``dt`` into a text file.

    Every frame starts with a cursor-home directive, so ``cat`` on a terminal
    replays the animation. With the same config the file is byte-identical
    between runs.
    """
    logger = get_logger()
    frames = int(cfg["record_frames"] if frames is None else frames)
    dt = float(cfg["record_dt"] if dt is None else dt)
    width = int(cfg["width"])
    height = int(cfg["height"])
    max_iters = int(cfg["max_iters"])
    if frames <= 0:
        raise ValueError("frames must be positive.")

    animator = Animator(animator_config(cfg), seed=cfg["seed"])
    _ensure_parent(output)

    logger.info("Record start frames=%s size=%sx%s dt=%s seed=%#x -> %s",
                frames, width, height, dt, cfg["seed"], output)

    start = clock()
    directives = 0
    done = 0
    with open(output, "w", encoding="utf-8", newline="\n") as f:
        for i in tqdm(range(frames), desc="record", unit="frame", disable=not progress):
            if cancel is not None and cancel.is_set():
                logger.warning("Record cancelled after %s frames", done)
                break
            c = animator.step(dt)
            f.write(HOME)
            directives += render(c, width, height, max_iters, f)
            done += 1
            if i % 100 == 0:
                logger.info("Recorded frame %s/%s c=%s", i, frames, c)

    total = clock() - start
    avg = done / total if total > 0 else 0.0
    logger.info("Record complete frames=%s directives=%s seconds=%.2f", done, directives, total)
    return RunSummary(frames=done, seconds=total, avg_fps=avg, directives=directives)
