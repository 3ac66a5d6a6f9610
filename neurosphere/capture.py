"""Render sphere frames offscreen and save them as PNG files.

Forces Qt onto the ``offscreen`` platform so it runs without a display:

    neurosphere-capture --frames 120 --every 10 --theme dark --out frames/

Output:
  - ``frame_0000.png`` ... in the output directory, one per captured frame
"""
from __future__ import annotations

import argparse
import logging
import os
import random
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt5 import QtCore, QtGui, QtWidgets

from .config import DARK_THEME, LIGHT_THEME
from .logging_config import setup_logging
from .view.engine import Frame, SphereEngine
from .view.loop import AnimationLoop, ManualFrameClock
from .view.renderer import SphereRenderer
from .view.surface import SurfaceController

logger = logging.getLogger(__name__)


class _FixedSize:
    """Stand-in container with a constant size."""

    def __init__(self, width: int, height: int) -> None:
        self._width = width
        self._height = height

    def width(self) -> int:
        return self._width

    def height(self) -> int:
        return self._height


def render_frames(
    frames: int,
    width: int,
    height: int,
    theme: str = LIGHT_THEME,
    seed: Optional[int] = None,
    every: int = 1,
    transparent: bool = False,
) -> List[QtGui.QImage]:
    """Run ``frames`` animation frames and return every ``every``-th as an image."""

    every = max(1, int(every))
    engine = SphereEngine(rng=random.Random(seed) if seed is not None else None)
    surface = SurfaceController(_FixedSize(width, height))
    clock = ManualFrameClock()
    loop = AnimationLoop(engine, surface, theme_source=lambda: theme, clock=clock)
    renderer = SphereRenderer()
    rect = QtCore.QRectF(0, 0, width, height)
    images: List[QtGui.QImage] = []

    def _paint(frame: Frame) -> None:
        if engine.frame_count % every:
            return
        image = QtGui.QImage(max(1, width), max(1, height), QtGui.QImage.Format_ARGB32)
        painter = QtGui.QPainter(image)
        try:
            renderer.paint(painter, frame, rect, transparent=transparent)
        finally:
            painter.end()
        images.append(image)

    loop.add_listener(_paint)
    if not loop.start():
        return images
    clock.advance(frames)
    loop.stop()
    return images


def _parse_size(value: str) -> Tuple[int, int]:
    try:
        w, h = value.lower().split("x", 1)
        size = int(w), int(h)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected WIDTHxHEIGHT, got {value!r}")
    if size[0] <= 0 or size[1] <= 0:
        raise argparse.ArgumentTypeError("size must be positive")
    return size


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="neurosphere-capture", description=__doc__.splitlines()[0])
    parser.add_argument("--frames", type=int, default=60, help="number of frames to simulate")
    parser.add_argument("--size", type=_parse_size, default=(800, 600), help="surface size, e.g. 800x600")
    parser.add_argument("--theme", choices=[LIGHT_THEME, DARK_THEME], default=LIGHT_THEME)
    parser.add_argument("--seed", type=int, default=None, help="seed for the particle pool")
    parser.add_argument("--every", type=int, default=1, help="save one frame out of N")
    parser.add_argument("--transparent", action="store_true", help="keep a transparent background")
    parser.add_argument("--out", type=Path, default=Path("frames"), help="output directory")
    parser.add_argument("--debug", action="store_true")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.debug else logging.INFO)
    # keep a reference for the lifetime of the run
    app = QtWidgets.QApplication.instance() or QtGui.QGuiApplication(sys.argv[:1])

    width, height = args.size
    images = render_frames(args.frames, width, height, args.theme, args.seed, args.every, args.transparent)
    args.out.mkdir(parents=True, exist_ok=True)
    for idx, image in enumerate(images):
        target = args.out / f"frame_{idx:04d}.png"
        if not image.save(str(target)):
            logger.error("Could not write %s", target)
            return 1
    logger.info("Wrote %d frame(s) to %s", len(images), args.out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
