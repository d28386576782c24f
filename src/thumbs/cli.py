from __future__ import annotations
import argparse
import logging
import sys
from typing import List, Optional

from .errors import EnumerationError
from .helpers import PipelineConfig, ThumbnailConfig, glob_sources, list_images
from .pipeline import ThumbnailPipeline
from .resize import INTERPOLATIONS


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="thumbs", description="Batch thumbnail generator")
    g_io = p.add_argument_group("I/O")
    g_io.add_argument("--dir", type=str, default="./pictures", help="Directory of images")
    g_io.add_argument("--pattern", type=str, default=None, help="Glob pattern instead of --dir")
    g_io.add_argument("--include_thumbs", action="store_true", help="Also process existing *_thumb files")
    g_io.add_argument("--show", action="store_true", help="Display the thumbnails when done")

    g_th = p.add_argument_group("Thumbnail")
    g_th.add_argument("--max_width", type=int, default=150)
    g_th.add_argument("--max_height", type=int, default=150)
    g_th.add_argument("--interpolation", choices=sorted(INTERPOLATIONS), default="lanczos")
    g_th.add_argument("--marker", type=str, default="_thumb")
    g_th.add_argument("--default_format", type=str, default=".jpg",
                      help="Encoder used when the file extension can't be written")

    g_pipe = p.add_argument_group("Pipeline")
    g_pipe.add_argument("--on_error", choices=("abort", "continue"), default="abort")
    g_pipe.add_argument("--queue_size", type=int, default=1, help="Handoff capacity (0 = unbounded)")
    g_pipe.add_argument("--decode_workers", type=int, default=1)
    g_pipe.add_argument("--resize_workers", type=int, default=1)

    g_log = p.add_argument_group("Logging")
    g_log.add_argument("-v", "--verbose", action="store_true")
    g_log.add_argument("-q", "--quiet", action="store_true")
    return p


def _configure_logging(verbose: bool, quiet: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING if quiet else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(threadName)s: %(message)s")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_argparser().parse_args(argv)
    _configure_logging(args.verbose, args.quiet)

    cfg = PipelineConfig(
        thumbnail=ThumbnailConfig(
            max_width=args.max_width,
            max_height=args.max_height,
            interpolation=args.interpolation,
        ),
        marker=args.marker,
        queue_size=args.queue_size,
        on_error=args.on_error,
        decode_workers=args.decode_workers,
        resize_workers=args.resize_workers,
        default_format=args.default_format,
        show=args.show,
    )
    try:
        pipeline = ThumbnailPipeline(cfg)
    except ValueError as e:
        print(f"thumbs: {e}", file=sys.stderr)
        return 2

    try:
        if args.pattern:
            sources = glob_sources(args.pattern)
        else:
            sources = list_images(args.dir, include_thumbs=args.include_thumbs, marker=args.marker)
    except EnumerationError as e:
        print(f"thumbs: {e}", file=sys.stderr)
        return 2
    if not sources:
        print("thumbs: no images found", file=sys.stderr)
        return 2

    result = pipeline.run(sources)
    if result.error is not None:
        print(f"thumbs: {type(result.error).__name__}: {result.error}", file=sys.stderr)
        return 1
    for failure in result.failures:
        print(f"thumbs: skipped {failure.identifier}: {failure.error}", file=sys.stderr)

    if cfg.show and result.written:
        from .viz import Visualizer
        Visualizer.show_thumbnails(result.written)

    return 0 if result.ok else 1
