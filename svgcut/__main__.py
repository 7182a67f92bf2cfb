"""Command line entry point: convert an SVG file and write a plot preview."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from svgcut.config import configure_logging, settings
from svgcut.convert import convert
from svgcut.engine.config import ConversionConfig
from svgcut.exporters.svg_preview import SvgPreviewExporter
from svgcut.svg.document import SvgDocument, SvgDocumentError

logger = logging.getLogger("svgcut")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="svgcut", description="Convert an SVG file into plot-ready paths")
    parser.add_argument("input", help="SVG file to convert")
    parser.add_argument("-o", "--output", help="Write the preview SVG here instead of stdout")
    parser.add_argument("--log-level", help="Overrides SVGCUT_LOG_LEVEL")
    parser.add_argument("--stroke-width", type=float, default=1.0, help="Stroke width of the preview")
    parser.add_argument("--margin", type=float, default=0.0, help="Margin around the plotted geometry")
    parser.add_argument(
        "--max-pattern-tiles",
        type=int,
        default=settings.svgcut_max_pattern_tiles,
        help="Pattern tiles allowed over the whole document (default: SVGCUT_MAX_PATTERN_TILES)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    source = Path(args.input)
    if not source.is_file():
        logger.error("File not found: %s", source)
        return 1

    try:
        document = SvgDocument.from_string(source.read_bytes())
        exporter = SvgPreviewExporter(stroke_width=args.stroke_width, margin=args.margin)
        convert(document, exporter, ConversionConfig(max_total_pattern_tiles=args.max_pattern_tiles))
    except SvgDocumentError as e:
        logger.error("Cannot convert %s: %s", source, e)
        return 1

    preview = exporter.render(title=source.stem)
    if args.output:
        Path(args.output).write_text(preview, encoding="utf-8")
        logger.info("Saved %d paths to %s", len(exporter.records), args.output)
    else:
        sys.stdout.write(preview)
    return 0


if __name__ == "__main__":
    sys.exit(main())
