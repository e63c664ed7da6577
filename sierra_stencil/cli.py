"""Command-line interface for sierra_stencil.

Dithers image files into black/transparent stencils, with a JSON mode for
scripted use.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from sierra_stencil.core.dither import THRESHOLD

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sierra-stencil",
        description="Convert images to Sierra-dithered black/transparent stencils.",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log per-image progress.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # --- convert subcommand ---
    convert = subparsers.add_parser(
        "convert",
        help="Dither one or more image files.",
    )
    convert.add_argument("inputs", nargs="+", help="Input image file paths.")
    convert.add_argument(
        "-o", "--output",
        help="Output file path (single input only). Defaults to <input>_dithered.png.",
    )
    convert.add_argument(
        "--output-dir",
        help="Directory for outputs when converting several inputs.",
    )
    convert.add_argument(
        "--threshold",
        type=float,
        default=THRESHOLD,
        help=f"Luminance threshold, 0 to 255 (default: {THRESHOLD}).",
    )
    convert.add_argument(
        "--data-url",
        action="store_true",
        help="Print the stencil as a data URL instead of writing a file.",
    )
    convert.add_argument(
        "--json",
        action="store_true",
        help="Output structured JSON (pipe-friendly).",
    )
    convert.add_argument(
        "--debug",
        action="store_true",
        help="Show stack traces on error (with --json).",
    )

    return parser


def _auto_output_path(input_path: Path, output_dir: Path | None = None) -> Path:
    """Generate default output path from input."""
    parent = output_dir if output_dir is not None else input_path.parent
    return parent / f"{input_path.stem}_dithered.png"


def _json_error(message: str, code: str) -> None:
    """Print JSON error to stderr and exit with code 1."""
    err = {"status": "error", "error": message, "code": code}
    print(json.dumps(err), file=sys.stderr)
    sys.exit(1)


def _fail(args: argparse.Namespace, message: str, code: str) -> None:
    if args.json:
        _json_error(message, code)
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def _run_convert(args: argparse.Namespace) -> None:
    """Run the convert pipeline."""
    from sierra_stencil.core.processor import Settings, process_all
    from sierra_stencil.core.writer import save_stencil
    from sierra_stencil.utils.registry import ProcessedRegistry

    is_json = args.json
    inputs = [Path(p).resolve() for p in args.inputs]

    if args.output and len(inputs) > 1:
        _fail(args, "--output accepts a single input; use --output-dir", "INVALID_INPUT")

    if args.output and args.data_url:
        _fail(args, "--output cannot be combined with --data-url", "INVALID_INPUT")

    if len(inputs) == 1 and not inputs[0].exists():
        _fail(args, f"File not found: {inputs[0]}", "FILE_NOT_FOUND")

    output_dir = Path(args.output_dir).resolve() if args.output_dir else None
    if output_dir is not None:
        output_dir.mkdir(parents=True, exist_ok=True)

    try:
        settings = Settings(threshold=args.threshold)
    except ValueError as e:
        _fail(args, str(e), "INVALID_INPUT")

    def on_progress(current: int, total: int) -> None:
        if not is_json:
            print(f"\rProcessing image {current}/{total}...", end="", file=sys.stderr)

    registry = ProcessedRegistry()
    outputs: list[dict] = []
    try:
        report = process_all(inputs, settings, registry=registry, on_progress=on_progress)
        failures = list(report.failures)
        claimed: dict[Path, str] = {}
        for result in report.results:
            entry = {
                "input": result.source,
                "width": result.width,
                "height": result.height,
            }
            if args.data_url:
                entry["data_url"] = result.data_url
                outputs.append(entry)
                continue

            if args.output:
                output_path = Path(args.output).resolve()
            else:
                output_path = _auto_output_path(Path(result.source), output_dir)
            if output_path in claimed:
                reason = f"Output path {output_path} already used by {claimed[output_path]}"
                logger.warning("Could not save %s: %s", result.source, reason)
                failures.append((result.source, reason))
                continue

            try:
                save_stencil(result.image, output_path)
            except (ValueError, OSError) as e:
                logger.warning("Could not save %s: %s", result.source, e)
                failures.append((result.source, str(e)))
                continue
            claimed[output_path] = result.source
            entry["output"] = str(output_path)
            outputs.append(entry)
    except Exception as e:
        if is_json:
            if args.debug:
                import traceback
                traceback.print_exc(file=sys.stderr)
            _json_error(str(e), "PROCESSING_ERROR")
        else:
            print(f"\nError during processing: {e}", file=sys.stderr)
            sys.exit(1)

    if len(inputs) == 1 and failures:
        _, reason = failures[0]
        if not is_json:
            print(file=sys.stderr)
        _fail(args, reason, "INVALID_INPUT")

    if not is_json:
        print(file=sys.stderr)
        for entry in outputs:
            if "data_url" in entry:
                print(entry["data_url"])
            else:
                print(f"Saved to {entry['output']}", file=sys.stderr)
        for source, reason in failures:
            print(f"Failed: {source}: {reason}", file=sys.stderr)
    else:
        result = {
            "status": "success" if not failures else "partial",
            "settings": {
                "threshold": settings.threshold,
                "format": settings.format,
            },
            "outputs": outputs,
            "failures": [
                {"input": source, "error": reason} for source, reason in failures
            ],
        }
        print(json.dumps(result, indent=2))

    if failures and not outputs:
        sys.exit(1)


def main(argv: list[str] | None = None) -> None:
    """Main entry point.

    Routing:
      sierra-stencil convert <file> [<file> ...] [opts]  → dither files
      sierra-stencil                                      → print help
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    if args.command == "convert":
        _run_convert(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
