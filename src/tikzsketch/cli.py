"""
Command-line interface for tikzsketch.

    tikzsketch run -i strokes.json -o out/      convert strokes to diagram.tex
    tikzsketch describe -i strokes.json         dump descriptors and classes
    tikzsketch init-config -o config.yaml       write the default config
"""

import argparse
import json
import sys

from tikzsketch.config import load_config, save_default_config
from tikzsketch.tracer import configure_tracer, get_tracer

OUTPUT_FILES = ("diagram.tex", "scene.json", "validation_report.json", "validation_summary.txt")


def _add_input_arguments(parser):
    parser.add_argument("--input", "-i", required=True, help="Stroke file (.json or .svg)")
    parser.add_argument("--config", "-c", default=None, help="Path to YAML configuration file")


def _add_trace_arguments(parser):
    group = parser.add_argument_group("tracing")
    group.add_argument("--trace", action="store_true", help="Enable runtime tracing")
    group.add_argument(
        "--trace-level",
        default="INFO",
        choices=["ERROR", "WARN", "INFO", "DEBUG"],
        help="Trace log level",
    )
    group.add_argument("--trace-file", default=None, help="Path to write trace logs")
    group.add_argument("--trace-json", action="store_true", help="Also write JSON trace lines")


def build_parser():
    parser = argparse.ArgumentParser(
        prog="tikzsketch",
        description="Convert freehand string-diagram sketches to TikZ",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    run_parser = subparsers.add_parser("run", help="Convert a stroke file to TikZ")
    _add_input_arguments(run_parser)
    run_parser.add_argument("--out", "-o", required=True, help="Output directory")
    run_parser.add_argument("--debug", action="store_true", help="Write per-stage debug artifacts")
    _add_trace_arguments(run_parser)

    describe_parser = subparsers.add_parser(
        "describe", help="Print descriptors and class of every stroke as JSON",
    )
    _add_input_arguments(describe_parser)

    init_parser = subparsers.add_parser("init-config", help="Create default config file")
    init_parser.add_argument(
        "--out", "-o", default="tikzsketch_config.yaml", help="Output path for config file",
    )

    return parser


def main(argv=None):
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return 0
    return handler(args)


def _fail(action, error):
    get_tracer().event(f"{action} failed: {error}", level="ERROR")
    print(f"\nError: {error}", file=sys.stderr)
    return 1


def _print_run_summary(graph, report, out_dir):
    print("\nConversion completed.")
    print(f"  Dots: {len(graph.dots)}")
    print(f"  Morphisms: {len(graph.morphisms)}")
    print(f"  Wires: {len(graph.edges)}")
    print(f"  Validation errors: {report.error_count}")
    print(f"  Validation warnings: {report.warning_count}")
    print(f"\nOutputs saved to: {out_dir}/")
    for name in OUTPUT_FILES:
        print(f"  - {name}")


def handle_run(args):
    """Convert one stroke file; exit status 1 on failure or validation errors."""
    config = load_config(args.config)

    # command-line flags win over the config file's tracing section
    tracing = config.tracing
    configure_tracer(
        enabled=args.trace or tracing.enabled,
        level=args.trace_level if args.trace else tracing.level,
        file_path=args.trace_file or tracing.file_path,
        json_output=args.trace_json or tracing.json_output,
    )
    tracer = get_tracer()

    try:
        from tikzsketch.pipeline import run_pipeline

        with tracer.span("cli_run", module="cli"):
            graph, report = run_pipeline(
                input_path=args.input, out_dir=args.out, config=config, debug=args.debug,
            )
    except Exception as e:
        return _fail("Conversion", e)

    _print_run_summary(graph, report, args.out)

    if report.has_errors:
        print("\n[!] Validation errors detected. Review validation_report.json")
        return 1
    return 0


def handle_describe(args):
    """Print one JSON record per stroke: point count, class and descriptors."""
    try:
        from tikzsketch.io.load_strokes import load_strokes
        from tikzsketch.shapes.classify import decide_kind, describe_path

        config = load_config(args.config)
        strokes = load_strokes(args.input)

        records = []
        for shape_id, path in enumerate(strokes.paths):
            descriptors = describe_path(path, config)
            records.append({
                "shape_id": shape_id,
                "points": len(path),
                "kind": decide_kind(descriptors, config),
                "descriptors": descriptors.model_dump(mode="json"),
            })
    except Exception as e:
        return _fail("Describe", e)

    print(json.dumps(records, indent=2, default=str))
    return 0


def handle_init_config(args):
    save_default_config(args.out)
    print(f"Default configuration saved to: {args.out}")
    return 0


COMMANDS = {
    "run": handle_run,
    "describe": handle_describe,
    "init-config": handle_init_config,
}


if __name__ == "__main__":
    sys.exit(main())
