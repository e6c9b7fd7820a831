#!/usr/bin/env python3
"""Pipeline DAG CLI - validate and auto-arrange exported pipeline files."""

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from pipeline_core import LayoutConfig, LayoutDirection, PipelineData, layout, validate
from pipeline_core.config import HOST, PORT, configure_logging, default_layout_config

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_ERROR = 2


def _json_out(data, code=EXIT_OK):
    print(json.dumps(data))
    sys.exit(code)


def _error_out(message):
    _json_out({"status": "error", "error": message}, EXIT_ERROR)


def _load_pipeline(file_path):
    """Read a pipeline JSON export from disk."""
    path = Path(file_path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        _error_out(f"File not found: {path}")
    except UnicodeDecodeError as e:
        _error_out(f"Could not decode {path} as UTF-8: {e.reason}")
    except json.JSONDecodeError as e:
        _error_out(f"Invalid JSON in {path}: {e}")

    if not isinstance(data, dict):
        _error_out(f"Expected a JSON object with 'nodes' and 'edges' in {path}")
    try:
        return PipelineData.from_json_dict(data)
    except ValidationError as e:
        _error_out(f"Invalid pipeline in {path}: {e.errors()[0]['msg']}")


def _layout_config(args):
    """Overlay command line options on the default layout settings."""
    overrides = {
        "node_width": args.node_width,
        "node_height": args.node_height,
        "node_separation": args.node_separation,
        "rank_separation": args.rank_separation,
        "margin_x": args.margin_x,
        "margin_y": args.margin_y,
        "direction": args.direction,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if args.center:
        overrides["center_ranks"] = True
    try:
        return LayoutConfig(**{**default_layout_config().model_dump(), **overrides})
    except ValidationError as e:
        _error_out(f"Invalid layout option: {e.errors()[0]['msg']}")


# ── Commands ─────────────────────────────────────────────────────────────────

def cmd_validate(args):
    pipeline = _load_pipeline(args.file_path)
    result = validate(pipeline.nodes, pipeline.edges)
    _json_out(result.to_dict(), EXIT_OK if result.is_valid else EXIT_INVALID)


def cmd_layout(args):
    pipeline = _load_pipeline(args.file_path)
    config = _layout_config(args)
    arranged = PipelineData(
        nodes=layout(pipeline.nodes, pipeline.edges, config),
        edges=pipeline.edges,
    )
    logger.info("Arranged %d nodes", len(arranged.nodes))

    if args.output:
        Path(args.output).write_text(json.dumps(arranged.to_json_dict(), indent=2))
        _json_out({"status": "ok", "file_path": args.output, "nodes": len(arranged.nodes)})
    _json_out(arranged.to_json_dict())


def cmd_serve(args):
    import uvicorn
    from pipeline_backend.main import app
    uvicorn.run(app, host=args.host, port=args.port)


# ── Main ─────────────────────────────────────────────────────────────────────

def build_parser():
    parser = argparse.ArgumentParser(prog="pipeline-dag", description="Pipeline DAG tool")
    parser.add_argument("--log-level", default=None)
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("validate")
    p.add_argument("file_path")

    p = sub.add_parser("layout")
    p.add_argument("file_path")
    p.add_argument("--output", default=None)
    p.add_argument("--node-width", type=float, default=None)
    p.add_argument("--node-height", type=float, default=None)
    p.add_argument("--node-separation", type=float, default=None)
    p.add_argument("--rank-separation", type=float, default=None)
    p.add_argument("--margin-x", type=float, default=None)
    p.add_argument("--margin-y", type=float, default=None)
    p.add_argument("--direction", choices=[d.value for d in LayoutDirection], default=None)
    p.add_argument("--center", action="store_true")

    p = sub.add_parser("serve")
    p.add_argument("--host", default=HOST)
    p.add_argument("--port", type=int, default=PORT)

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    cmd_map = {
        "validate": cmd_validate,
        "layout": cmd_layout,
        "serve": cmd_serve,
    }
    cmd_map[args.command](args)


if __name__ == "__main__":
    main()
