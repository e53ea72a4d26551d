from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence

import yaml

from .core.config import ConfigError, compute_config_hash, load_runtime_config
from .core.errors import error_payload
from .core.logging import LOGGER_NAME, configure_logging
from .core.pipeline import PipelineError, compute_pipeline_hash, dump_pipeline, load_pipeline_file

logger = logging.getLogger(LOGGER_NAME)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="shipinator", add_help=True)
    sub = parser.add_subparsers(dest="command", required=True)

    config = sub.add_parser("config", help="Resolve and print the runtime configuration")
    config.add_argument("--config", default="", help="path to config file")
    config.add_argument("--json", action="store_true", help="print as JSON instead of YAML")

    validate = sub.add_parser("validate", help="Validate a pipeline document")
    validate.add_argument("path", help="path to .shipinator.yaml")
    validate.add_argument("--print", dest="print_doc", action="store_true", help="print the normalized document")
    validate.add_argument("--log-level", default="info", help="debug, info, warn or error")

    return parser


def _report(exc: Exception) -> int:
    payload = error_payload(exc)
    print(f"error: {payload.type}: {payload.message}", file=sys.stderr)
    if payload.hint:
        print(f"hint: {payload.hint}", file=sys.stderr)
    return 1


def _cmd_config(args: argparse.Namespace) -> int:
    # warnings emitted during resolution need a handler before log_level is known
    configure_logging("info", stream=sys.stderr)
    cfg = load_runtime_config(args.config)
    configure_logging(cfg.log_level, stream=sys.stderr)

    logger.info(
        "config loaded",
        extra={
            "listen_addr": cfg.listen_addr,
            "db_name": cfg.db.name,
            "artifact_path": cfg.artifact_path,
            "kubeconfig": cfg.kubeconfig,
            "log_level": cfg.log_level,
            "config_hash": compute_config_hash(cfg),
        },
    )

    if args.json:
        print(json.dumps(cfg.redacted(), indent=2))
    else:
        print(yaml.safe_dump(cfg.redacted(), sort_keys=False), end="")
    return 0


def _cmd_validate(args: argparse.Namespace) -> int:
    configure_logging(args.log_level, stream=sys.stderr)
    doc = load_pipeline_file(args.path)
    digest = compute_pipeline_hash(doc)
    logger.info("pipeline valid", extra={"path": args.path, "sections": ",".join(doc.sections), "hash": digest})

    if args.print_doc:
        print(dump_pipeline(doc), end="")
        return 0

    print(f"ok: {args.path}")
    print(f"sections: {', '.join(doc.sections)}")
    if doc.build is not None:
        print(f"build steps: {len(doc.build.steps)}")
    if doc.test is not None:
        print(f"test steps: {len(doc.test.steps)}")
    if doc.deploy is not None:
        print(f"deploy: {doc.deploy.artifact} -> {doc.deploy.target}/{doc.deploy.namespace}")
    print(f"hash: {digest}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(list(argv) if argv is not None else None)

    try:
        if args.command == "config":
            return _cmd_config(args)
        if args.command == "validate":
            return _cmd_validate(args)
    except (ConfigError, PipelineError) as e:
        return _report(e)

    raise AssertionError(f"Unhandled command: {args.command}")


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main(sys.argv[1:]))
