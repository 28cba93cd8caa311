from __future__ import annotations

import argparse
import logging
import sys

import yaml

from .config import StencilConfig, load_config
from .interpolate import Interpolator
from .trust import TrustCategory


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="stencil", description="Interpolate expressions embedded in a text template.")
    parser.add_argument("template", type=str, help="Template file path or '-' for stdin")
    parser.add_argument("context", type=str, nargs="?", default=None, help="YAML/JSON file with the render context")
    parser.add_argument("-c", "--config", type=str, default=None, help="Path to YAML configuration file")
    parser.add_argument(
        "-t",
        "--trusted-context",
        type=str,
        default=None,
        choices=[c.value for c in TrustCategory],
        help="Require the output to be trusted for this category",
    )
    parser.add_argument(
        "--must-have-expression",
        action="store_true",
        help="Exit with status 2 when the template holds no expression",
    )
    parser.add_argument("-o", "--output", type=str, default="-", help="Output file path or '-' for stdout")
    return parser


def load_context(path: str | None) -> dict:
    if path is None:
        return {}
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Context file {path} must contain a mapping")
    return data


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
    cfg: StencilConfig = load_config(args.config) if args.config else StencilConfig()
    interpolator = Interpolator.from_config(cfg)

    if args.template == "-":
        text = sys.stdin.read()
    else:
        with open(args.template, "r", encoding="utf-8") as f:
            text = f.read()

    template = interpolator.compile(text, args.must_have_expression, args.trusted_context)
    if template is None:
        rendered, status = text, 2
    else:
        rendered = template.render(load_context(args.context))
        status = 0 if rendered is not None else 1

    if rendered is None:
        return status

    if args.output == "-":
        sys.stdout.write(rendered)
    else:
        with open(args.output, "w", encoding="utf-8") as dst:
            dst.write(rendered)
    return status


if __name__ == "__main__":
    raise SystemExit(main())
