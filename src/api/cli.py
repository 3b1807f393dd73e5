"""
どこで: `api.cli`（`lavafield` コマンド）。
何を: コマンドライン引数を `run_lava()` の引数へ写し、初期化失敗を終了コード 1 で報告する。
なぜ: 描画の起動をスクリプト無しで行えるようにし、エラー報告の形式を 1 箇所に揃えるため。
"""

from __future__ import annotations

import argparse
import logging
from typing import Sequence

from engine.render.errors import CompileError, RenderInitError

from .lava import run_lava
from .lava_runner.params import parse_assignments

logger = logging.getLogger("api.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lavafield",
        description="Render an animated lava field shader with live parameter controls.",
    )
    parser.add_argument("--width", type=int, default=None, help="window width (logical px)")
    parser.add_argument("--height", type=int, default=None, help="window height (logical px)")
    parser.add_argument("--vertex", default=None, help="vertex shader file (default: bundled)")
    parser.add_argument("--fragment", default=None, help="fragment shader file (default: bundled)")
    parser.add_argument("--config", default=None, help="extra YAML config layered on defaults")
    parser.add_argument(
        "--no-gui",
        dest="gui",
        action="store_false",
        default=None,
        help="do not open the parameter panel",
    )
    parser.add_argument("--log-level", default=None, help="logging level (e.g. DEBUG, INFO)")
    parser.add_argument(
        "--set",
        dest="assignments",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="initial parameter value (repeatable)",
    )
    parser.add_argument(
        "--init-only",
        action="store_true",
        help="validate config, shaders and parameters, then exit without opening a window",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        values = parse_assignments(args.assignments)
    except ValueError as e:
        parser.error(str(e))

    try:
        run_lava(
            width=args.width,
            height=args.height,
            vertex_shader=args.vertex,
            fragment_shader=args.fragment,
            use_parameter_gui=args.gui,
            parameter_values=values,
            config_path=args.config,
            log_level=args.log_level,
            init_only=args.init_only,
        )
    except CompileError as e:
        logger.error("%s shader failed to compile", e.stage)
        return 1
    except RenderInitError as e:
        logger.error("render initialization failed: %s", e)
        return 1
    except ValueError as e:
        logger.error("%s", e)
        return 2
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
