"""コマンドラインから画像エフェクトを実行するエントリポイント。"""

from __future__ import annotations

import argparse
import asyncio
import sys
import time
import traceback
from typing import Dict, List, Optional, Sequence, Tuple

from . import __version__
from .config import load_effective_config
from .effects import available_effects, get_effect
from .exceptions import DependencyError, OptionError, PipelineError, ValidationError
from .options import EffectArgumentParser
from .pipeline import resolve_invocation, run_invocation
from .utils.logger import get_logger, setup_logging, shutdown_logging


def build_parser() -> Tuple[EffectArgumentParser, Dict[str, argparse.ArgumentParser]]:
    """トップレベルのパーサと、エフェクト名→サブパーサの対応を返す。"""
    parser = EffectArgumentParser(
        prog="magickfx",
        description="Apply a single visual effect to an image using ImageMagick.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML file whose values override the built-in defaults (or set MAGICKFX_CONFIG).",
    )
    parser.add_argument(
        "--log-json",
        action="store_true",
        help="If set, outputs logs in machine-readable JSON format.",
    )
    parser.add_argument(
        "--log-kv",
        action="store_true",
        help="If set, outputs logs in human-readable Key-Value pair format.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging, including every ImageMagick command line.",
    )

    subparsers = parser.add_subparsers(dest="effect", metavar="EFFECT")
    subparsers.required = True
    effect_parsers: Dict[str, argparse.ArgumentParser] = {}
    for effect in available_effects():
        sub = subparsers.add_parser(
            effect.name,
            aliases=list(effect.aliases),
            help=effect.summary,
            description=effect.description,
        )
        effect.add_arguments(sub)
        effect_parsers[effect.name] = sub
    return parser, effect_parsers


def _split_extras(extras: Sequence[str], help_text: Optional[str] = None) -> List[str]:
    """Leftover arguments are extra FILEs unless they look like options."""
    for arg in extras:
        if arg.startswith("-"):
            raise OptionError(f"Unknown option: '{arg}'", option=arg, help_text=help_text)
    return list(extras)


def _print_help(text: Optional[str]) -> None:
    if text:
        sys.stderr.write("\n" + text)
        sys.stderr.flush()


async def main(argv: Optional[Sequence[str]] = None) -> int:
    """コマンドライン引数を解析しエフェクトを実行する。終了コードを返す。"""
    args_list = list(sys.argv[1:] if argv is None else argv)
    parser, effect_parsers = build_parser()

    if not args_list:
        parser.print_help()
        return 0

    effect_name: Optional[str] = None
    try:
        args, extras = parser.parse_known_args(args_list)
        effect_name = get_effect(args.effect).name
        effect_help = effect_parsers[effect_name].format_help()
        files = list(getattr(args, "files", None) or []) + _split_extras(extras, effect_help)
    except OptionError as e:
        setup_logging()
        get_logger().kv_error(str(e), kv_pairs={"Event": "UsageError", "Option": e.option})
        shutdown_logging()
        _print_help(e.help_text or parser.format_help())
        return 1

    setup_logging(log_json=args.log_json, log_kv=args.log_kv, debug_mode=args.debug)
    logger = get_logger()
    start_time = time.monotonic()
    try:
        config = load_effective_config(args.config)
        log_dir = (config.get("logging") or {}).get("dir")
        if log_dir:
            setup_logging(
                log_json=args.log_json,
                log_kv=args.log_kv,
                debug_mode=args.debug,
                log_dir=log_dir,
                force=True,
            )
            logger = get_logger()

        effect = get_effect(effect_name)
        if extras and not effect.needs_file():
            raise OptionError(f"Unknown option: '{extras[0]}'", option=extras[0])
        invocation = resolve_invocation(effect, args, files, config)
        await run_invocation(invocation, config)
        logger.kv_info(
            f"Execution complete! ({time.monotonic() - start_time:.2f} seconds)",
            kv_pairs={"Event": "ExecutionComplete", "Effect": effect_name},
        )
        return 0
    except OptionError as e:
        logger.kv_error(str(e), kv_pairs={"Event": "UsageError", "Option": e.option})
        _print_help(e.help_text or effect_parsers[effect_name].format_help())
        return 1
    except ValidationError as e:
        logger.kv_error(
            str(e),
            kv_pairs={
                "Event": "ValidationError",
                "Message": e.message,
                "Line": e.line_number,
                "Column": e.column_number,
            },
        )
        return 1
    except DependencyError:
        # ensure_magick_installed has already logged the details.
        return 1
    except PipelineError as e:
        logger.kv_error(
            str(e), kv_pairs={"Event": "PipelineError", "ReturnCode": e.returncode}
        )
        return 1
    except Exception as e:
        logger.kv_error(
            f"An unexpected error occurred: {e}",
            kv_pairs={
                "Event": "UnexpectedError",
                "Message": str(e),
                "Traceback": traceback.format_exc(),
            },
        )
        return 1
    finally:
        shutdown_logging()


def run() -> None:
    """console_scripts エントリポイント。"""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
