from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from fs_analyser.errors import AnalyserError
from fs_analyser.services.config_service import AnalyserConfig, ConfigService
from fs_analyser.services.scan_service import ScanService
from fs_analyser.views.table_view import TableView

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="analyser",
        description="Analyse filesystem to fix space issues",
    )
    commands = parser.add_subparsers(dest="command")

    fs = commands.add_parser(
        "filesystem",
        help="Analyse filesystem to fix space issues and errors",
    )
    fs_commands = fs.add_subparsers(dest="fs_command")

    space = fs_commands.add_parser("space", help="Find the largest file and report disk usage")
    space.add_argument("-p", "--path", default="", help="directory to walk")
    space.add_argument("-f", "--filter", default=None, help="regular expression matched against file names")
    space.add_argument("--root-path", default=None, help="mount point to report disk usage for")
    space.set_defaults(handler=_run_space)

    volume = fs_commands.add_parser("volume", help="Volume level reports")
    volume_commands = volume.add_subparsers(dest="volume_command")
    scan = volume_commands.add_parser("scan", help="Report total size and the largest directory")
    scan.add_argument("-p", "--path", default="", help="directory to walk")
    scan.set_defaults(handler=_run_volume_scan)

    return parser


def configure_logging(cfg: AnalyserConfig) -> None:
    level = logging.getLevelName(cfg.log_level)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: Sequence[str] | None = None, view: TableView | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help()
        return 0

    cfg = ConfigService().load()
    configure_logging(cfg)
    service = ScanService(config=cfg)
    view = view or TableView()

    try:
        return handler(args, service, view)
    except AnalyserError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1


def _run_space(args: argparse.Namespace, service: ScanService, view: TableView) -> int:
    result = service.space(args.path, pattern=args.filter, root_path=args.root_path)
    for w in result.warnings:
        logger.warning(w)
    view.render(result.data.rows)
    if not result.ok:
        print(f"ERROR: {result.error}", file=sys.stderr)
        return 1
    return 0


def _run_volume_scan(args: argparse.Namespace, service: ScanService, view: TableView) -> int:
    result = service.volume_scan(args.path)
    for w in result.warnings:
        logger.warning(w)
    view.render(result.data.rows)
    if not result.ok:
        print(f"ERROR: {result.error}", file=sys.stderr)
        return 1
    return 0
