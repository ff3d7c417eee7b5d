"""Command line interface for BundleView."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List

from .api import describe_container, list_containers, open_index, summarize_index
from .config import REPORTERS, load_config
from .errors import BundleError
from .index import AssetIndex
from .logging import configure_logging, step
from .reporting import get_reporter, make_reporter, set_reporter, set_verbosity


def _directories(args: argparse.Namespace) -> List[Path]:
    dirs = list(getattr(args, "config_dirs", []))
    dirs.extend(args.dirs)
    return dirs


def _load(args: argparse.Namespace) -> AssetIndex:
    return open_index(_directories(args))


def _scan_cmd(args: argparse.Namespace) -> int:
    index = _load(args)
    get_reporter().flush()
    print(json.dumps(summarize_index(index), indent=2, sort_keys=True))
    return 0


def _find_cmd(args: argparse.Namespace) -> int:
    index = _load(args)
    step(f"resolving {args.name}")
    info = describe_container(index, args.name)
    rep = get_reporter()
    rep.flush()
    if info is None:
        rep.status(f"Lookup summary: container={args.name} found=0")
        return 1
    rep.status(f"Lookup summary: container={args.name} found=1")
    print(json.dumps(info, indent=2, sort_keys=True))
    return 0


def _name_cmd(args: argparse.Namespace) -> int:
    index = _load(args)
    name = index.container_name_by_virtual_path(args.vpath, args.path_id)
    get_reporter().flush()
    if name is None:
        return 1
    print(name)
    return 0


def _ls_cmd(args: argparse.Namespace) -> int:
    index = _load(args)
    get_reporter().flush()
    for name in list_containers(index):
        print(name)
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="bundleview", description="Asset archive index and lookup tool"
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=None,
        help="Increase verbosity (repeatable)",
    )
    p.add_argument(
        "-r",
        "--reporter",
        choices=list(REPORTERS),
        default=None,
        help="Select reporter backend: plain (default), rich, json (JSONL events), silent",
    )
    p.add_argument(
        "--config",
        type=Path,
        help="JSON/YAML config listing directories to ingest",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    s = sub.add_parser("scan", help="Ingest directories and print a summary")
    s.add_argument("dirs", type=Path, nargs="*")
    s.set_defaults(func=_scan_cmd)

    f = sub.add_parser("find", help="Resolve a container path to its object")
    f.add_argument("name")
    f.add_argument("dirs", type=Path, nargs="*")
    f.set_defaults(func=_find_cmd)

    n = sub.add_parser("name", help="Container path of an object")
    n.add_argument("vpath", help="Virtual file name of the owning table")
    n.add_argument("path_id", type=int)
    n.add_argument("dirs", type=Path, nargs="*")
    n.set_defaults(func=_name_cmd)

    ls = sub.add_parser("ls", help="List container paths")
    ls.add_argument("dirs", type=Path, nargs="*")
    ls.set_defaults(func=_ls_cmd)

    return p


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    reporter = "plain"
    verbosity = 0
    args.config_dirs = []
    if args.config is not None:
        try:
            cfg = load_config(args.config)
        except (BundleError, OSError) as e:
            parser.error(f"cannot load config: {e}")
        reporter = cfg.reporter
        verbosity = cfg.verbosity
        args.config_dirs = cfg.directories
    # Explicit flags win over the config file.
    if args.reporter is not None:
        reporter = args.reporter
    if args.verbose is not None:
        verbosity = args.verbose
    set_reporter(make_reporter(reporter))
    set_verbosity(verbosity)
    configure_logging(verbosity)
    if not _directories(args):
        parser.error("no directories given (pass DIR arguments or --config)")
    rep = get_reporter()
    try:
        return args.func(args)
    except BundleError as e:
        rep.flush()
        rep.error(str(e), code=e.code)
        return 2
    except OSError as e:
        rep.flush()
        rep.error(f"I/O error: {e}")
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
