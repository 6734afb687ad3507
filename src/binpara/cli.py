from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from binpara.core.errors import RoundTripError
from binpara.core.serde import serialize_many
from binpara.io import IoError, IoSettings, read_binary_paragraphs, write_binary_paragraphs

logger = logging.getLogger("binpara")


def _setup_logging(level: str) -> None:
    """Attach one stderr handler to the package logger (idempotent across calls)."""
    logger.setLevel(level)
    if not any(getattr(h, "_binpara_cli", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s | %(levelname)s | %(message)s"))
        handler._binpara_cli = True  # type: ignore[attr-defined]
        logger.addHandler(handler)


def _common_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--config", type=str, default=None, help="TOML config path (default: search cwd).")
    p.add_argument("--log-level", type=str, default=None, help="Override the configured log level.")
    p.add_argument(
        "--fail-fast", action="store_true", help="Stop at the first bad paragraph of a file."
    )


def _load_settings(args: argparse.Namespace) -> IoSettings:
    s = IoSettings.load(args.config)
    overrides: dict[str, object] = {}
    if args.log_level:
        overrides["log_level"] = args.log_level
    if args.fail_fast:
        overrides["fail_fast"] = True
    s = IoSettings._apply_mapping(s, overrides)
    _setup_logging(s.log_level)
    return s


def _cmd_check(argv: list[str]) -> int:
    p = argparse.ArgumentParser(
        prog="check", description="Parse binary paragraph files and list the records found."
    )
    p.add_argument("files", nargs="+", help="Paragraph files to check.")
    _common_args(p)
    args = p.parse_args(argv)
    settings = _load_settings(args)

    code = 0
    for path in args.files:
        try:
            records = read_binary_paragraphs(path, settings)
        except (IoError, OSError) as e:
            print(f"[ERROR] {e}", file=sys.stderr)
            code = 1
            continue
        for record in records:
            print(f"{path}: {record.display_name()}")
    return code


def _cmd_format(argv: list[str]) -> int:
    p = argparse.ArgumentParser(
        prog="format", description="Rewrite a binary paragraph file in canonical form."
    )
    p.add_argument("file", help="Paragraph file to format.")
    p.add_argument("--in-place", action="store_true", help="Rewrite the file instead of printing.")
    _common_args(p)
    args = p.parse_args(argv)
    settings = _load_settings(args)

    try:
        records = read_binary_paragraphs(args.file, settings)
        if args.in_place:
            write_binary_paragraphs(Path(args.file), records, settings)
        else:
            sys.stdout.write(serialize_many(records))
    except (IoError, RoundTripError, OSError) as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1
    return 0


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="binpara", description="Binary paragraph file utilities.")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("check")
    sub.add_parser("format")
    return p


def main(argv: list[str] | None = None) -> None:
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv:
        build_argparser().print_help()
        return
    cmd, rest = argv[0], argv[1:]
    if cmd == "check":
        code = _cmd_check(rest)
    elif cmd == "format":
        code = _cmd_format(rest)
    else:
        print(f"Unknown command: {cmd}", file=sys.stderr)
        code = 2
    raise SystemExit(code)


if __name__ == "__main__":
    main()
