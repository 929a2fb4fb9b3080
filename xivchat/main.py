"""xivchat: command line entry point."""

from __future__ import annotations

import argparse
import json
import logging
import signal
import sys
import threading
from pathlib import Path

from dotenv import load_dotenv

from xivchat.config import CONFIG_FILE, AppConfig
from xivchat.decoder import decode_records
from xivchat.dump import parse_dump_line
from xivchat.entry import DecodedEntry
from xivchat.watcher import RecordDumpWatcher

_LOG_FMT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger(__name__)


def format_entry(entry: DecodedEntry, show_raw: bool = False) -> str:
    """Render an entry as a single display line."""
    if not entry.is_complete:
        line = f"<{entry.status.value}> {entry.raw_text!r}"
    else:
        ts = entry.timestamp.strftime("%Y-%m-%d %H:%M:%S")
        channel = entry.channel
        label = f"{entry.code}/{channel.value}" if channel else entry.code
        line = f"[{ts}] [{label}] {entry.text}"
        if show_raw:
            line += f"  | {entry.raw_text!r}"
    return line


def _print_entry(entry: DecodedEntry, args: argparse.Namespace, config: AppConfig) -> None:
    if not entry.is_complete and not args.incomplete:
        return
    if args.json:
        print(json.dumps(entry.to_dict(), ensure_ascii=False))
    else:
        print(format_entry(entry, show_raw=args.raw or config.show_raw))


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=_LOG_FMT,
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def _cmd_decode(path: Path, args: argparse.Namespace, config: AppConfig) -> int:
    try:
        lines = path.read_text(encoding="ascii", errors="replace").splitlines()
    except OSError as e:
        print(f"Cannot read {path}: {e}", file=sys.stderr)
        return 1

    records = (r for r in (parse_dump_line(line) for line in lines) if r is not None)
    for entry in decode_records(records):
        _print_entry(entry, args, config)
    return 0


def _cmd_watch(path: Path, args: argparse.Namespace, config: AppConfig) -> int:
    if not path.exists():
        print(f"Cannot read {path}: file not found", file=sys.stderr)
        return 1

    watcher = RecordDumpWatcher(
        path,
        lambda entry: _print_entry(entry, args, config),
        poll_interval=config.poll_interval,
    )
    history = min(config.history_records, config.chatlog_capacity)
    for entry in watcher.read_tail(max_records=history):
        _print_entry(entry, args, config)

    stop = threading.Event()
    signal.signal(signal.SIGINT, lambda *_: stop.set())
    watcher.start()
    try:
        stop.wait()
    finally:
        watcher.stop()
    return 0


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="xivchat", description="Decode chat log records dumped from game memory",
    )
    parser.add_argument("--config", default=CONFIG_FILE, help="Config file (JSON)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)
    for name, help_text in (
        ("decode", "Decode every record of a dump file"),
        ("watch", "Print history, then follow a dump file"),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("file", nargs="?", help="Record dump file (default: config dump_path)")
        cmd.add_argument("--json", action="store_true", help="Print entries as JSON lines")
        cmd.add_argument("--raw", action="store_true", help="Append raw text to each line")
        cmd.add_argument(
            "--incomplete", action="store_true", help="Also print records that failed to decode",
        )
    return parser


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = build_arg_parser().parse_args(argv)

    config = AppConfig.load(args.config)
    config.apply_env()
    _setup_logging("DEBUG" if args.debug else config.log_level)

    path = Path(args.file or config.dump_path)
    logger.debug("Using dump file %s", path)
    if args.command == "watch":
        return _cmd_watch(path, args, config)
    return _cmd_decode(path, args, config)


if __name__ == "__main__":
    sys.exit(main())
