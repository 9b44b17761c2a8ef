#!/usr/bin/env python3

import argparse
import dataclasses
import json
import logging
import signal
import sys
from pathlib import Path
from typing import Any, List, Optional

from ringlink.clipboard import ClipboardSource
from ringlink.services.clipboard_service import ClipboardService
from ringlink.services.config_service import ConfigStore
from ringlink.services.settings import AppSettings
from ringlink.utils.dotpath import MISSING

logger = logging.getLogger(__name__)


class RingLinkApp:
    """Headless host that owns the config store and the clipboard watcher."""

    def __init__(
        self,
        settings: Optional[AppSettings] = None,
        source: Optional[ClipboardSource] = None,
    ):
        self.settings = settings or AppSettings.from_env()
        self.config = ConfigStore(settings=self.settings)
        self._source = source
        self.clipboard_service: Optional[ClipboardService] = None
        self.running = False

    def start(self) -> None:
        if self.running:
            return

        self.config.load()
        logger.info(f"Config loaded: version {self.config.get('version')}")
        self.running = True

        if not self.config.get("clipboard.enabled"):
            logger.info("Clipboard history disabled in config")
            return

        self.clipboard_service = ClipboardService(
            self.config,
            source=self._source,
            poll_interval=self.settings.poll_interval,
        )
        self.clipboard_service.start()

    def stop(self) -> None:
        if not self.running:
            return

        self.running = False
        if self.clipboard_service:
            self.clipboard_service.stop()
        logger.info("ringlink shutting down")

    def run_forever(self) -> None:
        self.start()
        try:
            if self.clipboard_service:
                self.clipboard_service.run_forever()
        except KeyboardInterrupt:
            print("\nStopping...")
        finally:
            self.stop()


def _parse_value(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def _print_json(value: Any) -> None:
    print(json.dumps(value, ensure_ascii=False, indent=2))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ringlink",
        description="ringlink - clipboard history and settings store"
    )

    parser.add_argument(
        "-c", "--config-dir",
        type=Path,
        default=None,
        help="Configuration directory (default: $RINGLINK_CONFIG_DIR or ~/.ringlink)"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose debug logging"
    )

    commands = parser.add_subparsers(dest="command", required=True)

    watch = commands.add_parser("watch", help="Record clipboard history until interrupted")
    watch.add_argument(
        "-i", "--poll-interval",
        type=float,
        default=None,
        help="Clipboard polling interval in seconds (default: 0.5)"
    )

    get = commands.add_parser("get", help="Print a config value")
    get.add_argument("path", nargs="?", default=None, help="Dot path, e.g. clipboard.maxHistory")

    set_ = commands.add_parser("set", help="Change a config value")
    set_.add_argument("path", help="Dot path, e.g. clipboard.maxHistory")
    set_.add_argument("value", help="JSON value; anything that is not JSON is stored as a string")

    export = commands.add_parser("export", help="Export the config to a file")
    export.add_argument("file", type=Path)

    import_ = commands.add_parser("import", help="Import the config from a file")
    import_.add_argument("file", type=Path)

    backup = commands.add_parser("backup", help="Back up the current config file")
    backup.add_argument("--reason", default="auto")

    commands.add_parser("backups", help="List config backups, newest first")

    return parser


def _settings_from_args(args: argparse.Namespace) -> AppSettings:
    settings = AppSettings.from_env()
    overrides = {}
    if args.config_dir is not None:
        overrides["config_dir"] = args.config_dir
    if getattr(args, "poll_interval", None) is not None:
        overrides["poll_interval"] = args.poll_interval
    if overrides:
        settings = dataclasses.replace(settings, **overrides)
    return settings


def run_command(args: argparse.Namespace, settings: AppSettings) -> int:
    if args.command == "watch":
        app = RingLinkApp(settings=settings)

        def signal_handler(signum, frame):
            app.stop()
            sys.exit(0)

        signal.signal(signal.SIGTERM, signal_handler)
        app.run_forever()
        return 0

    store = ConfigStore(settings=settings)
    store.load()

    if args.command == "get":
        value = store.get(args.path)
        if value is MISSING:
            print(f"{args.path}: not set", file=sys.stderr)
            return 1
        _print_json(value)
        return 0

    if args.command == "set":
        return 0 if store.set(args.path, _parse_value(args.value)) else 1

    if args.command == "export":
        return 0 if store.export_to(args.file) else 1

    if args.command == "import":
        return 0 if store.import_from(args.file) else 1

    if args.command == "backup":
        path = store.create_backup(args.reason)
        if path is None:
            return 1
        print(path)
        return 0

    if args.command == "backups":
        for path in store.list_backups():
            print(path)
        return 0

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = _settings_from_args(args)
    except ValueError as e:
        parser.error(str(e))

    level = logging.DEBUG if args.verbose else getattr(logging, settings.log_level, logging.INFO)
    logging.basicConfig(level=level, format='%(levelname)s: %(message)s')

    try:
        return run_command(args, settings)
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
