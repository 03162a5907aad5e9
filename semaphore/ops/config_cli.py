"""Command line helpers for inspecting and preparing ``config.json``."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
import os
from pathlib import Path
import sys
import tempfile

from semaphore.config import (
    DbDriver,
    SecretDecodePolicy,
    init_config,
    load_config,
    resolve_config_path,
)
from semaphore.errors import ConfigError
from semaphore.logging import configure_logging, get_logger
from semaphore.logging_events import log_event

logger = get_logger(__name__)


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Semaphore configuration tooling")
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.json (defaults to ./config.json)",
    )
    parser.add_argument(
        "--print",
        dest="print_config",
        action="store_true",
        help="Print the resolved configuration as JSON",
    )
    parser.add_argument(
        "--show-db",
        action="store_true",
        help="Print the selected database backend",
    )
    parser.add_argument(
        "--generate-secrets",
        action="store_true",
        help=(
            "Write freshly generated cookie secrets into the configuration file "
            "(unknown keys are dropped)"
        ),
    )
    parser.add_argument(
        "--strict-secrets",
        action="store_true",
        help="Fail instead of ignoring cookie secrets that are not valid base64",
    )
    parser.add_argument(
        "--allow-multiple-databases",
        action="store_true",
        help="Pick the first configured backend (mysql, bolt, pgsql) when several are set",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (defaults to SEMAPHORE_LOG_LEVEL, then INFO)",
    )
    return parser.parse_args(argv)


def _write_config_file(path: Path, text: str) -> None:
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}.", suffix=".tmp")
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(text)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, path)
    except Exception:
        tmp_path.unlink(missing_ok=True)
        raise


def _generate_secrets(config_path: str | None) -> int:
    """Rewrite the configuration with fresh cookie secrets.

    The file is re-rendered from the decoded document, so keys Semaphore does
    not know about are not kept.
    """

    document = load_config(config_path)
    document.generate_cookie_secrets()
    path = resolve_config_path(config_path)
    _write_config_file(path, document.to_json() + "\n")
    log_event(logger, "config.secrets.generated", path=str(path))
    print(f"Cookie secrets written to {path}")
    return 0


def _cli(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    configure_logging(args.log_level)

    if args.generate_secrets:
        return _generate_secrets(args.config)

    policy = SecretDecodePolicy.STRICT if args.strict_secrets else SecretDecodePolicy.LENIENT
    try:
        runtime = init_config(args.config, secret_policy=policy)
        if args.print_config:
            print(runtime.document.to_json())
        if args.show_db:
            db_config = runtime.db_config(allow_multiple=args.allow_multiple_databases)
            if db_config.dialect is DbDriver.BOLT:
                print(f"bolt {db_config.get_connection_string(True)}")
            else:
                url = db_config.sqlalchemy_url()
                rendered = url.render_as_string(hide_password=True)
                print(f"{db_config.dialect.display_name} {rendered}")
    except ConfigError as exc:
        logger.error(
            "Configuration error: %s",
            exc.message,
            extra={"event": "config.cli.failed", "code": exc.code.value},
        )
        print(exc.message, file=sys.stderr)
        return 1
    return 0


def main() -> None:
    raise SystemExit(_cli())


if __name__ == "__main__":  # pragma: no cover - CLI entrypoint
    main()
