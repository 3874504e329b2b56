#!/usr/bin/env python3
"""
sonar-dev: development helpers for analysis-server plugins

Common usage:
  sonar-dev upload target/my-plugin-1.0.jar --server-home ~/sonarqube
  sonar-dev trim src/main/resources --include '**/*.html'
  sonar-dev trim . --list-files

Use `sonar-dev <command> --help` for the options of each command.
"""

from __future__ import annotations

import argparse
import importlib.metadata
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path

from sonar_dev.config import (
    SonarDevConfig,
    combine_configs,
    find_config_file,
    load_config,
    load_env_config,
    merge_cli_with_config,
)
from sonar_dev.errors import ConfigurationError, SonarDevError
from sonar_dev.file_selector import FileSelection, FileSelector
from sonar_dev.trimmer import DEFAULT_ENCODING, TrimStatus, trim_directory
from sonar_dev.uploader import DEFAULT_SERVER_URL, upload

logger = logging.getLogger(__name__)


@dataclass
class UploadOptions:
    """Options for `sonar-dev upload`."""

    artifacts: list[str]
    server_home: str | None = None
    server_url: str | None = None
    timeout: float | None = None


@dataclass
class TrimOptions:
    """Options for `sonar-dev trim`."""

    directory: str
    includes: list[str] | None = None
    excludes: list[str] | None = None
    encoding: str | None = None
    default_excludes: bool | None = None
    list_files: bool = False
    check: bool = False
    keep_going: bool = False


@dataclass
class GlobalOptions:
    verbose: bool = False
    quiet: bool = False
    version: bool = False
    command: str | None = None
    explicit_flags: set[str] = field(default_factory=set)


# Options that may also come from the environment or a config file.
# argparse leaves them as `None` when the flag is not given.
_MERGEABLE = (
    "server_home",
    "server_url",
    "timeout",
    "includes",
    "excludes",
    "encoding",
    "default_excludes",
)


def _build_parser() -> argparse.ArgumentParser:
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    description = doc_parts[0]
    epilog = "\n\n".join(doc_parts[1:])

    parser = argparse.ArgumentParser(
        prog="sonar-dev",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information and exit",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Show debug messages"
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Only show warnings and errors"
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    upload_parser = subparsers.add_parser(
        "upload",
        help="Copy plugin artifacts into a local server and restart it",
        description="Copy plugin artifacts into <server-home>/extensions/downloads/ and "
        "restart the server. The server must run with sonar.dev=true.",
    )
    upload_parser.add_argument(
        "artifacts",
        nargs="+",
        metavar="ARTIFACT",
        help="Plugin artifact(s) to upload, e.g. target/my-plugin-1.0.jar",
    )
    upload_parser.add_argument(
        "--server-home",
        type=str,
        default=None,
        metavar="DIR",
        help="Home directory of the local server installation",
    )
    upload_parser.add_argument(
        "--server-url",
        type=str,
        default=None,
        metavar="URL",
        help=f"Server URL (default: {DEFAULT_SERVER_URL})",
    )
    upload_parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        metavar="SECONDS",
        help="Timeout for the restart request (default: the HTTP client default)",
    )

    trim_parser = subparsers.add_parser(
        "trim",
        help="Strip leading and trailing whitespace from every line of text files",
        description="Strip leading and trailing whitespace from every line of the files "
        "under DIRECTORY. Patterns use ANT syntax (`*`, `?`, `**`) relative to DIRECTORY.",
    )
    trim_parser.add_argument("directory", metavar="DIRECTORY", help="Directory to scan")
    trim_parser.add_argument(
        "--include",
        action="append",
        default=None,
        dest="includes",
        metavar="PATTERN",
        help="Only trim files matching this pattern (e.g., '**/*.txt'). Can be repeated. "
        "Default: all files",
    )
    trim_parser.add_argument(
        "--exclude",
        action="append",
        default=None,
        dest="excludes",
        metavar="PATTERN",
        help="Skip files matching this pattern. Can be repeated",
    )
    trim_parser.add_argument(
        "--encoding",
        type=str,
        default=None,
        help=f"Text encoding of the files (default: {DEFAULT_ENCODING})",
    )
    trim_parser.add_argument(
        "--default-excludes",
        action=argparse.BooleanOptionalAction,
        default=None,
        dest="default_excludes",
        help="Also skip version-control metadata and editor backup files",
    )
    trim_parser.add_argument(
        "--list-files",
        action="store_true",
        dest="list_files",
        help="Print the selected file paths without trimming",
    )
    trim_parser.add_argument(
        "--check",
        action="store_true",
        help="Do not write files; exit with status 1 if any file would be trimmed",
    )
    trim_parser.add_argument(
        "--keep-going",
        action="store_true",
        dest="keep_going",
        help="Report files that cannot be read or written and continue with the others",
    )
    return parser


def _parse_args(
    args: list[str] | None = None,
) -> tuple[GlobalOptions, UploadOptions | TrimOptions | None, argparse.ArgumentParser]:
    parser = _build_parser()
    opts = parser.parse_args(args)

    global_opts = GlobalOptions(
        verbose=opts.verbose,
        quiet=opts.quiet,
        version=opts.version,
        command=opts.command,
        explicit_flags={
            name for name in _MERGEABLE if getattr(opts, name, None) is not None
        },
    )

    command_opts: UploadOptions | TrimOptions | None = None
    if opts.command == "upload":
        command_opts = UploadOptions(
            artifacts=opts.artifacts,
            server_home=opts.server_home,
            server_url=opts.server_url,
            timeout=opts.timeout,
        )
    elif opts.command == "trim":
        command_opts = TrimOptions(
            directory=opts.directory,
            includes=opts.includes,
            excludes=opts.excludes,
            encoding=opts.encoding,
            default_excludes=opts.default_excludes,
            list_files=opts.list_files,
            check=opts.check,
            keep_going=opts.keep_going,
        )
    return global_opts, command_opts, parser


def _configure_logging(verbose: bool, quiet: bool) -> logging.Handler:
    """Send `sonar_dev` log records to stderr. Returns the handler so it can be removed."""
    package_logger = logging.getLogger("sonar_dev")
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    package_logger.addHandler(handler)
    if verbose:
        package_logger.setLevel(logging.DEBUG)
    elif quiet:
        package_logger.setLevel(logging.WARNING)
    else:
        package_logger.setLevel(logging.INFO)
    return handler


def _load_settings() -> SonarDevConfig:
    """Config file settings overridden by environment settings."""
    settings = SonarDevConfig()
    config_path = find_config_file(Path.cwd())
    if config_path:
        logger.debug("Using config file %s", config_path)
        settings = load_config(config_path)
    return combine_configs(settings, load_env_config())


def _run_upload(options: UploadOptions) -> int:
    if not options.server_home:
        raise ConfigurationError(
            "Server home directory is not set: use --server-home, "
            "SONAR_DEV_SERVER_HOME or `server-home` in the config file"
        )
    upload(
        server_home=Path(options.server_home).expanduser(),
        artifacts=[Path(a) for a in options.artifacts],
        server_url=options.server_url or DEFAULT_SERVER_URL,
        timeout=options.timeout,
    )
    return 0


def _run_trim(options: TrimOptions) -> int:
    selection = FileSelection(
        root=Path(options.directory),
        includes=options.includes or [],
        excludes=options.excludes or [],
        default_excludes=bool(options.default_excludes),
    )

    if options.list_files:
        for path in FileSelector(selection).select():
            print(path)
        return 0

    results = trim_directory(
        selection,
        encoding=options.encoding or DEFAULT_ENCODING,
        check=options.check,
        keep_going=options.keep_going,
    )
    rewritten = sum(1 for r in results if r.status == TrimStatus.rewritten)
    failed = sum(1 for r in results if r.status == TrimStatus.failed)
    unchanged = len(results) - rewritten - failed

    verb = "would be trimmed" if options.check else "trimmed"
    logger.info("%d file(s) %s, %d unchanged, %d failed", rewritten, verb, unchanged, failed)

    if failed:
        return 2
    if options.check and rewritten:
        return 1
    return 0


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the sonar-dev CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, 1 for configuration errors or `trim --check`
        finding untrimmed files, 2 for file and server errors)
    """
    global_opts, command_opts, parser = _parse_args(args)

    if global_opts.version:
        try:
            version = importlib.metadata.version("sonar-dev")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return 0

    if command_opts is None:
        parser.print_help(sys.stderr)
        return 1

    log_handler = _configure_logging(global_opts.verbose, global_opts.quiet)
    try:
        settings = _load_settings()
        merge_cli_with_config(command_opts, settings, global_opts.explicit_flags)
        if isinstance(command_opts, UploadOptions):
            return _run_upload(command_opts)
        return _run_trim(command_opts)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except SonarDevError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    finally:
        logging.getLogger("sonar_dev").removeHandler(log_handler)


if __name__ == "__main__":
    sys.exit(main())
