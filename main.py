#!/usr/bin/env python3
"""
Plugin Release Diff - command line entry point

Lists the plugins bundled in a Jenkins WAR together with the source commit
of each version, or compares two WARs and reports new and updated plugins
with their source diffs.

Usage:
    python main.py --jenkins-war jenkins-2.400.war
    python main.py --jenkins-war jenkins-2.401.war --previous-war jenkins-2.400.war [--versions-only]
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from shared.config import Config
from shared.logging_config import get_worker_logger, setup_logging
from shared.plugin_analyzer import PluginDiffError
from Workers.Supervisor.supervisor import run_comparison

logger = get_worker_logger("main")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Resolve bundled plugin versions to source commits and diff two releases"
    )
    parser.add_argument("--jenkins-war", required=True, type=Path, help="Distribution archive to inspect")
    parser.add_argument("--previous-war", type=Path, help="Previous distribution archive (enables compare mode)")
    parser.add_argument("--versions-only", action="store_true", default=None,
                        help="Only print versions and commits, no diff bodies")
    parser.add_argument("--keep-deletions", action="store_true",
                        help="Keep removed lines in updated plugin diffs")
    parser.add_argument("--hide-unchanged", action="store_true", default=None,
                        help="Leave plugins resolved to the same commit out of the updated list")
    parser.add_argument("--scratch-dir", help="Working directory for packages and clones (default: new temp dir)")
    parser.add_argument("--git-timeout", type=float, help="Kill git commands running longer than this many seconds")
    parser.add_argument("--log-level", help="Logging level (default: LOG_LEVEL or INFO)")
    parser.add_argument("-v", "--verbose", action="store_true", default=None, help="Enable debug output")
    return parser


def config_from_args(args: argparse.Namespace) -> Config:
    """Environment defaults overridden by command line flags."""
    config = Config()
    if args.versions_only is not None:
        config.versions_only = args.versions_only
    if args.keep_deletions:
        config.additions_only = False
    if args.hide_unchanged is not None:
        config.hide_unchanged = args.hide_unchanged
    if args.scratch_dir:
        config.scratch_dir = args.scratch_dir
    if args.git_timeout is not None:
        config.git_timeout_seconds = args.git_timeout
    if args.log_level:
        config.log_level = args.log_level
    if args.verbose is not None:
        config.verbose = args.verbose
    return config


def main(argv: Optional[List[str]] = None) -> int:
    """Main function for command-line usage."""
    args = build_parser().parse_args(argv)

    try:
        config = config_from_args(args)
        config.validate()
    except ValueError as e:
        print(f"❌ Invalid configuration: {e}", file=sys.stderr)
        return 1

    setup_logging(config.log_level, verbose=config.is_debug)

    try:
        run_comparison(config, args.jenkins_war, args.previous_war)
    except PluginDiffError as e:
        logger.error(f"❌ Error executing plugin diff: {e}")
        print(f"Error executing plugin diff: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        logger.exception(f"❌ Unexpected failure: {e}")
        print(f"Error executing plugin diff: {type(e).__name__}: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
