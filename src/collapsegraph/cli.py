#!/usr/bin/env python3
"""
CollapseGraph CLI - Certification Spine Runner

Command-line interface for computing, freezing and verifying the
certification spine, running the collapse trace experiment, and
inspecting normalization profiles.

Usage:
    collapsegraph spine
    collapsegraph spine --freeze --snapshot gates/expected.json
    collapsegraph verify --snapshot gates/expected.json
    collapsegraph trace --out out/
    collapsegraph normalize "Hell0 W0r1d" --profile auth_safe
    collapsegraph profile-info --profile packs/code_safe.yaml

Exit Codes:
    0   OK              - Command succeeded
    10  INPUT_INVALID   - Invalid input (text, profile pack, domain)
    11  CONFIG_ERROR    - Configuration file or environment invalid
    12  VERIFY_FAIL     - Snapshot or chain verification failed
    20  INTERNAL_ERROR  - Unexpected internal error
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from collapse_kernel.glyph.normalize import normalize_str, verify_terminal

from . import __version__
from .config import RunConfig, load_config
from .exceptions import (
    CollapseGraphError,
    ConfigInvalidError,
    InputInvalidError,
    IntegrityFailError,
    InternalError,
    wrap_internal_exception,
)
from .experiment import open_file_sinks, run_collapse_trace
from .logging_config import configure_logging
from .profile_loader import resolve_profile
from .snapshot import verify_snapshot, write_snapshot
from .spine import run_spine, sample_normalization

logger = logging.getLogger(__name__)


# ============================================================================
# EXIT CODES
# ============================================================================

class ExitCode:
    """Deterministic exit codes for pipeline integration."""
    OK = 0                # Command succeeded
    INPUT_INVALID = 10    # Invalid input
    CONFIG_ERROR = 11     # Configuration invalid
    VERIFY_FAIL = 12      # Verification failed
    INTERNAL_ERROR = 20   # Unexpected error


def error_to_exit_code(error: CollapseGraphError) -> int:
    """Map a coded error to its exit code."""
    if isinstance(error, InputInvalidError):
        return ExitCode.INPUT_INVALID
    elif isinstance(error, ConfigInvalidError):
        return ExitCode.CONFIG_ERROR
    elif isinstance(error, IntegrityFailError):
        return ExitCode.VERIFY_FAIL
    else:
        return ExitCode.INTERNAL_ERROR


# ============================================================================
# OUTPUT FORMATTING
# ============================================================================

class Colors:
    """ANSI color codes for terminal output."""
    BLUE = '\033[94m'
    CYAN = '\033[96m'
    GREEN = '\033[92m'
    RED = '\033[91m'
    BOLD = '\033[1m'
    END = '\033[0m'

    @classmethod
    def disable(cls):
        cls.BLUE = ''
        cls.CYAN = ''
        cls.GREEN = ''
        cls.RED = ''
        cls.BOLD = ''
        cls.END = ''


def print_header(text: str):
    print(f"\n{Colors.BOLD}{Colors.CYAN}{'='*60}{Colors.END}")
    print(f"{Colors.BOLD}{Colors.CYAN}{text}{Colors.END}")
    print(f"{Colors.BOLD}{Colors.CYAN}{'='*60}{Colors.END}")


def print_success(text: str):
    print(f"{Colors.GREEN}[OK] {text}{Colors.END}")


def print_error(text: str):
    print(f"{Colors.RED}[ERROR] {text}{Colors.END}", file=sys.stderr)


def print_info(text: str):
    print(f"{Colors.BLUE}[INFO] {text}{Colors.END}")


def print_kv(key: str, value: str, indent: int = 0):
    spaces = "  " * indent
    print(f"{spaces}{Colors.BOLD}{key}:{Colors.END} {value}")


# ============================================================================
# COMMANDS
# ============================================================================

def cmd_spine(args, config: RunConfig) -> int:
    """Compute the spine digests; optionally freeze them."""
    print_header("CollapseGraph - Certification Spine")

    run = run_spine(config)
    profile = run.profile

    normalized, terminal = sample_normalization(profile)
    print_kv("Profile", profile.name)
    print_kv("Classes", str(profile.class_count()))
    print_kv("Sample", normalized)
    print_kv("Sample Terminal", str(terminal).lower())
    print()
    print_kv("Quotient Classes", str(run.class_count))
    print_kv("H_sem (bits)", repr(run.h_sem_bits))
    print_kv("Quotient Digest", run.quotient_digest)
    print_kv("Chain Valid", str(run.chain.is_valid()).lower())
    print()

    digests = run.digests.to_dict()
    print(json.dumps(digests, indent=2, sort_keys=True))

    if args.freeze:
        path = write_snapshot(args.snapshot or config.snapshot_path, digests)
        print()
        print_success(f"Froze {path}")

    return ExitCode.OK


def cmd_verify(args, config: RunConfig) -> int:
    """Recompute the spine and compare it with the frozen snapshot."""
    print_header("CollapseGraph - Verify Snapshot")

    path = Path(args.snapshot or config.snapshot_path)
    print_info(f"Snapshot: {path}")

    run = run_spine(config)
    run.chain.verify()
    verify_snapshot(path, run.digests.to_dict())

    print_success("Freeze gate OK")
    return ExitCode.OK


def cmd_trace(args, config: RunConfig) -> int:
    """Run the collapse trace experiment into out_dir."""
    out_dir = Path(args.out or config.out_dir)
    profile = resolve_profile(config.profile)
    sinks = open_file_sinks(out_dir, echo=sys.stdout)
    try:
        run_collapse_trace(sinks, profile)
    finally:
        sinks.close()
    print()
    print_success(f"Trace logs written to: {out_dir}")
    return ExitCode.OK


def cmd_normalize(args, config: RunConfig) -> int:
    """Normalize TEXT through a profile."""
    profile = resolve_profile(args.profile or config.profile)
    normalized = normalize_str(profile, args.text, strict=not args.lenient)
    print_kv("profile", profile.name)
    print_kv("normalized", normalized)
    print_kv("terminal", str(verify_terminal(profile, normalized)).lower())
    return ExitCode.OK


def cmd_profile_info(args, config: RunConfig) -> int:
    """Show a compiled profile's classes and representatives."""
    profile = resolve_profile(args.profile or config.profile)

    print_header("CollapseGraph - Profile Info")
    print_kv("Name", profile.name)
    print_kv("Syntax Strict", str(profile.params.syntax_strict).lower())
    print_kv("Classes", str(profile.class_count()))
    print_kv("Graph Hash", profile.graph_hash_hex)
    print_kv("Witness Alphabet", ''.join(profile.witness_alphabet))

    merged = [members for members in profile.classes if len(members) > 1]
    print(f"\n{Colors.BOLD}Merged Classes ({len(merged)}):{Colors.END}")
    for members in merged:
        rep = profile.rep(members[0])
        print(f"  {rep!r} <- {' '.join(repr(m) for m in members)}")
    return ExitCode.OK


# ============================================================================
# MAIN
# ============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="collapsegraph",
        description="CollapseGraph CLI - deterministic certification spine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit Codes:
  0   OK              Command succeeded
  10  INPUT_INVALID   Invalid input
  11  CONFIG_ERROR    Configuration invalid
  12  VERIFY_FAIL     Verification failed
  20  INTERNAL_ERROR  Unexpected error

Examples:
  collapsegraph spine --freeze
  collapsegraph verify
  collapsegraph normalize "Hell0 W0r1d (O0I1)"
  collapsegraph --config run.yaml trace --out out/
        """
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", help="YAML run configuration file")
    parser.add_argument("--log-level", type=str.upper,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        help="Logging level (overrides config)")
    parser.add_argument("--log-json", action="store_true", help="Emit JSON log lines")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # spine
    spine_parser = subparsers.add_parser("spine", help="Compute the certification spine")
    spine_parser.add_argument("--freeze", action="store_true",
                              help="Write the digests to the snapshot file")
    spine_parser.add_argument("--snapshot", "-s", help="Snapshot file (default from config)")
    spine_parser.set_defaults(func=cmd_spine)

    # verify
    verify_parser = subparsers.add_parser("verify", help="Verify the spine against the snapshot")
    verify_parser.add_argument("--snapshot", "-s", help="Snapshot file (default from config)")
    verify_parser.set_defaults(func=cmd_verify)

    # trace
    trace_parser = subparsers.add_parser("trace", help="Run the collapse trace experiment")
    trace_parser.add_argument("--out", "-o", help="Output directory for trace logs")
    trace_parser.set_defaults(func=cmd_trace)

    # normalize
    norm_parser = subparsers.add_parser("normalize", help="Normalize text through a profile")
    norm_parser.add_argument("text", help="Text to normalize")
    norm_parser.add_argument("--profile", "-p", help="Profile name or YAML pack path")
    norm_parser.add_argument("--lenient", action="store_true",
                             help="Pass characters outside the universe through unchanged")
    norm_parser.set_defaults(func=cmd_normalize)

    # profile-info
    info_parser = subparsers.add_parser("profile-info", help="Show profile information")
    info_parser.add_argument("--profile", "-p", help="Profile name or YAML pack path")
    info_parser.set_defaults(func=cmd_profile_info)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    if not sys.stdout.isatty():
        Colors.disable()

    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        config = load_config(args.config)
        configure_logging(args.log_level or config.log_level, json_format=args.log_json)
        return args.func(args, config)
    except Exception as e:
        error = wrap_internal_exception(e)
        if error.code == InternalError.code:
            logger.exception("Unexpected error in %s", args.command)
        print_error(f"{error.code}: {error.message}")
        for detail in error.details.get("errors", []):
            print(f"  {Colors.RED}[X]{Colors.END} {detail}", file=sys.stderr)
        return error_to_exit_code(error)


if __name__ == "__main__":
    sys.exit(main())
