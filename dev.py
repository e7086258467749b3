#!/usr/bin/env python3
"""
Development helper script for the iSCSI initiator configuration library.

Usage:
    python dev.py test                  # Run all tests
    python dev.py test --file sync      # Run specific test file
    python dev.py test --coverage       # Run with coverage
    python dev.py lint                  # Run linting
    python dev.py show --dir /tmp/prefs # Dump a stored configuration
    python dev.py clean                 # Clean cache files
"""

import argparse
import subprocess
import sys
import shutil
from pathlib import Path


def run_command(cmd, description=""):
    """Run a command and report failures."""
    if description:
        print(f"🔄 {description}")

    try:
        subprocess.run(cmd, shell=True, check=True)
        return True
    except subprocess.CalledProcessError as e:
        print(f"❌ Command failed with exit code {e.returncode}: {cmd}")
        return False


def run_tests(args):
    """Run the pytest suite."""
    cmd = "python -m pytest"
    if args.file:
        cmd += f" tests/test_{args.file}.py"
    if args.coverage:
        cmd += " --cov=iscsiprefs --cov-report=html --cov-report=term"
    if args.verbose:
        cmd += " -v"
    return run_command(cmd, "Running tests")


def run_lint(args):
    """Run flake8 over the package and tests."""
    return run_command(
        "python -m flake8 --max-line-length=120 iscsiprefs tests", "Running flake8 linting"
    )


def show_config(args):
    """Print the targets, portals and initiator stored in a preferences file.

    Secrets are not read: CHAP entries are reported by tag only.
    """
    from iscsiprefs import ISCSIPropertyList, InMemorySecretStore

    plist = ISCSIPropertyList.open(args.dir, args.app_id, secret_store=InMemorySecretStore())

    initiator = plist.copy_initiator_record()
    if initiator:
        print(f"Initiator: {initiator.name or '<unnamed>'} "
              f"(alias: {initiator.alias or '-'}, auth: {initiator.auth_method.value})")

    for target_iqn in plist.copy_target_iqns():
        record = plist.copy_target_record(target_iqn)
        print(f"Target: {target_iqn} (auth: {record.auth_method.value})")
        for address, portal in record.portals.items():
            print(f"    Portal: {address}")
            if portal.connection_config:
                print(f"        header digest: {portal.connection_config.header_digest}, "
                      f"data digest: {portal.connection_config.data_digest}")

    discovery = plist.copy_discovery_record()
    if discovery:
        print(f"Discovered targets: {', '.join(discovery.target_iqns()) or '-'}")
    return True


def clean_cache(args):
    """Remove Python and test cache files."""
    print("🧹 Cleaning cache files...")

    for pattern in ("__pycache__", ".pytest_cache", "*.pyc", "htmlcov", ".coverage"):
        for path in Path(".").rglob(pattern):
            if path.is_dir():
                shutil.rmtree(path)
            else:
                path.unlink()
            print(f"   Removed {path}")

    print("✅ Cache cleanup complete")
    return True


def main():
    parser = argparse.ArgumentParser(
        description="Development helper for the iSCSI initiator configuration library"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    test_parser = subparsers.add_parser("test", help="Run tests")
    test_parser.add_argument(
        "--file", help="Run specific test file (e.g., 'sync' for test_sync.py)"
    )
    test_parser.add_argument(
        "--coverage", action="store_true", help="Run with coverage report"
    )
    test_parser.add_argument(
        "--verbose", "-v", action="store_true", help="Verbose output"
    )

    subparsers.add_parser("lint", help="Run linting")

    show_parser = subparsers.add_parser("show", help="Dump a stored configuration")
    show_parser.add_argument("--dir", required=True, help="Preferences directory")
    show_parser.add_argument(
        "--app-id", default="com.github.iscsi-osx.iSCSIInitiator", help="Preferences app id"
    )

    subparsers.add_parser("clean", help="Clean cache files")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    commands = {
        "test": run_tests,
        "lint": run_lint,
        "show": show_config,
        "clean": clean_cache,
    }

    success = commands[args.command](args)
    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
