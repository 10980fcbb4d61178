"""Command-line interface for the Polylang interpreter."""

import sys
import argparse
from pathlib import Path

from . import log
from .types import type_to_str
from .config import Settings
from .values import format_value
from .interpreter import Interpreter
from .environment import SCOPE_POLICIES


def main(argv: list[str] | None = None) -> int:
  """Main entry point for the polylang interpreter."""
  parser = argparse.ArgumentParser(
    prog="polylang",
    description="Polylang - type check and evaluate JSON-encoded programs",
  )
  parser.add_argument("source", type=Path, help="Program file to run (.json)")
  parser.add_argument(
    "--scope",
    choices=sorted(SCOPE_POLICIES),
    help="Scoping policy for function calls (default: $POLYLANG_SCOPE or static)",
  )
  mode = parser.add_mutually_exclusive_group()
  mode.add_argument(
    "--no-check",
    action="store_true",
    help="Skip the type checker and evaluate directly",
  )
  mode.add_argument(
    "--check-only",
    action="store_true",
    help="Type check and print the program's type without evaluating",
  )
  parser.add_argument("--log-level", help="Log level for polylang loggers (default: $POLYLANG_LOG_LEVEL or WARNING)")

  args = parser.parse_args(argv)

  try:
    settings = Settings.from_env().override(
      scope=args.scope,
      check=False if args.no_check else None,
      log_level=args.log_level.upper() if args.log_level else None,
    )
  except ValueError as e:
    print(f"Error: {e}", file=sys.stderr)
    return 1
  log.configure(settings.log_level)

  # Validate source file
  if not args.source.exists():
    print(f"Error: Source file '{args.source}' not found", file=sys.stderr)
    return 1

  source = args.source.read_text(encoding="utf-8")
  result = Interpreter(settings).run_json(source, check_only=args.check_only)

  if not result.success:
    print(f"Error: {result.error}", file=sys.stderr)
    return 1
  if args.check_only:
    print(type_to_str(result.type))
  elif result.value is not None:
    print(format_value(result.value))
  return 0


if __name__ == "__main__":
  sys.exit(main())
