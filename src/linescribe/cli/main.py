#!/usr/bin/env python3
"""
LINESCRIBE CLI - Script Runner & Inspector
------------------------------------------
Three read-mostly views of a script:

    run       surface every ordinary line (built-ins executed quietly)
    classify  label each line with its command type
    vars      run the script, then dump the Property Registry as YAML

Exit codes: 0 ok, 1 script/resource error or Ctrl-C, 91 internal defect.

Author: LineScribe Team
Date: 2026-10-19
"""

import sys
import argparse
import logging
from typing import List, Optional

from linescribe.cli.formatter import ScribeFormatter, console
from linescribe.core.errors import ScriptError, UnrecoverableError
from linescribe.core.exporter import RegistryExporter
from linescribe.core.models import SYSTEM_ENV, CommandType, ScanOptions
from linescribe.core.registry import PropertyRegistry
from linescribe.grammar.classifier import BatchGrammar
from linescribe.macros.evaluator import MacroEvaluator, StrictMacroEvaluator
from linescribe.scanning.script import EnvScriptScanner, ScriptScanner

logger = logging.getLogger("linescribe.cli")

VERSION = "linescribe v0.3.0"
EXIT_SCRIPT_ERROR = 1
EXIT_INTERNAL_ERROR = 91


class LineScribeCLI:
    """
    CLI wrapper that turns subcommands into scanner runs.
    run() returns the process exit code; main() hands it to sys.exit.
    """

    def __init__(self, formatter: Optional[ScribeFormatter] = None):
        self.formatter = formatter or ScribeFormatter()
        self.parser = argparse.ArgumentParser(
            prog="linescribe",
            description="LineScribe - line-oriented script scanner with built-in commands",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        self._setup_args()

    def _setup_args(self):
        self.parser.add_argument("-V", "--version", action="version", version=VERSION)

        common = argparse.ArgumentParser(add_help=False)
        common.add_argument("script", help="Path to the script (or its text, with --inline)")
        common.add_argument("--inline", action="store_true", help="Treat SCRIPT as literal script text")
        common.add_argument("--no-trim", action="store_true", help="Keep leading/trailing whitespace")
        common.add_argument("--no-compress", action="store_true", help="Keep runs of whitespace")
        common.add_argument("--verbose", action="store_true", help="Per-line debug logging")

        subparsers = self.parser.add_subparsers(dest="command", metavar="Command")

        for name, help_text in (("run", "Execute built-ins and list the surfaced lines"),
                                ("vars", "Execute the script and dump the resulting properties")):
            sub = subparsers.add_parser(name, parents=[common], help=help_text)
            sub.add_argument("--env", action="store_true", help="Expose the OS environment as System.env")
            sub.add_argument("-D", dest="defines", action="append", default=[], metavar="KEY=VALUE",
                             help="Pre-set a script variable (repeatable)")
            sub.add_argument("--strict-macros", action="store_true",
                             help="Fail on ${...} references that resolve to nothing")
            if name == "vars":
                sub.add_argument("--show-env", action="store_true", help="Include System.env in the dump")

        subparsers.add_parser("classify", parents=[common], help="Show the command type of every line")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _options(self, args: argparse.Namespace) -> ScanOptions:
        return ScanOptions(trim=not args.no_trim, compress=not args.no_compress, verbose=args.verbose)

    def _source(self, args: argparse.Namespace) -> str:
        return args.script if args.inline else "@" + args.script

    def _registry(self, args: argparse.Namespace) -> PropertyRegistry:
        registry = PropertyRegistry.with_globals()
        for define in args.defines:
            key, sep, value = define.partition("=")
            if not sep or not key:
                raise ScriptError(f"-D expects KEY=VALUE, got '{define}'")
            registry.set_global(key, value)
        return registry

    def _script_scanner(self, args: argparse.Namespace) -> ScriptScanner:
        scanner_cls = EnvScriptScanner if args.env else ScriptScanner
        evaluator = StrictMacroEvaluator() if args.strict_macros else MacroEvaluator()
        scanner = scanner_cls(self._options(args), registry=self._registry(args), evaluator=evaluator)
        scanner.open_source(self._source(args))
        return scanner

    # ------------------------------------------------------------------
    # Subcommands
    # ------------------------------------------------------------------
    def cmd_run(self, args: argparse.Namespace):
        scanner = self._script_scanner(args)
        surfaced = 0
        while scanner.has_next_line():
            line = scanner.next_line()
            surfaced += 1
            self.formatter.show_line(surfaced, line, scanner.is_line_echoed())
        self.formatter.show_summary(surfaced, scanner.get_file_name())

    def cmd_classify(self, args: argparse.Namespace):
        grammar = BatchGrammar(self._options(args))
        grammar.open_source(self._source(args))

        rows = []
        while grammar.has_next_line():
            grammar.next_line()
            cmd_type = grammar.get_cmd_type()
            rows.append({
                "line_no": grammar.get_orig_line_num(),
                "type": cmd_type,
                "payload": self._payload_of(grammar, cmd_type),
                "echoed": grammar.is_line_echoed(),
            })
        self.formatter.print_classification_table(rows, title=f"Classification: {grammar.get_file_name()}")

    @staticmethod
    def _payload_of(grammar: BatchGrammar, cmd_type: CommandType) -> Optional[str]:
        if cmd_type in (CommandType.PROPERTIES, CommandType.SET_PROPERTY):
            return "=".join(grammar.get_property_kv())
        if cmd_type is CommandType.SLEEP:
            return f"{grammar.get_sleep_duration()} ms"
        return {
            CommandType.MAKE_NEW_ROOT: grammar.get_make_new_root,
            CommandType.BATCH: grammar.get_sub_batch_file,
            CommandType.PRINT: grammar.get_print_expr,
            CommandType.SAVE_TO: grammar.get_save_to,
            CommandType.USE_AS_INPUT: grammar.get_use_as_input,
            CommandType.ORDINARY: grammar.current_line_or_none,
        }.get(cmd_type, lambda: None)()

    def cmd_vars(self, args: argparse.Namespace):
        scanner = self._script_scanner(args)
        while scanner.has_next_line():
            scanner.next_line()
        exclude = () if args.show_env else (SYSTEM_ENV,)
        yaml_text = RegistryExporter().export(scanner.registry, exclude=exclude)
        self.formatter.show_registry(yaml_text, title=f"Properties after {scanner.get_file_name()}")

    # ------------------------------------------------------------------
    # Routing
    # ------------------------------------------------------------------
    def run(self, argv: Optional[List[str]] = None) -> int:
        args = self.parser.parse_args(argv)
        if not args.command:
            self.parser.print_help()
            return 0

        logging.basicConfig(
            level=logging.DEBUG if args.verbose else logging.WARNING,
            format="%(levelname)s %(name)s: %(message)s",
        )

        handler = {"run": self.cmd_run, "classify": self.cmd_classify, "vars": self.cmd_vars}[args.command]
        try:
            handler(args)
        except UnrecoverableError as e:
            logger.exception("Internal defect while scanning")
            self.formatter.show_error(str(e), fatal=True)
            return EXIT_INTERNAL_ERROR
        except ScriptError as e:
            self.formatter.show_error(str(e))
            return EXIT_SCRIPT_ERROR
        return 0


def main(argv: Optional[List[str]] = None):
    """Application entry point with interrupt handling."""
    try:
        code = LineScribeCLI().run(argv)
    except KeyboardInterrupt:
        console.print("\n[bold red]Terminated by user.[/bold red]")
        sys.exit(EXIT_SCRIPT_ERROR)
    sys.exit(code)


if __name__ == "__main__":
    main()
