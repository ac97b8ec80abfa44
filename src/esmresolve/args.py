"""Argument parsing for the esmresolve command."""

import argparse

from .constants import Constants


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="esmresolve",
        description="Resolve Node.js module specifiers the way Node.js does",
        add_help=True,
    )

    parser.add_argument("specifiers",
                        metavar="SPECIFIER",
                        help="Module specifier to resolve",
                        nargs="+")
    parser.add_argument("-p", "--parent",
                        dest="PARENT",
                        help="URL or path of the importing module (default: current directory)",
                        action="store",
                        type=str)
    parser.add_argument("-c", "--condition",
                        dest="CONDITIONS",
                        help="Condition to match in conditional exports; repeatable",
                        action="append",
                        type=str)
    parser.add_argument("--experimental-wasm-modules",
                        dest="WASM_MODULES",
                        help="Treat .wasm files as WebAssembly modules",
                        action="store_true")
    parser.add_argument("--no-cache",
                        dest="NO_CACHE",
                        help="Do not cache resolution results",
                        action="store_true")
    parser.add_argument("--config",
                        dest="CONFIG",
                        help="Path to a YAML or JSON config file",
                        action="store",
                        type=str)
    parser.add_argument("-f", "--format",
                        dest="OUTPUT_FORMAT",
                        help="Output format (json or text)",
                        action="store",
                        type=str.lower,
                        choices=Constants.OUTPUT_FORMATS,
                        default="json")
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'])
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)

    return parser.parse_args(argv)
