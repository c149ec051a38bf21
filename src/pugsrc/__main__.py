"""Command line entry point.

Reads parser JSON from a file or stdin and prints the regenerated source::

    pug-lexer index.pug | pug-parser | python -m pugsrc --colon
    pugsrc --tabs --quote double ast.json

Exit status is 0 on success, 1 when the tree cannot be turned into source
and 2 when the input is not a JSON object.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from pugsrc import __version__, generate
from pugsrc.config import GeneratorConfig
from pugsrc.errors import PugsrcError
from pugsrc.serialization import from_json

_QUOTES = {"single": "'", "double": '"'}


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="pugsrc",
        description="Generate Pug source from a parser JSON syntax tree",
    )
    p.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument(
        "file",
        nargs="?",
        type=Path,
        help="parser JSON file (reads stdin when omitted or '-')",
    )
    indent = p.add_mutually_exclusive_group()
    indent.add_argument(
        "--indent",
        type=int,
        default=2,
        metavar="N",
        help="indent with N spaces (default: 2)",
    )
    indent.add_argument("--tabs", action="store_true", help="indent with tabs")
    p.add_argument(
        "--colon",
        action="store_true",
        help="use block expansion (li: a) where possible",
    )
    p.add_argument(
        "--quote",
        choices=sorted(_QUOTES),
        default="single",
        help="quote character for quoted attribute names (default: single)",
    )
    return p


def _config(ns: argparse.Namespace) -> GeneratorConfig:
    unit = "\t" if ns.tabs else " " * ns.indent
    return GeneratorConfig(
        indent_unit=unit,
        use_colon=ns.colon,
        preferred_quote=_QUOTES[ns.quote],
    )


def _read_input(path: Path | None) -> str:
    if path is None or str(path) == "-":
        return sys.stdin.read()
    return path.read_text(encoding="utf-8")


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)

    try:
        config = _config(ns)
        tree = from_json(_read_input(ns.file))
        source = generate(tree, config=config)
    except PugsrcError as e:
        sys.stderr.write(f"pugsrc: {e}\n")
        return 1
    except (json.JSONDecodeError, ValueError) as e:
        sys.stderr.write(f"pugsrc: invalid input: {e}\n")
        return 2
    except OSError as e:
        sys.stderr.write(f"pugsrc: {e}\n")
        return 2

    sys.stdout.write(source + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
