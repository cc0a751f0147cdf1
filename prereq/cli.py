"""Command-line interface."""

import logging
import sys
from argparse import ArgumentParser, Namespace
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from prereq.config import load_requirements
from prereq.files import create_file, find_file
from prereq.logs import levels, setup_logging
from prereq.relations import Requirements
from prereq.render import objects, render, renderers
from prereq.watch import Watcher


def main(argv: Optional[Sequence[str]] = None):
    parser, commands = get_parser()
    args = parser.parse_args(argv)
    if args.command == "help":
        if args.help_target:
            commands[args.help_target].print_help()
        else:
            parser.print_help()
        return

    log_level, exit_level = levels(args.verbose, args.keep_going)
    if args.command == "watch":
        exit_level = logging.FATAL
    setup_logging(sys.stderr, log_level, exit_level)

    command = globals()[f"command_{args.command}"]
    assert command, "unexpected command name"
    command(args)


def get_parser() -> Tuple[ArgumentParser, Mapping[str, ArgumentParser]]:
    parser = ArgumentParser(
        prog="prq", description="tool for checking requirements between objects"
    )
    commands = parser.add_subparsers(metavar="command", dest="command", required=True)

    parser_help = commands.add_parser("help", help="show this help message and exit")
    parser_help.add_argument(
        metavar="command",
        dest="help_target",
        nargs="?",
        help="get help for a specific command",
    )

    parser_init = commands.add_parser("init", help="create a relations file")

    parser_check = commands.add_parser("check", help="check the relations file")

    parser_list = commands.add_parser("list", help="list relations")
    parser_list.add_argument(
        "object", nargs="?", help="show direct relations of this object only"
    )

    parser_requires = commands.add_parser(
        "requires", help="test if an object requires another"
    )
    parser_requires.add_argument("dependent", help="dependent object")
    parser_requires.add_argument("requirement", help="required object")
    parser_requires.add_argument(
        "-d", "--direct", action="store_true", help="only consider direct relations"
    )

    parser_chains = commands.add_parser("chains", help="show chains of requirements")
    parser_chains.add_argument(
        "object", nargs="?", help="show chains starting at this object only"
    )
    parser_chains.add_argument(
        "-u", "--up", action="store_true", help="follow dependents instead"
    )
    parser_chains.add_argument(
        "-a",
        "--all",
        action="store_true",
        help="start a chain at every object, not only at ends (not with an object)",
    )

    parser_render = commands.add_parser("render", help="render a report")
    parser_render.add_argument("format", choices=renderers.keys(), help="format")
    parser_render.add_argument(
        "-o", "--output", type=Path, help="write to a file instead of stdout"
    )

    parser_watch = commands.add_parser(
        "watch", help="check the relations file whenever it changes"
    )

    for subparser in [
        parser_init,
        parser_check,
        parser_list,
        parser_requires,
        parser_chains,
        parser_render,
        parser_watch,
    ]:
        if subparser is not parser_init:
            subparser.add_argument(
                "-f", "--file", type=Path, help="relations file (default: search)"
            )
        subparser.add_argument(
            "-k",
            "--keep-going",
            action="store_true",
            help="keep going if there are errors",
        )
        subparser.add_argument(
            "-v",
            "--verbose",
            action="count",
            help="increase logging (can use multiple times)",
        )

    return parser, commands.choices


def load(args: Namespace) -> Requirements[str]:
    return load_requirements(find_file(args.file))


def command_init(args: Namespace):
    path = create_file(Path.cwd())
    print(f"Created {path.name}")


def command_check(args: Namespace):
    reqs = load(args)
    print(summary(reqs))


def command_list(args: Namespace):
    reqs = load(args)
    if args.object is None:
        reqs.dump(sys.stdout)
        return
    printer = InfoPrinter()
    printer.topic(args.object)
    printer.heading("Requirements")
    printer.items(reqs.requirements(args.object))
    printer.heading("Dependents")
    printer.items(reqs.dependents(args.object))


def command_requires(args: Namespace):
    reqs = load(args)
    found = reqs.exists(args.dependent, args.requirement, recurse=not args.direct)
    print("yes" if found else "no")


def command_chains(args: Namespace):
    reqs = load(args)
    if args.object is not None:
        if args.all:
            logging.error("--all cannot be used with an object")
            return
        if args.up and not reqs.has_dependents(args.object):
            logging.error("%s has no dependents", args.object)
            return
        if not args.up and not reqs.has_requirements(args.object):
            logging.error("%s has no requirements", args.object)
            return
        if args.up:
            chains = reqs.all_dependencies(args.object)
        else:
            chains = reqs.all_requirements(args.object)
    elif args.up:
        chains = reqs.all_dependencies(without_duplicates=not args.all)
    else:
        chains = reqs.all_requirements(without_duplicates=not args.all)
    for chain in chains:
        print(format_chain(chain))


def command_render(args: Namespace):
    reqs = load(args)
    output = render(args.format, reqs)
    if args.output is None:
        sys.stdout.write(output)
        return
    with open(args.output, "w") as f:
        f.write(output)
    logging.info("wrote %s", args.output)


def command_watch(args: Namespace):
    path = find_file(args.file)
    Watcher(path, lambda reqs: print(summary(reqs), flush=True)).run()


def summary(reqs: Requirements[Any]) -> str:
    count = len(objects(reqs))
    kind = "reflexive " if reqs.reflexive else ""
    return f"{reqs.size()} {kind}relations between {count} objects"


def format_chain(chain: List[Any]) -> str:
    return " -> ".join(str(item) for item in chain)


class InfoPrinter:

    """Helper class for implementing command_list."""

    def __init__(self):
        self.first = True

    def topic(self, s: Any):
        if not self.first:
            print()
        self.first = False
        print(s)

    def heading(self, s: Any):
        print(f"\n    {s}:")

    def items(self, items: Iterable[Any]):
        empty = True
        for item in items:
            print(f"    {item}")
            empty = False
        if empty:
            print("    (none)")
