"""Simulation CLI for Cup Manager.

Runs simulated tournaments from the command line, or from an interactive
prompt with autocomplete when started without arguments.
"""

# Cup Manager
# Copyright (C) 2025  Cup Manager developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

import argparse
import sys
import time
from pathlib import Path
from typing import List, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import NestedCompleter, WordCompleter
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.styles import Style

from cupmanager.exceptions import CupManagerException
from cupmanager.models import TournamentFormat
from cupmanager.testing.simulator import (
    ResultPattern,
    SimulationConfig,
    TournamentSimulator,
    export_json_format,
)
from cupmanager.utils import setup_logger

logger = setup_logger(__name__)

FORMAT_CHOICES = [f.value for f in TournamentFormat]
PATTERN_CHOICES = [p.value for p in ResultPattern]

COMMANDS = {
    "simulate": {
        "description": "Play one tournament with random results",
        "options": {
            "--participants": "Number of participants (default 8)",
            "--format": f"Tournament format ({', '.join(FORMAT_CHOICES)})",
            "--seed": "Random seed",
            "--draws": "Draw percentage outside elimination stages",
            "--max-goals": "Highest score a side can get",
            "--pattern": f"Result pattern ({', '.join(PATTERN_CHOICES)})",
            "--output": "Write the summary as JSON to this file",
        },
    },
    "benchmark": {
        "description": "Time repeated simulations",
        "options": {
            "--participants": "Number of participants (default 16)",
            "--format": f"Tournament format ({', '.join(FORMAT_CHOICES)})",
            "--iterations": "Number of runs (default 10)",
        },
    },
}


# ANSI color codes for terminal output
class Colors:
    OKBLUE = "\033[94m"
    OKCYAN = "\033[96m"
    OKGREEN = "\033[92m"
    WARNING = "\033[93m"
    FAIL = "\033[91m"
    ENDC = "\033[0m"
    BOLD = "\033[1m"


def print_banner():
    print(
        f"""
{Colors.OKBLUE}Cup Manager simulator{Colors.ENDC}

Type {Colors.BOLD}/help{Colors.ENDC} to see all available commands
Type {Colors.BOLD}exit{Colors.ENDC} or {Colors.BOLD}quit{Colors.ENDC} to leave interactive mode
"""
    )


def print_commands_list():
    print(f"\n{Colors.BOLD}Available Commands:{Colors.ENDC}\n")
    for cmd, info in COMMANDS.items():
        print(f"  {Colors.OKGREEN}{cmd:15}{Colors.ENDC} - {info['description']}")
    print()


def print_command_help(command: str):
    """Print detailed help for a specific command."""
    if command not in COMMANDS:
        print(f"{Colors.FAIL}Unknown command: {command}{Colors.ENDC}")
        print_commands_list()
        return

    cmd_info = COMMANDS[command]
    print(f"\n{Colors.BOLD}{Colors.OKBLUE}Command: {command}{Colors.ENDC}")
    print(f"{Colors.BOLD}Description:{Colors.ENDC} {cmd_info['description']}\n")
    print(f"{Colors.BOLD}Options:{Colors.ENDC}")
    for option, description in cmd_info["options"].items():
        print(f"  {Colors.OKCYAN}{option:20}{Colors.ENDC} {description}")
    print()


def create_completer() -> NestedCompleter:
    """Create autocomplete completer for interactive mode."""
    completions = {}
    for cmd, info in COMMANDS.items():
        options_completer = WordCompleter(list(info["options"].keys()))
        completions[cmd] = options_completer
        completions[f"/{cmd}"] = options_completer
    completions["/help"] = None
    completions["/list"] = None
    return NestedCompleter.from_nested_dict(completions)


def run_simulate_command(args: argparse.Namespace) -> int:
    config = SimulationConfig(
        num_participants=args.participants,
        tournament_format=TournamentFormat(args.format),
        seed=args.seed,
        draw_percentage=args.draws,
        max_goals=args.max_goals,
        result_pattern=ResultPattern(args.pattern),
    )
    try:
        summary = TournamentSimulator(config).run()
    except CupManagerException as e:
        print(f"{Colors.FAIL}Simulation failed: {e}{Colors.ENDC}")
        return 1

    print(f"\n{Colors.BOLD}{summary['name']}{Colors.ENDC} ({summary['format']})")
    for line in summary["matches"]:
        print(f"  {line}")
    print(f"\n{Colors.BOLD}Standings:{Colors.ENDC}")
    for position, row in enumerate(summary["standings"], start=1):
        print(
            f"  {position:2d}. {row['participant']:20s} {row['points']:3d} pts "
            f"GD {row['goal_difference']:+d}"
        )
    if summary["champion"]:
        print(f"\n{Colors.OKGREEN}Champion: {summary['champion']}{Colors.ENDC}")
    elif summary["blocked"]:
        print(f"\n{Colors.WARNING}Tournament is blocked{Colors.ENDC}")

    if args.output:
        Path(args.output).write_text(export_json_format(summary), encoding="utf-8")
        print(f"Summary written to {args.output}")
    return 0


def run_benchmark_command(args: argparse.Namespace) -> int:
    timings: List[float] = []
    for iteration in range(args.iterations):
        config = SimulationConfig(
            num_participants=args.participants,
            tournament_format=TournamentFormat(args.format),
            seed=iteration,
        )
        start = time.perf_counter()
        try:
            TournamentSimulator(config).run()
        except CupManagerException as e:
            print(f"{Colors.FAIL}Simulation failed: {e}{Colors.ENDC}")
            return 1
        timings.append(time.perf_counter() - start)

    avg_time = sum(timings) / len(timings)
    print(f"\n{Colors.BOLD}Benchmark ({args.iterations} runs):{Colors.ENDC}")
    print(f"  Average: {avg_time*1000:.2f}ms")
    print(f"  Min: {min(timings)*1000:.2f}ms")
    print(f"  Max: {max(timings)*1000:.2f}ms")
    return 0


def add_simulate_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--participants", type=int, default=8)
    parser.add_argument(
        "--format", choices=FORMAT_CHOICES, default=TournamentFormat.HYBRID.value
    )
    parser.add_argument("--seed", type=int)
    parser.add_argument("--draws", type=int, default=25)
    parser.add_argument("--max-goals", type=int, default=5)
    parser.add_argument(
        "--pattern", choices=PATTERN_CHOICES, default=ResultPattern.RANDOM.value
    )
    parser.add_argument("--output")


def add_benchmark_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--participants", type=int, default=16)
    parser.add_argument(
        "--format", choices=FORMAT_CHOICES, default=TournamentFormat.HYBRID.value
    )
    parser.add_argument("--iterations", type=int, default=10)


def create_main_parser() -> argparse.ArgumentParser:
    """Create main argument parser."""
    parser = argparse.ArgumentParser(
        prog="cupmanager-sim",
        description="Tournament simulator for Cup Manager",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Interactive mode
  cupmanager-sim

  # Simulate a knockout with 7 participants
  cupmanager-sim simulate --participants 7 --format knockout --seed 3

  # Benchmark the group + knockout format
  cupmanager-sim benchmark --participants 32 --iterations 20
        """,
    )
    parser.add_argument(
        "--interactive", "-i", action="store_true", help="Start in interactive mode"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    sim_parser = subparsers.add_parser("simulate", help=COMMANDS["simulate"]["description"])
    add_simulate_arguments(sim_parser)
    sim_parser.set_defaults(func=run_simulate_command)

    bench_parser = subparsers.add_parser(
        "benchmark", help=COMMANDS["benchmark"]["description"]
    )
    add_benchmark_arguments(bench_parser)
    bench_parser.set_defaults(func=run_benchmark_command)

    return parser


def run_interactive_mode() -> int:
    """Run in interactive mode with autocomplete."""
    print_banner()
    parser = create_main_parser()
    session = PromptSession(
        completer=create_completer(),
        history=InMemoryHistory(),
        style=Style.from_dict({"prompt": "#00aa00 bold"}),
    )

    while True:
        try:
            user_input = session.prompt("cupmanager-sim> ").strip()
        except KeyboardInterrupt:
            print(f"\n{Colors.WARNING}Use 'exit' or 'quit' to leave{Colors.ENDC}")
            continue
        except EOFError:
            print(f"\n{Colors.OKGREEN}Goodbye!{Colors.ENDC}\n")
            return 0

        if not user_input:
            continue
        if user_input in ["exit", "quit", "q"]:
            print(f"\n{Colors.OKGREEN}Goodbye!{Colors.ENDC}\n")
            return 0
        if user_input in ["/help", "help", "?", "/list"]:
            print_commands_list()
            continue
        if user_input.startswith(("/help ", "help ")):
            print_command_help(user_input.split()[1].lstrip("/"))
            continue

        parts = user_input.split()
        command = parts[0].lstrip("/")
        if command not in COMMANDS:
            print(f"{Colors.FAIL}Unknown command: {command}{Colors.ENDC}")
            print(f"Type {Colors.BOLD}/help{Colors.ENDC} to see available commands")
            continue

        try:
            args = parser.parse_args([command] + parts[1:])
        except SystemExit:
            # argparse exits on bad arguments
            continue
        args.func(args)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the cupmanager-sim CLI."""
    argv = sys.argv[1:] if argv is None else argv
    if not argv or "--interactive" in argv or "-i" in argv:
        return run_interactive_mode()

    parser = create_main_parser()
    args = parser.parse_args(argv)
    if hasattr(args, "func"):
        return args.func(args)
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
