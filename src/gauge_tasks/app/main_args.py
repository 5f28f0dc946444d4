# standard library
import argparse

from pathlib import Path

# typing
from typing import NamedTuple, Optional


def arguments_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gauge-tasks")
    parser.add_argument(
        "task", nargs="?", default="default", help="Name of the task to run"
    )
    parser.add_argument("--conf", help="Path to a JSON configuration file")
    parser.add_argument(
        "--project", help="Folder of the project (default: current folder)"
    )
    parser.add_argument(
        "--verbose", help="Display debug logs & all scopes", action="store_true"
    )
    return parser


class MainArguments(NamedTuple):
    """
    Arguments that can be set when starting gauge-tasks.

    Inline help for arguments description can be displayed using:
    ```shell
    gauge-tasks --help
    ```
    """

    task: str = "default"
    """
    Name of the task to run, positional argument.

    **Example**
    ```shell
    gauge-tasks test:spec
    ```
    """
    config_path: Optional[Path] = None
    """
    Path to a JSON configuration file overriding the defaults, exposed as **--conf**.

    **Example**
    ```shell
    gauge-tasks build --conf='./gauge-tasks.json'
    ```
    """
    project_dir: Optional[Path] = None
    """
    Folder of the project, exposed as **--project**.
    """
    verbose: bool = False
    """
    Display debug logs and the scopes of every step, exposed as **--verbose**.
    """


def parse_main_arguments(argv: Optional[list[str]] = None) -> MainArguments:
    args = arguments_parser().parse_args(argv)
    return MainArguments(
        task=args.task,
        config_path=Path(args.conf) if args.conf else None,
        project_dir=Path(args.project) if args.project else None,
        verbose=args.verbose if args.verbose else False,
    )
