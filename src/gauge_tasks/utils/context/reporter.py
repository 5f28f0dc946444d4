# standard library
import datetime
import json
import sys

# third parties
from colorama import Fore, Style

# relative
from .models import ContextReporter, Label, LogEntry, LogLevel


def is_task_scope(entry: LogEntry) -> bool:
    """
    Whether the entry is the start or the end of a task's scope (and not of one of its nested scopes).
    """
    task = entry.attributes.get("task")
    if task is None or str(Label.TASK) not in entry.labels:
        return False
    return entry.text == task or entry.text.startswith(f"{task} in ")


class ConsoleContextReporter(ContextReporter):
    """
    This [ContextReporter](@yw-nav-class:ContextReporter) logs into the standard
    output in a human-readable way.

    Scopes of the tasks are always reported with their duration, other scopes
    and debug entries only in verbose mode.
    """

    verbose: bool

    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def format(self, entry: LogEntry) -> str | None:
        labels = set(entry.labels)
        is_task = is_task_scope(entry)
        stamp = datetime.datetime.fromtimestamp(entry.timestamp).strftime("%H:%M:%S")
        prefix = f"[{Style.DIM}{stamp}{Style.RESET_ALL}]"

        if str(Label.BANNER) in labels:
            return f"\n{Style.BRIGHT}{Fore.GREEN}{entry.text}{Style.RESET_ALL}\n"

        if str(Label.STARTED) in labels:
            if not is_task and not self.verbose:
                return None
            return f"{prefix} Starting {Fore.CYAN}{entry.text}{Style.RESET_ALL}..."

        if str(Label.DONE) in labels:
            if not is_task and not self.verbose:
                return None
            return f"{prefix} Finished {Fore.CYAN}{entry.text}{Style.RESET_ALL}"

        if entry.level == LogLevel.DEBUG and not self.verbose:
            return None

        color = {
            LogLevel.DEBUG: Style.DIM,
            LogLevel.INFO: "",
            LogLevel.WARNING: Fore.YELLOW,
            LogLevel.ERROR: Fore.RED,
        }[entry.level]
        text = entry.text.rstrip("\n")
        if str(Label.STD_OUTPUT) in labels:
            return f"{color}{text}{Style.RESET_ALL}"
        line = f"{prefix} {color}{text}{Style.RESET_ALL}"
        if entry.data and (self.verbose or entry.level == LogLevel.ERROR):
            line += f"\n{json.dumps(entry.data, indent=2, default=str)}"
        return line

    async def log(self, entry: LogEntry):
        line = self.format(entry)
        if line is None:
            return
        stream = sys.stderr if entry.level == LogLevel.ERROR else sys.stdout
        print(line, file=stream)


class InMemoryReporter(ContextReporter):
    """
    Stores logs generated from a [context](@yw-nav-class:Context) in memory.
    """

    max_count = 10000

    def __init__(self):
        self.entries: list[LogEntry] = []
        self.errors: set[str] = set()

    def clear(self):
        self.entries = []
        self.errors = set()

    def texts(self, level: LogLevel | None = None) -> list[str]:
        return [e.text for e in self.entries if level is None or e.level == level]

    async def log(self, entry: LogEntry):
        self.entries.append(entry)
        if str(Label.FAILED) in entry.labels:
            self.errors.add(entry.context_id)
        if len(self.entries) > 2 * self.max_count:
            self.entries = self.entries[len(self.entries) - self.max_count :]
