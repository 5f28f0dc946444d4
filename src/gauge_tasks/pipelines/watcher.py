# standard library
import asyncio

from collections.abc import Awaitable, Callable
from fnmatch import fnmatch
from pathlib import Path

# third parties
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

# Gauge tasks utilities
from gauge_tasks.utils import Context

OnSourceChange = Callable[[Path], Awaitable[None]]


class SourcesEventHandler(FileSystemEventHandler):
    """
    Forward the file events matching the watched patterns to the event loop.

    Events are emitted from the observer's thread, the callback is scheduled on `loop`.
    """

    root: Path
    patterns: list[str]
    on_change: OnSourceChange
    loop: asyncio.AbstractEventLoop

    def __init__(
        self,
        root: Path,
        patterns: list[str],
        on_change: OnSourceChange,
        loop: asyncio.AbstractEventLoop,
    ):
        super().__init__()
        self.root = root.resolve()
        self.patterns = patterns
        self.on_change = on_change
        self.loop = loop

    def matches(self, path: Path) -> bool:
        try:
            relative = path.resolve().relative_to(self.root)
        except ValueError:
            return False
        # '**/' also matches zero folder (e.g. 'lib/**/*.js' includes 'lib/Gauge.js')
        return any(
            fnmatch(relative.as_posix(), pattern)
            or fnmatch(relative.as_posix(), pattern.replace("**/", ""))
            for pattern in self.patterns
        )

    def on_any_event(self, event: FileSystemEvent):
        if event.is_directory or event.event_type not in [
            "created",
            "modified",
            "moved",
            "deleted",
        ]:
            return
        path = Path(
            str(event.dest_path if event.event_type == "moved" else event.src_path)
        )
        if self.matches(path):
            asyncio.run_coroutine_threadsafe(self.on_change(path), self.loop)


class SourcesWatcher:
    """
    Re-trigger an action (the build) on source changes.

    A change happening while the action is running is skipped: only one build targets the artifacts at a time.
    Failures of the action are logged, the watch goes on.
    """

    def __init__(
        self,
        root: Path,
        patterns: list[str],
        action: Callable[[], Awaitable[object]],
        context: Context,
    ):
        self.root = root
        self.patterns = patterns
        self.action = action
        self.context = context
        self.running = False
        self.triggered_count = 0

    async def trigger(self, path: Path):
        if self.running:
            await self.context.info(
                text=f"'{path.name}' changed, build already in progress"
            )
            return
        self.running = True
        self.triggered_count += 1
        try:
            await self.context.info(text=f"'{path.name}' changed, rebuilding")
            await self.action()
        except Exception as e:
            await self.context.error(
                text=f"Rebuild failed: {e}", data={"file": str(path)}
            )
        finally:
            self.running = False

    async def watch(self, stop: asyncio.Event | None = None):
        """
        Observe the sources until `stop` is set (forever if not provided).
        """
        stop = stop or asyncio.Event()
        handler = SourcesEventHandler(
            root=self.root,
            patterns=self.patterns,
            on_change=self.trigger,
            loop=asyncio.get_running_loop(),
        )
        observer = Observer()
        observer.schedule(handler, str(self.root), recursive=True)
        observer.start()
        await self.context.info(
            text=f"Watching {', '.join(self.patterns)}",
            data={"root": str(self.root)},
        )
        try:
            await stop.wait()
        finally:
            observer.stop()
            observer.join()
