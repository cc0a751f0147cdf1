"""File watching for relations files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable

from watchdog.events import (
    FileCreatedEvent,
    FileModifiedEvent,
    FileMovedEvent,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from prereq.config import load_requirements
from prereq.relations import Requirements

Callback = Callable[[Requirements[str]], Any]


class Watcher:

    """Watch a relations file and reload it every time it changes."""

    def __init__(self, path: Path, callback: Callback):
        self.path = path
        self.handler = Handler(path, callback)
        self.observer = Observer()

    def run(self):
        # Editors often replace the file instead of writing it, so watch the
        # directory rather than the file itself.
        directory = self.path.parent
        self.observer.schedule(self.handler, str(directory), recursive=False)
        logging.info("running initial check")
        self.handler.reload()
        logging.info("watching %s", self.path)
        self.observer.start()
        try:
            while self.observer.is_alive():
                self.observer.join(1)
        except KeyboardInterrupt:
            logging.info("quitting")
        finally:
            self.observer.stop()
            self.observer.join()


class Handler(FileSystemEventHandler):

    """Handler for file system events on the relations file."""

    def __init__(self, path: Path, callback: Callback):
        super().__init__()
        self.path = path.resolve()
        self.callback = callback

    def matches(self, event: FileSystemEvent) -> bool:
        if event.is_directory:
            return False
        if isinstance(event, FileMovedEvent):
            return Path(event.dest_path).resolve() == self.path
        if isinstance(event, (FileModifiedEvent, FileCreatedEvent)):
            return Path(event.src_path).resolve() == self.path
        return False

    def on_any_event(self, event: FileSystemEvent):
        if not self.matches(event):
            return
        logging.info("%s %s: reload", event.src_path, event.event_type)
        self.reload()

    def reload(self):
        self.callback(load_requirements(self.path))
