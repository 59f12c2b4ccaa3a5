#!/usr/bin/env python3
"""
# LessonTree
# Copyright (c) 2026 Dale Chapman
# Licensed under the MIT License. See LICENSE in the project root.

watch_and_build.py (LessonTree)

- Watches the content folder for any change.
- After a burst of changes settles (debounce), regenerates the whole
  manifest and, unless disabled, the master document.
- Changes to the generated files themselves are ignored so a rebuild
  never triggers another one.

Usage:
    lessontree watch [--no-master]
"""

from __future__ import annotations

import threading
import time
from pathlib import Path
from typing import Callable, Iterable, Optional

from watchdog.events import FileSystemEvent, PatternMatchingEventHandler
from watchdog.observers import Observer

from lessontree import icons
from lessontree.config_utils import LessonTreeConfig
from lessontree.errors import LessonTreeError, content_root_missing_error
from lessontree.manifest import generate_manifest
from lessontree.master_document import write_master_html

# Event types that can change the tree; open/close notifications are noise
TREE_EVENTS = {"created", "deleted", "modified", "moved"}


def run_build(config: LessonTreeConfig, include_master: bool = True) -> bool:
    """
    Regenerate the outputs once. Errors are reported, not raised, so the
    watcher keeps running.
    """
    try:
        result = generate_manifest(
            config.content_root,
            config.manifest_file,
            sort_entries=config.sort_entries,
        )
        message = f"Wrote manifest to {result.path}" if result.changed else "Manifest unchanged"
        print(f"[watch] {icons.changed_icon(result.changed)} {message}")

        if include_master:
            path = write_master_html(
                config.content_root,
                config.master_file,
                title=config.master_title,
                sort_entries=config.sort_entries,
            )
            print(f"[watch] {icons.SUCCESS} Master document written: {path}")
    except LessonTreeError as e:
        print(f"[watch] {icons.ERROR} Build failed:{e}")
        return False
    return True


class ContentChangeHandler(PatternMatchingEventHandler):
    """Debounce filesystem events into single rebuild calls."""

    def __init__(
        self,
        rebuild: Callable[[], object],
        ignore_paths: Iterable[Path] = (),
        debounce: float = 2.0,
    ):
        super().__init__(
            patterns=["*"],
            ignore_patterns=[str(Path(p).resolve()) for p in ignore_paths],
            ignore_directories=False,
            case_sensitive=True,
        )
        self.rebuild = rebuild
        self.debounce = debounce
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._pending_log: bool = True
        self._running: bool = False

    def run_now(self, label: str = "DEBOUNCED RUN: rebuilding") -> bool:
        """
        Rebuild on the calling thread. Returns False, without building,
        when another rebuild is still running.
        """
        with self._lock:
            if self._running:
                print("[watch] Build already running, skipping this run")
                return False
            self._running = True
        try:
            print(f"[watch] {label}")
            self.rebuild()
            print("[watch] BUILD COMPLETE\n")
            return True
        finally:
            with self._lock:
                self._running = False
                # Next burst should log again
                self._pending_log = True

    def _debounced_run(self):
        self.run_now()

    def schedule_rebuild(self, src_path: str):
        with self._lock:
            if self._pending_log:
                print(f"[watch] CHANGE DETECTED: {src_path}")
                self._pending_log = False
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.debounce, self._debounced_run)
            self._timer.daemon = True
            self._timer.start()

    def cancel(self):
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def on_any_event(self, event: FileSystemEvent):
        if event.event_type not in TREE_EVENTS:
            return
        self.schedule_rebuild(str(event.src_path))


def watch(config: LessonTreeConfig, include_master: bool = True) -> None:
    content_root = config.content_root
    if not content_root.is_dir():
        raise content_root_missing_error(content_root)

    icons.fence("WATCH")

    handler = ContentChangeHandler(
        rebuild=lambda: run_build(config, include_master),
        ignore_paths=[config.manifest_file, config.master_file],
        debounce=config.watch_debounce,
    )
    observer = Observer()
    observer.schedule(handler, str(content_root.resolve()), recursive=True)
    observer.start()

    print(f"[watch] {icons.WATCH} WATCHING: {content_root}")
    print(f"[watch] MANIFEST: {config.manifest_file}")
    if include_master:
        print(f"[watch] MASTER: {config.master_file}")
    print()

    # Initial build shares the handler's guard with timer rebuilds
    handler.run_now("Running initial build...")

    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        print(f"\n[watch] {icons.WAVE} Stopping...")
    finally:
        handler.cancel()
        observer.stop()
    observer.join()
