"""
Scans a set of files for a template using a fixed pool of worker threads.

Workers pull paths off one shared queue until it runs dry. Each file is read
whole into memory and owned by the worker that read it; counters are kept per
worker and merged once the pool has joined. Matches reach the reporter in
small batches as they are found, and an interrupt stops the workers after the
batch or file they are on.
"""

from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from queue import Empty, Queue
import threading
import time
from typing import Iterable, Iterator, Optional

from .errors import FileUnreadable, InvalidConfiguration
from .matcher import capture_window, iter_candidate_offsets, match_window
from .template import Template


@dataclass(frozen=True)
class Match:
    path: Path
    offset: int
    window: bytes


@dataclass
class RunAggregate:
    files_total: int = 0
    files_scanned: int = 0
    files_skipped: int = 0
    files_unreadable: int = 0
    files_with_matches: int = 0
    total_bytes: int = 0
    total_matches: int = 0
    elapsed: float = 0.0

    def absorb(self, other: 'RunAggregate'):
        self.files_scanned += other.files_scanned
        self.files_skipped += other.files_skipped
        self.files_unreadable += other.files_unreadable
        self.files_with_matches += other.files_with_matches
        self.total_bytes += other.total_bytes
        self.total_matches += other.total_matches


class ScanState(Enum):
    IDLE = 'idle'
    ENUMERATING = 'enumerating'
    SCANNING = 'scanning'
    DRAINED = 'drained'
    ABORTED = 'aborted'


class FileOutcome(Enum):
    SCANNED = 'scanned'
    TOO_SMALL = 'too small'
    UNREADABLE = 'unreadable'


class Reporter:
    """Receives scan events. Methods may be called from worker threads."""

    def scan_started(self, files_total: int):
        pass

    def matches_found(self, path: Path, matches: list[Match]):
        """A batch of matches from one file, in offset order.

        Called as often as needed per file; batches of one file arrive in order.
        """
        pass

    def file_done(self, path: Path, outcome: FileOutcome, error: BaseException = None):
        pass

    def summary(self, aggregate: RunAggregate):
        pass


class ScanTarget:
    def __init__(self, path: Path, data: bytes):
        self.path = path
        self.data = data

    @property
    def size(self) -> int:
        return len(self.data)

    @classmethod
    def load(cls, path: Path, min_size: int) -> Optional['ScanTarget']:
        """Reads the whole file, or returns None if it's shorter than min_size."""
        try:
            if path.stat().st_size < min_size:
                return None
            with open(path, 'rb') as file:
                data = file.read()
        except OSError as e:
            raise FileUnreadable(path, e) from e

        # file may have shrunk between stat and read
        if len(data) < min_size:
            return None
        return cls(path, data)


class Scanner:
    # matches handed to the reporter at a time
    BATCH_SIZE = 256

    def __init__(self, template: Template, workers: int = 1,
                 reporter: Reporter = None, vectorized: bool = True):
        if workers < 1:
            raise InvalidConfiguration(f'thread count must be at least 1, got {workers}')

        self.template = template
        self.workers = workers
        self.reporter = reporter or Reporter()
        self.vectorized = vectorized
        self.state = ScanState.IDLE
        self.aggregate: Optional[RunAggregate] = None
        self._stop = threading.Event()

    def run(self, paths: Iterable) -> RunAggregate:
        if self.state is not ScanState.IDLE:
            raise RuntimeError(f'scanner already used (state: {self.state.value})')

        self.state = ScanState.ENUMERATING
        queue: Queue = Queue()
        for path in paths:
            queue.put(Path(path))

        aggregate = RunAggregate(files_total=queue.qsize())
        self.reporter.scan_started(aggregate.files_total)

        self.state = ScanState.SCANNING
        started = time.perf_counter()

        with ThreadPoolExecutor(max_workers=self.workers) as pool:
            futures = [pool.submit(self._work, queue) for _ in range(self.workers)]
            try:
                wait(futures, return_when=FIRST_EXCEPTION)
                tallies = [future.result() for future in futures]
            except BaseException:
                # Ctrl-C or a failed worker: the others finish their current file and quit
                self._stop.set()
                self.state = ScanState.ABORTED
                raise

        for tally in tallies:
            aggregate.absorb(tally)
        aggregate.elapsed = time.perf_counter() - started

        self.state = ScanState.DRAINED
        self.aggregate = aggregate
        self.reporter.summary(aggregate)
        return aggregate

    def scan_file(self, path) -> list[Match]:
        """Matches in one file, in offset order. Raises FileUnreadable."""
        target = ScanTarget.load(Path(path), self.template.span)
        if target is None:
            return []
        return list(self.scan_target(target))

    def scan_target(self, target: ScanTarget) -> Iterator[Match]:
        """Yields matches in offset order as they are found."""
        template = self.template
        data = target.data

        if self.vectorized:
            offsets = iter_candidate_offsets(data, template)
        else:
            offsets = range(target.size - template.span + 1)

        for offset in offsets:
            if match_window(data, offset, template):
                yield Match(target.path, offset, capture_window(data, offset, template))

    def _work(self, queue: Queue) -> RunAggregate:
        tally = RunAggregate()
        while not self._stop.is_set():
            try:
                path = queue.get_nowait()
            except Empty:
                break
            self._process(path, tally)
        return tally

    def _process(self, path: Path, tally: RunAggregate):
        try:
            target = ScanTarget.load(path, self.template.span)
        except FileUnreadable as e:
            tally.files_unreadable += 1
            self.reporter.file_done(path, FileOutcome.UNREADABLE, e)
            return

        if target is None:
            tally.files_skipped += 1
            self.reporter.file_done(path, FileOutcome.TOO_SMALL)
            return

        found = 0
        batch = []
        for match in self.scan_target(target):
            batch.append(match)
            found += 1
            if len(batch) >= self.BATCH_SIZE:
                self.reporter.matches_found(path, batch)
                batch = []
                if self._stop.is_set():
                    break
        if batch:
            self.reporter.matches_found(path, batch)

        tally.files_scanned += 1
        tally.total_bytes += target.size
        tally.total_matches += found
        if found:
            tally.files_with_matches += 1

        self.reporter.file_done(path, FileOutcome.SCANNED)
