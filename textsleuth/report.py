import threading
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.progress import Progress, TaskID

from .scanner import FileOutcome, Match, Reporter, RunAggregate
from .template import Template


console = Console(highlight=False, emoji=False, soft_wrap=True)


def sizeof_fmt(num, suffix='B'):
    for unit in ('', 'Ki', 'Mi', 'Gi', 'Ti', 'Pi', 'Ei', 'Zi'):
        if abs(num) < 1024.0:
            return f'{num:3.1f} {unit}{suffix}'
        num /= 1024.0
    return f'{num:.1f} Yi{suffix}'


def plural(count: int, word: str, suffix='s') -> str:
    return f'{count} {word}{"" if count == 1 else suffix}'


def printable(text: str) -> str:
    """Undecodable pattern bytes are kept as surrogates; make them safe to print."""
    return text.encode('utf8', errors='surrogateescape').decode('utf8', errors='replace')


def format_offset(offset: int) -> str:
    return f'Offset 0x{offset:X} (decimal {offset})'


class CollectingReporter(Reporter):
    """Keeps every match in memory, keyed by file."""

    def __init__(self):
        self._lock = threading.Lock()
        self.matches: dict[Path, list[Match]] = {}
        self.outcomes: dict[Path, FileOutcome] = {}
        self.aggregate: Optional[RunAggregate] = None

    def matches_found(self, path, matches):
        with self._lock:
            self.matches.setdefault(path, []).extend(matches)

    def file_done(self, path, outcome, error=None):
        with self._lock:
            self.outcomes[path] = outcome

    def summary(self, aggregate):
        self.aggregate = aggregate


class ConsoleReporter(Reporter):
    """Prints matches grouped under a `> path` header.

    Workers print in batches, so when batches from two files interleave the
    header is repeated for the file that resumes.
    """

    def __init__(self, console: Console = console, verbose: bool = False,
                 progress: Optional[Progress] = None):
        self.console = progress.console if progress else console
        self.verbose = verbose
        self.progress = progress
        self._task: Optional[TaskID] = None
        self._lock = threading.Lock()
        self._last_path: Optional[Path] = None

    def banner(self, version: str):
        self.console.print(f'\nTextSleuth v{version}\n')

    def header(self, template: Template, files_total: int):
        out = self.console
        out.print(f'> Character byte length: {template.element_width}\n')
        out.print(f'> Wildcard byte count: {template.wildcard_width}\n')
        out.print(f'> Search pattern: {printable(template.source)}', markup=False)
        out.print(f'  ({template.letters})\n')
        out.print(f'> Initiating scan process against {plural(files_total, "file")}...\n')

    def scan_started(self, files_total):
        if self.progress:
            self._task = self.progress.add_task('Scanning...', total=files_total)

    def matches_found(self, path, matches):
        lines = []
        for match in matches:
            lines.append(f'  - {format_offset(match.offset)}')
            lines.append(f'    {match.window.hex()}')

        with self._lock:
            if path != self._last_path:
                lines.insert(0, f'> {path}')
                self._last_path = path
            self.console.print('\n'.join(lines), markup=False)

    def file_done(self, path, outcome, error=None):
        if self.verbose and outcome is not FileOutcome.SCANNED:
            reason = str(error) if error else outcome.value
            self.console.log(f'skipped {path}: {reason}', markup=False)

        if self.progress and self._task is not None:
            self.progress.advance(self._task)

    def summary(self, aggregate):
        out = self.console
        if aggregate.total_matches:
            out.print()
        out.print(f'> Scan complete. Found {plural(aggregate.total_matches, "match", "es")}'
                  f' in {plural(aggregate.files_with_matches, "file")}.\n')
        out.print(f'> Total scanned size: {aggregate.total_bytes} bytes'
                  f' ({sizeof_fmt(aggregate.total_bytes)})\n')
        if self.verbose:
            out.print(f'> Skipped {plural(aggregate.files_skipped, "file")} too small to match,'
                      f' {aggregate.files_unreadable} unreadable\n')
        out.print(f'> Time elapsed: {aggregate.elapsed:.2f} seconds\n')
