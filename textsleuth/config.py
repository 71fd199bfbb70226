from dataclasses import dataclass
import os
from pathlib import Path
import re
from typing import Optional

from .errors import InvalidConfiguration
from .files import parse_extensions


def cpu_count() -> int:
    return os.cpu_count() or 1


def default_workers() -> int:
    """One core is left free for the rest of the machine."""
    return max(1, cpu_count() - 1)


def describe_bounds(minimum: int, maximum: Optional[int] = None) -> str:
    if maximum is not None:
        return f'whole number between {minimum} and {maximum}'
    if minimum == 0:
        return 'whole number zero or greater'
    if minimum == 1:
        return 'whole number greater than zero'
    return f'whole number {minimum} or greater'


def parse_count(value, name: str, minimum: int = 0, maximum: Optional[int] = None) -> int:
    """Parses a non-negative whole number given on the command line."""
    invalid = InvalidConfiguration(f'specified {name} is invalid, must be '
                                   f'{describe_bounds(minimum, maximum)}')

    if isinstance(value, bool):
        raise invalid

    if isinstance(value, int):
        number = value
    else:
        text = str(value).strip()
        if not re.fullmatch(r'\d+', text):
            raise invalid
        number = int(text)

    if number < minimum or (maximum is not None and number > maximum):
        raise invalid
    return number


@dataclass(frozen=True)
class ScanConfig:
    element_width: int
    pattern_path: Path
    target: Path
    wildcard_width: int = 0
    workers: int = 1
    ignore: tuple[str, ...] = ()

    @classmethod
    def from_options(cls, length=None, pattern=None, target=None,
                     wildcard=None, ignore=None, threads=None):
        if length is None and pattern is None and target is None:
            raise InvalidConfiguration('no options specified')
        if length is None:
            raise InvalidConfiguration('character byte length is required (-l)')
        if pattern is None:
            raise InvalidConfiguration('pattern file is required (-p)')
        if target is None:
            raise InvalidConfiguration('search path is required (-t)')

        cores = cpu_count()

        return cls(
            element_width=parse_count(length, 'character byte length', minimum=1),
            wildcard_width=parse_count(0 if wildcard is None else wildcard,
                                       'wildcard count', minimum=0),
            workers=(default_workers() if threads is None
                     else parse_count(threads, 'thread count', minimum=1, maximum=cores)),
            pattern_path=Path(pattern),
            target=Path(target),
            ignore=parse_extensions(ignore),
        )
