"""
Compiles a symbolic pattern like `A B C A` into a matchable template.

Each distinct token becomes an integer symbol, numbered in order of first
appearance. Tokens are only ever compared for equality, so any transcription
alphabet works (kana, full-width letters, whatever the script uses).
"""

from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path
import string

from .errors import InvalidConfiguration, InvalidTemplate, format_error


@dataclass(frozen=True)
class Template:
    symbols: tuple[int, ...]
    element_width: int
    wildcard_width: int = 0
    source: str = ''
    tokens: tuple[str, ...] = field(default=(), repr=False)

    @property
    def pattern_length(self) -> int:
        return len(self.symbols)

    @cached_property
    def unique_symbol_count(self) -> int:
        return len(set(self.symbols))

    @property
    def stride(self) -> int:
        return self.element_width + self.wildcard_width

    @property
    def span(self) -> int:
        return self.element_width + (self.pattern_length - 1) * self.stride

    @property
    def display_width(self) -> int:
        return self.span + self.wildcard_width

    @cached_property
    def positions(self) -> tuple[int, ...]:
        """Offsets of each element group relative to the window start."""
        return tuple(k * self.stride for k in range(self.pattern_length))

    @property
    def letters(self) -> str:
        return ' '.join(symbol_letter(s) for s in self.symbols)


def symbol_letter(symbol: int) -> str:
    """0 -> A, 25 -> Z, 26 -> AA, like spreadsheet columns"""
    letters = ''
    n = symbol + 1
    while n:
        n, rem = divmod(n - 1, 26)
        letters = string.ascii_uppercase[rem] + letters
    return letters


def normalize(text: str) -> str:
    return ' '.join(text.split())


def intern_tokens(tokens) -> tuple[int, ...]:
    table: dict[str, int] = {}
    return tuple(table.setdefault(token, len(table)) for token in tokens)


def compile_template(text: str, element_width: int, wildcard_width: int = 0) -> Template:
    if element_width < 1:
        raise InvalidConfiguration(
            f'character byte length must be greater than zero, got {element_width}')
    if wildcard_width < 0:
        raise InvalidConfiguration(
            f'wildcard count must be zero or greater, got {wildcard_width}')

    source = normalize(text)
    tokens = tuple(source.split(' ')) if source else ()
    if not tokens:
        raise InvalidTemplate('search pattern is empty')

    return Template(
        symbols=intern_tokens(tokens),
        element_width=element_width,
        wildcard_width=wildcard_width,
        source=source,
        tokens=tokens,
    )


def read_pattern_file(path: Path) -> str:
    """Returns the first line of a pattern file.

    The file is read as raw bytes and decoded leniently: undecodable bytes
    survive as surrogates so they still compare equal to themselves.
    """
    path = Path(path)
    if path.is_dir():
        raise InvalidTemplate(f'specified pattern file is a folder, cannot read: {path}')

    try:
        with open(path, 'rb') as f:
            line = f.readline()
    except OSError as e:
        raise InvalidTemplate(f'cannot read specified pattern file ({format_error(e)})') from e

    if line.startswith(b'\xef\xbb\xbf'):
        line = line[3:]
    return line.decode('utf8', errors='surrogateescape').rstrip('\r\n')
