"""
Window matching: decides whether the bytes at one offset fit a template.

A window matches when the template's symbols can be mapped onto the window's
byte groups one-to-one: repeated symbols see identical groups and distinct
symbols see distinct groups. Wildcard bytes between groups are never read.
"""

from typing import Iterator, Optional

import numpy  # pip install numpy

from .template import Template


# offsets examined per vectorized pass
CHUNK_SIZE = 1 << 16


def extract_groups(buffer: bytes, offset: int, template: Template) -> list[bytes]:
    width = template.element_width
    return [bytes(buffer[offset + pos:offset + pos + width]) for pos in template.positions]


def fast_reject(groups: list[bytes], template: Template) -> bool:
    """True if the window can't possibly match.

    A valid assignment pairs distinct symbols with distinct groups, so the
    counts of both have to agree. Cheap, and it throws away nearly every
    offset in real data.
    """
    return len(set(groups)) != template.unique_symbol_count


def validate_groups(groups: list[bytes], template: Template) -> bool:
    bound: dict[int, bytes] = {}
    for symbol, group in zip(template.symbols, groups):
        if bound.setdefault(symbol, group) != group:
            return False
    return True


def match_window(buffer: bytes, offset: int, template: Template) -> bool:
    if offset < 0 or offset + template.span > len(buffer):
        raise ValueError(f'window at {offset} overruns buffer of {len(buffer)} bytes '
                         f'(span {template.span})')

    groups = extract_groups(buffer, offset, template)
    if fast_reject(groups, template):
        return False
    return validate_groups(groups, template)


def capture_window(buffer: bytes, offset: int, template: Template) -> bytes:
    """Bytes shown for a match, including a trailing wildcard if the file has it."""
    return bytes(buffer[offset:offset + template.display_width])


def constraints(template: Template) -> list[tuple[int, int, bool]]:
    """
    Reduces a template to pairwise group comparisons.

    Returns (pos_a, pos_b, equal) triples of byte positions within the window.
    Consecutive occurrences of one symbol must be equal (equality chains),
    and the first occurrences of two different symbols must differ. Together
    these accept exactly the windows that match_window accepts.
    """
    positions = template.positions
    last_seen: dict[int, int] = {}
    firsts: list[int] = []
    pairs = []

    for pos, symbol in zip(positions, template.symbols):
        if symbol in last_seen:
            pairs.append((last_seen[symbol], pos, True))
        else:
            firsts.append(pos)
        last_seen[symbol] = pos

    for i, pos_a in enumerate(firsts):
        for pos_b in firsts[i + 1:]:
            pairs.append((pos_a, pos_b, False))

    return pairs


def candidate_offsets(buffer: bytes, template: Template,
                      start: int = 0, stop: Optional[int] = None) -> numpy.ndarray:
    """
    Offsets in [start, stop) where a full window could match, vectorized.

    Working memory is a few bool arrays the length of the offset range, no
    matter how long the template is.
    """
    data = numpy.frombuffer(buffer, dtype=numpy.uint8)
    last = len(data) - template.span + 1
    stop = last if stop is None else min(stop, last)
    start = max(start, 0)
    count = stop - start
    if count <= 0:
        return numpy.empty(0, dtype=numpy.intp)

    width = template.element_width
    mask = numpy.ones(count, dtype=bool)
    same = numpy.empty(count, dtype=bool)
    scratch = numpy.empty(count, dtype=bool)

    for pos_a, pos_b, equal in constraints(template):
        for t in range(width):
            a = start + pos_a + t
            b = start + pos_b + t
            if t == 0:
                numpy.equal(data[a:a + count], data[b:b + count], out=same)
            else:
                numpy.equal(data[a:a + count], data[b:b + count], out=scratch)
                same &= scratch

        if not equal:
            numpy.logical_not(same, out=same)
        mask &= same

        if not mask.any():
            break

    offsets = numpy.flatnonzero(mask)
    offsets += start
    return offsets


def iter_candidate_offsets(buffer: bytes, template: Template,
                           chunk_size: int = CHUNK_SIZE) -> Iterator[int]:
    """candidate_offsets over the whole buffer, one chunk of offsets at a time."""
    total = len(buffer) - template.span + 1
    for start in range(0, max(total, 0), chunk_size):
        for offset in candidate_offsets(buffer, template, start, start + chunk_size):
            yield int(offset)
