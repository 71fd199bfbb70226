import pytest

from textsleuth.errors import InvalidConfiguration
from textsleuth.files import enumerate_files, parse_extensions


def test_parse_extensions():
    assert parse_extensions('sfd, .ADX,pvr,,') == ('sfd', 'adx', 'pvr')
    assert parse_extensions(None) == ()
    assert parse_extensions('') == ()


def test_single_file_ignores_filter(write_file):
    path = write_file('movie.sfd', b'\x00')
    assert list(enumerate_files(path, ignore=['sfd'])) == [path]


def test_recursive_walk(tmp_path, write_file):
    a = write_file('a.bin', b'')
    b = write_file('sub/b.bin', b'')
    c = write_file('sub/deeper/c.dat', b'')
    assert list(enumerate_files(tmp_path)) == [a, b, c]


def test_ignore_is_case_insensitive(tmp_path, write_file):
    keep = write_file('keep.bin', b'')
    write_file('voice.ADX', b'')
    write_file('sub/tex.pvr', b'')
    write_file('sub/notpvr', b'')
    found = list(enumerate_files(tmp_path, ignore=('adx', 'PVR')))
    assert found == [keep, tmp_path / 'sub' / 'notpvr']


def test_missing_root(tmp_path):
    with pytest.raises(InvalidConfiguration):
        enumerate_files(tmp_path / 'nowhere')
