from click.testing import CliRunner
import pytest

from textsleuth import __version__
from textsleuth.cli import main


@pytest.fixture
def runner():
    return CliRunner()


def test_finds_wildcard_match(runner, write_file):
    pattern = write_file('pattern.txt', 'ち ち\n')
    target = write_file('game/script.bin', bytes.fromhex('14ed0014ed'))

    result = runner.invoke(main, ['-l', '2', '-w', '1', '-p', str(pattern),
                                  '-t', str(target.parent), '-T', '1'])

    assert result.exit_code == 0, result.output
    assert f'TextSleuth v{__version__}' in result.output
    assert '> Search pattern: ち ち' in result.output
    assert '(A A)' in result.output
    assert f'> {target}' in result.output
    assert '  - Offset 0x0 (decimal 0)' in result.output
    assert '    14ed0014ed' in result.output
    assert 'Found 1 match in 1 file.' in result.output
    assert 'Total scanned size: 5 bytes' in result.output


def test_ignored_extensions(runner, write_file):
    pattern = write_file('pattern.txt', 'A B A')
    target = write_file('game/voice.adx', b'aba')

    result = runner.invoke(main, ['-l', '1', '-p', str(pattern), '-t', str(target.parent),
                                  '-i', 'ADX', '-T', '1'])

    assert result.exit_code == 0, result.output
    assert 'against 0 files' in result.output
    assert 'Found 0 matches' in result.output


def test_env_vars(runner, write_file):
    pattern = write_file('pattern.txt', 'A A')
    target = write_file('a.bin', bytes.fromhex('0100000100'))

    result = runner.invoke(main, ['-l', '1', '-p', str(pattern), '-t', str(target), '-T', '1'],
                           env={'TEXTSLEUTH_WILDCARD': '2'})

    assert result.exit_code == 0, result.output
    assert 'Wildcard byte count: 2' in result.output
    assert 'Offset 0x0 (decimal 0)' in result.output
    assert 'Offset 0x1 (decimal 1)' in result.output


def test_progress_and_verbose(runner, write_file, tmp_path):
    pattern = write_file('pattern.txt', 'A B A')
    write_file('game/a.bin', b'aba')
    write_file('game/b.bin', b'ab')

    result = runner.invoke(main, ['-l', '1', '-p', str(pattern), '-t', str(tmp_path / 'game'),
                                  '--progress', '-v', '-T', '1'])

    assert result.exit_code == 0, result.output
    assert 'Found 1 match in 1 file.' in result.output
    assert 'skipped' in result.output


def test_no_options(runner):
    result = runner.invoke(main, [])
    assert result.exit_code == 1
    assert 'ERROR: no options specified' in result.output
    assert '--length' in result.output


def test_bad_length(runner, write_file):
    pattern = write_file('pattern.txt', 'A')
    result = runner.invoke(main, ['-l', 'two', '-p', str(pattern), '-t', str(pattern)])
    assert result.exit_code == 1
    assert 'character byte length is invalid' in result.output


def test_empty_pattern(runner, write_file):
    pattern = write_file('pattern.txt', '   \n')
    result = runner.invoke(main, ['-l', '1', '-p', str(pattern), '-t', str(pattern)])
    assert result.exit_code == 1
    assert 'search pattern is empty' in result.output


def test_missing_target(runner, write_file, tmp_path):
    pattern = write_file('pattern.txt', 'A')
    result = runner.invoke(main, ['-l', '1', '-p', str(pattern), '-t', str(tmp_path / 'nope')])
    assert result.exit_code == 1
    assert 'cannot read specified search path' in result.output


def test_version(runner):
    result = runner.invoke(main, ['--version'])
    assert result.exit_code == 0
    assert __version__ in result.output
