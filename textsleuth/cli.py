"""
usage: textsleuth --help

Brute-force search for text stored in an unknown fixed-width encoding.

Transcribe a known line of in-game text as a pattern, one token per character
(e.g. `A B C A`, or the characters themselves separated by spaces), and
textsleuth reports every offset where the bytes repeat the same way.
"""

import click  # pip install click
from rich.progress import Progress  # pip install rich

from . import __version__
from .config import ScanConfig
from .errors import SleuthError
from .files import enumerate_files
from .report import ConsoleReporter, console
from .scanner import Scanner
from .template import compile_template, read_pattern_file


@click.command(context_settings={
    'help_option_names': ['-h', '--help'],
    'auto_envvar_prefix': 'TEXTSLEUTH',
})
@click.option('--length', '-l', metavar='NUM',
              help='Encoded character byte length (e.g., 1, 2)')
@click.option('--pattern', '-p', metavar='FILE',
              help='Path of pattern file')
@click.option('--target', '-t', metavar='DIR_OR_FILE',
              help='Path of folder to recursively scan (or single file)')
@click.option('--wildcard', '-w', metavar='NUM',
              help='Number of wildcard bytes in between encoded characters (e.g., 1, 2)')
@click.option('--ignore', '-i', metavar='STR',
              help='Comma-separated list of file extensions to ignore (e.g., sfd,adx,pvr)')
@click.option('--threads', '-T', metavar='NUM',
              help='Number of files scanned in parallel; default: cores - 1')
@click.option('--progress/--no-progress', default=False,
              help='Show a progress bar while scanning')
@click.option('--verbose', '-v', is_flag=True,
              help='Report skipped and unreadable files')
@click.version_option(__version__, prog_name='TextSleuth')
@click.pass_context
def main(ctx, length, pattern, target, wildcard, ignore, threads, progress, verbose):
    """Scan binary files for text in an unknown fixed-width encoding."""
    reporter = ConsoleReporter(verbose=verbose)
    reporter.banner(__version__)

    try:
        config = ScanConfig.from_options(length=length, pattern=pattern, target=target,
                                         wildcard=wildcard, ignore=ignore, threads=threads)
        template = compile_template(read_pattern_file(config.pattern_path),
                                    config.element_width, config.wildcard_width)
        files = list(enumerate_files(config.target, config.ignore))
    except SleuthError as e:
        console.print(f'ERROR: {e}\n', markup=False)
        console.print(ctx.get_help(), markup=False)
        ctx.exit(1)

    reporter.header(template, len(files))

    if not progress:
        Scanner(template, workers=config.workers, reporter=reporter).run(files)
        return

    with Progress(console=console, transient=True) as bar:
        reporter = ConsoleReporter(verbose=verbose, progress=bar)
        Scanner(template, workers=config.workers, reporter=reporter).run(files)
