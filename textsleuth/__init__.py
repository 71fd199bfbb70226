"""
Brute-force search for unknown fixed-width text encodings in binary files.
"""

__version__ = '1.0.0'

from .errors import FileUnreadable, InvalidConfiguration, InvalidTemplate, SleuthError
from .template import Template, compile_template, read_pattern_file
from .matcher import candidate_offsets, match_window
from .scanner import Match, Reporter, RunAggregate, Scanner

__all__ = [
    'FileUnreadable',
    'InvalidConfiguration',
    'InvalidTemplate',
    'SleuthError',
    'Template',
    'compile_template',
    'read_pattern_file',
    'candidate_offsets',
    'match_window',
    'Match',
    'Reporter',
    'RunAggregate',
    'Scanner',
]
