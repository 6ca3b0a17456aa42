# playlang language package
# This package provides a validator and tree-walking interpreter for the playlang language.
from .errors import PlaylangError
from .interpreter import run_program, validate_program, Interpreter
from .parser import parse_program, tokenize
from .processor import process, ProcessResult

__all__ = [
    'run_program',
    'validate_program',
    'parse_program',
    'tokenize',
    'process',
    'ProcessResult',
    'Interpreter',
    'PlaylangError',
]
