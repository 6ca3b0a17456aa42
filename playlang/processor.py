"""Phase-by-phase processing of playlang source code.

`process` runs the phases a mode asks for (scan, parse, validate and
execute) and records which of them succeeded instead of raising. The first
error ends processing; the phase it belongs to and every later phase are
marked as failed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from lark import Token

from .ast import Program
from .errors import LexicalError, ParseError, PlaylangError, RuntimeFault
from .interpreter import Interpreter
from .parser import parse_program, tokenize


MODES = ('scan', 'parse', 'validate', 'execute', 'console')


@dataclass
class ProcessResult:
    lexical_ok: bool = True
    syntax_ok: bool = True
    semantic_ok: bool = True
    runtime_ok: bool = True
    tokens: List[Token] = field(default_factory=list)
    tree: Optional[Program] = None
    output: List[str] = field(default_factory=list)
    error_kind: Optional[str] = None
    error_message: Optional[str] = None
    location: Tuple[int, int] = (0, 0)

    @property
    def ok(self) -> bool:
        return self.lexical_ok and self.syntax_ok and self.semantic_ok and self.runtime_ok

    def fail(self, err: PlaylangError):
        self.error_kind = err.kind
        self.error_message = err.message
        self.location = err.location
        self.runtime_ok = False
        if isinstance(err, RuntimeFault):
            return
        self.semantic_ok = False
        if isinstance(err, (LexicalError, ParseError)):
            self.syntax_ok = False
        if isinstance(err, LexicalError):
            self.lexical_ok = False


def process(source: str, mode: str = 'execute', **options) -> ProcessResult:
    """Process source code up to the phase selected by `mode`.

    ``scan`` only tokenizes, ``parse`` also builds the tree, ``validate``
    checks it without running it, ``execute`` runs it, and ``console`` runs
    it in script mode where only the last statement prints. Extra keyword
    options are passed on to the `Interpreter`.
    """
    if mode not in MODES:
        raise ValueError(f"unknown processing mode {mode!r}, expected one of {', '.join(MODES)}")
    result = ProcessResult()
    interpreter = None
    try:
        result.tokens = tokenize(source)
        if mode == 'scan':
            return result
        result.tree = parse_program(source)
        if mode == 'parse':
            return result
        if mode == 'validate':
            Interpreter(**options).validate(result.tree)
            return result
        interpreter = Interpreter(script_mode=mode == 'console', **options)
        result.output = interpreter.run(result.tree)
    except PlaylangError as err:
        result.fail(err)
        if interpreter is not None:
            result.output = list(interpreter.output)
    return result
