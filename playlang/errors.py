from typing import Optional, Tuple


Location = Tuple[int, int]


class PlaylangError(Exception):
    """Base of every error raised while processing playlang code.

    Each error carries a human-readable message and the ``[start, end)``
    source offsets of the offending code, usable to highlight it.
    """
    kind = 'Error'

    def __init__(self, message: str, location: Optional[Location] = None):
        if location is None:
            location = (0, 0)
        super().__init__(f"{self.kind}: {message} at location {list(location)}")
        self.message = message
        self.location = location


class LexicalError(PlaylangError):
    """Source text contains characters no token matches."""
    kind = 'LexicalError'


class ParseError(PlaylangError):
    """Token stream does not match the grammar."""
    kind = 'SyntaxError'


class SemanticError(PlaylangError):
    """Base class for violations found by the validator."""
    kind = 'SemanticError'


class MissingDeclarationError(SemanticError):
    kind = 'MissingDeclarationError'


class UniquenessViolationError(SemanticError):
    kind = 'UniquenessViolationError'


class TypeMismatchError(SemanticError):
    kind = 'TypeMismatchError'


class OperatorMismatchError(SemanticError):
    kind = 'OperatorMismatchError'


class GrammarError(SemanticError):
    """Misplaced or unreachable break, ambiguous overload, missing operand."""
    kind = 'GrammarError'


class RuntimeFault(PlaylangError):
    """Base class for faults only detectable while executing."""
    kind = 'RuntimeFault'


class ArithmeticFault(RuntimeFault):
    kind = 'ArithmeticFault'


class ResourceExhaustionFault(RuntimeFault):
    """Loop iteration ceiling or call depth bound exceeded."""
    kind = 'ResourceExhaustionFault'
