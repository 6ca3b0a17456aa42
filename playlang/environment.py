from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from .ast import FunctionDef
from .errors import GrammarError, Location, MissingDeclarationError, UniquenessViolationError
from .types import TypeSpec, Value, default_value


@dataclass
class Declaration:
    """A declared variable or parameter and its current value."""
    identifier: str
    declared_type: TypeSpec
    current_value: Optional[Value] = None
    default_value: Optional[Value] = None

    def __post_init__(self):
        if self.default_value is None:
            self.default_value = default_value(self.declared_type)
        if self.current_value is None:
            self.current_value = self.default_value

    def reset(self):
        self.current_value = self.default_value


@dataclass
class FunctionSignature:
    identifier: str
    return_type: TypeSpec
    param_types: Tuple[TypeSpec, ...]
    node: Optional[FunctionDef] = field(default=None, compare=False)

    @property
    def arity(self) -> int:
        return len(self.param_types)

    def __repr__(self) -> str:
        params = ', '.join(repr(t) for t in self.param_types)
        return f"{self.return_type!r} {self.identifier}({params})"


class ScopeManager:
    """Stack of variable frames plus one flat function table.

    The last frame of `frames` is the innermost one. Functions are not
    nested; they are keyed by identifier and parameter count.
    """
    def __init__(self):
        self.frames: List[Dict[str, Declaration]] = []
        self.functions: List[FunctionSignature] = []

    @property
    def depth(self) -> int:
        return len(self.frames)

    def open_scope(self):
        self.frames.append({})

    def close_scope(self):
        self.frames.pop()

    @contextmanager
    def scope(self) -> Iterator[Dict[str, Declaration]]:
        """Open a frame for the duration of a block, closing it on every exit path."""
        self.open_scope()
        try:
            yield self.frames[-1]
        finally:
            self.close_scope()

    @contextmanager
    def call_frame(self) -> Iterator[Dict[str, Declaration]]:
        """Run a function body on the global frame plus a fresh frame.

        Functions are only defined at the top level, so their bodies see the
        global declarations but never the locals of the caller.
        """
        saved = self.frames
        self.frames = saved[:1]
        self.open_scope()
        try:
            yield self.frames[-1]
        finally:
            self.frames = saved

    def ensure_undeclared(self, identifier: str, location: Optional[Location] = None):
        if self.frames and identifier in self.frames[-1]:
            raise UniquenessViolationError(f"variable identifier <{identifier}> is already defined", location)

    def declare(self, decl: Declaration, location: Optional[Location] = None) -> Declaration:
        self.ensure_undeclared(decl.identifier, location)
        self.frames[-1][decl.identifier] = decl
        return decl

    def lookup(self, identifier: str, location: Optional[Location] = None) -> Declaration:
        for frame in reversed(self.frames):
            if identifier in frame:
                return frame[identifier]
        raise MissingDeclarationError(f"declaration <{identifier}> was never instantiated", location)

    def declare_function(self, sig: FunctionSignature, location: Optional[Location] = None) -> FunctionSignature:
        for existing in self.functions:
            if existing.identifier != sig.identifier or existing.arity != sig.arity:
                continue
            if existing == sig:
                raise UniquenessViolationError(f"function <{sig!r}> is already defined", location)
            raise GrammarError(f"function <{sig!r}> cannot be defined as it conflicts with <{existing!r}>", location)
        self.functions.append(sig)
        return sig

    def resolve_function(self, identifier: str, arity: int, location: Optional[Location] = None) -> FunctionSignature:
        for sig in self.functions:
            if sig.identifier == identifier and sig.arity == arity:
                return sig
        raise MissingDeclarationError(f"function <{identifier}> with {arity} parameter(s) was never defined", location)
