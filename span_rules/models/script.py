"""Models for rule source buffers and their compiled form."""

from collections.abc import Sequence
from dataclasses import dataclass


@dataclass(kw_only=True)
class ScriptSource:
    """Source buffer registered with the compiler.

    The revision is bumped on every edit and lets callers tell whether a
    compile result still matches the buffer.
    """

    uri: str
    text: str
    revision: int = 0


@dataclass(frozen=True, kw_only=True)
class Diagnostic:
    """Compile-time error with its location in the source."""

    message: str
    line: int | None = None
    column: int | None = None

    def __str__(self) -> str:
        if self.line is None:
            return self.message
        if self.column is None:
            return f"line {self.line}: {self.message}"
        return f"line {self.line}, column {self.column}: {self.message}"


@dataclass(frozen=True, kw_only=True)
class CompiledArtifact:
    """Output of one compile invocation.

    An empty diagnostics list means the code is runnable.
    """

    uri: str
    revision: int
    source: str
    code: str
    diagnostics: Sequence[Diagnostic] = ()

    @property
    def ok(self) -> bool:
        return not self.diagnostics
