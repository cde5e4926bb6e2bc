"""Compile rule scripts into plain executable Python."""

import ast
import asyncio
import logging
from collections.abc import MutableMapping
from dataclasses import dataclass, field

from span_rules.errors import NotReadyError
from span_rules.models.script import CompiledArtifact, Diagnostic, ScriptSource

log = logging.getLogger(__name__)


class AnnotationStripper(ast.NodeTransformer):
    """Lower annotated source to code that runs without the annotated names.

    Rule scripts annotate with ``Span`` and ``Trace``, which only exist for
    the reader, so annotations are removed rather than evaluated.
    """

    def _strip_arguments(self, args: ast.arguments) -> None:
        for arg in (*args.posonlyargs, *args.args, *args.kwonlyargs):
            arg.annotation = None
        if args.vararg:
            args.vararg.annotation = None
        if args.kwarg:
            args.kwarg.annotation = None

    def visit_FunctionDef(self, node: ast.FunctionDef) -> ast.AST:
        self._strip_arguments(node.args)
        node.returns = None
        self.generic_visit(node)
        return node

    def visit_AsyncFunctionDef(self, node: ast.AsyncFunctionDef) -> ast.AST:
        self._strip_arguments(node.args)
        node.returns = None
        self.generic_visit(node)
        return node

    def visit_AnnAssign(self, node: ast.AnnAssign) -> ast.AST | None:
        if node.value is None:
            return None
        assign = ast.Assign(targets=[node.target], value=node.value)
        return ast.copy_location(assign, node)

    def generic_visit(self, node: ast.AST) -> ast.AST:
        super().generic_visit(node)
        # Dropping annotated declarations can leave a block empty.
        body = getattr(node, "body", None)
        if isinstance(body, list) and not body:
            body.append(ast.Pass())
        if isinstance(node, ast.Try) and not node.handlers and not node.finalbody:
            node.finalbody.append(ast.Pass())
        return node


def _diagnostic_from(err: SyntaxError) -> Diagnostic:
    return Diagnostic(message=err.msg, line=err.lineno, column=err.offset)


def lower(text: str, filename: str) -> tuple[str, list[Diagnostic]]:
    """Parse, check and lower source text.

    Returns:
        The lowered code and the diagnostics; the code is empty when there
        are diagnostics.

    """
    try:
        tree = ast.parse(text, filename=filename)
        # Errors like "'return' outside function" are only reported by compile().
        compile(tree, filename, "exec", dont_inherit=True)
        lowered = ast.fix_missing_locations(AnnotationStripper().visit(tree))
        return ast.unparse(lowered) + "\n", []
    except SyntaxError as err:
        return "", [_diagnostic_from(err)]
    except (ValueError, RecursionError, MemoryError) as err:
        # Pathological input, e.g. expressions nested too deeply for the parser
        return "", [
            Diagnostic(
                message=f"Source cannot be compiled: {type(err).__name__}: {err}"
            )
        ]


@dataclass(kw_only=True)
class ScriptCompiler:
    """Registry of source buffers and compiler for them."""

    _sources: MutableMapping[str, ScriptSource] = field(
        default_factory=dict, repr=False
    )

    def register(self, uri: str, text: str) -> ScriptSource:
        """Register a buffer, replacing any buffer with the same uri."""
        source = ScriptSource(uri=uri, text=text)
        self._sources[uri] = source
        log.debug("Registered script %s", uri)
        return source

    def update(self, uri: str, text: str) -> ScriptSource:
        """Replace the text of a registered buffer and bump its revision."""
        source = self.get_source(uri)
        source.text = text
        source.revision += 1
        return source

    def unregister(self, uri: str) -> None:
        self._sources.pop(uri, None)
        log.debug("Unregistered script %s", uri)

    def is_registered(self, uri: str) -> bool:
        return uri in self._sources

    def get_source(self, uri: str) -> ScriptSource:
        """Return the registered buffer.

        Raises:
            NotReadyError: If no buffer is registered under the uri

        """
        if (source := self._sources.get(uri)) is None:
            raise NotReadyError(f"Script '{uri}' is not registered with the compiler")
        return source

    async def compile(self, uri: str) -> CompiledArtifact:
        """Compile the current text of a registered buffer.

        Source defects are reported as diagnostics on the artifact, never
        raised.

        Raises:
            NotReadyError: If no buffer is registered under the uri

        """
        source = self.get_source(uri)
        text, revision = source.text, source.revision

        log.info("Compiling script %s (revision %d)", uri, revision)
        code, diagnostics = await asyncio.to_thread(lower, text, uri)
        if diagnostics:
            log.info(
                "Compilation of %s produced %d diagnostic(s)", uri, len(diagnostics)
            )

        return CompiledArtifact(
            uri=uri,
            revision=revision,
            source=text,
            code=code,
            diagnostics=tuple(diagnostics),
        )
