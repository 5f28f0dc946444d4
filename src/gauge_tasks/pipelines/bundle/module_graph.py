# standard library
import re

from pathlib import Path

# third parties
import pyparsing

# relative
from .models import SourceModule

require_regex = re.compile(r"""\brequire\s*\(\s*['"]([^'"]+)['"]\s*\)""")
import_regex = re.compile(
    r"""\b(?:import|export)\s+(?:[\w*{}\s,$]+\s+from\s+)?['"]([^'"]+)['"]"""
)

# Quoted strings are matched (and kept) first, so that e.g. '//' in a URL is not taken for a comment.
comments_stripper = (
    pyparsing.quotedString
    | pyparsing.QuotedString("`", esc_char="\\", multiline=True, unquote_results=False)
    | pyparsing.cppStyleComment.suppress()
)


class ModuleNotFound(RuntimeError):
    def __init__(self, specifier: str, importer: Path):
        self.specifier = specifier
        self.importer = importer
        super().__init__(f"Cannot find module '{specifier}' from '{importer}'")


def strip_comments(content: str) -> str:
    return comments_stripper.transformString(content)


def find_specifiers(content: str) -> list[str]:
    """
    Return the specifiers imported by a module (using `require` or `import`), in order of appearance.
    """
    code = strip_comments(content)
    matches = [
        (m.start(), m.group(1))
        for regex in [require_regex, import_regex]
        for m in regex.finditer(code)
    ]
    specifiers = []
    for _, specifier in sorted(matches):
        if specifier not in specifiers:
            specifiers.append(specifier)
    return specifiers


def is_relative(specifier: str) -> bool:
    return specifier.startswith("./") or specifier.startswith("../")


def resolve_specifier(specifier: str, importer: Path) -> Path:
    base = importer.parent / specifier
    candidates = [base, base.with_name(f"{base.name}.js"), base / "index.js"]
    resolved = next((c for c in candidates if c.is_file()), None)
    if not resolved:
        raise ModuleNotFound(specifier=specifier, importer=importer)
    return resolved.resolve()


def resolve_module_graph(entries: list[Path]) -> list[SourceModule]:
    """
    Resolve the graph of modules reachable from the entry points using relative imports, bare
    specifiers (packages) are left to the runtime.

    Parameters:
        entries: entry modules

    Return:
        The modules ordered dependencies first.
    """
    ids: dict[Path, int] = {}
    modules: dict[Path, SourceModule] = {}
    ordered: list[SourceModule] = []
    visiting: set[Path] = set()

    def visit(path: Path):
        if path in modules or path in visiting:
            # already processed, or an import cycle: CommonJS semantics handle it at runtime
            return
        visiting.add(path)
        ids.setdefault(path, len(ids) + 1)
        source = path.read_text(encoding="UTF-8")
        dependencies = {
            specifier: resolve_specifier(specifier, path)
            for specifier in find_specifiers(source)
            if is_relative(specifier)
        }
        for dependency in dependencies.values():
            ids.setdefault(dependency, len(ids) + 1)
        for dependency in dependencies.values():
            visit(dependency)
        module = SourceModule(
            id=ids[path], path=path, source=source, dependencies=dependencies
        )
        modules[path] = module
        ordered.append(module)
        visiting.discard(path)

    for entry in entries:
        if not entry.is_file():
            raise FileNotFoundError(f"Entry module '{entry}' not found")
        visit(entry.resolve())

    return ordered
