# standard library
import json

from pathlib import Path

# relative
from .models import Bundle, SourceMap, TransformedModule

PRELUDE = """(function (modules, entries, globalRequire) {
    var cache = {};
    function load(id) {
        if (cache[id]) {
            return cache[id].exports;
        }
        var definition = modules[id];
        var module = cache[id] = { exports: {} };
        definition[0].call(module.exports, function (name) {
            if (Object.prototype.hasOwnProperty.call(definition[1], name)) {
                return load(definition[1][name]);
            }
            if (typeof globalRequire === "function") {
                return globalRequire(name);
            }
            throw new Error("Cannot find module '" + name + "'");
        }, module, module.exports);
        return module.exports;
    }
    for (var i = 0; i < entries.length; i++) {
        load(entries[i]);
    }
})({"""


def module_source_map(transformed: TransformedModule, root: Path) -> SourceMap:
    if transformed.source_map:
        return transformed.source_map
    module = transformed.module
    return {
        "version": 3,
        "sources": [relative_name(module.path, root)],
        "sourcesContent": [module.source],
        "names": [],
        "mappings": "",
    }


def relative_name(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root.resolve()).as_posix()
    except ValueError:
        return path.as_posix()


def concatenate(
    modules: list[TransformedModule],
    entries: list[Path],
    root: Path,
    filename: str,
) -> Bundle:
    """
    Wrap each transformed module in a function registered by id, and prepend a minimal CommonJS loader.

    The generated index source map (one section per module) references the upstream maps emitted by the
    transpiler.

    Parameters:
        modules: the transformed modules, dependencies first
        entries: the entry points, loaded in order at runtime (absent ones are skipped)
        root: folder used to express the sources' path in the source map
        filename: name of the generated file

    Return:
        The bundle.
    """
    ids = {m.module.path: m.module.id for m in modules}
    lines = PRELUDE.split("\n")
    sections = []
    for index, transformed in enumerate(modules):
        module = transformed.module
        lines.append(f"{module.id}: [function (require, module, exports) {{")
        sections.append(
            {
                "offset": {"line": len(lines), "column": 0},
                "map": module_source_map(transformed, root),
            }
        )
        lines.extend(transformed.code.rstrip("\n").split("\n"))
        mapping = {
            specifier: ids[path]
            for specifier, path in module.dependencies.items()
            if path in ids
        }
        separator = "," if index < len(modules) - 1 else ""
        lines.append(f"}}, {json.dumps(mapping)}]{separator}")

    entry_ids = [ids[e.resolve()] for e in entries if e.resolve() in ids]
    lines.append(
        f'}}, {json.dumps(entry_ids)}, typeof require === "function" ? require : null);'
    )

    return Bundle(
        code="\n".join(lines) + "\n",
        source_map={"version": 3, "file": filename, "sections": sections},
        modules=[m.module.path for m in modules],
    )
