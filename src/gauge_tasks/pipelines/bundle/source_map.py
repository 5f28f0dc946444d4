# standard library
from collections.abc import Iterable

# relative
from .models import SourceMap

BASE64_DIGITS = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
BASE64_VALUES = {digit: value for value, digit in enumerate(BASE64_DIGITS)}
VLQ_SHIFT = 5
VLQ_MASK = (1 << VLQ_SHIFT) - 1
VLQ_CONTINUATION = 1 << VLQ_SHIFT

Segment = tuple[int, ...]
"""
A decoded mapping segment with absolute values:
`(column,)`, `(column, source, line, source_column)` or `(column, source, line, source_column, name)`.
"""


def encode_vlq(value: int) -> str:
    vlq = ((-value) << 1) | 1 if value < 0 else value << 1
    encoded = ""
    while True:
        digit = vlq & VLQ_MASK
        vlq >>= VLQ_SHIFT
        if vlq:
            digit |= VLQ_CONTINUATION
        encoded += BASE64_DIGITS[digit]
        if not vlq:
            return encoded


def decode_vlq(text: str) -> list[int]:
    values = []
    value = shift = 0
    for char in text:
        if char not in BASE64_VALUES:
            raise ValueError(f"Invalid base64 VLQ digit '{char}' in '{text}'")
        digit = BASE64_VALUES[char]
        value += (digit & VLQ_MASK) << shift
        if digit & VLQ_CONTINUATION:
            shift += VLQ_SHIFT
            continue
        values.append(-(value >> 1) if value & 1 else value >> 1)
        value = shift = 0
    if shift:
        raise ValueError(f"Truncated base64 VLQ '{text}'")
    return values


def decode_mappings(mappings: str) -> list[list[Segment]]:
    """
    Decode the `mappings` field of a regular source map, one list of segments per generated line.
    """
    lines = []
    source = source_line = source_column = name = 0
    for line in mappings.split(";"):
        column = 0
        segments = []
        for field in filter(None, line.split(",")):
            values = decode_vlq(field)
            if len(values) not in (1, 4, 5):
                raise ValueError(f"Invalid mapping segment '{field}'")
            column += values[0]
            if len(values) == 1:
                segments.append((column,))
                continue
            source += values[1]
            source_line += values[2]
            source_column += values[3]
            if len(values) == 4:
                segments.append((column, source, source_line, source_column))
                continue
            name += values[4]
            segments.append((column, source, source_line, source_column, name))
        lines.append(segments)
    return lines


def encode_mappings(lines: Iterable[list[Segment]]) -> str:
    previous = [0, 0, 0, 0, 0]
    encoded_lines = []
    for segments in lines:
        previous[0] = 0
        fields = []
        for segment in sorted(segments):
            fields.append(
                "".join(encode_vlq(v - previous[i]) for i, v in enumerate(segment))
            )
            previous[: len(segment)] = segment
        encoded_lines.append(",".join(fields))
    return ";".join(encoded_lines)


def flatten_index_map(index_map: SourceMap) -> SourceMap:
    """
    Merge the sections of an index source map into a regular source map.

    Sources and names of the sections are appended in order, the segments are moved to the generated
    position given by the section's offset. A map without `sections` is returned as is.
    """
    if "sections" not in index_map:
        return index_map

    sources: list[str] = []
    contents: list[str | None] = []
    names: list[str] = []
    lines: list[list[Segment]] = []
    for section in index_map["sections"]:
        section_map = flatten_index_map(section["map"])
        offset_line = section["offset"]["line"]
        offset_column = section["offset"]["column"]
        source_base, name_base = len(sources), len(names)

        root = section_map.get("sourceRoot") or ""
        if root and not root.endswith("/"):
            root += "/"
        section_sources = [f"{root}{s}" for s in section_map.get("sources", [])]
        section_contents = list(section_map.get("sourcesContent") or [])
        sources.extend(section_sources)
        contents.extend(
            section_contents[: len(section_sources)]
            + [None] * (len(section_sources) - len(section_contents))
        )
        names.extend(section_map.get("names", []))

        for index, segments in enumerate(
            decode_mappings(section_map.get("mappings", ""))
        ):
            target = offset_line + index
            lines.extend([] for _ in range(target + 1 - len(lines)))
            for segment in segments:
                column = segment[0] + (offset_column if index == 0 else 0)
                moved = (column,)
                if len(segment) > 1:
                    moved += (segment[1] + source_base, segment[2], segment[3])
                if len(segment) > 4:
                    moved += (segment[4] + name_base,)
                lines[target].append(moved)

    flat: SourceMap = {"version": 3}
    if index_map.get("file"):
        flat["file"] = index_map["file"]
    flat.update({"sources": sources, "names": names, "mappings": encode_mappings(lines)})
    if any(c is not None for c in contents):
        flat["sourcesContent"] = contents
    return flat
