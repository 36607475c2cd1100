"""
Exporter - Serialize stage results to text, CSV and XML.

A StageResult is one of:
- Tokens:        (token, ...)
- LemmaPairs:    ((text, lemma), ...)
- TaggedTokens:  ((text, pos, tag), ...)
- Entities:      ((text, label), ...)

The exporter is a pure projection; callers decide where output is written.
"""

import csv
import io
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, List, Tuple, Union
from xml.etree import ElementTree as ET

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'


class ExportFormat(Enum):
    """Closed set of export formats."""
    TEXT = "txt"
    CSV = "csv"
    XML = "xml"

    @property
    def extension(self) -> str:
        return self.value


@dataclass(frozen=True)
class Tokens:
    """Tokenizer output."""
    tokens: Tuple[str, ...]

    columns = ("text",)

    def records(self) -> List[Tuple[str, ...]]:
        return [(token,) for token in self.tokens]


@dataclass(frozen=True)
class LemmaPairs:
    """Lemmatizer output."""
    pairs: Tuple[Tuple[str, str], ...]

    columns = ("text", "lemma")

    def records(self) -> List[Tuple[str, ...]]:
        return [tuple(p) for p in self.pairs]


@dataclass(frozen=True)
class TaggedTokens:
    """POS tagger output."""
    tagged: Tuple[Tuple[str, str, str], ...]

    columns = ("text", "pos", "tag")

    def records(self) -> List[Tuple[str, ...]]:
        return [tuple(t) for t in self.tagged]


@dataclass(frozen=True)
class Entities:
    """Named entity recognizer output."""
    entities: Tuple[Tuple[str, str], ...]

    columns = ("text", "label")

    def records(self) -> List[Tuple[str, ...]]:
        return [tuple(e) for e in self.entities]


StageResult = Union[Tokens, LemmaPairs, TaggedTokens, Entities]


def _text_line(result: StageResult, record: Tuple[str, ...]) -> str:
    if isinstance(result, Tokens):
        return record[0]
    if isinstance(result, LemmaPairs):
        return f"{record[0]}: lemma:{record[1]}"
    if isinstance(result, TaggedTokens):
        return f"{record[0]}: pos:{record[1]}, tag:{record[2]}"
    return f"{record[0]}: label:{record[1]}"


def to_text(result: StageResult) -> str:
    """One human-readable line per record."""
    lines = [_text_line(result, record) for record in result.records()]
    return "\n".join(lines) + ("\n" if lines else "")


def to_csv(result: StageResult) -> str:
    """Header row, then one row per record."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(result.columns)
    writer.writerows(result.records())
    return buffer.getvalue()


def to_xml(result: StageResult) -> str:
    """
    <root> wrapping one <tokens token="..."> element per record.

    Every column after the first becomes a sub-element named after it.
    """
    root = ET.Element("root")
    for record in result.records():
        element = ET.SubElement(root, "tokens", {"token": record[0]})
        for name, value in zip(result.columns[1:], record[1:]):
            ET.SubElement(element, name).text = value
    ET.indent(root)
    return XML_DECLARATION + ET.tostring(root, encoding="unicode") + "\n"


_SERIALIZERS: Dict[ExportFormat, Callable[[StageResult], str]] = {
    ExportFormat.TEXT: to_text,
    ExportFormat.CSV: to_csv,
    ExportFormat.XML: to_xml,
}


def export(result: StageResult, fmt: ExportFormat) -> str:
    """
    Serialize a stage result.

    Args:
        result: Tokens, LemmaPairs, TaggedTokens or Entities
        fmt: ExportFormat member

    Returns:
        Serialized payload
    """
    if not isinstance(fmt, ExportFormat):
        raise ValueError(f"Unsupported format: {fmt!r}")
    return _SERIALIZERS[fmt](result)


def export_all(result: StageResult, formats: Iterable[ExportFormat]) -> Dict[ExportFormat, str]:
    """Serialize one result to several formats."""
    return {fmt: export(result, fmt) for fmt in formats}


def read_tokens(payload: str) -> Tuple[str, ...]:
    """Inverse of the text projection of Tokens: one token per line."""
    return tuple(line for line in payload.splitlines() if line.strip())
