"""Filtering of tab-separated export lists against a list of ignore rules."""

import argparse
import json
import re
import sys
from dataclasses import dataclass
from enum import Enum

_ORDINAL = re.compile(r"\+?[0-9]+")


class EntryKind(Enum):
    IGNORE_ORDINAL = "@"
    ACCEPT_NAME = "+"
    IGNORE_NAME = "-"
    IGNORE_SYMBOL = "!"


@dataclass(frozen=True)
class IgnoreEntry:
    """One rule of an ignore list: an ordinal or a case-insensitive name pattern."""

    kind: EntryKind
    ordinal: int | None = None
    pattern: re.Pattern | None = None


def _parse_ordinal(text, what):
    if not _ORDINAL.fullmatch(text):
        raise ValueError(f"invalid {what} {text!r}")
    return int(text)


def parse_ignore_line(line):
    """Parse one line of an ignore list; return None for blank lines and comments."""
    trimmed = line.strip()
    if not trimmed or trimmed.startswith("#"):
        return None
    if trimmed.startswith("@"):
        return IgnoreEntry(EntryKind.IGNORE_ORDINAL, ordinal=_parse_ordinal(trimmed[1:], "ordinal"))

    mode = trimmed[0]
    if mode not in ("+", "-", "!"):
        raise ValueError(f"unknown line type {trimmed!r}")
    pattern = re.compile(f"^{trimmed[1:]}\\Z", re.IGNORECASE)
    return IgnoreEntry(EntryKind(mode), pattern=pattern)


def read_ignore_list(path):
    """Read all rules from an ignore-list file."""
    with open(path, encoding="utf-8") as handle:
        entries = (parse_ignore_line(line) for line in handle)
        return [entry for entry in entries if entry is not None]


def _split_export(line):
    pieces = line.rstrip("\r\n").split("\t")
    if len(pieces) < 3:
        raise ValueError(f"export line has fewer than three fields: {line!r}")
    path_parts = json.loads(pieces[0])
    if not isinstance(path_parts, list) or not all(isinstance(p, str) for p in path_parts):
        raise ValueError(f"path parts are not a list of strings: {pieces[0]!r}")
    filename = re.split(r"[/\\]", path_parts[-1])[-1] if path_parts else None
    ordinal = _parse_ordinal(pieces[1], "ordinal") if pieces[1] else None
    name = pieces[2] or None
    return filename, ordinal, name


def should_output(line, ignore_list):
    """Decide whether an export line passes; the first matching rule wins."""
    filename, ordinal, name = _split_export(line)
    for entry in ignore_list:
        if entry.kind is EntryKind.IGNORE_ORDINAL:
            if ordinal is not None and ordinal == entry.ordinal:
                return False
        elif entry.kind is EntryKind.IGNORE_SYMBOL:
            if name is not None and entry.pattern.search(name):
                return False
        elif filename is not None and entry.pattern.search(filename):
            return entry.kind is EntryKind.ACCEPT_NAME
    return True


def filter_exports(lines, ignore_list):
    """Yield the export lines, unchanged, that pass the ignore list."""
    for line in lines:
        if should_output(line, ignore_list):
            yield line


def main(argv=None):
    parser = argparse.ArgumentParser(description="Filter an export list through an ignore list.")
    parser.add_argument("exports_list")
    parser.add_argument("ignore_list")
    args = parser.parse_args(argv)

    ignore_list = read_ignore_list(args.ignore_list)
    with open(args.exports_list, encoding="utf-8", newline="") as exports:
        for line in filter_exports(exports, ignore_list):
            sys.stdout.write(line)
    return 0