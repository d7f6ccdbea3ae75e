"""Conflict marker parsing, resolution sessions and the resolver."""

from conflux.conflict.parser import (
    ConflictHunk,
    ConflictRef,
    ParsedFile,
    Resolution,
    TextChunk,
    parse,
)
from conflux.conflict.session import ResolverSession

__all__ = [
    "ConflictHunk",
    "ConflictRef",
    "ParsedFile",
    "Resolution",
    "ResolverSession",
    "TextChunk",
    "parse",
]
