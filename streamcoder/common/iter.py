# streamcoder/common/iter.py
from __future__ import annotations

import codecs
import re
from typing import BinaryIO, Iterator

_LINE_BREAK = re.compile(r"[\r\n]")


def iter_lines(stream: BinaryIO, *, encoding: str = "utf-8", chunk_size: int = 4096) -> Iterator[str]:
    """
    Yield text lines from a binary stream as soon as their terminator arrives.

    Both '\\r' and '\\n' end a line and are not included; empty lines are
    skipped. Reads with read1() so a line is never held back waiting for a
    full chunk or for the byte after a trailing '\\r'.
    """
    decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
    read = getattr(stream, "read1", stream.read)
    carry = ""
    while True:
        chunk = read(chunk_size)
        if not chunk:
            break
        *lines, carry = _LINE_BREAK.split(carry + decoder.decode(chunk))
        for line in lines:
            if line:
                yield line
    carry += decoder.decode(b"", final=True)
    if carry:
        yield carry
