from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

UNMATCHED_OPEN = 'unmatched_open'
UNMATCHED_CLOSE = 'unmatched_close'

_KIND_MESSAGES = {
    UNMATCHED_OPEN: 'unmatched opening bracket',
    UNMATCHED_CLOSE: 'unmatched closing bracket',
}


def _build_context(lines: List[str], line_no_1: int, column: int = 0, *, context: int = 2) -> str:
    if not lines:
        return ''
    idx = min(max(1, line_no_1), len(lines))
    start = max(1, idx - context)
    end = min(len(lines), idx + context)

    out: List[str] = []
    for i in range(start, end + 1):
        text = lines[i - 1].rstrip('\r\n')
        prefix = '>' if i == idx else ' '
        out.append(f"{prefix} {i:4d} | {text}")
        if i == idx and column > 0:
            out.append(f"       | {' ' * (column - 1)}^")
    return "\n".join(out)


def _hint_for(kind: str) -> Optional[str]:
    if kind == UNMATCHED_OPEN:
        return 'Every "[" needs a matching "]" later in the source.'
    if kind == UNMATCHED_CLOSE:
        return 'This "]" has no "[" before it. Remove it or add the missing "[".'
    return None


@dataclass
class BFError(Exception):
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass
class BFCompileError(BFError):
    kind: str
    line: int
    column: int
    context: str


@dataclass
class BFMemoryError(BFError):
    pointer: int
    pc: int


def make_compile_error(*, kind: str, lines: List[str], line: int, column: int) -> BFCompileError:
    ctx = _build_context(lines, line, column)
    hint = _hint_for(kind)
    ctx_block = f"\n{ctx}" if ctx else ""
    hint_block = f"\nHint: {hint}" if hint else ""
    return BFCompileError(
        message=f"CompileError: {_KIND_MESSAGES[kind]} (line {line}, column {column}){ctx_block}{hint_block}",
        kind=kind,
        line=line,
        column=column,
        context=ctx,
    )


def make_memory_error(*, pointer: int, pc: int, tape_length: int) -> BFMemoryError:
    return BFMemoryError(
        message=(
            f"RuntimeError: memory access violation: pointer moved to {pointer}, "
            f"outside [0, {tape_length}) (instruction {pc})"
        ),
        pointer=pointer,
        pc=pc,
    )
