from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

TAPE_LENGTH = 30000


def _zeroed_cells() -> np.ndarray:
    return np.zeros(TAPE_LENGTH, dtype=np.uint8)


@dataclass
class Tape:
    cells: np.ndarray = field(default_factory=_zeroed_cells)
    pointer: int = 0

    @property
    def current(self) -> int:
        return int(self.cells[self.pointer])

    def window(self, radius: int = 8) -> str:
        """Cells around the pointer, the current one bracketed."""
        start = max(0, self.pointer - radius)
        end = min(len(self.cells), self.pointer + radius + 1)
        parts = []
        for addr in range(start, end):
            val = int(self.cells[addr])
            parts.append(f"[{val}]" if addr == self.pointer else str(val))
        return f"@{start}: " + " ".join(parts)
