import os
from typing import List, Optional


def _encode(entry: str) -> str:
    return entry.replace("\\", "\\\\").replace("\n", "\\n")


def _decode(line: str) -> str:
    out = []
    i = 0
    while i < len(line):
        ch = line[i]
        if ch == "\\" and i + 1 < len(line):
            nxt = line[i + 1]
            out.append("\n" if nxt == "n" else nxt)
            i += 2
            continue
        out.append(ch)
        i += 1
    return "".join(out)


class HistoryManager:
    def __init__(self, history_path: str, max_items: int = 100):
        self.history_path = history_path
        self.max_items = max_items
        self.history: List[str] = []
        self.position: Optional[int] = None  # None means not navigating history

    def load(self) -> List[str]:
        if os.path.exists(self.history_path):
            try:
                with open(self.history_path, 'r', encoding='utf-8') as f:
                    data = [_decode(l.rstrip('\n')) for l in f if l.strip()]
                self.history = data[-self.max_items:]
                return self.history
            except OSError:
                self.history = []
                return self.history

        # No history; create empty file best-effort
        try:
            with open(self.history_path, 'w', encoding='utf-8') as f:
                f.write('')
        except OSError:
            pass
        self.history = []
        return self.history

    def append(self, entry: str) -> None:
        self.position = None
        if not entry:
            return
        self.history.append(entry)
        if len(self.history) > self.max_items:
            self.history = self.history[-self.max_items:]

    def persist(self, entry: str) -> None:
        if not entry:
            return
        try:
            with open(self.history_path, 'a', encoding='utf-8') as f:
                f.write(_encode(entry) + '\n')
        except OSError:
            pass

    # ---------- navigation ----------
    def previous(self) -> Optional[str]:
        if not self.history:
            return None
        if self.position is None:
            self.position = len(self.history) - 1
        else:
            self.position = max(0, self.position - 1)
        return self.history[self.position]

    def next(self) -> str:
        """Newer entry, or an empty string once past the newest."""
        if self.position is None:
            return ""
        self.position += 1
        if self.position >= len(self.history):
            self.position = None
            return ""
        return self.history[self.position]

    @property
    def items(self) -> List[str]:
        return list(self.history)
