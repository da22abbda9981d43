import codecs
import curses


SUBMIT_KEYS = (0,)  # Ctrl+Space
INTERRUPT_KEYS = (3, 4)  # Ctrl+C, Ctrl+D
ENTER_KEYS = (10, 13, curses.KEY_ENTER)
BACKSPACE_KEYS = (curses.KEY_BACKSPACE, 127, 8)
TAB_WIDTH = 4


class CommandBuffer:
    def __init__(self):
        self.lines = [""]
        self.col = 0
        self.line = 0
        self.dirty = True
        self._utf8 = codecs.getincrementaldecoder("utf-8")(errors="replace")

    # ---------- state helpers ----------
    def reset(self):
        self.lines = [""]
        self.col = 0
        self.line = 0
        self.dirty = True

    def text(self):
        return "\n".join(self.lines)

    def set_text(self, text):
        self.lines = (text or "").split("\n")
        self.line = len(self.lines) - 1
        self.col = len(self.lines[self.line])
        self.dirty = True

    def is_empty(self):
        return not self.text().strip()

    @property
    def cursor(self):
        return self.col, self.line

    def _current(self):
        return self.lines[self.line]

    # ---------- edits ----------
    def insert_char(self, ch):
        if ch == "\n":
            cur = self._current()
            self.lines[self.line] = cur[: self.col]
            self.lines.insert(self.line + 1, cur[self.col :])
            self.line += 1
            self.col = 0
        else:
            cur = self._current()
            self.lines[self.line] = cur[: self.col] + ch + cur[self.col :]
            self.col += len(ch)
        self.dirty = True

    def delete_backward(self):
        if self.col > 0:
            cur = self._current()
            self.lines[self.line] = cur[: self.col - 1] + cur[self.col :]
            self.col -= 1
        elif self.line > 0:
            prev = self.lines[self.line - 1]
            self.lines[self.line - 1] = prev + self._current()
            del self.lines[self.line]
            self.line -= 1
            self.col = len(prev)
        else:
            return
        self.dirty = True

    def delete_forward(self):
        before = self.cursor
        self.move_right(wrap=True)
        if self.cursor != before:
            self.delete_backward()

    # ---------- motions ----------
    def move_left(self):
        if self.col > 0:
            self.col -= 1
            self.dirty = True

    def move_right(self, wrap=False):
        if self.col < len(self._current()):
            self.col += 1
            self.dirty = True
        elif wrap and self.line < len(self.lines) - 1:
            self.line += 1
            self.col = 0
            self.dirty = True

    def move_up(self):
        if self.line > 0:
            self.line -= 1
            self.col = min(self.col, len(self._current()))
            self.dirty = True

    def move_down(self):
        if self.line < len(self.lines) - 1:
            self.line += 1
            self.col = min(self.col, len(self._current()))
            self.dirty = True

    def move_line_start(self):
        self.col = 0
        self.dirty = True

    def move_line_end(self):
        self.col = len(self._current())
        self.dirty = True

    # ---------- input handling ----------
    def handle_key(self, ch):
        if ch in SUBMIT_KEYS:
            return "submit"
        if ch in INTERRUPT_KEYS:
            return "interrupt"

        if ch == 16:  # Ctrl+P
            return "history_prev"
        if ch == 14:  # Ctrl+N
            return "history_next"

        if ch in ENTER_KEYS:
            self.insert_char("\n")
            return None

        if ch == 9:  # Tab
            self.insert_char(" " * TAB_WIDTH)
            return None

        if ch in BACKSPACE_KEYS:
            self.delete_backward()
            return None

        if ch == curses.KEY_DC:
            self.delete_forward()
            return None

        if ch == curses.KEY_LEFT:
            self.move_left()
        elif ch == curses.KEY_RIGHT:
            self.move_right()
        elif ch == curses.KEY_UP:
            self.move_up()
        elif ch == curses.KEY_DOWN:
            self.move_down()
        elif ch in (curses.KEY_HOME, 1):  # Home or Ctrl+A
            self.move_line_start()
        elif ch in (curses.KEY_END, 5):  # End or Ctrl+E
            self.move_line_end()
        elif 32 <= ch <= 126:
            self._utf8.reset()
            self.insert_char(chr(ch))
        elif 128 <= ch <= 255:
            # getch hands over UTF-8 one byte at a time
            text = self._utf8.decode(bytes([ch]))
            if text:
                self.insert_char(text)

        return None
