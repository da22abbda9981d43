import curses
import sys
import unicodedata
from contextlib import contextmanager

RETURN_PROMPT = "\n[press Enter to return to callsh]"


def _printable(text):
    text = str(text).replace("\r\n", "\n").expandtabs()
    return "".join(
        ch for ch in text if ch == "\n" or unicodedata.category(ch) != "Cc"
    )


def _cell_width(ch):
    if unicodedata.combining(ch):
        return 0
    return 2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1


class TerminalRenderer:
    """Owns everything drawn below the prompt anchor.

    Drawing never relies on curses' implicit scrolling: whenever output needs a
    row past the bottom of the window the window is scrolled by one and the
    anchor row is moved up to follow the content.
    """

    def __init__(self, win, poll_timeout_ms=100, pause_after_suspend=True):
        self.win = win
        self.poll_timeout_ms = poll_timeout_ms
        self.pause_after_suspend = pause_after_suspend
        self.tty_in = sys.__stdin__
        self.tty_out = sys.__stdout__
        self.anchor = (0, 0)
        self.anchor_changed = True
        self._buffer_end = (0, 0)
        self.win.scrollok(True)

    # ---------- anchor ----------
    def reset_anchor(self):
        self.anchor = self.win.getyx()
        self.anchor_changed = True
        return self.anchor

    def _next_row(self, row):
        h, _ = self.win.getmaxyx()
        row += 1
        if row >= h:
            self.win.scroll(1)
            self.anchor = (self.anchor[0] - 1, self.anchor[1])
            row = h - 1
        return row

    def _put(self, row, x, text, attr=0):
        _, w = self.win.getmaxyx()
        n = w - 1 - x
        if row < 0 or n <= 0 or not text:
            return
        self.win.addnstr(row, x, text, n, attr)

    # ---------- command buffer ----------
    def render_buffer(self, buffer, prompt):
        h, w = self.win.getmaxyx()
        a_row, a_col = self.anchor
        if a_row >= 0:
            self.win.move(a_row, a_col)
        else:
            # first lines have scrolled off the top
            self.win.move(0, 0)
        self.win.clrtobot()

        row = a_row
        end_x = a_col
        for i, text in enumerate(buffer.lines):
            if i == 0:
                self._put(row, a_col, prompt + text)
                end_x = a_col + len(prompt) + len(text)
            else:
                row = self._next_row(row)
                self._put(row, 0, text)
                end_x = len(text)
        self._buffer_end = (row, min(end_x, w - 1))

        a_row, a_col = self.anchor
        y = a_row + buffer.line
        if buffer.line == 0:
            x = a_col + len(prompt) + buffer.col
        else:
            x = buffer.col
        self.win.move(max(0, min(y, h - 1)), max(0, min(x, w - 1)))
        self.win.refresh()
        self.anchor_changed = False
        return self.anchor

    def move_below_buffer(self):
        row, col = self._buffer_end
        self.win.move(max(0, row), col)

    # ---------- free-form output ----------
    def emit(self, text, attr=0):
        _, w = self.win.getmaxyx()
        row, col = self.win.getyx()
        for i, part in enumerate(_printable(text).split("\n")):
            if i > 0:
                row = self._next_row(row)
                col = 0
            # col counts screen cells, not characters
            x, chunk = col, ""
            for ch in part:
                width = _cell_width(ch)
                if col > 0 and col + width > w - 1:
                    if chunk:
                        self.win.addnstr(row, x, chunk, len(chunk), attr)
                    row = self._next_row(row)
                    x, col, chunk = 0, 0, ""
                chunk += ch
                col += width
            if chunk:
                self.win.addnstr(row, x, chunk, len(chunk), attr)
        self.win.move(row, min(col, w - 1))
        self.win.refresh()

    def newline(self):
        self.emit("\n")

    def emit_table(self, table):
        lines = table.render_lines()
        if not lines:
            return
        self.emit(lines[0], curses.A_BOLD)
        for line in lines[1:]:
            self.emit("\n" + line)

    def wait_for_return(self):
        if self.tty_in is None or self.tty_out is None:
            return
        self.tty_out.write(RETURN_PROMPT)
        self.tty_out.flush()
        self.tty_in.readline()

    # ---------- raw mode ----------
    @contextmanager
    def suspended(self):
        """Hand the real terminal to a child process.

        Raw mode, keypad and the poll timeout come back on every exit path.
        When the child finishes normally the terminal stays in cooked mode
        until Enter is pressed, so its output can be read before the window
        is cleared and the next prompt starts at the top.
        """
        try:
            curses.def_prog_mode()
        except curses.error:
            pass
        curses.endwin()
        try:
            yield
            if self.pause_after_suspend:
                self.wait_for_return()
        finally:
            curses.reset_prog_mode()
            curses.raw()
            self.win.keypad(True)
            self.win.timeout(self.poll_timeout_ms)
            self.win.clear()
            self.win.move(0, 0)
            self.win.refresh()
            self.anchor = (0, 0)
            self.anchor_changed = True
