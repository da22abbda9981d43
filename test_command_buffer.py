import curses
import unittest

from command_buffer import CommandBuffer


def _buffer(text, col=None, line=None):
    buf = CommandBuffer()
    buf.set_text(text)
    if line is not None:
        buf.line = line
    if col is not None:
        buf.col = col
    return buf


def _in_range(buf):
    return 0 <= buf.line < len(buf.lines) and 0 <= buf.col <= len(buf.lines[buf.line])


class CommandBufferEditTests(unittest.TestCase):
    def test_insert_char_at_cursor(self):
        buf = _buffer("ac", col=1)
        buf.insert_char("b")
        self.assertEqual(buf.text(), "abc")
        self.assertEqual(buf.cursor, (2, 0))

    def test_line_break_splits_line_and_moves_to_next_line_start(self):
        buf = _buffer("abcd", col=2)
        buf.insert_char("\n")
        self.assertEqual(buf.lines, ["ab", "cd"])
        self.assertEqual(buf.cursor, (0, 1))

    def test_line_break_then_backspace_restores_content_and_cursor(self):
        for col in range(len("hello") + 1):
            buf = _buffer("hello", col=col)
            buf.insert_char("\n")
            buf.delete_backward()
            self.assertEqual(buf.lines, ["hello"])
            self.assertEqual(buf.cursor, (col, 0))

    def test_delete_backward_joins_onto_previous_line(self):
        buf = _buffer("abc\nde", col=0, line=1)
        buf.delete_backward()
        self.assertEqual(buf.lines, ["abcde"])
        self.assertEqual(buf.cursor, (3, 0))

    def test_delete_backward_at_origin_is_noop(self):
        buf = _buffer("abc", col=0, line=0)
        buf.dirty = False
        buf.delete_backward()
        self.assertEqual(buf.text(), "abc")
        self.assertEqual(buf.cursor, (0, 0))
        self.assertFalse(buf.dirty)

    def test_delete_forward_at_line_end_joins_next_line(self):
        buf = _buffer("ab\ncd", col=2, line=0)
        buf.delete_forward()
        self.assertEqual(buf.lines, ["abcd"])
        self.assertEqual(buf.cursor, (2, 0))

    def test_delete_forward_at_buffer_end_is_noop(self):
        buf = _buffer("ab")
        buf.delete_forward()
        self.assertEqual(buf.text(), "ab")
        self.assertEqual(buf.cursor, (2, 0))

    def test_mutations_mark_dirty(self):
        buf = CommandBuffer()
        buf.dirty = False
        buf.insert_char("x")
        self.assertTrue(buf.dirty)


class CommandBufferMotionTests(unittest.TestCase):
    def test_move_right_does_not_wrap_without_flag(self):
        buf = _buffer("ab\ncd", col=2, line=0)
        buf.move_right()
        self.assertEqual(buf.cursor, (2, 0))
        buf.move_right(wrap=True)
        self.assertEqual(buf.cursor, (0, 1))

    def test_vertical_motion_clamps_column(self):
        buf = _buffer("a\nlonger line\nab", col=8, line=1)
        buf.move_up()
        self.assertEqual(buf.cursor, (1, 0))
        buf = _buffer("a\nlonger line\nab", col=8, line=1)
        buf.move_down()
        self.assertEqual(buf.cursor, (2, 2))

    def test_motions_never_leave_range(self):
        buf = _buffer("first\n\nthird line\nx")
        moves = [
            buf.move_up, buf.move_up, buf.move_up, buf.move_up, buf.move_up,
            buf.move_left, buf.move_left, buf.move_right, buf.move_right,
            buf.move_down, buf.move_right, buf.move_down, buf.move_line_end,
            buf.move_down, buf.move_down, buf.move_down, buf.move_right,
            buf.move_up, buf.move_left, buf.move_line_start, buf.move_left,
        ]
        for move in moves:
            move()
            self.assertTrue(_in_range(buf), f"cursor {buf.cursor} out of range")

    def test_home_and_end(self):
        buf = _buffer("hello", col=2)
        buf.move_line_start()
        self.assertEqual(buf.col, 0)
        buf.move_line_end()
        self.assertEqual(buf.col, 5)


class CommandBufferKeyTests(unittest.TestCase):
    def _feed(self, buf, keys):
        results = []
        for k in keys:
            results.append(buf.handle_key(ord(k) if isinstance(k, str) else k))
        return results

    def test_enter_inserts_line_break_and_never_submits(self):
        buf = CommandBuffer()
        results = self._feed(buf, ["a", 10, "b", 13, curses.KEY_ENTER])
        self.assertEqual(buf.lines, ["a", "b", "", ""])
        self.assertNotIn("submit", results)

    def test_submit_and_interrupt_chords(self):
        buf = CommandBuffer()
        self.assertEqual(buf.handle_key(0), "submit")
        self.assertEqual(buf.handle_key(4), "interrupt")
        self.assertEqual(buf.handle_key(3), "interrupt")

    def test_arrows_and_backspace(self):
        buf = CommandBuffer()
        self._feed(buf, ["a", "b", "c", curses.KEY_LEFT, curses.KEY_BACKSPACE])
        self.assertEqual(buf.text(), "ac")
        self.assertEqual(buf.cursor, (1, 0))

    def test_delete_key_removes_character_under_cursor(self):
        buf = _buffer("abc", col=0)
        self._feed(buf, [curses.KEY_DC])
        self.assertEqual(buf.text(), "bc")

    def test_history_keys_are_reported(self):
        buf = CommandBuffer()
        self.assertEqual(buf.handle_key(16), "history_prev")
        self.assertEqual(buf.handle_key(14), "history_next")

    def test_tab_inserts_spaces(self):
        buf = CommandBuffer()
        self._feed(buf, [9, "x"])
        self.assertEqual(buf.text(), "    x")

    def test_utf8_bytes_are_decoded_into_one_character(self):
        buf = CommandBuffer()
        self._feed(buf, ["c", "d", "("] + list("\"Données\")".encode("utf-8")))
        self.assertEqual(buf.text(), 'cd("Données")')
        self.assertEqual(buf.cursor, (13, 0))

    def test_stray_continuation_byte_inserts_replacement_character(self):
        buf = CommandBuffer()
        self._feed(buf, [0x80, "a"])
        self.assertEqual(buf.text(), "\ufffda")


if __name__ == "__main__":
    unittest.main()
