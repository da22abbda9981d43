import curses
import logging

from command_buffer import CommandBuffer
from config_paths import HISTORY_PATH, INIT_SCRIPT, load_config
from history_manager import HistoryManager
from process_arbiter import ExecutionMode, ProcessArbiter, ProgramRegistry
from render_engine import TerminalRenderer
from result_table import ResultTable
from shell_runtime import ShellRuntime, TableValue
from syntax_classifier import classify

logger = logging.getLogger(__name__)


def _error_text(exc):
    return f"{type(exc).__name__}: {exc}"


class Orchestrator:
    def __init__(self, stdscr, config=None, registry=None, init_script=INIT_SCRIPT,
                 history_path=HISTORY_PATH):
        self.stdscr = stdscr
        self.config = config if config is not None else load_config()
        self.prompt = self.config["PROMPT"]
        self.init_script = init_script

        curses.raw()
        self.stdscr.keypad(True)
        self.stdscr.timeout(self.config["POLL_TIMEOUT_MS"])

        self.renderer = TerminalRenderer(
            stdscr,
            self.config["POLL_TIMEOUT_MS"],
            pause_after_suspend=self.config["PAUSE_AFTER_PASSTHROUGH"],
        )
        if registry is None:
            registry = ProgramRegistry.from_search_path()
        self.runtime = ShellRuntime(
            self.renderer, registry, ProcessArbiter(self.renderer.suspended)
        )
        self.buffer = CommandBuffer()

        # ---- history ----
        self.history_mgr = HistoryManager(
            history_path, max_items=self.config["HISTORY_SIZE"]
        )
        self.history_mgr.load()

    # ---------------- output helpers ----------------

    def _show_value(self, value):
        if value is None:
            return
        if isinstance(value, (TableValue, ResultTable)):
            self.runtime.emit_value(value)
        elif isinstance(value, str):
            self.renderer.emit(value)
        else:
            self.renderer.emit(repr(value))
        self.renderer.newline()

    def _show_error(self, exc):
        self.renderer.emit_table(ResultTable.error(_error_text(exc)))
        self.renderer.newline()

    # ---------------- startup ----------------

    def _run_init_script(self):
        try:
            self.runtime.run_init_script(self.init_script)
        except curses.error:
            raise
        except (Exception, SystemExit) as e:
            logger.warning("init script %s failed: %s", self.init_script, e)
            self._show_error(e)

    # ---------------- submission ----------------

    def submit(self):
        code = self.buffer.text()
        if self.buffer.is_empty():
            return None

        self.renderer.move_below_buffer()
        self.renderer.newline()

        try:
            mode = classify(code, self.runtime.program_names())
        except SyntaxError:
            # evaluation reports the syntax error itself
            mode = ExecutionMode.CAPTURED

        # exit() and sys.exit() end the evaluation, never the shell
        try:
            value = self.runtime.evaluate(code, mode)
            self._show_value(value)
        except curses.error:
            raise
        except (Exception, SystemExit) as e:
            logger.debug("evaluation failed: %s", _error_text(e))
            self._show_error(e)
            self.renderer.reset_anchor()
            self.buffer.dirty = True
            return False

        self.history_mgr.append(code)
        self.history_mgr.persist(code)
        self.buffer.reset()
        self.renderer.reset_anchor()
        return True

    def _recall(self, action):
        if action == "history_prev":
            entry = self.history_mgr.previous()
            if entry is not None:
                self.buffer.set_text(entry)
        else:
            self.buffer.set_text(self.history_mgr.next())

    # ---------------- main loop ----------------

    def redraw(self):
        self.renderer.render_buffer(self.buffer, self.prompt)
        self.buffer.dirty = False

    def run(self):
        self.stdscr.clear()
        self.renderer.emit(self.config["WELCOME"])
        self.renderer.newline()
        self._run_init_script()
        self.renderer.reset_anchor()

        while True:
            if self.buffer.dirty or self.renderer.anchor_changed:
                self.redraw()

            ch = self.stdscr.getch()
            if ch == -1:
                continue

            action = self.buffer.handle_key(ch)
            if action == "interrupt":
                break
            if action == "submit":
                self.submit()
            elif action in ("history_prev", "history_next"):
                self._recall(action)
