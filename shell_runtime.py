import ast
import builtins
import io
import logging
import os
import sys

import numpy as np
import pandas as pd

import shell_builtins
from process_arbiter import ExecutionMode, ModeFlag, ProcessArbiter, ProgramRegistry
from result_table import ResultTable

logger = logging.getLogger(__name__)


def wrap(value):
    if isinstance(value, ResultTable):
        return TableValue(value)
    return value


class TableValue:
    """Runtime-facing view of a ResultTable.

    ``t[3]`` selects the third row, ``t["name"]`` a column; everything else
    is delegated to the explicit accessors of the underlying table.
    """

    def __init__(self, table: ResultTable):
        self.table = table

    def __getitem__(self, key):
        if isinstance(key, (bool, np.bool_)):
            raise TypeError("table indices must be int or str, not bool")
        if isinstance(key, (int, np.integer)):
            return wrap(self.table.by_row(int(key)))
        if isinstance(key, str):
            return wrap(self.table.by_column(key))
        raise TypeError(f"table indices must be int or str, not {type(key).__name__}")

    def __len__(self):
        return len(self.table)

    def __iter__(self):
        for i in range(1, len(self.table) + 1):
            yield self[i]

    def __eq__(self, other):
        if isinstance(other, TableValue):
            return self.table == other.table
        if isinstance(other, ResultTable):
            return self.table == other
        return NotImplemented

    @property
    def header(self):
        return self.table.header

    @property
    def rows(self):
        return self.table.rows

    @property
    def frame(self):
        return self.table.to_frame()

    def __str__(self):
        return self.table.to_text()

    def __repr__(self):
        return self.table.to_text()


class ProgramCallable:
    def __init__(self, program, arbiter, flag):
        self.program = program
        self._arbiter = arbiter
        self._flag = flag

    def __call__(self, *args):
        return wrap(self._arbiter.invoke(self.program, args, self._flag))

    def __repr__(self):
        return f"<program {self.program.name} at {self.program.path}>"


class ShellRuntime:
    """Python namespace with every bound program, ``ls``, ``cd`` and ``print``.

    ``output`` is anything with ``emit(text)`` and ``emit_table(table)``;
    the REPL passes its TerminalRenderer.
    """

    def __init__(self, output, registry: ProgramRegistry = None, arbiter: ProcessArbiter = None):
        self.output = output
        self.registry = registry if registry is not None else ProgramRegistry()
        self.arbiter = arbiter if arbiter is not None else ProcessArbiter()
        self.flag = ModeFlag()
        self.namespace = {"__builtins__": builtins, "__name__": "__callsh__"}
        self._bind()

    # ---------- binding ----------
    def _bind(self):
        for name in self.registry.names():
            self.namespace[name] = ProgramCallable(
                self.registry.get(name), self.arbiter, self.flag
            )
        self.namespace.update(
            {
                "pd": pd,
                "np": np,
                "ls": self._ls,
                "cd": self._cd,
                "print": self._print,
            }
        )

    def _ls(self, path="."):
        return wrap(shell_builtins.ls(path))

    def _cd(self, path=""):
        return wrap(shell_builtins.cd(path))

    def _print(self, *args, sep=" ", end="\n", file=None, flush=False):
        for i, arg in enumerate(args):
            if i:
                self.output.emit(sep)
            self.emit_value(arg)
        if end:
            self.output.emit(end)

    def emit_value(self, value):
        if isinstance(value, TableValue):
            value = value.table
        if isinstance(value, ResultTable):
            self.output.emit_table(value)
        else:
            self.output.emit(str(value))

    def program_names(self):
        return {
            name for name, val in self.namespace.items() if isinstance(val, ProgramCallable)
        }

    # ---------- evaluation ----------
    def _run(self, parsed, filename):
        stdout = io.StringIO()
        stderr = io.StringIO()
        env = self.namespace
        old_out, old_err = sys.stdout, sys.stderr
        try:
            sys.stdout, sys.stderr = stdout, stderr
            last_value = None
            body = list(parsed.body)
            if body and isinstance(body[-1], ast.Expr):
                expr = ast.Expression(body.pop().value)
                exec(
                    compile(ast.Module(body=body, type_ignores=[]), filename, "exec"),
                    env,
                )
                last_value = eval(compile(expr, filename, "eval"), env)
            else:
                exec(compile(parsed, filename, "exec"), env)
        finally:
            sys.stdout, sys.stderr = old_out, old_err
            captured = stdout.getvalue() + stderr.getvalue()
            if captured:
                self.output.emit(captured)
        return wrap(last_value)

    def evaluate(self, code, mode=ExecutionMode.CAPTURED):
        """Run ``code`` and return the value of its final expression.

        ``mode`` applies to the first program call only; the flag is back to
        CAPTURED when this returns or raises.
        """
        parsed = ast.parse(code, filename="<input>")
        self.flag.set(mode)
        try:
            return self._run(parsed, "<input>")
        finally:
            self.flag.set(ExecutionMode.CAPTURED)

    def run_init_script(self, path):
        """Execute the init script once; a missing file is not an error."""
        if not path or not os.path.exists(path):
            return False
        with open(path, "r", encoding="utf-8") as f:
            src = f.read()
        parsed = ast.parse(src, filename=path)
        self.flag.set(ExecutionMode.CAPTURED)
        self._run(parsed, path)
        logger.info("ran init script %s", path)
        return True
