import ast

from process_arbiter import ExecutionMode


def _is_plain_argument(node):
    if isinstance(node, ast.Constant):
        return True
    if isinstance(node, ast.Name):
        return True
    if isinstance(node, ast.UnaryOp) and isinstance(node.operand, ast.Constant):
        return True
    return False


def bare_call_target(parsed):
    """Name of the program called when ``parsed`` is exactly one bare call.

    A bare call is a single expression statement of the form ``name(args)``
    whose arguments are literals or plain names, so no other call can run
    before it. Anything else returns None.
    """
    if len(parsed.body) != 1:
        return None
    stmt = parsed.body[0]
    if not isinstance(stmt, ast.Expr):
        return None
    call = stmt.value
    if not isinstance(call, ast.Call) or not isinstance(call.func, ast.Name):
        return None
    args = list(call.args) + [kw.value for kw in call.keywords]
    for arg in args:
        if isinstance(arg, ast.Starred):
            arg = arg.value
        if not _is_plain_argument(arg):
            return None
    return call.func.id


def classify(code, program_names):
    """Execution mode for ``code``; raises SyntaxError when it does not parse."""
    parsed = ast.parse(code)
    target = bare_call_target(parsed)
    if target is not None and target in program_names:
        return ExecutionMode.PASSTHROUGH
    return ExecutionMode.CAPTURED
