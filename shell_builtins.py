import os

from result_table import ResultTable

LS_HEADER = ["type", "name"]
CD_HEADER = ["path"]

_GROUP_ORDER = {"file": 0, "dir": 1, "sym": 2}


def _entry_type(entry):
    if entry.is_symlink():
        return "sym"
    if entry.is_dir(follow_symlinks=False):
        return "dir"
    return "file"


def ls(path="."):
    """List ``path`` as a {type, name} table grouped by entry type."""
    target = path or "."
    with os.scandir(target) as it:
        entries = [(_entry_type(e), e.name) for e in it]
    entries.sort(key=lambda item: (_GROUP_ORDER[item[0]], item[1]))
    return ResultTable(LS_HEADER, [list(e) for e in entries])


def cd(path=""):
    """Change directory (home when ``path`` is empty) and report where we are.

    A target that cannot be entered leaves the working directory unchanged.
    """
    target = os.path.expanduser(path) if path else os.path.expanduser("~")
    if target and target != "~":
        try:
            os.chdir(target)
        except OSError:
            pass
    return ResultTable(CD_HEADER, [[os.getcwd()]])
