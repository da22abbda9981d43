import curses
import logging
import sys

from config_paths import LOG_PATH, ensure_config_dirs, load_config
from orchestrator import Orchestrator

__version__ = "0.1.0"


USAGE = (
    "callsh - a Python-scripted interactive shell\n\n"
    "Usage:\n  callsh\n  callsh -v\n  callsh -h\n\n"
    "Keys:\n  Ctrl+Space  run the buffer\n  Enter       new line\n"
    "  Ctrl+P/N    history\n  Ctrl+D      quit\n"
)


def setup_logging(path=LOG_PATH, level=logging.INFO):
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(
        logging.Formatter("[%(asctime)s] %(levelname)s %(name)s: %(message)s")
    )
    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(level)
    return handler


def main(argv=None):
    args = sys.argv[1:] if argv is None else argv

    if "-v" in args or "-V" in args:
        print(__version__)
        return 0

    if "-h" in args or "--help" in args:
        print(USAGE)
        return 0

    if args:
        print(f"callsh: unexpected arguments: {' '.join(args)}", file=sys.stderr)
        print(USAGE, file=sys.stderr)
        return 2

    ensure_config_dirs()
    setup_logging()
    config = load_config()

    def curses_main(stdscr):
        Orchestrator(stdscr, config).run()

    curses.wrapper(curses_main)
    return 0


if __name__ == "__main__":
    sys.exit(main())
