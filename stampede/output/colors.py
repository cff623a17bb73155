COLORS = (
    "\033[1;31m",  # red
    "\033[1;32m",  # green
    "\033[1;33m",  # yellow
    "\033[1;34m",  # blue
    "\033[1;35m",  # magenta
    "\033[1;36m",  # cyan
    "\033[0;91m",  # bright red
    "\033[0;92m",  # bright green
    "\033[0;94m",  # bright blue
    "\033[0;95m",  # bright magenta
    "\033[0;96m",  # bright cyan
)

RESET = "\033[0m"

PALETTE_SIZE = len(COLORS)


def color_code(key: int) -> str:
    return COLORS[key % PALETTE_SIZE]
