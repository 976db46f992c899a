import sys
from pathlib import Path

import fncli

from .core.errors import RolloverError


def main():
    fncli.autodiscover(Path(__file__).parent, "rollover")

    user_args = sys.argv[1:] or ["run"]
    argv = ["rollover", *user_args]
    try:
        code = fncli.dispatch(argv)
    except RolloverError as e:
        sys.stderr.write(f"{e}\n")
        sys.exit(1)
    sys.exit(code)


if __name__ == "__main__":
    main()
