import time

from rollover import config


def log(msg: str) -> None:
    config.ROLLOVER_DIR.mkdir(parents=True, exist_ok=True)
    timestamp = time.strftime("%Y-%m-%d %H:%M:%S")
    with config.LOG_FILE.open("a") as f:
        f.write(f"{timestamp} {msg}\n")
