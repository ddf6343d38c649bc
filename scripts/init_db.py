import sys
from pathlib import Path

# Ensure project root is on sys.path when running as a script
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from myflix_api.config import load_config
from myflix_api.db import connect, describe, init_db


def main() -> None:
    cfg = load_config()
    with connect(cfg) as db:
        init_db(db)

    print(f"DB initialized: {describe(cfg)}")


if __name__ == "__main__":
    main()
