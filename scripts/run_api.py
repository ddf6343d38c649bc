import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

import uvicorn


def main() -> None:
    host = os.environ.get("API_HOST", "0.0.0.0")
    # PORT is what Heroku-style platforms inject.
    port = int(os.environ.get("API_PORT") or os.environ.get("PORT") or "8080")
    uvicorn.run("myflix_api.api.server:app", host=host, port=port, reload=False)


if __name__ == "__main__":
    main()
