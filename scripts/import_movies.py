"""Provision the movies collection from a JSON file.

Movies are read-only over HTTP, so this is how the catalog gets filled.

Usage:
  python scripts/import_movies.py --file movies.json

Notes:
  - The file holds a JSON array of movie documents (Title, Description, Genre,
    Director, Year, Rating, Actors, ImagePath, Featured).
  - Movies are upserted by Title, so re-running the import is safe.
"""

from __future__ import annotations

import argparse
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


from myflix_api.config import Config
from myflix_api.db import connect, describe, init_db
from myflix_api.movies import load_movies_file, upsert_movies


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--file", default="movies.json", help="Path to a JSON array of movies")
    args = parser.parse_args()

    cfg = Config()  # reads env
    path = Path(args.file)
    movies = load_movies_file(path)
    if not movies:
        print(f"No movies found in {path}")
        return

    with connect(cfg) as db:
        init_db(db)
        written = upsert_movies(db, movies)

    print(f"Imported {len(movies)} movies into {describe(cfg)} ({written} written)")


if __name__ == "__main__":
    main()
