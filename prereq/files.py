"""Locating and creating relations files."""

import logging
import os.path
from pathlib import Path
from typing import Optional

from prereq import defaults
from prereq.logs import fatal


def create_file(root: Path) -> Path:
    """Create the default relations file in root.

    Exits with a fatal log if the file already exists.
    """
    path = root / defaults.FILENAME
    try:
        with open(path, "x") as f:
            f.write(defaults.prereq_yml)
    except FileExistsError as ex:
        fatal("%s already exists", ex.filename)
    logging.info("created %s", path)
    return path


def find_file(explicit: Optional[Path] = None) -> Path:
    """Find the relations file.

    If explicit is given, it must exist. Otherwise searches for prereq.yml in
    the current directory and its parents. Exits with a fatal log if it cannot
    find the file.
    """
    if explicit is not None:
        if not explicit.is_file():
            fatal("file %s not found", explicit)
        return explicit
    path = Path.cwd()
    while True:
        candidate = path / defaults.FILENAME
        if candidate.exists() and candidate.is_file():
            # Must use os.path.relpath rather than Path.relative_to because the
            # latter does not go up directories (i.e. use "..").
            relative = Path(os.path.relpath(candidate, Path.cwd()))
            logging.info("found relations file %s", relative)
            return relative
        if path == path.parent:
            fatal("no %s found in this directory or its parents", defaults.FILENAME)
        path = path.parent
