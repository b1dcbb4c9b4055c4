"""
Locating the POS database file.

The SQLite file is owned by the desktop application. The API only opens it,
so startup fails loudly when the file cannot be found instead of letting
sqlite create an empty database.
"""
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


class DatabaseNotFoundError(FileNotFoundError):
    """Raised when none of the candidate locations holds the database file"""

    def __init__(self, file_name, checked_paths):
        self.file_name = file_name
        self.checked_paths = [str(path) for path in checked_paths]
        locations = '\n'.join(f'  - {path}' for path in self.checked_paths)
        super().__init__(
            f"Database file '{file_name}' not found. Please ensure the POS application "
            f"is installed correctly. Checked locations:\n{locations}"
        )


def candidate_paths(file_name, search_paths=(), base_dir=None, explicit_path=None):
    """Every location the database may live in, in search order"""
    candidates = []

    if explicit_path:
        candidates.append(Path(explicit_path).expanduser())

    for entry in search_paths:
        path = Path(entry).expanduser()
        # A directory entry means "look for the file in here"
        if path.suffix != Path(file_name).suffix or path.is_dir():
            path = path / file_name
        candidates.append(path)

    if base_dir is not None:
        base_dir = Path(base_dir)
        candidates.append(base_dir / file_name)
        candidates.append(base_dir.parent / file_name)

    candidates.append(Path.home() / '.local' / 'share' / 'Potta Finance POS' / file_name)

    local_app_data = os.environ.get('LOCALAPPDATA')
    if local_app_data:
        candidates.append(Path(local_app_data) / 'Programs' / 'Potta Finance POS' / file_name)
        candidates.append(Path(local_app_data) / 'Potta Finance POS' / file_name)

    # Keep order, drop duplicates
    unique = []
    for path in candidates:
        if path not in unique:
            unique.append(path)
    return unique


def locate_database(file_name, search_paths=(), base_dir=None, explicit_path=None):
    """Return the first existing database path, or None"""
    for path in candidate_paths(file_name, search_paths, base_dir, explicit_path):
        if path.is_file():
            return path
    return None


def database_uri(path):
    """SQLite URI that opens an existing file read-write without creating it"""
    return f'{Path(path).resolve().as_uri()}?mode=rw'


def require_database():
    """Fail fast when the configured database file is missing"""
    from django.conf import settings

    options = settings.POTTA_DATABASE
    found = locate_database(
        options['FILE_NAME'],
        options['SEARCH_PATHS'],
        settings.BASE_DIR,
        options['PATH'],
    )
    if found is None:
        error = DatabaseNotFoundError(
            options['FILE_NAME'],
            candidate_paths(options['FILE_NAME'], options['SEARCH_PATHS'], settings.BASE_DIR, options['PATH']),
        )
        logger.error(str(error))
        raise error

    logger.info(f"Database found at: {found}")
    return found
