from django.conf import settings
from django.core.checks import Error, register

from .database import candidate_paths, locate_database


@register()
def database_file_check(app_configs, **kwargs):
    """The API cannot serve anything without the desktop application's database"""
    options = settings.POTTA_DATABASE
    found = locate_database(options['FILE_NAME'], options['SEARCH_PATHS'], settings.BASE_DIR, options['PATH'])
    if found is not None:
        return []

    checked = candidate_paths(options['FILE_NAME'], options['SEARCH_PATHS'], settings.BASE_DIR, options['PATH'])
    return [
        Error(
            f"Database file '{options['FILE_NAME']}' not found.",
            hint='Checked: ' + ', '.join(str(path) for path in checked)
                 + '. Set POTTA_DB_PATH or POTTA_DB_SEARCH_PATHS.',
            id='potta.E001',
        )
    ]
