"""
Configuration

Settings are read from the environment (optionally from a .env file).
"""

import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

LOG_LEVEL = os.getenv('ARGO_LOG_LEVEL', 'INFO').upper()

# NetCDF input
FILE_SUFFIX = os.getenv('ARGO_FILE_SUFFIX', '.nc')

# Document store
SQL_ECHO = os.getenv('SQL_ECHO', 'false').lower() == 'true'


def get_database_url() -> str:
    """Return the configured database URL"""
    url = os.getenv('ARGO_DATABASE_URL')
    if url:
        return url

    db_host = os.getenv('POSTGRES_HOST', 'localhost')
    db_port = os.getenv('POSTGRES_PORT', '5432')
    db_name = os.getenv('POSTGRES_DB', 'argo')
    db_user = os.getenv('POSTGRES_USER', 'postgres')
    db_password = os.getenv('POSTGRES_PASSWORD', '')

    return f"postgresql://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}"
