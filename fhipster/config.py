"""Settings read from the environment, after load_dotenv() has merged a .env file.

Imported lazily by ParserManager and configure_logging, so importing the
package alone has no environment side effects.
"""

import os

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _env_list(name: str, default: str):
    raw = os.environ.get(name) or default
    return [item.strip() for item in raw.split(',') if item.strip()]


class Config:
    LOG_LEVEL = os.environ.get('FHIPSTER_LOG_LEVEL', 'WARNING').upper()

    # Relationship normalization
    ADD_MISSING_INVERSE = _env_bool('FHIPSTER_ADD_MISSING_INVERSE', False)
    MODEL_SUFFIX = os.environ.get('FHIPSTER_MODEL_SUFFIX') or 'Model'

    # Schema discovery
    JDL_EXTENSIONS = _env_list('FHIPSTER_JDL_EXTENSIONS', '.jdl,.jh')
