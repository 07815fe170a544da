import os
from dotenv import load_dotenv

# Load Environment Variables (may include a UTF-8 BOM if file saved with BOM)
load_dotenv()

_BOM = "\ufeff"

DEFAULT_MAX_SEQUENCE_LENGTH = 2_000_000
DEFAULT_COLOR1 = "#4DFE44"
DEFAULT_COLOR2 = "#FF44AA"


def _env(name):
    """Return an environment value, stripping any UTF-8 BOM.

    A .env file saved with a BOM can make python-dotenv register the first
    key as '\\ufeffNAME', so both spellings are tried.
    """
    value = os.environ.get(name)
    if value is None:
        value = os.environ.get(f"{_BOM}{name}")
    if value is None:
        return None
    value = value.lstrip(_BOM).strip()
    return value or None


def get_max_sequence_length():
    raw = _env("MAX_SEQUENCE_LENGTH")
    if raw is None:
        return DEFAULT_MAX_SEQUENCE_LENGTH
    try:
        value = int(raw.replace("_", ""))
    except ValueError:
        print(f"[fractalgen] Ignoring MAX_SEQUENCE_LENGTH={raw!r}, using {DEFAULT_MAX_SEQUENCE_LENGTH}")
        return DEFAULT_MAX_SEQUENCE_LENGTH
    if value <= 0:
        print(f"[fractalgen] MAX_SEQUENCE_LENGTH must be positive, using {DEFAULT_MAX_SEQUENCE_LENGTH}")
        return DEFAULT_MAX_SEQUENCE_LENGTH
    return value


def get_static_dir():
    return _env("FRACTAL_STATIC_DIR") or os.path.join(os.path.dirname(os.path.abspath(__file__)), "static")


def get_default_colors():
    return (_env("DEFAULT_COLOR1") or DEFAULT_COLOR1, _env("DEFAULT_COLOR2") or DEFAULT_COLOR2)
