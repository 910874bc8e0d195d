from __future__ import annotations
import os
from pathlib import Path


# Resolve installation dir (lilith package directory)
_LILITH_DIR = Path(__file__).resolve().parent

# Defaults
_DEFAULT_PRELUDE_DIR = _LILITH_DIR / 'prelude'
PRELUDE_FILE = 'std.lsp'
PRELUDE_PATH_VAR = 'LILITH_PRELUDE_PATH'

# Error messages are rendered into a bounded buffer.
ERROR_MESSAGE_MAX = 511

# Width of the Integer kind; results wrap like a signed machine word.
LONG_BITS = 64


def get_prelude_path() -> Path:
    p = Path(os.environ.get(PRELUDE_PATH_VAR) or _DEFAULT_PRELUDE_DIR)
    # a directory holds std.lsp; a file path is used as-is
    return p / PRELUDE_FILE if p.is_dir() else p
