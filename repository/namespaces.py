# repository/namespaces.py
from typing import Final

ROOT: Final[str] = "papertrail"
PREFERENCES: Final[str] = f"{ROOT}:prefs"
