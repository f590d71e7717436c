"""Configuration constants for the zenhtml snippet library."""

import os
from pathlib import Path

# Library directory. First directory which is found is used.
DATA_DIRECTORIES: list[Path] = [
    Path("~/.local/share/zenhtml").expanduser(),
    Path("~/.zenhtml").expanduser(),
    Path("~/.config/zenhtml").expanduser(),
]

# Used when none of DATA_DIRECTORIES exists yet.
DEFAULT_DATA_DIR: Path = DATA_DIRECTORIES[0]

DATABASE_FILENAME: str = "library.db"

# Gemini API key. Environment variables win over files; first file found is used.
API_KEY_ENV_VARS: list[str] = ["GEMINI_API_KEY", "API_KEY"]
API_KEY_FILES: list[Path] = [
    Path("~/.config/zenhtml-gemini-key.txt").expanduser(),
    Path("~/.config/secret/zenhtml-gemini-key.txt").expanduser(),
]

GEMINI_MODEL: str = os.environ.get("ZENHTML_GEMINI_MODEL", "gemini-3-flash-preview")
GEMINI_ENDPOINT: str = "https://generativelanguage.googleapis.com/v1beta/models"

# Seconds before a Gemini request is abandoned.
REQUEST_TIMEOUT: float = 60.0

# The classification prompt only carries this many leading characters of code.
PROMPT_CODE_LIMIT: int = 3000

DEFAULT_HTML: str = """\
<!DOCTYPE html>
<html>
<head>
  <style>
    body {
      margin: 0;
      height: 100vh;
      display: flex;
      justify-content: center;
      align-items: center;
      background: linear-gradient(45deg, #0f0c29, #302b63, #24243e);
      color: white;
      font-family: system-ui;
    }
    .card {
      padding: 2rem;
      background: rgba(255, 255, 255, 0.1);
      backdrop-filter: blur(10px);
      border-radius: 1rem;
      border: 1px solid rgba(255, 255, 255, 0.2);
      text-align: center;
      animation: fadeIn 1s ease-out;
    }
    @keyframes fadeIn {
      from { opacity: 0; transform: translateY(20px); }
      to { opacity: 1; transform: translateY(0); }
    }
  </style>
</head>
<body>
  <div class="card">
    <h1>ZenHTML Runner</h1>
    <p>Your code is running in live preview mode.</p>
    <p>Try the new Library feature to organize your snippets!</p>
  </div>
</body>
</html>"""


def resolve_data_directory() -> Path:
    """Return the first existing library directory, or the default one."""
    for candidate in DATA_DIRECTORIES:
        if candidate.is_dir():
            return candidate
    return DEFAULT_DATA_DIR
