from pathlib import Path
import logging
from functools import lru_cache

BASE_DIR = Path(__file__).resolve().parent.parent.parent
PROMPT_PATH = BASE_DIR / "resources" / "system_prompt.txt"

FALLBACK_PROMPT = (
    "You are a compassionate AI mental health companion. "
    "Provide supportive, empathetic responses. Never give medical advice."
)


def _load(path: Path) -> str:
    try:
        txt = path.read_text(encoding="utf-8").strip()
    except FileNotFoundError:
        logging.warning("[PromptLoader] system_prompt.txt not found. Using fallback.")
        return FALLBACK_PROMPT
    return txt or FALLBACK_PROMPT


@lru_cache(maxsize=1)
def get_system_prompt() -> str:
    return _load(PROMPT_PATH)
