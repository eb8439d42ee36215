"""
Request construction for the Responses API backends.
"""
import logging
from pathlib import Path
from typing import Optional, Union

from .models import ChatRequest, InputContent, InputMessage

logger = logging.getLogger(__name__)

# Codex system prompt shipped with the package
BUNDLED_INSTRUCTIONS_FILE = Path(__file__).parent / "prompts" / "gpt5_codex.md"


def _read_prompt_file(path: Path) -> Optional[str]:
    """Read a prompt file, returning None when it is missing, unreadable or blank"""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug(f"Instructions file not found at {path}")
        return None
    except OSError as e:
        logger.warning(f"Failed to read instructions file {path}: {e}")
        return None

    if not text.strip():
        logger.warning(f"Instructions file {path} is empty")
        return None
    return text


def load_codex_instructions(path: Optional[Union[str, Path]] = None) -> str:
    """Load the system instructions sent with every request.

    Args:
        path: Optional override file. When it is unset, missing or blank the
            bundled Codex prompt is used.

    Returns:
        Instructions text (never empty)

    Raises:
        FileNotFoundError: the bundled prompt is missing from the installation
    """
    if path:
        text = _read_prompt_file(Path(path).expanduser())
        if text is not None:
            return text
        logger.warning(f"Falling back to bundled instructions {BUNDLED_INSTRUCTIONS_FILE}")

    text = _read_prompt_file(BUNDLED_INSTRUCTIONS_FILE)
    if text is None:
        raise FileNotFoundError(f"Failed to read {BUNDLED_INSTRUCTIONS_FILE}; the package install is incomplete")
    return text


def build_chat_request(prompt: str, model: str, instructions: str, stream: bool) -> ChatRequest:
    """Wrap a prompt as a single user message with one input_text piece.

    Args:
        prompt: User prompt
        model: Model identifier
        instructions: System instructions
        stream: True for the session backend, False for the API-key backend

    Returns:
        ChatRequest with store disabled
    """
    return ChatRequest(
        model=model,
        input=[
            InputMessage(
                role="user",
                content=[InputContent(type="input_text", text=prompt)],
            )
        ],
        instructions=instructions,
        stream=stream,
        store=False,
    )
