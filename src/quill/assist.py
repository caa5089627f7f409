"""AI assist - title and tag suggestions generated from entry content."""

import logging

from .config import Config
from .ports.llm_service import LLMError, LLMService

logger = logging.getLogger(__name__)

TITLE_SYSTEM_PROMPT = (
    "You are a helpful assistant that generates concise, meaningful titles for journal "
    "entries. Create a title that captures the essence of the entry in 2-6 words."
)
TAGS_SYSTEM_PROMPT = (
    "You are a helpful assistant that generates relevant tags for journal entries. "
    "Create 3-5 tags that capture the main themes, emotions, or topics in the entry. "
    "Return only the comma-separated tags without any additional text or explanation."
)

TITLE_MAX_TOKENS = 30
TAGS_MAX_TOKENS = 50
TEMPERATURE = 0.7


class AIAssist:
    """
    Request/response bridge to the generation backend.

    Title and tag generation keep separate in-flight flags so one never
    blocks the other. Failures land in `error`, apart from the session's
    error banner, and return None so callers leave the draft untouched.
    """

    def __init__(self, llm: LLMService, config: Config | None = None):
        self.llm = llm
        self.max_chars = config.ai_max_chars if config else 1500
        self.is_title_generating = False
        self.is_tags_generating = False
        self.error: str | None = None

    def dismiss_error(self) -> None:
        self.error = None

    def generate_title(self, content: str) -> str | None:
        """Suggest a title for the content, or None on failure."""
        return self._generate(
            "title",
            "Generate a short, meaningful title for this journal entry",
            content,
            system=TITLE_SYSTEM_PROMPT,
            max_tokens=TITLE_MAX_TOKENS,
        )

    def generate_tags(self, content: str) -> str | None:
        """Suggest 3-5 comma-separated tags for the content, or None on failure."""
        return self._generate(
            "tags",
            "Generate 3-5 comma-separated tags for this journal entry",
            content,
            system=TAGS_SYSTEM_PROMPT,
            max_tokens=TAGS_MAX_TOKENS,
        )

    def _generate(self, kind: str, instruction: str, content: str, *, system: str, max_tokens: int) -> str | None:
        noun = "a title" if kind == "title" else "tags"
        if not content or not content.strip():
            self.error = f"Please add some content before generating {noun}"
            return None

        flag = f"is_{kind}_generating"
        try:
            setattr(self, flag, True)
            self.error = None
            generated = self.llm.generate(
                f"{instruction}:\n\n{content[: self.max_chars]}",
                system=system,
                max_tokens=max_tokens,
                temperature=TEMPERATURE,
            ).strip()
            if not generated:
                raise LLMError(f"Empty {kind} from generation backend")
            return generated
        except LLMError as e:
            logger.error(f"Error generating {kind}: {e}")
            self.error = f"Failed to generate {kind}. Please try again."
            return None
        finally:
            setattr(self, flag, False)
