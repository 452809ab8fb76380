"""
Model router: picks the upstream model for a mode and recovers from failures
by rotating through an ordered list of fallback candidates.
"""
from typing import List, Optional, Sequence

from config import Config
from models.chat_models import ChatMode, GenerationResult
from utils.constants import LAST_RESORT_MODEL, MIN_ANSWER_CHARS, UNUSABLE_ANSWERS, ModeBudget
from utils.exceptions import UpstreamGenerationError
from utils.logger import app_logger


class ModelRouter:
    """Selects models per mode and invokes them with a fallback chain."""

    MAX_TOKENS = {
        ChatMode.FAST: ModeBudget.FAST,
        ChatMode.THINK: ModeBudget.THINK,
    }

    def __init__(
        self,
        default_model: Optional[str] = None,
        fast_model: Optional[str] = None,
        think_model: Optional[str] = None,
        candidates: Optional[Sequence[str]] = None
    ):
        self.default_model = Config.LLM_MODEL if default_model is None else default_model
        self.fast_model = Config.LLM_MODEL_FAST if fast_model is None else fast_model
        self.think_model = Config.LLM_MODEL_THINK if think_model is None else think_model
        if candidates is None:
            candidates = [self.default_model, self.think_model, LAST_RESORT_MODEL]
        self.candidates = self._dedupe(candidates)

    @staticmethod
    def _dedupe(models: Sequence[str]) -> List[str]:
        """Drop blank and repeated model ids, keeping the first occurrence."""
        seen = []
        for model in models:
            if model and model not in seen:
                seen.append(model)
        return seen

    @staticmethod
    def is_unusable(text: str) -> bool:
        """True for blank, too short, bare role words, or a lone JSON object."""
        stripped = (text or "").strip()
        if len(stripped) < MIN_ANSWER_CHARS:
            return True
        if stripped.lower() in UNUSABLE_ANSWERS:
            return True
        return stripped.startswith("{") and stripped.endswith("}")

    def select_model(self, mode) -> str:
        """Preferred model for a mode, falling back to the generic default."""
        if ChatMode.parse(mode) == ChatMode.THINK:
            return self.think_model or self.default_model or LAST_RESORT_MODEL
        return self.fast_model or self.default_model or LAST_RESORT_MODEL

    @staticmethod
    async def invoke(client, model: str, messages: list, max_tokens: int) -> str:
        """Single LLM call; returns the generated text (possibly empty)."""
        response = await client.chat(
            model=model,
            messages=messages,
            options={"num_predict": max_tokens},
        )
        return response['message']['content'] or ""

    async def invoke_with_fallback(self, client, primary: str, messages: list, mode) -> GenerationResult:
        """
        Call the primary model and, in fast mode, rotate through the fallback candidates.

        Args:
            client: LLM client exposing an async chat() method
            primary: Model chosen by select_model
            messages: System and history messages
            mode: Requested mode

        Returns:
            GenerationResult with the text and the model that produced it

        Raises:
            UpstreamGenerationError: if no model produced text
        """
        mode = ChatMode.parse(mode)
        max_tokens = self.MAX_TOKENS[mode]

        try:
            text = await self.invoke(client, primary, messages, max_tokens)
        except Exception as e:
            if mode != ChatMode.FAST:
                app_logger.error(f"Model {primary} failed in {mode.value} mode: {e}")
                raise UpstreamGenerationError(str(e), model=primary) from e
            app_logger.warning(f"Model {primary} failed, trying fallbacks: {e}")
            last_error: Optional[Exception] = e
        else:
            if not self.is_unusable(text):
                return GenerationResult(text=text, model=primary)
            if mode != ChatMode.FAST:
                raise UpstreamGenerationError(f"Model {primary} returned an unusable response", model=primary)
            app_logger.warning(f"Model {primary} returned an unusable response, trying fallbacks: {text[:80]!r}")
            last_error = None

        return await self._sweep_candidates(client, primary, messages, max_tokens, last_error)

    async def _sweep_candidates(
        self,
        client,
        failed_model: str,
        messages: list,
        max_tokens: int,
        last_error: Optional[Exception]
    ) -> GenerationResult:
        """Try each candidate once, never the model that just failed."""
        for candidate in self.candidates:
            if candidate == failed_model:
                continue
            try:
                text = await self.invoke(client, candidate, messages, max_tokens)
            except Exception as e:
                app_logger.warning(f"Fallback model {candidate} failed: {e}")
                last_error = e
                continue

            if not self.is_unusable(text):
                app_logger.info(f"Fallback model {candidate} answered after {failed_model} failed")
                return GenerationResult(text=text, model=candidate)
            app_logger.warning(f"Fallback model {candidate} returned an unusable response")

        if last_error is not None:
            raise UpstreamGenerationError(str(last_error)) from last_error
        raise UpstreamGenerationError("Every model returned an empty or unusable response")
