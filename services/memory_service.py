"""
Memory service maintaining the think-mode summary of durable user facts.
"""
from typing import List, Optional

from utils.constants import (
    MEMORY_CONTEXT_TEMPLATE,
    MEMORY_SYSTEM_PROMPT,
    MEMORY_USER_TEMPLATE,
)
from utils.logger import app_logger


class MemoryService:
    """Builds and updates the bounded memory summary."""

    MAX_MEMORY_CHARS = 2000
    MAX_TOKENS = 512
    # How many trailing messages the distillation prompt sees
    RECENT_MESSAGES = 4

    @staticmethod
    def build_context(memory: Optional[str]) -> str:
        """Render the memory summary for the think-mode system prompt."""
        memory = (memory or "").strip()
        if not memory:
            return ""
        return MEMORY_CONTEXT_TEMPLATE.format(memory=memory)

    @staticmethod
    def format_summary(text: str, max_chars: int = MAX_MEMORY_CHARS) -> str:
        """
        Normalize model output into unique "- " bullet lines within max_chars.

        Lines are dropped whole rather than cut mid-fact.
        """
        bullets: List[str] = []
        seen = set()
        for line in (text or "").splitlines():
            fact = line.strip().lstrip("-*•").strip()
            if not fact or fact.lower() in seen:
                continue
            seen.add(fact.lower())
            bullets.append(f"- {fact}")

        summary = ""
        for bullet in bullets:
            candidate = f"{summary}\n{bullet}" if summary else bullet
            if len(candidate) > max_chars:
                break
            summary = candidate

        if not summary and bullets:
            summary = bullets[0][:max_chars]
        return summary

    @staticmethod
    def _conversation_excerpt(messages: List[dict], answer: str) -> str:
        lines = []
        for msg in messages[-MemoryService.RECENT_MESSAGES:]:
            if msg.get("role") == "system":
                continue
            speaker = "Kullanıcı" if msg.get("role") == "user" else "Asistan"
            lines.append(f"{speaker}: {msg.get('content', '')}")
        if answer:
            lines.append(f"Asistan: {answer}")
        return "\n".join(lines)

    @staticmethod
    async def update_memory(
        client,
        model: str,
        previous: Optional[str],
        messages: List[dict],
        answer: str = ""
    ) -> Optional[str]:
        """
        Distill the latest exchange into the memory summary.

        Args:
            client: LLM client exposing an async chat() method
            model: Model to run the distillation on
            previous: Current summary (may be None)
            messages: Conversation messages sent with this request
            answer: The assistant answer just generated

        Returns:
            The updated summary, or previous unchanged if the update failed
        """
        user_prompt = MEMORY_USER_TEMPLATE.format(
            memory=(previous or "").strip() or "(boş)",
            conversation=MemoryService._conversation_excerpt(messages, answer),
        )
        try:
            response = await client.chat(
                model=model,
                messages=[
                    {"role": "system", "content": MEMORY_SYSTEM_PROMPT.format(max_chars=MemoryService.MAX_MEMORY_CHARS)},
                    {"role": "user", "content": user_prompt},
                ],
                options={"num_predict": MemoryService.MAX_TOKENS, "temperature": 0.2},
            )
            text = response['message']['content'] or ""
        except Exception as e:
            app_logger.warning(f"Memory update failed, keeping previous summary: {e}")
            return previous

        summary = MemoryService.format_summary(text)
        if not summary:
            app_logger.warning("Memory update returned nothing usable, keeping previous summary")
            return previous

        app_logger.info(f"Memory summary updated ({len(summary)} chars)")
        return summary
