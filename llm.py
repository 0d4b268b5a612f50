# llm.py - chat completion client
import logging

from openai import OpenAI

logger = logging.getLogger(__name__)


class ChatModel:
    """Thin wrapper around OpenAI chat completions: messages in, text out."""

    def __init__(self, api_key=None, model="gpt-4o-mini", base_url=None, client=None):
        self.model = model
        self.client = client or OpenAI(api_key=api_key, base_url=base_url)

    def complete(self, messages, max_tokens=512, temperature=0.7):
        completion = self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            max_tokens=max_tokens,
            temperature=temperature,
        )
        answer = (completion.choices[0].message.content or "").strip()
        if not answer:
            raise RuntimeError("Model returned an empty reply")
        logger.debug("Model %s replied with %d chars", self.model, len(answer))
        return answer
