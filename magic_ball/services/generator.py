"""Daily prediction text generation (OpenRouter chat completions).

Callers always receive a text: every failure is logged and replaced with one
of the fallback predictions.
"""

import asyncio
import logging
import random
import re

import httpx

from magic_ball.exceptions import GenerationFailure
from magic_ball.load_secrets import (
    frontend_url,
    llm_timeout_seconds,
    openrouter_api_key,
    openrouter_model,
)

OPENROUTER_URL = "https://openrouter.ai/api/v1/chat/completions"
MAX_PREDICTION_LENGTH = 150
FORBIDDEN_WORDS = ("сьогодні", "сьогоднішній", "today", "ти", "твій", "тобі")
FORBIDDEN_WORDS_PATTERN = re.compile(r"\b(?:" + "|".join(FORBIDDEN_WORDS) + r")\b")

SYSTEM_PROMPT = """You are a quirky, positive "Pharmacist-Mage". Generate a short daily prediction in Ukrainian.

STRICT RULES:
1. Max 120 characters.
2. NEVER use "Сьогодні", "сьогоднішній", "today" - FORBIDDEN WORDS!
3. NEVER use "ти", "твій", "тобі" - use impersonal style.
4. No medicine, pills, vitamins mentions.

Good examples:
- "Зорі підказують: час для сміливих планів!"
- "Рівень удачі максимальний — всі двері відчинені."
- "Магія в повітрі! Лови момент."
- "Всесвіт шепоче: все складеться чудово."
- "Енергія зашкалює! Перешкоди зникають."
- "Час діяти — успіх чекає за рогом."
"""

FALLBACK_PREDICTIONS = [
    "Зорі підказують: саме час для сміливих планів та смачної кави.",
    "Рівень удачі максимальний: всі світлофори будуть зеленими.",
    "Рецепт дня: побільше посмішок і жодних зайвих турбот.",
    "Час повірити в диво та власні сили!",
    "Енергія просто зашкалює! Всі перешкоди долаються легко.",
    "Магія вже в повітрі — лови момент!",
    "Всесвіт шепоче: все складеться найкращим чином.",
    "Час діяти! Успіх вже чекає за рогом.",
]


def build_user_prompt(first_name: str | None) -> str:
    if first_name:
        return f"Generate a short daily prediction for {first_name}. Max 150 characters."
    return "Generate a short daily prediction. Max 150 characters."


class PredictionGenerator:
    def __init__(
        self,
        api_key: str | None = openrouter_api_key,
        model: str = openrouter_model,
        timeout: float = llm_timeout_seconds,
        referer: str = frontend_url,
        transport: httpx.AsyncBaseTransport | None = None,
        rng: random.Random | None = None,
    ):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        # "*" is a CORS wildcard, not a usable referer.
        self.referer = referer if referer and referer != "*" else "http://localhost:5173"
        self.transport = transport
        self.rng = rng or random.Random()

    def fallback_prediction(self) -> str:
        return self.rng.choice(FALLBACK_PREDICTIONS)

    async def generate(self, first_name: str | None) -> str:
        """Generate a prediction, falling back to a static text on any failure

        Args:
            first_name (str | None): Display name used in the user prompt

        Returns:
            str: Prediction text
        """
        if not self.api_key:
            logging.warning("OPENROUTER_API_KEY is not set, using fallback prediction")
            return self.fallback_prediction()

        try:
            return await self._request_prediction(first_name)
        except GenerationFailure as e:
            logging.error(f"OpenRouter API error: {e}")
            return self.fallback_prediction()

    async def _request_prediction(self, first_name: str | None) -> str:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": self.referer,
            "X-Title": "Daily Prediction App",
        }
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_user_prompt(first_name)},
            ],
            "max_tokens": 200,
            "temperature": 0.8,
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                # httpx limits each phase separately; this bounds the whole request.
                response = await asyncio.wait_for(
                    client.post(OPENROUTER_URL, headers=headers, json=payload), self.timeout
                )
        except asyncio.TimeoutError as e:
            raise GenerationFailure(f"no response within {self.timeout} seconds") from e
        except httpx.HTTPError as e:
            raise GenerationFailure(f"request failed: {e!r}") from e

        if not response.is_success:
            raise GenerationFailure(f"status {response.status_code}")

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise GenerationFailure(f"malformed response: {e!r}") from e
        if not isinstance(content, str):
            raise GenerationFailure("content is not a string")

        text = content.strip().strip("\"«»").strip()
        if not text:
            raise GenerationFailure("empty content")
        if len(text) > MAX_PREDICTION_LENGTH:
            raise GenerationFailure(f"content too long ({len(text)} characters)")
        if FORBIDDEN_WORDS_PATTERN.search(text.lower()):
            raise GenerationFailure("content contains a forbidden word")
        return text
