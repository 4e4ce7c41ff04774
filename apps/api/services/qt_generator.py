"""
QT Content Generator

Two sequential chat-completion calls per day:

1. Scripture: verbatim 개역개정 text for a 15-20 verse span of the day's
   reading, each verse prefixed with its number. Low temperature, since
   the text must not drift.
2. Devotional: interpretation, three reflection questions and a closing
   prayer, conditioned on the text from (1). Higher temperature for a
   pastoral tone.

Both calls must return a JSON object. A response without one aborts the
whole run: no retry, no fallback text. A day with no saved row is simply
regenerated on the next trigger.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from openai import OpenAI, OpenAIError

from core.config import settings
from core.exceptions import GenerationError, ResponseParseError
from services.llm_json import extract_json_object
from services.qt_passage import PASSAGE_DELIMITER

logger = logging.getLogger(__name__)

SCRIPTURE_SYSTEM_PROMPT = """당신은 성경 전문가이자 신중한 목회자입니다.
주어진 성경 범위(예: 민수기 1-2)에서 묵상에 가장 적합한 **연속된 15~20개 절**을 골라 본문을 제공하세요.

**[지시사항]**
1. 개역개정판 본문을 한 글자도 바꾸지 말고 그대로 옮기세요. 의역이나 요약은 절대 금지입니다.
2. 각 절 앞에 절 번호를 붙이세요. (예: "1 태초에 하나님이 천지를 창조하시니라")
3. 절대로 동일한 문장이나 단어를 반복(루프)하지 마세요.
4. 각 절은 성경의 순서대로 이어져야 합니다.
5. 반드시 아래 JSON 형식으로만 답하세요:
{"passage":"본문 내용 (줄바꿈은 \\n으로)"}"""

DEVOTIONAL_SYSTEM_PROMPT = """당신은 개혁주의 신학(Reformed Theology)에 입각하여 말씀을 해석하는 신중한 목회자이자 큐티 전문가입니다. 성도들이 말씀을 깊이 묵상하고 삶에 적용할 수 있도록 돕습니다.
주어진 성경 본문을 바탕으로 다음을 작성하세요:
1. 본문 해설: 개혁주의 신학의 관점(하나님의 주권, 전적인 은혜, 언약 등)을 반영하여 본문의 흐름과 영적인 의미를 해설해주세요. 분량은 대략 10줄 내외로 작성하며, 원어(히브리어/헬라어)의 의미나 성경적 배경 지식이 필요하다면 <참고> 형식으로 함께 설명해주세요.
2. 묵상 질문 3개: 성도의 삶에 울림을 주는 실질적이고 따뜻한 질문
3. 마무리 기도문 1개: 본문의 은혜를 갈구하는 간절하고 진실된 기도

반드시 아래 JSON 형식으로만 답하세요:
{"interpretation":"해설 내용","question1":"질문1","question2":"질문2","question3":"질문3","prayer":"기도문"}"""

DEVOTIONAL_KEYS = ("interpretation", "question1", "question2", "question3", "prayer")


@dataclass
class GeneratedQT:
    """Everything one generation run produces for a day."""
    reference: str
    scripture: str
    interpretation: str
    question1: Optional[str] = None
    question2: Optional[str] = None
    question3: Optional[str] = None
    prayer: Optional[str] = None


class QTContentGenerator:
    """Wraps the OpenAI client; the client is created on first use."""

    def __init__(self, client: Optional[Any] = None, model: Optional[str] = None):
        self._client = client
        self.model = model or settings.QT_MODEL

    @property
    def client(self):
        if self._client is None:
            if not settings.OPENAI_API_KEY:
                raise GenerationError("OPENAI_API_KEY not configured")
            self._client = OpenAI(api_key=settings.OPENAI_API_KEY)
        return self._client

    def _complete(self, system: str, user: str, temperature: float, max_tokens: int) -> str:
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except OpenAIError as e:
            raise GenerationError(f"OpenAI request failed: {e}") from e

        choices = getattr(response, "choices", None) or []
        if not choices:
            return ""
        return choices[0].message.content or ""

    def fetch_scripture(self, reference: str) -> str:
        content = self._complete(
            SCRIPTURE_SYSTEM_PROMPT,
            f"성경구절: {reference}",
            temperature=settings.QT_SCRIPTURE_TEMPERATURE,
            max_tokens=settings.QT_SCRIPTURE_MAX_TOKENS,
        )
        data = extract_json_object(content)
        scripture = data.get("passage")
        if not scripture:
            logger.warning(f"Scripture response for {reference} has no 'passage' value")
            return ""
        if PASSAGE_DELIMITER in scripture:
            raise ResponseParseError(f"Scripture for {reference} contains the passage marker {PASSAGE_DELIMITER!r}")
        return scripture

    def generate_devotional(self, reference: str, scripture: str) -> Dict[str, Optional[str]]:
        """Interpretation, question1..3 and prayer for an already-fetched text."""
        content = self._complete(
            DEVOTIONAL_SYSTEM_PROMPT,
            f"성경구절: {reference}\n본문:\n{scripture}",
            temperature=settings.QT_DEVOTIONAL_TEMPERATURE,
            max_tokens=settings.QT_DEVOTIONAL_MAX_TOKENS,
        )
        data = extract_json_object(content)
        missing = [key for key in DEVOTIONAL_KEYS if not data.get(key)]
        if missing:
            logger.warning(f"Devotional response for {reference} is missing keys: {', '.join(missing)}")
        return {key: data.get(key) for key in DEVOTIONAL_KEYS}

    def generate(self, reference: str) -> GeneratedQT:
        scripture = self.fetch_scripture(reference)
        devotional = self.generate_devotional(reference, scripture)
        return GeneratedQT(
            reference=reference,
            scripture=scripture,
            interpretation=devotional["interpretation"] or "",
            question1=devotional["question1"],
            question2=devotional["question2"],
            question3=devotional["question3"],
            prayer=devotional["prayer"],
        )


def get_qt_generator() -> QTContentGenerator:
    """FastAPI dependency (overridden in tests)."""
    return QTContentGenerator()
