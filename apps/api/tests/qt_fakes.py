"""
Test doubles for the OpenAI client and the web push sender.
"""
import json
from types import SimpleNamespace
from typing import Any, Dict, List, Union

SCRIPTURE_TEXT = (
    "1 여호와는 나의 목자시니 내게 부족함이 없으리로다\n"
    "2 그가 나를 푸른 풀밭에 누이시며 쉴 만한 물 가로 인도하시는도다\n"
    "3 내 영혼을 소생시키시고 자기 이름을 위하여 의의 길로 인도하시는도다"
)
INTERPRETATION_TEXT = "목자 되신 하나님은 우리의 필요를 아시고 먼저 채우시는 분입니다."


def scripture_response(passage: str = SCRIPTURE_TEXT) -> str:
    return "다음은 본문입니다.\n" + json.dumps({"passage": passage}, ensure_ascii=False) + "\n감사합니다."


def devotional_response(**overrides: Any) -> str:
    body = {
        "interpretation": INTERPRETATION_TEXT,
        "question1": "오늘 나를 인도하시는 목자를 어디서 발견합니까?",
        "question2": "내가 부족하다고 느끼는 것은 무엇입니까?",
        "question3": "쉴 만한 물 가로 나아가기 위해 내려놓을 것은 무엇입니까?",
        "prayer": "선한 목자 되신 주님, 오늘도 저를 인도하여 주옵소서. 아멘.",
    }
    body.update(overrides)
    return "```json\n" + json.dumps(body, ensure_ascii=False) + "\n```"


def completion(content: str) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class FakeCompletions:
    """Returns (or raises) queued responses in order and records each request."""

    def __init__(self, responses: List[Union[str, Exception]]):
        self.responses = list(responses)
        self.calls: List[Dict[str, Any]] = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if not self.responses:
            raise AssertionError("unexpected model call")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return completion(item)


class FakeOpenAI:
    def __init__(self, responses: List[Union[str, Exception]]):
        self.chat = SimpleNamespace(completions=FakeCompletions(responses))

    @property
    def calls(self) -> List[Dict[str, Any]]:
        return self.chat.completions.calls


class PushRecorder:
    """Stands in for services.push_service.send_push."""

    def __init__(self, fail_with: Exception = None):
        self.fail_with = fail_with
        self.sent: List[Dict[str, Any]] = []

    def __call__(self, subscription: Dict[str, Any], payload: Dict[str, Any]) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append({"subscription": subscription, "payload": payload})
