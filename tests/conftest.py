import pytest

from essay_annotator.feedback import parse_correction

ESSAY = (
    "Public libraries used to be the default gateway to knowledge, but tablets and "
    "subscription databases changed that expectation. There are more digital archives "
    "now so libraries feel redundant sometimes. Yet my neighbourhood branch is busiest "
    "when exams approach because human mentors still translate rubrics into plain "
    "language. They provides free internet for people who cannot pay for 5G plans. "
    "Community librarians also organise small events that keep neighbours connected "
    "even when they barely speak the same language."
)

PAYLOAD = {
    "score": 7.4,
    "summary": "词汇和论证结构表现稳健，主要扣分点在语法细节以及段落之间的逻辑衔接。",
    "breakdown": [
        {"label": "词汇", "value": 7.5},
        {"label": "语法", "value": 6.5},
        {"label": "逻辑", "value": 7.0},
        {"label": "连贯性", "value": 7.5},
    ],
    "annotations": [
        {
            "id": "ann-1",
            "type": "logic",
            "originalText": "There are more digital archives now so libraries feel redundant sometimes.",
            "suggestion": "As digital archives proliferate, libraries can pivot from storing content to curating live guidance.",
            "reason": "补足因果关系。",
        },
        {
            "id": "ann-2",
            "type": "grammar",
            "originalText": "They provides free internet for people who cannot pay for 5G plans.",
            "suggestion": "They provide free internet access for residents who cannot afford private 5G plans.",
            "reason": "主谓一致错误。",
        },
        {
            "id": "ann-3",
            "type": "vocabulary",
            "originalText": "organise small events",
            "suggestion": "host multilingual salons",
            "reason": "用词更具体。",
        },
    ],
}


@pytest.fixture
def essay():
    return ESSAY


@pytest.fixture
def payload():
    import copy
    return copy.deepcopy(PAYLOAD)


@pytest.fixture
def correction(payload):
    return parse_correction(payload)
