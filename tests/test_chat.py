from datetime import timedelta

from smokefree.chat import service
from smokefree.chat.coach import TONE_INSTRUCTIONS, OpenAICoachService, build_system_prompt
from smokefree.core.config import CHAT_HISTORY_CONTEXT
from smokefree.profile import service as profile_service
from smokefree.profile.schemas import PreferencesUpdate
from tests.conftest import NOW


def test_fallback_picks_reply_by_keyword():
    assert service.get_fallback_response("I have a strong URGE") == service.CRAVING_REPLY
    assert service.get_fallback_response("How am I doing?") == service.PROGRESS_REPLY
    assert service.get_fallback_response("help me relax") == service.BREATHING_REPLY
    assert service.get_fallback_response("hello") == service.DEFAULT_REPLY
    # Craving wins over breathing
    assert service.get_fallback_response("craving, need to breathe") == service.CRAVING_REPLY


def test_send_message_stores_both_sides(db, user, coach):
    result = service.send_message(db, user.id, "Hi coach", coach, NOW)
    assert result.message.role == "user"
    assert result.message.content == "Hi coach"
    assert result.assistant_message.role == "assistant"
    assert result.assistant_message.content == coach.answer
    assert result.assistant_message.metadata == {"model": "fake-coach"}

    prompt = coach.calls[0]
    assert prompt[0] == {"role": "system", "content": build_system_prompt("empathetic")}
    assert prompt[-1] == {"role": "user", "content": "Hi coach"}
    assert len(prompt) == 2


def test_history_and_context_are_sent(db, user, coach, make_plan):
    make_plan(NOW - timedelta(days=2, hours=3))
    service.send_message(db, user.id, "First question", coach, NOW)
    service.send_message(db, user.id, "Second question", coach, NOW + timedelta(minutes=1), include_context=True)

    prompt = coach.calls[1]
    assert prompt[1]["role"] == "system"
    assert "smoke-free for 2 days, 3 hours" in prompt[1]["content"]
    assert "$21.25" in prompt[1]["content"]
    assert [m["content"] for m in prompt[2:]] == ["First question", coach.answer, "Second question"]


def test_prompt_carries_a_full_window_of_past_messages(db, user, coach):
    for i in range(12):
        service.send_message(db, user.id, f"question {i}", coach, NOW + timedelta(minutes=i))

    service.send_message(db, user.id, "latest", coach, NOW + timedelta(minutes=12))
    prompt = coach.calls[-1]
    past = prompt[1:-1]
    assert len(past) == CHAT_HISTORY_CONTEXT == 10
    assert past[0] == {"role": "user", "content": "question 7"}
    assert past[-1] == {"role": "assistant", "content": coach.answer}
    assert "latest" not in [m["content"] for m in past]
    assert prompt[-1] == {"role": "user", "content": "latest"}


def test_prompt_follows_preferred_tone(db, user, coach):
    profile_service.update_preferences(db, user.id, PreferencesUpdate(ai_chatbot_tone="direct"), NOW)
    service.send_message(db, user.id, "Hi", coach, NOW)
    system_prompt = coach.calls[0][0]["content"]
    assert TONE_INSTRUCTIONS["direct"] in system_prompt
    assert TONE_INSTRUCTIONS["empathetic"] not in system_prompt


def test_context_skipped_without_plan(db, user, coach):
    service.send_message(db, user.id, "Hello", coach, NOW, include_context=True)
    assert [m["role"] for m in coach.calls[0]] == ["system", "user"]


def test_coach_failure_falls_back(db, user, coach):
    coach.fail = True
    result = service.send_message(db, user.id, "I really want to smoke", coach, NOW)
    assert result.assistant_message.content == service.CRAVING_REPLY
    assert result.assistant_message.metadata["fallback"] is True


def test_openai_coach_without_key_falls_back(db, user):
    coach = OpenAICoachService()
    coach.api_key = None
    result = service.send_message(db, user.id, "hello", coach, NOW)
    assert result.assistant_message.content == service.DEFAULT_REPLY
    assert result.assistant_message.metadata["fallback"] is True


def test_chat_routes(client, clock):
    resp = client.post("/chat/message", json={"message": "Any breathing tips?"})
    assert resp.status_code == 200
    assert resp.json()["assistant_message"]["role"] == "assistant"

    clock.advance(minutes=2)
    client.post("/chat/message", json={"message": "Thanks"})

    history = client.get("/chat/history").json()
    assert [m["content"] for m in history][-2:] == ["You've got this. Take a slow breath.", "Any breathing tips?"]
    assert history[1]["content"] == "Thanks"
    assert len(client.get("/chat/history?limit=3").json()) == 3

    assert client.delete("/chat/history").json() == {"deleted_count": 4}
    assert client.get("/chat/history").json() == []


def test_empty_message_is_rejected(client):
    assert client.post("/chat/message", json={"message": ""}).status_code == 422
