"""
Tests for AI post suggestions, post enhancement and video feedback
"""
from unittest.mock import Mock

import pytest

from harmony.models import User
from harmony.services.ai_analysis import (
    DEFAULT_TIPS, analyze_video_resume, fallback_analysis, generate_personalized_tips,
)
from harmony.services.ai_post_suggestions import (
    enhance_post, fallback_hashtags, fallback_suggestions, generate_post_suggestions,
)
from harmony.services.llm_client import LLMClient


def fake_client(reply=None, error=None):
    client = Mock(spec=LLMClient)
    client.is_configured.return_value = True
    if error is not None:
        client.complete_json.side_effect = error
    else:
        client.complete_json.return_value = reply
    return client


@pytest.fixture
def user():
    return User(id=1, username="alice", password="x", email="alice@example.com", name="Alice",
                title="Data Scientist", industry="Health Care", skills=["Machine Learning", "SQL"])


class TestLLMClient:

    def test_short_key_is_not_configured(self):
        assert not LLMClient(api_key="sk-short").is_configured()
        assert LLMClient(api_key="sk-" + "x" * 40).is_configured()

    def test_complete_json_requires_key(self):
        with pytest.raises(RuntimeError):
            LLMClient(api_key="").complete_json("system", "user")

    def test_extracts_json_from_code_fence(self):
        client = LLMClient(api_key="")
        assert client._extract_json('```json\n{"a": 1}\n```') == {"a": 1}

    def test_non_object_reply_is_rejected(self):
        client = LLMClient(api_key="sk-" + "x" * 40)
        client._call_api = Mock(return_value="[1, 2]")
        with pytest.raises(ValueError):
            client.complete_json("system", "user")

    def test_connection_check_offline(self):
        assert LLMClient(api_key="").test_connection() is False


class TestPostSuggestions:

    def test_fallback_templates(self):
        suggestions = fallback_suggestions("cloud computing")
        assert len(suggestions) == 3
        assert all("cloud computing" in s["content"] for s in suggestions)
        assert all(s["hashtags"][0] == "cloudcomputing" for s in suggestions)

    def test_uses_model_reply(self, user):
        client = fake_client({"suggestions": [
            {"title": "T", "content": "Body", "tone": "personal", "hashtags": ["#AI", "ML"]},
            {"title": "Empty"},
        ]})
        result = generate_post_suggestions("AI", user, client=client)
        assert result == [{"title": "T", "content": "Body", "tone": "personal", "hashtags": ["AI", "ML"]}]
        prompt = client.complete_json.call_args[0][1]
        assert "Data Scientist" in prompt

    def test_falls_back_on_error(self):
        result = generate_post_suggestions("AI", client=fake_client(error=RuntimeError("boom")))
        assert result == fallback_suggestions("AI")

    def test_falls_back_on_empty_reply(self):
        result = generate_post_suggestions("AI", client=fake_client({"suggestions": []}))
        assert result == fallback_suggestions("AI")


class TestEnhance:

    def test_fallback_hashtags_from_profile(self, user):
        assert fallback_hashtags(user) == ["HealthCare", "MachineLearning", "SQL", "Professional", "Networking"]
        assert fallback_hashtags(None) == ["Professional", "Networking"]

    def test_uses_model_reply(self, user):
        client = fake_client({"enhanced_content": "Better", "suggested_hashtags": ["#Growth"]})
        assert enhance_post("Draft", user, client=client) == {
            "enhanced_content": "Better", "suggested_hashtags": ["Growth"],
        }

    def test_error_returns_original(self, user):
        result = enhance_post("Draft", user, client=fake_client(error=ValueError("bad json")))
        assert result["enhanced_content"] == "Draft"
        assert result["suggested_hashtags"] == fallback_hashtags(user)


class TestVideoAnalysis:

    @pytest.fixture
    def video(self, tmp_path):
        path = tmp_path / "cv.mp4"
        path.write_bytes(b"0" * 2048)
        return str(path)

    def test_unconfigured_uses_static_feedback(self, video):
        assert analyze_video_resume(video, client=LLMClient(api_key="")) == fallback_analysis()

    def test_score_is_clamped(self, video, user):
        client = fake_client({"summary": "Solid", "key_strengths": ["Clear"], "overall_score": 14})
        result = analyze_video_resume(video, user, client=client)
        assert result["overall_score"] == 10
        assert result["summary"] == "Solid"
        assert result["improvement_areas"] == fallback_analysis()["improvement_areas"]

    def test_non_numeric_score_uses_default(self, video):
        result = analyze_video_resume(video, client=fake_client({"overall_score": "great"}))
        assert result["overall_score"] == 7

    def test_infinite_score_uses_default(self, video):
        result = analyze_video_resume(video, client=fake_client({"overall_score": float("inf")}))
        assert result["overall_score"] == 7

    def test_missing_file_falls_back(self, tmp_path):
        client = fake_client({"overall_score": 9})
        result = analyze_video_resume(str(tmp_path / "missing.mp4"), client=client)
        assert result == fallback_analysis()
        client.complete_json.assert_not_called()

    def test_tips(self, user):
        assert generate_personalized_tips(user, client=LLMClient(api_key="")) == DEFAULT_TIPS
        client = fake_client({"tips": ["Smile", "Keep it short"]})
        assert generate_personalized_tips(user, client=client) == ["Smile", "Keep it short"]
        assert generate_personalized_tips(user, client=fake_client(error=RuntimeError())) == DEFAULT_TIPS
