"""
Unit tests for the model gateway (retries, backoff, decoding)
"""

import asyncio

import pytest

from adapters.syntax_analyst import parse_analysis_response, strip_code_fence
from conftest import FakeModel, FakeStatusError
from core.domain.errors import (
    INVALID_CREDENTIAL_MESSAGE,
    SERVICE_UNAVAILABLE_MESSAGE,
    CredentialNotConfiguredError,
    InvalidCredentialError,
    RequestRejectedError,
    ServiceUnavailableError,
)
from core.domain.models import SentenceAnalysis
from core.services.retry import RetryState


class TestRetryBudget:
    """Transient failures are retried with exponential backoff"""

    def test_persistent_network_failure_makes_three_attempts(self, make_gateway, sleep):
        model = FakeModel([ConnectionError("boom")] * 5)
        gateway = make_gateway(model)

        with pytest.raises(ServiceUnavailableError) as excinfo:
            asyncio.run(gateway.call("hola", expect_json=False))

        assert len(model.calls) == 3
        assert sleep.waits == [2.0, 4.0]
        assert str(excinfo.value) == SERVICE_UNAVAILABLE_MESSAGE
        assert isinstance(excinfo.value.__cause__, ConnectionError)

    def test_server_errors_are_retried(self, make_gateway, sleep):
        model = FakeModel([FakeStatusError(503), FakeStatusError(500), FakeStatusError(502)])
        gateway = make_gateway(model)

        with pytest.raises(ServiceUnavailableError):
            asyncio.run(gateway.call("hola", expect_json=False))

        assert len(model.calls) == 3
        assert sleep.waits == [2.0, 4.0]

    def test_recovers_after_transient_failure(self, make_gateway, sleep):
        model = FakeModel([TimeoutError("slow"), "  Si lloviera, me quedaría en casa.  "])
        gateway = make_gateway(model)

        result = asyncio.run(gateway.call("hola", expect_json=False))

        assert result == "Si lloviera, me quedaría en casa."
        assert len(model.calls) == 2
        assert sleep.waits == [2.0]

    def test_empty_body_counts_as_failed_attempt(self, make_gateway, sleep, one_shot_json):
        model = FakeModel(["", "   ", one_shot_json])
        gateway = make_gateway(model)

        result = asyncio.run(gateway.call("hola", expect_json=True))

        assert isinstance(result, SentenceAnalysis)
        assert len(model.calls) == 3
        assert sleep.waits == [2.0, 4.0]

    def test_empty_body_every_time_exhausts_budget(self, make_gateway, sleep):
        model = FakeModel([None, None, None])
        gateway = make_gateway(model)

        with pytest.raises(ServiceUnavailableError):
            asyncio.run(gateway.call("hola", expect_json=True))

        assert len(model.calls) == 3

    def test_custom_budget(self, make_gateway, sleep):
        model = FakeModel([ConnectionError("x")] * 4)
        gateway = make_gateway(model, max_attempts=4)

        with pytest.raises(ServiceUnavailableError):
            asyncio.run(gateway.call("hola", expect_json=False))

        assert sleep.waits == [2.0, 4.0, 8.0]


class TestRetryState:
    def test_schedule(self):
        state = RetryState(max_attempts=3, backoff_base=2.0)

        assert state.next_delay is None
        assert state.record_failure(ConnectionError()) == 2.0
        assert state.record_failure(ConnectionError()) == 4.0
        assert state.record_failure(ConnectionError()) is None
        assert state.exhausted
        assert isinstance(state.last_error, ConnectionError)

    def test_single_attempt_never_waits(self):
        state = RetryState(max_attempts=1)

        assert state.record_failure(TimeoutError()) is None
        assert state.exhausted

    def test_budget_must_be_positive(self):
        with pytest.raises(ValueError):
            RetryState(max_attempts=0)


class TestShortCircuit:
    """Credential and client errors are never retried"""

    def test_missing_credential_fails_before_any_call(self, make_gateway, sleep):
        gateway = make_gateway(None)

        with pytest.raises(CredentialNotConfiguredError):
            asyncio.run(gateway.call("hola", expect_json=True))

        assert sleep.waits == []

    def test_invalid_api_key_message(self, make_gateway, sleep):
        model = FakeModel([FakeStatusError(400, "API key not valid. Please pass a valid API key.")])
        gateway = make_gateway(model)

        with pytest.raises(InvalidCredentialError) as excinfo:
            asyncio.run(gateway.call("hola", expect_json=True))

        assert len(model.calls) == 1
        assert sleep.waits == []
        assert str(excinfo.value) == INVALID_CREDENTIAL_MESSAGE

    def test_invalid_key_without_status(self, make_gateway, sleep):
        model = FakeModel([RuntimeError("api key not valid")])
        gateway = make_gateway(model)

        with pytest.raises(InvalidCredentialError):
            asyncio.run(gateway.call("hola", expect_json=False))

        assert len(model.calls) == 1

    @pytest.mark.parametrize("status", [401, 403])
    def test_auth_statuses_map_to_credential_error(self, make_gateway, sleep, status):
        model = FakeModel([FakeStatusError(status)])
        gateway = make_gateway(model)

        with pytest.raises(InvalidCredentialError):
            asyncio.run(gateway.call("hola", expect_json=False))

        assert len(model.calls) == 1
        assert sleep.waits == []

    @pytest.mark.parametrize("status", [400, 404, 429])
    def test_other_client_errors_fail_fast(self, make_gateway, sleep, status):
        model = FakeModel([FakeStatusError(status)])
        gateway = make_gateway(model)

        with pytest.raises(RequestRejectedError) as excinfo:
            asyncio.run(gateway.call("hola", expect_json=False))

        assert excinfo.value.status_code == status
        assert len(model.calls) == 1
        assert sleep.waits == []


class TestDecoding:
    """JSON-mode responses are decoded and validated, never raised"""

    def test_one_shot_example_yields_subject_and_predicate(self, make_gateway, one_shot_json):
        model = FakeModel([one_shot_json])
        gateway = make_gateway(model)

        result = asyncio.run(gateway.analyze_sentence("Juan come manzanas"))

        assert isinstance(result, SentenceAnalysis)
        assert [element.label for element in result.structure] == ["SN Sujeto", "SV - Predicado verbal"]

    def test_analysis_prompt_embeds_sentence_and_requests_json(self, make_gateway, one_shot_json):
        model = FakeModel([one_shot_json])
        gateway = make_gateway(model)

        asyncio.run(gateway.analyze_sentence("El libro que me prestaste es muy interesante"))

        prompt, expect_json = model.calls[0]
        assert "'El libro que me prestaste es muy interesante'" in prompt
        assert "NGLE" in prompt
        assert expect_json is True

    def test_generation_prompt_is_plain_text(self, make_gateway):
        model = FakeModel(["Quien canta su mal espanta.\n"])
        gateway = make_gateway(model)

        result = asyncio.run(gateway.generate_sentence("Oración con relativa libre de sujeto"))

        prompt, expect_json = model.calls[0]
        assert result == "Quien canta su mal espanta."
        assert '"Oración con relativa libre de sujeto"' in prompt
        assert expect_json is False

    def test_invalid_json_is_soft_failure(self, make_gateway, sleep):
        model = FakeModel(["{not json"])
        gateway = make_gateway(model)

        assert asyncio.run(gateway.analyze_sentence("Juan come")) is None
        assert len(model.calls) == 1
        assert sleep.waits == []

    def test_wrong_shape_is_soft_failure(self, make_gateway):
        model = FakeModel(['{"fullSentence": "Juan come", "structure": []}'])
        gateway = make_gateway(model)

        assert asyncio.run(gateway.analyze_sentence("Juan come")) is None

    def test_malformed_payload_is_logged(self, caplog):
        with caplog.at_level("ERROR"):
            assert parse_analysis_response("[1, 2") is None
        assert "[1, 2" in caplog.text

    @pytest.mark.parametrize("depth", [300, 1200])
    def test_deeply_nested_tree_is_soft_failure(self, make_gateway, sleep, depth):
        node = '{"text": "a", "label": "SN", "children": [' * depth + '{"text": "a", "label": "N (N)"}' + "]}" * depth
        body = '{"fullSentence": "a", "classification": "x", "structure": [' + node + "]}"
        model = FakeModel([body])
        gateway = make_gateway(model)

        assert asyncio.run(gateway.analyze_sentence("a")) is None
        assert len(model.calls) == 1
        assert sleep.waits == []

    def test_moderately_nested_tree_is_accepted(self):
        depth = 40
        node = '{"text": "a", "label": "SN", "children": [' * depth + '{"text": "a", "label": "N (N)"}' + "]}" * depth
        body = '{"fullSentence": "a", "classification": "x", "structure": [' + node + "]}"

        result = parse_analysis_response(body)

        assert result is not None
        assert result.total_nodes == depth + 1


class TestFenceStripping:
    """Fenced and unfenced bodies decode to the same document"""

    @pytest.mark.parametrize(
        "wrapper",
        [
            "```json\n{body}\n```",
            "```JSON\n{body}\n```",
            "```\n{body}\n```",
            "  ```json {body} ```  ",
            "{body}",
        ],
    )
    def test_fenced_variants_parse_identically(self, wrapper, one_shot_json):
        fenced = wrapper.replace("{body}", one_shot_json)

        assert parse_analysis_response(fenced) == parse_analysis_response(one_shot_json)
        assert parse_analysis_response(fenced) is not None

    def test_strip_leaves_unfenced_text_alone(self):
        assert strip_code_fence('  {"a": 1}\n') == '{"a": 1}'
