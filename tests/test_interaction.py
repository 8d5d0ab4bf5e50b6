"""
Unit tests for the analyze/generate interaction controller
"""

import asyncio

import pytest

from conftest import FakeModel
from core.domain.errors import INVALID_CREDENTIAL_MESSAGE, InvalidCredentialError
from core.domain.mode import AppMode
from core.domain.models import SentenceAnalysis
from core.services.interaction import (
    EMPTY_CRITERIA_MESSAGE,
    EMPTY_SENTENCE_MESSAGE,
    GENERATION_FAILED_MESSAGE,
    MALFORMED_ANALYSIS_MESSAGE,
    InteractionController,
    Status,
)


def _analysis(sentence: str) -> SentenceAnalysis:
    return SentenceAnalysis.model_validate(
        {
            "fullSentence": sentence,
            "classification": "Oración simple",
            "structure": [{"text": sentence, "label": "SV - Predicado verbal"}],
        }
    )


class FakeGateway:
    """`SyntaxGateway` with scripted replies and optional gates per input."""

    def __init__(self, analyses=None, sentences=None, gates=None, error=None):
        self.analyses = analyses or {}
        self.sentences = sentences or {}
        self.gates = gates or {}
        self.error = error
        self.calls = []

    async def _wait(self, text):
        self.calls.append(text)
        gate = self.gates.get(text)
        if gate is not None:
            await gate.wait()
        if self.error is not None:
            raise self.error

    async def analyze_sentence(self, sentence):
        await self._wait(sentence)
        return self.analyses.get(sentence)

    async def generate_sentence(self, criteria):
        await self._wait(criteria)
        return self.sentences.get(criteria)


class TestAnalyze:
    def test_one_shot_analysis(self, make_gateway, one_shot_json):
        controller = InteractionController(make_gateway(FakeModel([one_shot_json])))

        state = asyncio.run(controller.analyze("Juan come manzanas"))

        assert state.status is Status.SUCCESS
        assert state.error is None
        assert [element.label for element in state.analysis.structure] == ["SN Sujeto", "SV - Predicado verbal"]

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_empty_sentence_never_reaches_gateway(self, text):
        gateway = FakeGateway()
        controller = InteractionController(gateway)

        state = asyncio.run(controller.analyze(text))

        assert state.status is Status.ERROR
        assert state.error == EMPTY_SENTENCE_MESSAGE
        assert gateway.calls == []

    def test_malformed_response_becomes_error_state(self):
        controller = InteractionController(FakeGateway())

        state = asyncio.run(controller.analyze("Juan come"))

        assert state.status is Status.ERROR
        assert state.error == MALFORMED_ANALYSIS_MESSAGE
        assert state.analysis is None

    def test_gateway_error_message_is_shown(self):
        controller = InteractionController(FakeGateway(error=InvalidCredentialError()))

        state = asyncio.run(controller.analyze("Juan come"))

        assert state.status is Status.ERROR
        assert state.error == INVALID_CREDENTIAL_MESSAGE

    def test_new_analysis_replaces_previous(self):
        gateway = FakeGateway(analyses={"a": _analysis("a"), "b": _analysis("b")})
        controller = InteractionController(gateway)

        async def scenario():
            await controller.analyze("a")
            return await controller.analyze("b")

        state = asyncio.run(scenario())

        assert state.analysis.full_sentence == "b"


class TestGenerate:
    def test_generated_sentence_clears_analysis(self):
        gateway = FakeGateway(
            analyses={"Juan come": _analysis("Juan come")},
            sentences={"condicional": "Si vienes, te espero."},
        )
        controller = InteractionController(gateway)

        async def scenario():
            await controller.analyze("Juan come")
            controller.switch_mode(AppMode.GENERATE)
            return await controller.generate("condicional")

        state = asyncio.run(scenario())

        assert state.status is Status.SUCCESS
        assert state.mode is AppMode.GENERATE
        assert state.generated_sentence == "Si vienes, te espero."
        assert state.analysis is None

    def test_empty_criteria(self):
        gateway = FakeGateway()
        controller = InteractionController(gateway, mode=AppMode.GENERATE)

        state = asyncio.run(controller.generate("  "))

        assert state.error == EMPTY_CRITERIA_MESSAGE
        assert gateway.calls == []

    def test_empty_generation_is_an_error(self):
        controller = InteractionController(FakeGateway(sentences={"x": ""}), mode=AppMode.GENERATE)

        state = asyncio.run(controller.generate("x"))

        assert state.status is Status.ERROR
        assert state.error == GENERATION_FAILED_MESSAGE


class TestModeSwitching:
    def test_switch_clears_other_result_and_error(self):
        controller = InteractionController(FakeGateway())
        asyncio.run(controller.analyze(""))

        state = controller.switch_mode(AppMode.GENERATE)

        assert state.mode is AppMode.GENERATE
        assert state.status is Status.IDLE
        assert state.error is None

    def test_switch_invalidates_pending_request(self):
        gate = asyncio.Event()
        gateway = FakeGateway(analyses={"lento": _analysis("lento")}, gates={"lento": gate})
        controller = InteractionController(gateway)

        async def scenario():
            pending = asyncio.create_task(controller.analyze("lento"))
            await asyncio.sleep(0)
            controller.switch_mode(AppMode.GENERATE)
            gate.set()
            await pending
            return controller.state

        state = asyncio.run(scenario())

        assert state.mode is AppMode.GENERATE
        assert state.analysis is None
        assert state.status is Status.IDLE

    def test_switch_after_success_returns_to_idle(self):
        controller = InteractionController(FakeGateway(analyses={"a": _analysis("a")}))
        asyncio.run(controller.analyze("a"))

        state = controller.switch_mode(AppMode.GENERATE)

        assert state.status is Status.IDLE
        assert state.analysis is None
        assert state.generated_sentence is None

    def test_switch_keeps_success_of_the_kept_result(self):
        controller = InteractionController(FakeGateway(sentences={"x": "Llueve."}), mode=AppMode.GENERATE)
        asyncio.run(controller.generate("x"))

        state = controller.switch_mode(AppMode.GENERATE)

        assert state.status is Status.SUCCESS
        assert state.generated_sentence == "Llueve."


class TestStaleResponses:
    """A slow response never overwrites a newer request"""

    def test_late_response_is_discarded(self):
        gate = asyncio.Event()
        gateway = FakeGateway(
            analyses={"lento": _analysis("lento"), "rápido": _analysis("rápido")},
            gates={"lento": gate},
        )
        controller = InteractionController(gateway)

        async def scenario():
            slow = asyncio.create_task(controller.analyze("lento"))
            await asyncio.sleep(0)
            assert controller.state.is_loading
            fast = await controller.analyze("rápido")
            gate.set()
            await slow
            return fast, controller.state

        fast, final = asyncio.run(scenario())

        assert fast.analysis.full_sentence == "rápido"
        assert final.analysis.full_sentence == "rápido"
        assert final.status is Status.SUCCESS
        assert gateway.calls == ["lento", "rápido"]

    def test_tokens_increase(self):
        controller = InteractionController(FakeGateway(analyses={"a": _analysis("a")}))
        before = controller.current_token

        asyncio.run(controller.analyze("a"))

        assert controller.current_token > before
