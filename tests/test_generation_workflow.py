"""Tests for the generation workflow: sequential variations, all-or-nothing history, subject lines."""

import asyncio
import os
import sys
import tempfile
import unittest
from pathlib import Path

os.environ.setdefault("EMAIL_WRITER_DATA_DIR", tempfile.mkdtemp(prefix="email-writer-test-"))
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import httpx

from email_writer.errors import GenerationError
from email_writer.history.storage import LocalStorage
from email_writer.llm.client import LocalCompletionClient
from email_writer.llm.provider import ChatCompletionClient
from email_writer.workflow.generation import generate_emails, generate_subject_line
from email_writer.workflow.state import (
    APOLOGY,
    Failed,
    GenerationStarted,
    Idle,
    SelectTemplate,
    SetFreeText,
    SetLength,
    SetSubjectLine,
    SetTone,
    SetVariationCount,
    SubjectStarted,
)
from email_writer.workflow.store import AppStore


class FakeCompleter:
    """Records prompts; answers "Draft N" or raises on the call index in fail_on."""

    def __init__(self, fail_on: int | None = None, reply: str | None = None):
        self.prompts: list[str] = []
        self._fail_on = fail_on
        self._reply = reply

    async def generate(self, prompt: str) -> str:
        index = len(self.prompts)
        self.prompts.append(prompt)
        await asyncio.sleep(0)
        if self._fail_on is not None and index == self._fail_on:
            raise GenerationError()
        if self._reply is not None:
            return self._reply
        return f"  Draft {index + 1}\n"


def _provider_completer(status_code: int, json_body: dict | None = None) -> tuple[LocalCompletionClient, list]:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(status_code, json=json_body or {"error": {"message": "rate limited"}})

    provider = ChatCompletionClient(
        api_key="test-key",
        base_url="https://llm.test/v1",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )
    return LocalCompletionClient(provider), calls


class TestGenerateEmails(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.storage_path = Path(self._tmp.name) / "storage.json"
        self.store = AppStore.load(LocalStorage(self.storage_path))

    def tearDown(self):
        self._tmp.cleanup()

    def test_q3_budget_scenario(self):
        """One variation: one call with content, brief fragment and tone; one history entry."""
        self.store.dispatch(SetFreeText(text="ask about the Q3 budget"))
        self.store.dispatch(SetTone(tone="concise"))
        self.store.dispatch(SetLength(length="brief"))
        completer = FakeCompleter()
        item = asyncio.run(generate_emails(self.store, completer))

        self.assertEqual(len(completer.prompts), 1)
        prompt = completer.prompts[0]
        self.assertIn("ask about the Q3 budget", prompt)
        self.assertIn("2-3 sentences maximum", prompt)
        self.assertIn("concise", prompt)

        self.assertIsNotNone(item)
        self.assertEqual(item.emails, ("Draft 1",))
        self.assertEqual(item.subject_line, "No subject")
        self.assertIsNone(item.template_name)
        state = self.store.state
        self.assertEqual(state.history, (item,))
        self.assertEqual(state.results, ("Draft 1",))
        self.assertIsInstance(state.generation, Idle)
        persisted = AppStore.load(LocalStorage(self.storage_path)).state.history
        self.assertEqual(persisted, (item,))

    def test_thank_you_template_two_variations(self):
        """Two sequential calls, each with the template content and its own variation note."""
        self.store.dispatch(SetFreeText(text="ignored while template is active"))
        self.store.dispatch(SelectTemplate(template_id="thank-you"))
        self.store.dispatch(SetVariationCount(count=2))
        completer = FakeCompleter()
        item = asyncio.run(generate_emails(self.store, completer))

        self.assertEqual(len(completer.prompts), 2)
        template_content = self.store.state.to_request().template.content
        for i, prompt in enumerate(completer.prompts, 1):
            self.assertIn(template_content, prompt)
            self.assertIn(f"variation {i} of 2", prompt)
            self.assertNotIn("ignored while template is active", prompt)
        self.assertEqual(item.template_name, "Thank You")
        self.assertEqual(item.template_id, "thank-you")
        self.assertEqual(item.source_description, "Template: Thank You")
        self.assertEqual(item.emails, ("Draft 1", "Draft 2"))

    def test_n_variations_in_order(self):
        for n in (1, 3, 7):
            self.store.dispatch(SetFreeText(text="status update"))
            self.store.dispatch(SetVariationCount(count=n))
            item = asyncio.run(generate_emails(self.store, FakeCompleter()))
            self.assertEqual(item.variation_count, n)
            self.assertEqual(item.emails, tuple(f"Draft {i}" for i in range(1, n + 1)))

    def test_failure_discards_partial_results(self):
        """A failure on call 2 of 3 stops the loop; no history, apology shown, inputs kept."""
        self.store.dispatch(SetFreeText(text="ask about the Q3 budget"))
        self.store.dispatch(SetTone(tone="warm"))
        self.store.dispatch(SetVariationCount(count=3))
        completer = FakeCompleter(fail_on=1)
        item = asyncio.run(generate_emails(self.store, completer))

        self.assertIsNone(item)
        self.assertEqual(len(completer.prompts), 2)
        state = self.store.state
        self.assertEqual(state.results, (APOLOGY,))
        self.assertIsInstance(state.generation, Failed)
        self.assertEqual(state.history, ())
        self.assertEqual(state.free_text, "ask about the Q3 budget")
        self.assertEqual(state.tone, "warm")
        self.assertFalse(self.storage_path.exists())

    def test_upstream_429_yields_generic_error(self):
        """HTTP 429 from the provider: apology shown, error state, no history entry."""
        self.store.dispatch(SetFreeText(text="ask about the Q3 budget"))
        completer, calls = _provider_completer(429)
        item = asyncio.run(generate_emails(self.store, completer))

        self.assertIsNone(item)
        self.assertEqual(len(calls), 1)
        state = self.store.state
        self.assertEqual(state.results, (APOLOGY,))
        self.assertEqual(state.generation, Failed(reason=str(GenerationError())))
        self.assertEqual(state.history, ())

    def test_unexpected_exception_is_contained(self):
        class Broken:
            async def generate(self, prompt: str) -> str:
                raise RuntimeError("bug")

        self.store.dispatch(SetFreeText(text="x"))
        self.assertIsNone(asyncio.run(generate_emails(self.store, Broken())))
        self.assertEqual(self.store.state.results, (APOLOGY,))

    def test_refuses_without_content(self):
        self.store.dispatch(SetFreeText(text="   "))
        completer = FakeCompleter()
        self.assertIsNone(asyncio.run(generate_emails(self.store, completer)))
        self.assertEqual(completer.prompts, [])
        self.assertIsInstance(self.store.state.generation, Idle)

    def test_refuses_while_in_flight(self):
        self.store.dispatch(SetFreeText(text="x"))
        self.store.dispatch(GenerationStarted(total=1))
        completer = FakeCompleter()
        self.assertIsNone(asyncio.run(generate_emails(self.store, completer)))
        self.assertEqual(completer.prompts, [])

    def test_retry_after_failure(self):
        self.store.dispatch(SetFreeText(text="x"))
        asyncio.run(generate_emails(self.store, FakeCompleter(fail_on=0)))
        item = asyncio.run(generate_emails(self.store, FakeCompleter()))
        self.assertIsNotNone(item)
        self.assertEqual(self.store.state.history, (item,))

    def test_history_is_most_recent_first(self):
        self.store.dispatch(SetFreeText(text="first"))
        first = asyncio.run(generate_emails(self.store, FakeCompleter()))
        self.store.dispatch(SetFreeText(text="second"))
        second = asyncio.run(generate_emails(self.store, FakeCompleter()))
        self.assertEqual([i.id for i in self.store.state.history], [second.id, first.id])

    def test_history_cap(self):
        self.store.dispatch(SetFreeText(text="x"))
        for _ in range(3):
            asyncio.run(generate_emails(self.store, FakeCompleter(), max_history=2))
        self.assertEqual(len(self.store.state.history), 2)

    def test_history_records_current_subject(self):
        self.store.dispatch(SetFreeText(text="x"))
        self.store.dispatch(SetSubjectLine(text="Quick question"))
        item = asyncio.run(generate_emails(self.store, FakeCompleter()))
        self.assertEqual(item.subject_line, "Quick question")


class TestGenerateSubjectLine(unittest.TestCase):
    def setUp(self):
        self.store = AppStore()

    def test_subject_cleaned_and_stored(self):
        self.store.dispatch(SetFreeText(text="ask about the Q3 budget"))
        self.store.dispatch(SetTone(tone="persuasive"))
        completer = FakeCompleter(reply='"Q3 Budget: Quick Check-in"\n')
        subject = asyncio.run(generate_subject_line(self.store, completer))
        self.assertEqual(subject, "Q3 Budget: Quick Check-in")
        self.assertEqual(self.store.state.subject_line, "Q3 Budget: Quick Check-in")
        self.assertIsInstance(self.store.state.subject, Idle)
        self.assertIn("Tone: persuasive", completer.prompts[0])
        self.assertIn('Email content: "ask about the Q3 budget"', completer.prompts[0])

    def test_subject_uses_template_content(self):
        self.store.dispatch(SelectTemplate(template_id="meeting-request"))
        completer = FakeCompleter(reply="Meeting next week?")
        asyncio.run(generate_subject_line(self.store, completer))
        self.assertIn("I would like to schedule a meeting", completer.prompts[0])

    def test_subject_failure_keeps_previous(self):
        self.store.dispatch(SetFreeText(text="x"))
        self.store.dispatch(SetSubjectLine(text="Existing"))
        self.assertIsNone(asyncio.run(generate_subject_line(self.store, FakeCompleter(fail_on=0))))
        self.assertEqual(self.store.state.subject_line, "Existing")
        self.assertIsInstance(self.store.state.subject, Failed)

    def test_subject_guards(self):
        completer = FakeCompleter()
        self.assertIsNone(asyncio.run(generate_subject_line(self.store, completer)))
        self.store.dispatch(SetFreeText(text="x"))
        self.store.dispatch(SubjectStarted())
        self.assertIsNone(asyncio.run(generate_subject_line(self.store, completer)))
        self.assertEqual(completer.prompts, [])

    def test_concurrent_with_email_generation(self):
        """Subject and email generation run independently on the same store."""
        self.store.dispatch(SetFreeText(text="x"))
        self.store.dispatch(SetVariationCount(count=2))

        async def run():
            return await asyncio.gather(
                generate_emails(self.store, FakeCompleter()),
                generate_subject_line(self.store, FakeCompleter(reply="Subject")),
            )

        item, subject = asyncio.run(run())
        self.assertIsNotNone(item)
        self.assertEqual(subject, "Subject")
        self.assertEqual(item.emails, ("Draft 1", "Draft 2"))
        self.assertIsInstance(self.store.state.generation, Idle)
        self.assertIsInstance(self.store.state.subject, Idle)


if __name__ == "__main__":
    unittest.main()
