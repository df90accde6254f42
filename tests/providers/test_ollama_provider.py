import asyncio
import unittest

import httpx

from cline_cli.app_config import ProviderConfig
from cline_cli.chunk import ErrorChunk, TextChunk
from cline_cli.providers.ollama_provider import OllamaProvider, parse_frame
from tests.providers.fakes import RecordingTransport, collect, split_every


class OllamaParseFrameTests(unittest.TestCase):
    def test_content_frame(self) -> None:
        self.assertEqual(("Hel", False), parse_frame('{"message":{"content":"Hel"}}'))

    def test_done_frame_with_text(self) -> None:
        self.assertEqual(("lo", True), parse_frame('{"message":{"content":"lo"},"done":true}'))

    def test_done_frame_without_text(self) -> None:
        self.assertEqual((None, True), parse_frame('{"message":{"role":"assistant","content":""},"done":true}'))

    def test_blank_and_malformed_lines(self) -> None:
        self.assertEqual((None, False), parse_frame(""))
        self.assertEqual((None, False), parse_frame("   "))
        self.assertEqual((None, False), parse_frame("data: {}"))


class OllamaProviderStreamTests(unittest.TestCase):
    def _provider(self, transport: RecordingTransport, **overrides) -> OllamaProvider:
        return OllamaProvider(ProviderConfig(api_provider="ollama", **overrides), transport=transport)

    def test_two_frames_concatenate(self) -> None:
        body = b'{"message":{"content":"Hel"}}\n{"message":{"content":"lo"},"done":true}\n'
        for size in (len(body), 2, 1):
            with self.subTest(size=size):
                transport = RecordingTransport(split_every(body, size))
                chunks = asyncio.run(collect(self._provider(transport).create_message("s", "u")))
                self.assertEqual([TextChunk("Hel"), TextChunk("lo")], chunks)
                self.assertEqual("Hello", "".join(c.text for c in chunks))

    def test_done_flag_stops_stream(self) -> None:
        body = b'{"message":{"content":"a"},"done":true}\n{"message":{"content":"b"}}\n'
        transport = RecordingTransport([body])
        chunks = asyncio.run(collect(self._provider(transport).create_message("s", "u")))
        self.assertEqual([TextChunk("a")], chunks)

    def test_request_envelope_has_no_auth(self) -> None:
        transport = RecordingTransport([b'{"done":true}\n'])
        provider = self._provider(transport, base_url="http://gpu-box:11434/", model_id="qwen2.5-coder")
        asyncio.run(collect(provider.create_message("sys", "hi")))

        request = transport.requests[0]
        self.assertEqual("http://gpu-box:11434/api/chat", str(request.url))
        self.assertNotIn("authorization", request.headers)
        self.assertNotIn("x-api-key", request.headers)
        body = transport.last_json
        self.assertEqual("qwen2.5-coder", body["model"])
        self.assertEqual("sys", body["messages"][0]["content"])
        self.assertTrue(body["stream"])

    def test_default_endpoint(self) -> None:
        transport = RecordingTransport([b'{"done":true}\n'])
        provider = self._provider(transport)
        asyncio.run(collect(provider.create_message("s", "u")))
        self.assertEqual("http://localhost:11434/api/chat", str(transport.requests[0].url))
        self.assertEqual("llama3.2", provider.get_model().id)

    def test_server_not_running(self) -> None:
        transport = RecordingTransport(error=httpx.ConnectError("All connection attempts failed"))
        chunks = asyncio.run(collect(self._provider(transport).create_message("s", "u")))
        self.assertEqual([ErrorChunk("Error: All connection attempts failed")], chunks)


if __name__ == "__main__":
    unittest.main()
