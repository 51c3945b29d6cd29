#!/usr/bin/env python3
"""
Tests for the LLM client module.

These tests verify the Gemini and OpenAI clients against mocked SDKs,
including chat sessions, grounding sources and image generation.
"""

import base64
import unittest
from unittest.mock import patch, MagicMock

from seowizard.llm_client import (
    ChatReply, GeneratedImage, GeminiClient, OpenAIClient, create_llm_client
)


def _web_chunk(title, uri):
    chunk = MagicMock()
    chunk.web.title = title
    chunk.web.uri = uri
    return chunk


class TestGeneratedImage(unittest.TestCase):
    """Test cases for the GeneratedImage container."""

    def test_to_data_uri(self):
        image = GeneratedImage(data=b"abc", mime_type="image/png")
        self.assertEqual(image.to_data_uri(), "data:image/png;base64,YWJj")


class TestGeminiClient(unittest.TestCase):
    """Test cases for the GeminiClient class."""

    def setUp(self):
        """Set up test fixtures."""
        self.genai_patcher = patch('seowizard.llm_client.genai.Client')
        self.mock_genai_cls = self.genai_patcher.start()
        self.mock_client = MagicMock()
        self.mock_genai_cls.return_value = self.mock_client

        self.client = GeminiClient(api_key="test_api_key", model="gemini-test", image_model="gemini-image-test")

    def tearDown(self):
        """Tear down test fixtures."""
        self.genai_patcher.stop()

    def test_initialization(self):
        """Test that the client initializes correctly."""
        self.mock_genai_cls.assert_called_once_with(api_key="test_api_key")
        self.assertEqual(self.client.model, "gemini-test")
        self.assertEqual(self.client.image_model, "gemini-image-test")

    def test_start_chat(self):
        """Test that a chat is opened with the model and the system instruction."""
        chat = self.client.start_chat("You are a writer.")

        self.assertIs(chat, self.mock_client.chats.create.return_value)
        kwargs = self.mock_client.chats.create.call_args.kwargs
        self.assertEqual(kwargs["model"], "gemini-test")
        self.assertEqual(kwargs["config"].system_instruction, "You are a writer.")

    def test_send_message_with_sources(self):
        """Test that grounding chunks come back as sources."""
        response = MagicMock()
        response.text = "Research summary"
        response.candidates[0].grounding_metadata.grounding_chunks = [
            _web_chunk("Runner's World", "https://example.com/a"),
            _web_chunk(None, "https://example.com/b"),
        ]
        response.usage_metadata.prompt_token_count = 10
        response.usage_metadata.candidates_token_count = 20
        response.usage_metadata.total_token_count = 30
        chat = MagicMock()
        chat.send_message.return_value = response

        with patch.object(self.client, 'log_token_usage') as mock_log:
            reply = self.client.send_message(chat, "STEP 1")

        chat.send_message.assert_called_once_with("STEP 1")
        self.assertEqual(reply.text, "Research summary")
        self.assertEqual(reply.sources, [
            {"title": "Runner's World", "uri": "https://example.com/a"},
            {"title": "Source", "uri": "https://example.com/b"},
        ])
        mock_log.assert_called_once_with(
            model="gemini-test", prompt_tokens=10, completion_tokens=20, total_tokens=30
        )

    def test_send_message_without_candidates(self):
        """Test a reply with no candidates and no text."""
        response = MagicMock()
        response.text = None
        response.candidates = []
        chat = MagicMock()
        chat.send_message.return_value = response

        reply = self.client.send_message(chat, "STEP 2")

        self.assertEqual(reply, ChatReply(text="", sources=[]))

    def test_send_message_error_is_raised(self):
        """Test that chat errors propagate."""
        chat = MagicMock()
        chat.send_message.side_effect = Exception("API Error")

        with self.assertRaises(Exception) as context:
            self.client.send_message(chat, "STEP 1")
        self.assertIn("API Error", str(context.exception))

    def test_generate_image(self):
        """Test that the first inline image part is returned."""
        text_part = MagicMock()
        text_part.inline_data = None
        image_part = MagicMock()
        image_part.inline_data.data = b"PNGDATA"
        image_part.inline_data.mime_type = "image/png"
        response = MagicMock()
        response.candidates[0].content.parts = [text_part, image_part]
        self.mock_client.models.generate_content.return_value = response

        image = self.client.generate_image("a runner", aspect_ratio="16:9")

        self.assertEqual(image, GeneratedImage(data=b"PNGDATA", mime_type="image/png"))
        kwargs = self.mock_client.models.generate_content.call_args.kwargs
        self.assertEqual(kwargs["model"], "gemini-image-test")
        self.assertEqual(kwargs["contents"], "a runner")
        self.assertEqual(kwargs["config"].image_config.aspect_ratio, "16:9")

    def test_generate_image_without_image_data(self):
        """Test that a response without image parts yields None."""
        response = MagicMock()
        response.candidates = []
        self.mock_client.models.generate_content.return_value = response

        self.assertIsNone(self.client.generate_image("a runner"))


class TestOpenAIClient(unittest.TestCase):
    """Test cases for the OpenAIClient class."""

    def setUp(self):
        """Set up test fixtures."""
        self.openai_patcher = patch('openai.OpenAI')
        self.mock_openai = self.openai_patcher.start()
        self.mock_client = MagicMock()
        self.mock_openai.return_value = self.mock_client

        self.client = OpenAIClient(api_key="test_api_key", model="gpt-test")

    def tearDown(self):
        """Tear down test fixtures."""
        self.openai_patcher.stop()

    def _completion(self, content):
        response = MagicMock()
        response.choices = [MagicMock()]
        response.choices[0].message.content = content
        response.usage.prompt_tokens = 1
        response.usage.completion_tokens = 2
        response.usage.total_tokens = 3
        return response

    def test_chat_keeps_history(self):
        """Test that each turn is sent with the whole conversation so far."""
        self.mock_client.chat.completions.create.side_effect = [
            self._completion("first answer"),
            self._completion("second answer"),
        ]

        chat = self.client.start_chat("system prompt")
        self.client.send_message(chat, "first question")
        reply = self.client.send_message(chat, "second question")

        self.assertEqual(reply.text, "second answer")
        self.assertEqual([m["role"] for m in chat], ["system", "user", "assistant", "user", "assistant"])
        self.assertEqual(chat[0]["content"], "system prompt")

    def test_send_message_error_leaves_history_unchanged(self):
        """Test that a failed turn is removed from the conversation."""
        self.mock_client.chat.completions.create.side_effect = Exception("API Error")
        chat = self.client.start_chat("system prompt")

        with self.assertRaises(Exception):
            self.client.send_message(chat, "question")

        self.assertEqual(chat, [{"role": "system", "content": "system prompt"}])

    def test_generate_image(self):
        """Test that the base64 payload is decoded."""
        response = MagicMock()
        response.data = [MagicMock(b64_json=base64.b64encode(b"IMG").decode("ascii"))]
        self.mock_client.images.generate.return_value = response

        image = self.client.generate_image("a runner", aspect_ratio="16:9")

        self.assertEqual(image.data, b"IMG")
        kwargs = self.mock_client.images.generate.call_args.kwargs
        self.assertEqual(kwargs["size"], "1792x1024")
        self.assertEqual(kwargs["response_format"], "b64_json")

    def test_generate_image_without_data(self):
        """Test that an empty image response yields None."""
        response = MagicMock()
        response.data = []
        self.mock_client.images.generate.return_value = response

        self.assertIsNone(self.client.generate_image("a runner"))


class TestCreateLLMClient(unittest.TestCase):
    """Test cases for the client factory."""

    @patch('seowizard.llm_client.GeminiClient')
    def test_create_gemini(self, mock_gemini_cls):
        self.assertIs(create_llm_client("gemini"), mock_gemini_cls.return_value)

    @patch('seowizard.llm_client.OpenAIClient')
    def test_create_openai(self, mock_openai_cls):
        self.assertIs(create_llm_client("OpenAI"), mock_openai_cls.return_value)

    def test_unsupported_provider(self):
        with self.assertRaises(ValueError):
            create_llm_client("anthropic")


if __name__ == "__main__":
    unittest.main()
