#!/usr/bin/env python3
"""
Tests for the image generator module.

These tests verify the retry policy for rate-limited image requests.
"""

import unittest
from unittest.mock import MagicMock

from seowizard.llm_client import GeneratedImage, LLMClient
from seowizard.pipeline.image_generator import ImageGenerator, backoff_delay, is_rate_limit_error


class RateLimitError(Exception):
    def __init__(self, message="Resource exhausted", code=429):
        super().__init__(message)
        self.code = code


class TestBackoff(unittest.TestCase):
    """Test cases for the backoff helpers."""

    def test_backoff_sequence(self):
        self.assertEqual([backoff_delay(n) for n in range(1, 5)], [5, 10, 20, 40])

    def test_backoff_custom_base(self):
        self.assertEqual(backoff_delay(3, base_seconds=1), 4)

    def test_is_rate_limit_error(self):
        self.assertTrue(is_rate_limit_error(RateLimitError()))
        self.assertTrue(is_rate_limit_error(Exception("429 Too Many Requests")))
        self.assertTrue(is_rate_limit_error(Exception("Quota exceeded for project")))
        self.assertFalse(is_rate_limit_error(Exception("Invalid prompt")))
        self.assertFalse(is_rate_limit_error(RateLimitError("Server error", code=500)))


class TestImageGenerator(unittest.TestCase):
    """Test cases for the ImageGenerator class."""

    def setUp(self):
        """Set up test fixtures."""
        self.mock_llm_client = MagicMock(spec=LLMClient)
        self.mock_sleep = MagicMock()
        self.mock_compress = MagicMock(side_effect=lambda uri: "compressed:" + uri)

        self.generator = ImageGenerator(
            self.mock_llm_client,
            sleep=self.mock_sleep,
            max_attempts=5,
            base_delay=5,
            compress=self.mock_compress
        )

    def test_success_first_try(self):
        """Test that a generated image is compressed and returned."""
        self.mock_llm_client.generate_image.return_value = GeneratedImage(data=b"abc")

        result = self.generator.generate("a runner at dawn")

        self.assertEqual(result, "compressed:data:image/png;base64,YWJj")
        self.mock_sleep.assert_not_called()
        prompt = self.mock_llm_client.generate_image.call_args.args[0]
        self.assertIn('"a runner at dawn"', prompt)
        self.assertEqual(self.mock_llm_client.generate_image.call_args.kwargs["aspect_ratio"], "16:9")

    def test_rate_limited_then_success(self):
        """Test that a 429 is retried after the first backoff delay."""
        self.mock_llm_client.generate_image.side_effect = [
            RateLimitError(),
            GeneratedImage(data=b"abc"),
        ]

        result = self.generator.generate("a runner")

        self.assertIsNotNone(result)
        self.assertEqual(self.mock_llm_client.generate_image.call_count, 2)
        self.mock_sleep.assert_called_once_with(5)

    def test_rate_limit_exhausted(self):
        """Test that repeated 429s give up after the maximum attempts."""
        self.mock_llm_client.generate_image.side_effect = RateLimitError()

        result = self.generator.generate("a runner")

        self.assertIsNone(result)
        self.assertEqual(self.mock_llm_client.generate_image.call_count, 5)
        self.assertEqual([c.args[0] for c in self.mock_sleep.call_args_list], [5, 10, 20, 40])
        self.mock_compress.assert_not_called()

    def test_other_error_is_not_retried(self):
        """Test that a non rate-limit error gives up immediately."""
        self.mock_llm_client.generate_image.side_effect = Exception("Invalid prompt")

        result = self.generator.generate("a runner")

        self.assertIsNone(result)
        self.assertEqual(self.mock_llm_client.generate_image.call_count, 1)
        self.mock_sleep.assert_not_called()

    def test_rate_limited_then_other_error(self):
        """Test that a non rate-limit error after a retry stops retrying."""
        self.mock_llm_client.generate_image.side_effect = [RateLimitError(), Exception("Invalid prompt")]

        self.assertIsNone(self.generator.generate("a runner"))
        self.assertEqual(self.mock_llm_client.generate_image.call_count, 2)
        self.mock_sleep.assert_called_once_with(5)

    def test_max_attempts_from_argument(self):
        """Test that the attempt limit is configurable."""
        generator = ImageGenerator(self.mock_llm_client, sleep=self.mock_sleep, max_attempts=2, base_delay=1)
        self.mock_llm_client.generate_image.side_effect = RateLimitError()

        self.assertIsNone(generator.generate("a runner"))
        self.assertEqual(self.mock_llm_client.generate_image.call_count, 2)
        self.assertEqual([c.args[0] for c in self.mock_sleep.call_args_list], [1])

    def test_no_image_in_response(self):
        """Test that a response without image data yields None."""
        self.mock_llm_client.generate_image.return_value = None

        self.assertIsNone(self.generator.generate("a runner"))
        self.mock_sleep.assert_not_called()


if __name__ == "__main__":
    unittest.main()
