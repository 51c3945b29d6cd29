"""LLM client interface and implementations."""

import abc
import base64
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional

from loguru import logger
from google import genai
from google.genai import types
import openai

from seowizard.config import get_llm_config, LLM_CONFIG


@dataclass
class ChatReply:
    """Text returned by one chat turn, plus grounding citations if any."""

    text: str
    sources: List[Dict[str, str]] = field(default_factory=list)


@dataclass
class GeneratedImage:
    """Raw image bytes returned by an image model."""

    data: bytes
    mime_type: str = "image/png"

    def to_data_uri(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"


class LLMClient(abc.ABC):
    """Abstract base class for LLM clients."""

    @abc.abstractmethod
    def start_chat(self, system_instruction: str) -> Any:
        """Open a conversational context.

        Args:
            system_instruction: Persona / system prompt for the whole conversation

        Returns:
            Provider-specific chat handle, passed back into send_message
        """
        pass

    @abc.abstractmethod
    def send_message(self, chat: Any, message: str) -> ChatReply:
        """Send one user message within a chat and return the model reply."""
        pass

    @abc.abstractmethod
    def generate_image(self, prompt: str, aspect_ratio: str = "16:9") -> Optional[GeneratedImage]:
        """Generate a single image.

        Args:
            prompt: Natural language description of the image
            aspect_ratio: Requested aspect ratio, e.g. "16:9"

        Returns:
            The image, or None when the model returned no image data.
            Provider errors are raised to the caller.
        """
        pass

    def log_token_usage(self, model: str, prompt_tokens: int, completion_tokens: int, total_tokens: int):
        """Log token usage for an LLM API call.

        Args:
            model: The model name used for the API call
            prompt_tokens: Number of tokens in the prompt
            completion_tokens: Number of tokens in the completion
            total_tokens: Total number of tokens used
        """
        logger.info(f"Token usage - Model: {model}, Prompt tokens: {prompt_tokens}, Completion tokens: {completion_tokens}, Total tokens: {total_tokens}")


class GeminiClient(LLMClient):
    """Google Gemini client with search-grounded chat sessions."""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None, image_model: Optional[str] = None):
        """Initialize the Gemini client."""
        config = get_llm_config("gemini")
        self.client = genai.Client(api_key=api_key or config["api_key"])
        self.model = model or config["model"]
        self.image_model = image_model or config["image_model"]
        self.temperature = config["temperature"]
        self.top_k = config["top_k"]
        self.top_p = config["top_p"]
        self.use_search_grounding = config.get("use_search_grounding", True)

    def start_chat(self, system_instruction: str) -> Any:
        tools = [types.Tool(google_search=types.GoogleSearch())] if self.use_search_grounding else None
        logger.info(f"Opening Gemini chat session with model {self.model}")
        return self.client.chats.create(
            model=self.model,
            config=types.GenerateContentConfig(
                temperature=self.temperature,
                top_k=self.top_k,
                top_p=self.top_p,
                system_instruction=system_instruction,
                tools=tools
            )
        )

    def send_message(self, chat: Any, message: str) -> ChatReply:
        try:
            response = chat.send_message(message)
        except Exception as e:
            logger.error(f"Error in Gemini chat call: {e}")
            raise

        usage = getattr(response, "usage_metadata", None)
        if usage is not None:
            self.log_token_usage(
                model=self.model,
                prompt_tokens=usage.prompt_token_count or 0,
                completion_tokens=usage.candidates_token_count or 0,
                total_tokens=usage.total_token_count or 0
            )

        return ChatReply(text=response.text or "", sources=self._extract_sources(response))

    @staticmethod
    def _extract_sources(response: Any) -> List[Dict[str, str]]:
        """Collect web grounding chunks from the first candidate."""
        candidates = getattr(response, "candidates", None) or []
        if not candidates:
            return []
        metadata = getattr(candidates[0], "grounding_metadata", None)
        chunks = getattr(metadata, "grounding_chunks", None) or []

        sources = []
        for chunk in chunks:
            web = getattr(chunk, "web", None)
            if web is not None and getattr(web, "uri", None):
                sources.append({"title": web.title or "Source", "uri": web.uri})
        return sources

    def generate_image(self, prompt: str, aspect_ratio: str = "16:9") -> Optional[GeneratedImage]:
        response = self.client.models.generate_content(
            model=self.image_model,
            contents=prompt,
            config=types.GenerateContentConfig(
                image_config=types.ImageConfig(aspect_ratio=aspect_ratio)
            )
        )

        candidates = response.candidates or []
        parts = candidates[0].content.parts if candidates and candidates[0].content else None
        for part in parts or []:
            if part.inline_data and part.inline_data.data:
                return GeneratedImage(data=part.inline_data.data, mime_type=part.inline_data.mime_type or "image/png")

        logger.warning("Gemini image response contained no image data")
        return None


class OpenAIClient(LLMClient):
    """OpenAI API client implementation."""

    # Closest supported Images API sizes per aspect ratio
    IMAGE_SIZES = {
        "16:9": "1792x1024",
        "1:1": "1024x1024",
        "9:16": "1024x1792"
    }

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None, image_model: Optional[str] = None):
        """Initialize the OpenAI client."""
        config = get_llm_config("openai")
        self.client = openai.OpenAI(api_key=api_key or config["api_key"])
        self.model = model or config["model"]
        self.image_model = image_model or config["image_model"]
        self.temperature = config["temperature"]

    def start_chat(self, system_instruction: str) -> List[Dict[str, str]]:
        # The chat handle is the running message history
        return [{"role": "system", "content": system_instruction}]

    def send_message(self, chat: List[Dict[str, str]], message: str) -> ChatReply:
        chat.append({"role": "user", "content": message})
        logger.info(f"Using model {self.model}")
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=chat,
                temperature=self.temperature,
            )
        except Exception as e:
            chat.pop()
            logger.error(f"Error in OpenAI API call: {e}")
            raise

        if getattr(response, "usage", None):
            self.log_token_usage(
                model=self.model,
                prompt_tokens=response.usage.prompt_tokens,
                completion_tokens=response.usage.completion_tokens,
                total_tokens=response.usage.total_tokens
            )

        text = response.choices[0].message.content or ""
        chat.append({"role": "assistant", "content": text})
        return ChatReply(text=text)

    def generate_image(self, prompt: str, aspect_ratio: str = "16:9") -> Optional[GeneratedImage]:
        response = self.client.images.generate(
            model=self.image_model,
            prompt=prompt,
            size=self.IMAGE_SIZES.get(aspect_ratio, "1024x1024"),
            response_format="b64_json",
            n=1
        )
        if not response.data or not response.data[0].b64_json:
            logger.warning("OpenAI image response contained no image data")
            return None
        return GeneratedImage(data=base64.b64decode(response.data[0].b64_json), mime_type="image/png")


def create_llm_client(provider: Optional[str] = None) -> LLMClient:
    """Create an LLM client based on configuration.

    Args:
        provider: Optional provider name, defaults to LLM_PROVIDER

    Returns:
        LLMClient instance
    """
    provider = (provider or LLM_CONFIG["default_provider"]).lower()

    if provider == "gemini":
        return GeminiClient()
    elif provider == "openai":
        return OpenAIClient()
    else:
        raise ValueError(f"Unsupported LLM provider: {provider}")
