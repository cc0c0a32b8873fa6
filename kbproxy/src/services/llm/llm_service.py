"""Service module for interacting with large language models.

Only Google's Gemini API is wired in; the base class keeps the chat pipeline
independent of the provider.
"""

import logging
from abc import ABC, abstractmethod

import google.generativeai as genai
from google.generativeai.generative_models import GenerativeModel

from kbproxy.conf.config import Config

logger = logging.getLogger(__name__)


class LlmError(Exception):
    """Raised when the language model fails to produce an answer."""


class BaseLLMService(ABC):
    """Base class for LLM services.

    This abstract class defines the interface that all LLM services must implement.
    """

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """Generate a single completion for a prompt.

        Args:
            prompt: Complete prompt text

        Returns:
            str: Generated response text

        Raises:
            LlmError: If model generation fails
        """


class GeminiLLMService(BaseLLMService):
    """Service for interacting with Google's Gemini API."""

    def __init__(self, api_key: str, model_name: str = Config.GEMINI_MODEL_NAME):
        """Initialize the Gemini LLM service.

        Args:
            api_key: Gemini API key
            model_name: Gemini model identifier

        Raises:
            ValueError: If no API key is given
        """
        if not api_key:
            raise ValueError(
                "Gemini API key not found. Please set the GEMINI_API_KEY environment variable."
            )
        genai.configure(api_key=api_key)  # type: ignore

        self.model_name = model_name
        self.client = GenerativeModel(model_name=model_name)
        logger.info(f"Initialized Gemini LLM service with model: {model_name}")

    def generate(self, prompt: str) -> str:
        """Generate a response using Gemini's API.

        Args:
            prompt: Complete prompt text

        Returns:
            str: Text of the first candidate

        Raises:
            LlmError: If the API call fails or returns no text
        """
        try:
            response = self.client.generate_content(prompt)  # type: ignore
            text = response.text if response else None
        except Exception as e:
            logger.error(f"Error generating response from Gemini: {str(e)}")
            raise LlmError(f"Failed to generate response: {str(e)}") from e

        if not text:
            logger.error("Empty response from Gemini API")
            raise LlmError("Empty response from Gemini API")
        return text
