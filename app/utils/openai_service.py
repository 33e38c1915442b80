import logging
from typing import Optional
from openai import AsyncOpenAI
from tenacity import retry, wait_exponential, stop_after_attempt

logger = logging.getLogger(__name__)

class OpenAIService:
    """Service for OpenAI chat completions used by contract generation and memory extraction"""

    def __init__(
        self,
        api_key: str,
        llm_model: str = "gpt-4o",
        extraction_model: str = "gpt-4o-mini",
        client: Optional[AsyncOpenAI] = None
    ):
        """
        Initialize OpenAI service with an async client

        Args:
            api_key: OpenAI API key
            llm_model: Model for contract generation
            extraction_model: Cheaper model for structured preference extraction
            client: Pre-built AsyncOpenAI client (tests)
        """
        self.async_client = client or AsyncOpenAI(api_key=api_key)
        self.llm_model = llm_model
        self.extraction_model = extraction_model
        logger.info(f"OpenAI service initialized - LLM: {llm_model}, Extraction: {extraction_model}")

    # ===================== TEXT GENERATION FUNCTIONS =====================

    @retry(wait=wait_exponential(multiplier=1, min=2, max=10), stop=stop_after_attempt(3), reraise=True)
    async def generate_text(
        self,
        prompt: str,
        system_message: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 2000,
        model: Optional[str] = None,
        json_mode: bool = False
    ) -> str:
        """
        Generate text with a chat completion

        Args:
            prompt: User prompt
            system_message: System message for context
            temperature: Temperature for generation
            max_tokens: Maximum tokens to generate
            model: Override the default generation model
            json_mode: If True, response will be valid JSON

        Returns:
            Generated text
        """
        try:
            messages = []

            if system_message:
                messages.append({"role": "system", "content": system_message})

            messages.append({"role": "user", "content": prompt})

            kwargs = {
                "model": model or self.llm_model,
                "messages": messages,
                "temperature": temperature,
                "max_tokens": max_tokens,
            }

            if json_mode:
                kwargs["response_format"] = {"type": "json_object"}

            response = await self.async_client.chat.completions.create(**kwargs)

            generated_text = response.choices[0].message.content
            if not generated_text:
                raise ValueError("Unexpected response format from OpenAI: empty message content")

            usage = getattr(response, "usage", None)
            logger.info(f"Generated text with {usage.completion_tokens if usage else '?'} tokens")
            return generated_text
        except Exception as e:
            logger.error(f"Error generating text: {str(e)}")
            raise
