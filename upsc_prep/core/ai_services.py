# upsc_prep/core/ai_services.py
import json
import logging
import random
import time
from typing import Any, Dict, List, Optional

from groq import Groq

from .config import config
from .dummy_data import DUMMY_EVALUATION_FEEDBACK
from .prompts import PromptFormatter, PromptTemplates
from .utils import round_to

logger = logging.getLogger(__name__)


class AIService:
    """Answer evaluation and editorial summaries, via Groq or simulated"""

    def __init__(self):
        self.client = None
        self.use_dummy = config.USE_DUMMY_AI

        if not self.use_dummy:
            self._init_groq_client()
        else:
            logger.info("🔧 AI Service in dummy mode - using simulated evaluation")

    def _init_groq_client(self):
        try:
            self.client = Groq(api_key=config.GROQ_API_KEY, timeout=config.GROQ_TIMEOUT)
            logger.info("✅ Groq client initialized")
        except Exception as e:
            logger.error(f"❌ Groq client initialization failed, falling back to dummy mode: {e}")
            self.client = None
            self.use_dummy = True

    # ==================== Answer evaluation ====================

    def evaluate_answer(self, question: Dict[str, Any], answer_text: Optional[str]) -> Dict[str, Any]:
        """Grade a mains answer. Uploaded answers (no text) always get the simulated grade."""
        marks = question["marks"]

        if self.use_dummy or not answer_text:
            return self._generate_dummy_evaluation(marks, answer_text)

        try:
            prompt = PromptTemplates.create_answer_evaluation_prompt(
                question, PromptFormatter.truncate(answer_text)
            )
            response = self._call_llm_with_retries(prompt, temperature=config.GROQ_TEMPERATURE)
            return self._parse_evaluation_response(response, marks)
        except Exception as e:
            logger.warning(f"LLM evaluation failed, using simulated result: {e}")
            return self._generate_dummy_evaluation(marks, answer_text)

    def _generate_dummy_evaluation(self, marks: int, answer_text: Optional[str]) -> Dict[str, Any]:
        if answer_text:
            raw = round_to(random.random() * marks * 0.6 + marks * 0.3)
            score = min(marks, max(3, raw))
        else:
            score = marks * 0.5

        return {
            "score": score,
            "strengths": list(DUMMY_EVALUATION_FEEDBACK["strengths"]),
            "improvements": list(DUMMY_EVALUATION_FEEDBACK["improvements"]),
            "suggestions": list(DUMMY_EVALUATION_FEEDBACK["suggestions"]),
            "detailed_feedback": DUMMY_EVALUATION_FEEDBACK["detailed_feedback"],
        }

    def _parse_evaluation_response(self, response: str, marks: int) -> Dict[str, Any]:
        payload = json.loads(PromptFormatter.clean_llm_response(response))

        score = float(payload.get("score", 0))
        score = max(0.0, min(float(marks), round_to(score, 1)))

        def as_list(key: str) -> List[str]:
            value = payload.get(key) or []
            if isinstance(value, str):
                value = [value]
            return [str(item).strip() for item in value if str(item).strip()]

        return {
            "score": score,
            "strengths": as_list("strengths"),
            "improvements": as_list("improvements"),
            "suggestions": as_list("suggestions"),
            "detailed_feedback": str(payload.get("detailed_feedback", "")).strip(),
        }

    # ==================== Editorial summary ====================

    def summarize_editorial(self, title: str, category: str, content: str) -> str:
        if not self.use_dummy and content:
            try:
                prompt = PromptTemplates.create_editorial_summary_prompt(
                    title, category, PromptFormatter.truncate(content)
                )
                return self._call_llm_with_retries(prompt, max_tokens=600)
            except Exception as e:
                logger.warning(f"LLM summary failed, using template summary: {e}")

        return (
            f'Key Points from "{title}":\n\n'
            f"1. This editorial discusses important aspects of {category}.\n"
            "2. The analysis covers recent developments and their implications for UPSC aspirants.\n"
            "3. Key constitutional and policy dimensions are examined.\n\n"
            f"Relevance for UPSC: This topic is relevant for {category} in GS Papers."
        )

    # ==================== LLM plumbing ====================

    def _call_llm_with_retries(self, prompt: str, max_tokens: int = None,
                               temperature: float = None, retries: int = None) -> str:
        """Call LLM with retry logic"""
        if not self.client:
            raise Exception("AI service not available")
        if max_tokens is None:
            max_tokens = config.GROQ_MAX_TOKENS
        if temperature is None:
            temperature = config.GROQ_TEMPERATURE
        if retries is None:
            retries = config.LLM_RETRIES

        last_error = None

        for attempt in range(retries):
            try:
                logger.debug(f"LLM call attempt {attempt + 1}/{retries}")

                completion = self.client.chat.completions.create(
                    model=config.GROQ_MODEL,
                    messages=[{"role": "user", "content": prompt}],
                    temperature=temperature,
                    max_completion_tokens=max_tokens,
                )

                if not completion.choices:
                    raise Exception("LLM returned no response")

                response = (completion.choices[0].message.content or "").strip()
                if not response:
                    raise Exception("LLM returned empty content")

                return response

            except Exception as e:
                last_error = e
                logger.warning(f"LLM call attempt {attempt + 1} failed: {e}")
                if attempt < retries - 1:
                    time.sleep(2 ** attempt)

        raise Exception(f"LLM call failed after {retries} attempts: {last_error}")

    def health_check(self) -> Dict[str, Any]:
        if self.use_dummy:
            return {"status": "healthy", "mode": "dummy"}

        try:
            start_time = time.time()
            test_response = self.client.chat.completions.create(
                model=config.GROQ_MODEL,
                messages=[{"role": "user", "content": "Hello"}],
                max_completion_tokens=5,
            )
            response_time = time.time() - start_time

            if test_response.choices:
                return {
                    "status": "healthy",
                    "mode": "live",
                    "model": config.GROQ_MODEL,
                    "response_time_ms": round(response_time * 1000, 2),
                }
            return {"status": "error", "message": "No response from LLM"}

        except Exception as e:
            return {"status": "error", "message": str(e)}


# Singleton pattern for AI service
_ai_service = None


def get_ai_service() -> AIService:
    """Get AI service instance (singleton)"""
    global _ai_service
    if _ai_service is None:
        _ai_service = AIService()
    return _ai_service


def close_ai_service():
    """Close AI service instance"""
    global _ai_service
    if _ai_service:
        _ai_service = None
