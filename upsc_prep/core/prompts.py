# upsc_prep/core/prompts.py
from typing import Dict, Any


class PromptTemplates:
    """Centralized prompt template management"""

    @staticmethod
    def create_answer_evaluation_prompt(question: Dict[str, Any], answer_text: str) -> str:
        """Prompt asking the LLM to grade a mains answer as JSON"""
        return f"""You are an experienced UPSC Civil Services Mains examiner. Evaluate the candidate's answer strictly but fairly.

QUESTION ({question.get('paper') or 'General Studies'}, {question.get('subject')}, {question.get('marks')} marks, word limit {question.get('word_limit')}):
{question.get('question_text')}

CANDIDATE ANSWER:
{answer_text}

EVALUATION CRITERIA:
- Understanding of the demand of the question
- Structure: introduction, body, conclusion
- Use of facts, constitutional provisions, reports and examples
- Balance and critical analysis
- Adherence to the word limit

Respond with ONLY a JSON object of this shape:
{{
  "score": <number between 0 and {question.get('marks')}>,
  "strengths": ["...", "...", "..."],
  "improvements": ["...", "...", "..."],
  "suggestions": ["...", "...", "..."],
  "detailed_feedback": "<one paragraph>"
}}"""

    @staticmethod
    def create_editorial_summary_prompt(title: str, category: str, content: str) -> str:
        """Prompt for an exam-oriented editorial summary"""
        return f"""Summarize this newspaper editorial for a UPSC aspirant.

TITLE: {title}
CATEGORY: {category}

EDITORIAL:
{content}

REQUIREMENTS:
- Start with "Key Points from \\"{title}\\":"
- 3 to 5 numbered key points, one sentence each
- End with a line starting "Relevance for UPSC:" naming the GS paper(s)
- Plain text, no markdown headings"""


class PromptFormatter:
    """Utility functions for prompt formatting"""

    @staticmethod
    def truncate(text: str, max_length: int = 6000) -> str:
        if not text:
            return ""
        text = text.strip()
        if len(text) <= max_length:
            return text
        return text[:max_length].rsplit(" ", 1)[0] + " ..."

    @staticmethod
    def clean_llm_response(response: str) -> str:
        """Strip markdown code fences around a JSON payload"""
        cleaned = response.strip()
        if cleaned.startswith("```"):
            cleaned = cleaned.strip("`")
            if cleaned.lower().startswith("json"):
                cleaned = cleaned[4:]
        start = cleaned.find("{")
        end = cleaned.rfind("}")
        if start != -1 and end > start:
            cleaned = cleaned[start:end + 1]
        return cleaned.strip()
