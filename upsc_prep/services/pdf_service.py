# upsc_prep/services/pdf_service.py
import io
import logging
from typing import Any, Dict
from xml.sax.saxutils import escape

from reportlab.lib.pagesizes import LETTER
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer

logger = logging.getLogger(__name__)


class PDFService:
    """Printable mock test result reports"""

    def generate_mock_test_report(self, result: Dict[str, Any]) -> bytes:
        """Build a PDF from the payload returned by the mock test results endpoint"""
        try:
            pdf_buffer = io.BytesIO()
            doc = SimpleDocTemplate(pdf_buffer, pagesize=LETTER)
            styles = getSampleStyleSheet()
            story = []

            story.append(Paragraph(escape(result.get("title") or "Mock Test Report"), styles["Title"]))
            story.append(Spacer(1, 12))

            summary = (
                f"Score: {result.get('score', 0)}/{result.get('totalMarks', 0)}<br/>"
                f"Accuracy: {result.get('accuracy', 0)}%<br/>"
                f"Correct: {result.get('correctCount', 0)} | Wrong: {result.get('wrongCount', 0)} | "
                f"Skipped: {result.get('skippedCount', 0)}<br/>"
                f"Time taken: {result.get('timeTaken', 0)} seconds<br/>"
                f"Completed: {result.get('completedAt') or '-'}"
            )
            story.append(Paragraph(summary, styles["Normal"]))
            story.append(Spacer(1, 12))

            subject_wise = result.get("subjectWise") or {}
            if subject_wise:
                story.append(Paragraph("Subject-wise Performance", styles["Heading2"]))
                for subject, tally in subject_wise.items():
                    line = (f"{escape(subject)}: {tally.get('correct', 0)} correct, "
                            f"{tally.get('wrong', 0)} wrong of {tally.get('total', 0)}")
                    story.append(Paragraph(line, styles["Normal"]))
                story.append(Spacer(1, 12))

            if result.get("analysis"):
                story.append(Paragraph("Analysis", styles["Heading2"]))
                story.append(Paragraph(escape(result["analysis"]), styles["Normal"]))
                story.append(Spacer(1, 12))

            questions = result.get("questions") or []
            if questions:
                story.append(Paragraph("Question Review", styles["Heading2"]))
                for question in questions:
                    text = escape(question.get("questionText", "")).replace("\n", "<br/>")
                    story.append(Paragraph(f"Q{question.get('questionNum')}. {text}", styles["Normal"]))
                    verdict = "Correct" if question.get("isCorrect") else "Incorrect"
                    if not question.get("selectedOption"):
                        verdict = "Skipped"
                    story.append(Paragraph(
                        f"Your answer: {question.get('selectedOption') or '-'} | "
                        f"Correct answer: {question.get('correctOption')} | {verdict}",
                        styles["Normal"],
                    ))
                    if question.get("explanation"):
                        story.append(Paragraph(escape(question["explanation"]), styles["Italic"]))
                    story.append(Spacer(1, 6))

            doc.build(story)
            pdf_buffer.seek(0)
            return pdf_buffer.read()

        except Exception as e:
            logger.error(f"❌ PDF generation error: {e}")
            raise Exception(f"PDF generation failed: {e}")


# Singleton pattern for PDF service
_pdf_service = None


def get_pdf_service() -> PDFService:
    global _pdf_service
    if _pdf_service is None:
        _pdf_service = PDFService()
    return _pdf_service
