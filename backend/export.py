from __future__ import annotations

import json
from datetime import datetime, timezone
from io import BytesIO

from docx import Document

from backend.schemas import ExportFormat
from studydeck.schemas import SummarizationResult
from studydeck.summarizer import format_flashcards, format_summary, notes_from_summary


def _generated_iso(result: SummarizationResult) -> str:
    return datetime.fromtimestamp(result.generatedAt / 1000, tz=timezone.utc).isoformat()


def export_deck(result: SummarizationResult, fmt: ExportFormat, url: str) -> str:
    if fmt == ExportFormat.txt:
        return export_as_text(result, url)
    if fmt == ExportFormat.json:
        return export_as_json(result, url)
    if fmt == ExportFormat.md:
        return export_as_markdown(result, url)
    raise ValueError(f"Unsupported format: {fmt}")


def export_as_text(result: SummarizationResult, url: str) -> str:
    return (
        f"URL: {url}\n"
        f"Generated: {_generated_iso(result)}\n\n"
        f"{format_summary(result.summary)}\n\n"
        f"---\n\n"
        f"{format_flashcards(result.flashcards)}"
    )


def export_as_json(result: SummarizationResult, url: str) -> str:
    payload = {"url": url, **result.model_dump(mode="json")}
    return json.dumps(payload, indent=2, ensure_ascii=False)


def export_as_markdown(result: SummarizationResult, url: str) -> str:
    summary = result.summary
    lines = [
        "# Study Deck",
        "",
        f"**Source:** {url}",
        f"**Generated:** {_generated_iso(result)}",
        "",
        "## Summary",
        "",
        summary.text,
        "",
        "## Key Points",
        "",
    ]
    lines += [f"- {p}" for p in summary.keyPoints] or ["_(none)_"]
    lines += [
        "",
        f"**Topics:** {', '.join(summary.topics)} | **Difficulty:** {summary.difficulty.value}"
        f" | **Confidence:** {round(summary.confidence * 100)}%",
        "",
        "## Notes",
        "",
    ]
    lines += [f"- {n}" for n in notes_from_summary(summary)]
    lines += ["", "## Flashcards", ""]
    for idx, card in enumerate(result.flashcards, start=1):
        lines += [
            f"### {idx}. {card.question}",
            "",
            card.answer,
            "",
            f"_{card.type.value} · {card.difficulty.value} · {card.readingTime} · {', '.join(card.tags)}_",
            "",
        ]
    return "\n".join(lines)


def build_docx(result: SummarizationResult, url: str) -> BytesIO:
    doc = Document()
    doc.add_heading("Study Deck", level=1)
    doc.add_paragraph(f"Source URL: {url}")
    doc.add_paragraph(f"Generated: {_generated_iso(result)}")

    doc.add_heading("Summary", level=2)
    doc.add_paragraph(result.summary.text)
    for point in result.summary.keyPoints:
        doc.add_paragraph(point, style="List Bullet")
    doc.add_paragraph(
        f"Topics: {', '.join(result.summary.topics)}. Difficulty: {result.summary.difficulty.value}."
    )

    doc.add_heading("Flashcards", level=2)
    for idx, card in enumerate(result.flashcards, start=1):
        doc.add_paragraph(f"Q{idx}. {card.question}")
        doc.add_paragraph(f"A{idx}. {card.answer}")
        doc.add_paragraph("")  # spacer

    bio = BytesIO()
    doc.save(bio)
    bio.seek(0)
    return bio
