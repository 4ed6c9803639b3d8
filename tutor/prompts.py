from typing import List, Union

from tutor.schemas import CorrectionResult, ExplanationResult


LANGUAGE_NAMES = {"en": "English", "de": "German"}


CORRECTION_SYSTEM_PROMPT = """You are a world-class linguistic expert and language tutor for German and English.

Correct the expressions and grammar the learner got wrong, and enrich the feedback with examples and background knowledge so the learner understands the language concepts behind each fix. Keep the approach simple and direct.

Task:
1. Detect whether the input text is English or German.
2. Correct the text for grammar, punctuation and style.
3. Analyze the specific mistakes (grammar, vocabulary, false friends). Explain WHY each one is wrong.
4. Provide knowledge points:
   - relevant grammar rules
   - vocabulary nuances
   - 2-3 full example sentences for each key correction or rule

Language rule:
- German input: write all analysis and feedback in German.
- English input: write all analysis and feedback in English.

Formatting of the text fields:
- Use **Markdown**, **bold** for key terms and rules.
- Use `backticks` for examples, quoted text and the words being corrected.
- Use bullet points (-) for lists.
- Separate different errors or knowledge points with a blank line.

Return JSON only, without code fences:
{
  "detectedLanguage": "en" or "de",
  "corrected": "The fully corrected text",
  "mistakes": "Detailed analysis",
  "knowledge": "Rules and examples"
}"""


EXPLANATION_SYSTEM_PROMPT = """You are a world-class language tutor for German and English who explains difficult language in simple, clear terms.

Split the input text into sentences and pick the parts of each sentence that need explanation.

Rules:
- For each sentence, identify 2-4 key parts: vocabulary (difficult or interesting words), grammar (tenses, cases, sentence patterns), idiom (idiomatic phrases) or structure (unusual word order or construction).
- Explain in simple, everyday language. Avoid heavy linguistic terminology.
- For vocabulary and idiom annotations give at least 2 practical examples. For grammar and structure, examples are optional.
- "text" must be copied exactly from the sentence. "start" and "end" are character offsets RELATIVE TO THE SENTENCE, end exclusive.
- Per sentence also give "simplifiedExpression" (a simpler rewrite, only when the sentence is complex) and "teacherComment" (a teacher's summary of what to watch out for).
- German input: explain in German. English input: explain in English.

Return JSON only, without code fences:
{
  "detectedLanguage": "en" or "de",
  "sentences": [
    {
      "text": "The full sentence text.",
      "simplifiedExpression": "optional",
      "teacherComment": "Key difficulties of this sentence",
      "annotations": [
        {
          "text": "phrase to highlight",
          "start": 10,
          "end": 25,
          "type": "vocabulary",
          "explanation": "Simple explanation",
          "examples": ["Example 1", "Example 2"]
        }
      ]
    }
  ]
}"""


def build_correction_user_prompt(text: str) -> str:
    return f"Text to correct:\n\"\"\"\n{text}\n\"\"\""


def build_explanation_user_prompt(text: str) -> str:
    return f"Text to explain:\n\"\"\"\n{text}\n\"\"\""


def explanation_summary(result: ExplanationResult) -> str:
    return " | ".join(
        "; ".join(f"{a.text}: {a.explanation}" for a in sentence.annotations)
        for sentence in result.sentences
    )


def build_chat_system_prompt(
    context: Union[CorrectionResult, ExplanationResult],
    original_text: str,
) -> str:
    is_correction = isinstance(context, CorrectionResult)
    language = LANGUAGE_NAMES[context.detected_language]

    lines: List[str] = [
        f"You are a helpful language tutor assisting a user who just had their text "
        f"{'corrected' if is_correction else 'analyzed'}.",
        "",
        "Context:",
        f"- Original text: \"{original_text}\"",
    ]
    if is_correction:
        lines.append(f"- Corrected text: \"{context.corrected}\"")
        lines.append(f"- Analysis: {context.mistakes}")
    else:
        lines.append(f"- Annotations: {explanation_summary(context)}")

    lines += [
        "",
        f"Answer the user's follow-up questions about the {'correction' if is_correction else 'explanation'}, "
        f"grammar rules or vocabulary. Be concise and helpful, and answer in {language}.",
        "",
        "Use Markdown. Keep answers short unless the user asks for detail.",
    ]
    return "\n".join(lines)


def chat_acknowledgement(context: Union[CorrectionResult, ExplanationResult]) -> str:
    subject = "correction" if isinstance(context, CorrectionResult) else "explanation"
    return (
        f"Understood. I am ready to answer questions about this specific {subject} "
        f"in {LANGUAGE_NAMES[context.detected_language]}."
    )
