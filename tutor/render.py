"""Terminal renderables for results, built with rich."""

from typing import List, Optional, Sequence

from rich.console import Group
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from tutor.annotations import AnnotatedText, expanded_identity, style_for
from tutor.diff import DiffPart
from tutor.schemas import ChatMessage, RepairedAnnotation
from tutor.session import CorrectionView, ExplanationView, SentenceView


DIFF_STYLES = {
    "added": "bold green underline",
    "removed": "red strike dim",
    "same": "",
}


def render_diff(parts: Sequence[DiffPart]) -> Text:
    text = Text()
    for part in parts:
        text.append(part.value, style=DIFF_STYLES[part.kind])
    return text


def render_sentence(view: SentenceView) -> Text:
    """Sentence with each annotated span highlighted and numbered."""
    open_identity = expanded_identity(view.selection)
    text = Text()
    for segment in view.segments:
        if isinstance(segment, AnnotatedText):
            style = style_for(segment.annotation.type).rich_style
            if segment.annotation.identity == open_identity:
                style += " bold"
            text.append(segment.text, style=style)
            text.append(f"[{segment.annotation.identity}]", style="dim")
        else:
            text.append(segment.text)
    return text


def render_annotation(annotation: RepairedAnnotation) -> Panel:
    category = style_for(annotation.type)
    body: List = [Markdown(annotation.explanation)]
    if annotation.examples:
        examples = Text()
        for example in annotation.examples:
            examples.append(f"• {example}\n", style="italic")
        body.append(examples)
    return Panel(
        Group(*body),
        title=f"{category.icon} {category.label}: {annotation.text}",
        title_align="left",
        border_style=category.rich_style.split(" on ")[-1],
    )


def render_sentence_view(view: SentenceView, expand_all: bool = False) -> Group:
    items: List = [render_sentence(view)]

    open_identity = expanded_identity(view.selection)
    for annotation in view.highlighted():
        if expand_all or annotation.identity == open_identity:
            items.append(render_annotation(annotation))

    if view.sentence.simplified_expression:
        items.append(Text.assemble(("Simpler: ", "bold"), view.sentence.simplified_expression))
    if view.sentence.teacher_comment:
        items.append(Panel(Markdown(view.sentence.teacher_comment), title="Teacher's note", border_style="blue"))
    return Group(*items)


def render_explanation(view: ExplanationView, expand_all: bool = False) -> Group:
    items = []
    for sentence in view.sentences:
        items.append(Panel(
            render_sentence_view(sentence, expand_all=expand_all),
            title=f"Sentence {sentence.index + 1}",
            title_align="left",
        ))
    return Group(*items)


def render_correction(view: CorrectionView) -> Group:
    return Group(
        Panel(render_diff(view.parts), title="Changes", title_align="left"),
        Panel(Text(view.result.corrected), title="Corrected", title_align="left", border_style="green"),
        Panel(Markdown(view.result.mistakes), title="Mistakes", title_align="left"),
        Panel(Markdown(view.result.knowledge), title="Knowledge", title_align="left"),
    )


def render_view(view, expand_all: bool = False):
    if isinstance(view, ExplanationView):
        return render_explanation(view, expand_all=expand_all)
    return render_correction(view)


def render_chat(messages: Sequence[ChatMessage]) -> Group:
    items = []
    for message in messages:
        if message.role == "user":
            items.append(Text.assemble(("you › ", "bold cyan"), message.content))
        else:
            items.append(Panel(Markdown(message.content), border_style="magenta"))
    return Group(*items)


def render_history_table(entries, title: Optional[str] = None) -> Table:
    table = Table(title=title or "History")
    table.add_column("id", style="cyan", no_wrap=True)
    table.add_column("when")
    table.add_column("kind")
    table.add_column("lang")
    table.add_column("text")
    for entry in entries:
        preview = entry.original.replace("\n", " ")
        if len(preview) > 60:
            preview = preview[:57] + "..."
        table.add_row(
            entry.id or "",
            entry.timestamp.astimezone().strftime("%Y-%m-%d %H:%M"),
            entry.kind,
            entry.language,
            preview,
        )
    return table
