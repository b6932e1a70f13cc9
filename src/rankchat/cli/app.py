"""Main CLI application using Typer."""
import asyncio
from datetime import datetime
from pathlib import Path

import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..assistant import SEOAssistant
from ..errors import RankChatError
from ..export import transcript_filename, write_printable_html, write_transcript
from ..parsing import extract_sections
from ..playback import WavFileAudio, pcm_to_wav
from ..prompts import QUICK_ACTIONS, STARTER_PROMPTS, TOOL_PRESETS, get_preset
from ..session import (
    DATA_SOURCES,
    Attachment,
    ChatMessage,
    ChatSession,
    DataSource,
    LengthStatus,
    ResponseMode,
    SerpPreview,
)
from ..session.serp import DEFAULT_URL, DESCRIPTION_LIMIT, TITLE_LIMIT
from ..ui.formatting import message_label, preview, render_answer
from .providers import console_debug_callback, get_session, require_assistant_provider

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="rankchat",
    help="SEO assistant chat with grounded answers, reports and read-aloud",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()

LOG_LEVEL_HELP = "Print component logs at this level: debug (all), info, warning, or error"


def _resolve(session: ChatSession, ref: str) -> ChatMessage:
    message = session.resolve(ref)
    if message is None:
        console.print(f"[red]Error: no message '{ref}' (use a number from 'history', an id, or 'last')[/red]")
        raise typer.Exit(code=1)
    return message


def _apply_settings(
    session: ChatSession,
    source: DataSource | None,
    thinking: bool | None,
    mode: ResponseMode | None,
) -> None:
    changes = {}
    if source is not None:
        changes["data_source"] = source
    if thinking is not None:
        changes["thinking_mode"] = thinking
    if mode is not None:
        changes["response_mode"] = mode
    if changes:
        try:
            session.update_settings(**changes)
        except ValidationError as e:
            console.print(f"[red]Error: invalid setting: {e}[/red]")
            raise typer.Exit(code=1)


def _print_answer(message: ChatMessage, show_reasoning: bool) -> None:
    if message.text.startswith("**Error:**"):
        console.print(Panel(Markdown(message.text), border_style="red", title="Failed to generate response"))
        return
    parsed = extract_sections(message.text)
    console.print(render_answer(parsed, message.sources, show_reasoning=show_reasoning))


async def _ask(
    session: ChatSession,
    text: str,
    attachment: Attachment | None,
    show_reasoning: bool,
    log_level: str | None,
) -> None:
    provider = require_assistant_provider(console)
    async with provider:
        assistant = SEOAssistant(session, provider)
        assistant.set_debug_callback(console_debug_callback(log_level, console))
        with console.status("[dim]Thinking...[/dim]"):
            answer = await assistant.ask(text, attachment)
    if answer is None:
        console.print("[yellow]Nothing to send: give a question or --attach a file[/yellow]")
        raise typer.Exit(code=1)
    _print_answer(answer, show_reasoning)


@app.command()
def ask(
    question: str = typer.Argument("", help="Your SEO question"),
    attach: Path | None = typer.Option(
        None,
        "--attach",
        "-a",
        exists=True,
        dir_okay=False,
        help="File to send along (images and PDFs inline, anything else as text)"
    ),
    source: DataSource | None = typer.Option(
        None,
        "--source",
        "-s",
        help="Focus Google Search on a data source (saved as the new default)"
    ),
    thinking: bool | None = typer.Option(
        None,
        "--thinking/--no-thinking",
        help="Ask for a reasoning section before the answer (saved as the new default)"
    ),
    mode: ResponseMode | None = typer.Option(
        None,
        "--mode",
        "-m",
        help="Response style (saved as the new default)"
    ),
    reasoning: bool = typer.Option(
        False,
        "--reasoning",
        "-r",
        help="Show the reasoning section"
    ),
    log_level: str | None = typer.Option(None, "--log-level", "-l", help=LOG_LEVEL_HELP),
):
    """Ask the assistant a question and add the exchange to the session."""
    session = get_session(log_level, console)
    _apply_settings(session, source, thinking, mode)
    attachment = Attachment.from_path(attach) if attach else None
    asyncio.run(_ask(session, question, attachment, reasoning, log_level))


@app.command()
def chat(
    reasoning: bool = typer.Option(False, "--reasoning", "-r", help="Show reasoning sections"),
    log_level: str | None = typer.Option(None, "--log-level", "-l", help=LOG_LEVEL_HELP),
):
    """Interactive chat in the terminal (line mode)."""
    async def _chat():
        session = get_session(log_level, console)
        provider = require_assistant_provider(console)
        async with provider:
            assistant = SEOAssistant(session, provider)
            assistant.set_debug_callback(console_debug_callback(log_level, console))

            source = DATA_SOURCES[session.settings.data_source].label
            console.print("[bold cyan]Rabbit Rank SEO Assistant[/bold cyan]")
            console.print(f"[dim]{provider.model} | {source} | {session.settings.response_mode.value}[/dim]")
            console.print("[dim]Type 'exit', 'quit', or 'q' to leave\n[/dim]")

            while True:
                try:
                    user_input = console.input("[bold yellow]You:[/bold yellow] ")
                except (KeyboardInterrupt, EOFError):
                    console.print("\n[dim]Goodbye![/dim]")
                    break

                if not user_input.strip():
                    continue
                if user_input.strip().lower() in ("exit", "quit", "q"):
                    console.print("[dim]Goodbye![/dim]")
                    break

                with console.status("[dim]Thinking...[/dim]"):
                    answer = await assistant.ask(user_input)
                if answer is not None:
                    console.print()
                    _print_answer(answer, reasoning)
                    console.print()

    asyncio.run(_chat())


@app.command()
def history(
    search: str | None = typer.Option(None, "--search", "-q", help="Only messages containing this text"),
    pinned: bool = typer.Option(False, "--pinned", "-p", help="Only pinned messages"),
):
    """List the messages of the current session."""
    session = get_session()
    positions = {m.id: i for i, m in enumerate(session.messages, start=1)}
    messages = session.pinned_messages() if pinned else list(session.messages)
    if search:
        matches = {m.id for m in session.search(search)}
        messages = [m for m in messages if m.id in matches]

    if not messages:
        console.print("[dim]No messages.[/dim]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Time", style="dim")
    table.add_column("Role")
    table.add_column("Message")
    table.add_column("", justify="center")
    for message in messages:
        role = "[green]You[/green]" if message.role == "user" else "[magenta]Assistant[/magenta]"
        table.add_row(
            str(positions[message.id]),
            f"{message.timestamp:%Y-%m-%d %H:%M}",
            role,
            preview(message.text),
            "📌" if session.is_pinned(message.id) else "",
        )
    console.print(table)


@app.command()
def show(
    ref: str = typer.Argument("last", help="Message number, id, or 'last' (latest answer)"),
    reasoning: bool = typer.Option(False, "--reasoning", "-r", help="Show the reasoning section"),
):
    """Show one message with its reasoning, promotion and sources."""
    session = get_session()
    message = _resolve(session, ref)
    console.print(f"[bold]{message_label(message)}[/bold]")
    if message.is_assistant:
        _print_answer(message, reasoning)
    else:
        console.print(message.text)


@app.command()
def quick(
    action: str = typer.Argument(..., help=f"One of: {', '.join(QUICK_ACTIONS)}"),
    ref: str = typer.Argument("last", help="Answer to rework (number, id, or 'last')"),
    log_level: str | None = typer.Option(None, "--log-level", "-l", help=LOG_LEVEL_HELP),
):
    """Rework an answer: summarize, checklist, metatags or actionplan."""
    if action not in QUICK_ACTIONS:
        console.print(f"[red]Error: unknown action '{action}'. Choose from: {', '.join(QUICK_ACTIONS)}[/red]")
        raise typer.Exit(code=1)
    session = get_session(log_level, console)
    message = _resolve(session, ref)

    async def _quick():
        provider = require_assistant_provider(console)
        async with provider:
            assistant = SEOAssistant(session, provider)
            assistant.set_debug_callback(console_debug_callback(log_level, console))
            with console.status(f"[dim]Running {action}...[/dim]"):
                answer = await assistant.quick_action(action, message)
        if answer is not None:
            _print_answer(answer, show_reasoning=False)

    asyncio.run(_quick())


@app.command(name="export-html")
def export_html(
    ref: str = typer.Argument("last", help="Answer to export (number, id, or 'last')"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output file"),
):
    """Export an answer as a printable HTML report (print to PDF from a browser)."""
    session = get_session()
    message = _resolve(session, ref)
    main_content = extract_sections(message.text).main_content
    path = output or Path(f"SEO-Assistant-Response-{datetime.now():%Y%m%d-%H%M%S}.html")
    try:
        write_printable_html(main_content, path)
    except OSError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]Saved report to {path}[/green]")


@app.command()
def transcript(
    output: Path | None = typer.Option(None, "--output", "-o", help="Output file"),
):
    """Export the whole session as a markdown transcript."""
    session = get_session()
    if not session.messages:
        console.print("[dim]No messages to export yet.[/dim]")
        return
    path = output or Path(transcript_filename())
    try:
        write_transcript(session.messages, path)
    except OSError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]Chat exported to {path}[/green]")


@app.command()
def speak(
    ref: str = typer.Argument("last", help="Answer to read aloud (number, id, or 'last')"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Save WAV here instead of playing"),
):
    """Read an answer aloud."""
    session = get_session()
    message = _resolve(session, ref)
    text = extract_sections(message.text).main_content if message.is_assistant else message.text

    async def _speak():
        provider = require_assistant_provider(console)
        async with provider:
            with console.status("[dim]Generating speech...[/dim]"):
                pcm = await provider.synthesize_speech(text)
        wav = pcm_to_wav(pcm)
        if output is not None:
            output.write_bytes(wav)
            console.print(f"[green]Saved audio to {output}[/green]")
            return
        audio = WavFileAudio(wav)
        try:
            audio.play()
            console.print("[dim]Playing... (Ctrl+C to stop)[/dim]")
            while not audio.finished:
                await asyncio.sleep(0.2)
        finally:
            audio.release()

    try:
        asyncio.run(_speak())
    except KeyboardInterrupt:
        pass
    except RankChatError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)


@app.command()
def pin(
    ref: str = typer.Argument("last", help="Message to pin or unpin (number, id, or 'last')"),
):
    """Pin or unpin a message."""
    session = get_session()
    message = _resolve(session, ref)
    pinned = session.toggle_pin(message.id)
    console.print(f"[green]{'Pinned' if pinned else 'Unpinned'}:[/green] {preview(message.text)}")


@app.command()
def stats():
    """Show session statistics."""
    session = get_session()
    session_stats = session.stats()

    table = Table(show_header=False, box=None)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Messages", str(session_stats.total_messages))
    table.add_row("Your messages", str(session_stats.user_messages))
    table.add_row("Answers", str(session_stats.assistant_messages))
    table.add_row("Average answer", f"{session_stats.average_answer_words} words")
    table.add_row("Last answer", f"{session_stats.last_answer_words} words")
    table.add_row("Grounded answers", str(session_stats.grounded_answers))
    table.add_row("Pinned", str(session_stats.pinned_messages))
    table.add_row("Response latency", session_stats.latency_label)
    console.print(Panel(table, title="Session", border_style="cyan"))


@app.command()
def new(
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
):
    """Start a new chat: clears messages and pins (settings are kept)."""
    session = get_session()
    if not session.messages:
        console.print("[dim]Session is already empty.[/dim]")
        return
    if not yes and not typer.confirm(f"Delete {len(session.messages)} message(s)?"):
        console.print("[dim]Aborted.[/dim]")
        return
    session.new_chat()
    console.print("[green]Started a new SEO chat session[/green]")


@app.command()
def settings(
    source: DataSource | None = typer.Option(None, "--source", "-s", help="Data source for grounded search"),
    thinking: bool | None = typer.Option(None, "--thinking/--no-thinking", help="Reasoning section"),
    mode: ResponseMode | None = typer.Option(None, "--mode", "-m", help="Response style"),
):
    """Show or change the saved request settings."""
    session = get_session()
    _apply_settings(session, source, thinking, mode)
    current = session.settings
    config = DATA_SOURCES[current.data_source]

    table = Table(show_header=False, box=None)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Data source", f"{config.label} [dim]({config.description})[/dim]")
    table.add_row("Thinking mode", "on" if current.thinking_mode else "off")
    table.add_row("Response style", current.response_mode.value)
    store = session.store
    table.add_row("Store", f"{store.backend_type} [dim]({', '.join(sorted(store.keys())) or 'empty'})[/dim]")
    console.print(table)


@app.command(name="prompts")
def prompts_command(
    name: str | None = typer.Argument(None, help="Prompt to send; omit to list them"),
    reasoning: bool = typer.Option(False, "--reasoning", "-r", help="Show the reasoning section"),
    log_level: str | None = typer.Option(None, "--log-level", "-l", help=LOG_LEVEL_HELP),
):
    """List the ready-made SEO questions, or ask one of them."""
    if name is None:
        for title, presets in (("Starter prompts", STARTER_PROMPTS), ("SEO tools", TOOL_PRESETS)):
            table = Table(title=title, show_header=True, header_style="bold cyan")
            table.add_column("Name", style="cyan")
            table.add_column("Prompt")
            table.add_column("About", style="dim")
            for key, preset in presets.items():
                table.add_row(key, preset.label, preset.description)
            console.print(table)
        return

    try:
        preset = get_preset(name)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)
    session = get_session(log_level, console)
    console.print(f"[bold]{preset.label}[/bold] [dim]{preset.text}[/dim]")
    asyncio.run(_ask(session, preset.text, None, reasoning, log_level))


_STATUS_STYLES = {
    LengthStatus.EMPTY: "dim",
    LengthStatus.SHORT: "yellow",
    LengthStatus.GOOD: "green",
    LengthStatus.LONG: "red",
}


@app.command()
def serp(
    title: str = typer.Argument(..., help="Page title tag"),
    description: str = typer.Option("", "--description", "-d", help="Meta description"),
    url: str = typer.Option(DEFAULT_URL, "--url", "-u", help="Page URL"),
):
    """Preview how a page would look in Google results and check its lengths."""
    snippet = SerpPreview.check(title, description, url)

    preview_text = Text()
    preview_text.append(snippet.shown_url + "\n", style="green")
    preview_text.append(snippet.shown_title + "\n", style="bold blue")
    preview_text.append(snippet.shown_description or "No meta description", style="white")
    console.print(Panel(preview_text, title="SERP Preview", border_style="cyan"))

    table = Table(show_header=False, box=None)
    table.add_column("Field", style="cyan")
    table.add_column("Length")
    table.add_column("Status")
    for label, length, limit, status in (
        ("Title", snippet.title_length, TITLE_LIMIT, snippet.title_status),
        ("Description", snippet.description_length, DESCRIPTION_LIMIT, snippet.description_status),
    ):
        style = _STATUS_STYLES[status]
        table.add_row(label, f"{length}/{limit}", f"[{style}]{status.value}[/{style}]")
    console.print(table)


@app.command(name="tui")
def tui_command(
    export_dir: Path = typer.Option(
        Path("."),
        "--export-dir",
        "-e",
        file_okay=False,
        help="Directory for exported reports and transcripts"
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Show log panel with level: debug (all), info, warning, or error"
    ),
):
    """Launch interactive TUI chat interface."""
    async def _tui():
        from ..ui import run_tui

        provider = require_assistant_provider(console)
        session = get_session()
        assistant = SEOAssistant(session, provider)
        try:
            await run_tui(assistant, log_level=log_level, export_dir=export_dir)
        finally:
            console.print("\n[dim]Goodbye![/dim]")

    try:
        asyncio.run(_tui())
    except KeyboardInterrupt:
        pass


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
