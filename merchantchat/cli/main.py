"""merchantchat CLI - Command Line Interface."""

import asyncio

import click

from merchantchat import __version__
from merchantchat.settings import settings


@click.group()
@click.version_option(__version__)
def cli():
    """merchantchat - Merchant assistant agent."""
    pass


def format_status(status: dict) -> str:
    """Human readable form of a parsed status line."""
    event = status.get("event")
    if event == "agent_start":
        return f"[{status.get('agent')}] started"
    if event == "agent_end":
        return f"[agent] produced: {status.get('output')}"
    if event == "agent_tool_start":
        return f"[toolInfo] using tool: {status.get('tool')}"
    if event == "agent_tool_end":
        return f"[toolInfo] finished using tool: {status.get('tool')}"
    return f"[status] {status}"


@cli.command()
@click.argument("message")
@click.option("--merchant-id", "-m", default=1, type=int, help="Merchant ID passed to the agent")
@click.option("--history", help="Prior conversation transcript")
@click.option("--model", help="Model to use (e.g., openai:gpt-4.1)")
@click.option("--stream/--no-stream", default=True, help="Stream output")
@click.option("--print-history", is_flag=True, help="Print the updated transcript afterwards")
def ask(
    message: str,
    merchant_id: int,
    history: str | None,
    model: str | None,
    stream: bool,
    print_history: bool,
):
    """
    Ask the merchant agent a question.

    Examples:
        merchantchat ask "What is 2 squared - 39 squared?"
        merchantchat ask "Give me user 275 info" --no-stream
        merchantchat ask "And squared again?" --history "User: ...

        Assistant: ..."

    In streaming mode, text goes to stdout and status events to stderr.
    """
    asyncio.run(_ask_async(message, merchant_id, history, model, stream, print_history))


async def _ask_async(
    message: str,
    merchant_id: int,
    history: str | None,
    model: str | None,
    stream: bool,
    print_history: bool,
):
    """Async implementation of ask command."""
    from merchantchat.agentic.agent import create_merchant_agent
    from merchantchat.errors import MerchantChatError
    from merchantchat.services.session import MerchantSession
    from merchantchat.streaming.formatters import parse_status_line

    try:
        session = MerchantSession(
            merchant_id,
            agent_factory=lambda: create_merchant_agent(model=model),
        )
    except MerchantChatError as e:
        raise click.ClickException(str(e)) from e

    if stream:
        try:
            fragments = await session.handle_message_stream(message, history)
        except MerchantChatError as e:
            raise click.ClickException(str(e)) from e
        async for fragment in fragments:
            status = parse_status_line(fragment)
            if status is not None:
                click.secho(format_status(status), err=True, fg="cyan")
            else:
                click.echo(fragment, nl=False)
        click.echo()
    else:
        result = await session.handle_message(message, history)
        click.echo(result.final_output)

    if print_history:
        click.echo()
        click.echo(session.conversation_history)

    await session.close()


@cli.command()
@click.option("--host", "-h", default=settings.api.host, help="Host to bind")
@click.option("--port", "-p", default=settings.api.port, help="Port to bind")
@click.option("--reload/--no-reload", default=False, help="Enable auto-reload")
def serve(host: str, port: int, reload: bool):
    """Start the merchantchat API server."""
    import uvicorn

    click.echo(f"Starting merchantchat server v{__version__} on http://{host}:{port}")
    click.echo(f"  API docs: http://{host}:{port}/docs")
    uvicorn.run(
        "merchantchat.api.main:app",
        host=host,
        port=port,
        reload=reload,
    )


if __name__ == "__main__":
    cli()
