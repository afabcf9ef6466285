"""
The logic specific to the CLI interface
"""

import logging
from dataclasses import dataclass

import httpx
import pwinput
import rich_click as click
from rich.console import Console
from rich.json import JSON
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.theme import Theme

from linguabridge import __version__
from linguabridge.async_tools import run_sync
from linguabridge.config import ApiKeyStore, Settings
from linguabridge.errors import ConfigurationError
from linguabridge.languages import LANGUAGE_NAMES, language_name
from linguabridge.providers import ProviderId, ProviderRegistry
from linguabridge.translate import Dispatcher

HOSTED_PROVIDERS = [p.value for p in ProviderId if p is not ProviderId.MOCK]
MOCK_LATENCY = (0.8, 2.0)

custom_theme = Theme(
    {
        "info": "dim cyan",
        "warning": "magenta",
        "danger": "bold red",
    }
)
console = Console(theme=custom_theme)
err_console = Console(theme=custom_theme, stderr=True)


def validate_no_colon(ctx, param, value):
    """
    Callback to ensure the namespace does not contain a colon.
    """

    if ":" in value:
        msg = "The character ':' is not allowed in the namespace."
        raise click.BadParameter(msg)

    return value


@dataclass
class Context:
    """
    Internal context of the CLI app
    """

    namespace: str
    store: ApiKeyStore

    def settings(self, mock_latency: tuple[float, float] = (0.0, 0.0)) -> Settings:
        """Reads the settings, turning configuration errors into CLI errors"""

        try:
            return Settings.from_environment(
                store=self.store, mock_latency=mock_latency
            )
        except ConfigurationError as e:
            raise click.ClickException(str(e)) from e


@click.group()
@click.version_option(
    __version__,
    prog_name="linguabridge",
    message="%(prog)s version: %(version)s",
)
@click.option(
    *["--namespace", "-n"],
    default="default",
    help="The keyring namespace in which API keys are stored.",
    show_default=True,
    callback=validate_no_colon,
)
@click.option(
    *["--verbose", "-v"],
    is_flag=True,
    help="Log every call made to the providers.",
)
@click.pass_context
def cli(ctx, namespace: str, verbose: bool):
    """
    Translate text with hosted LLMs, falling back to a demo mode when none of
    them is reachable.
    """

    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )

    if verbose:
        logging.getLogger("linguabridge").setLevel(logging.DEBUG)

    ctx.obj = Context(
        namespace=namespace,
        store=ApiKeyStore(namespace),
    )


@cli.command()
@click.argument(
    "provider",
    type=click.Choice(HOSTED_PROVIDERS, case_sensitive=False),
)
@click.option(
    *["--api-key", "-k"],
    required=False,
    help="Your secret API key.",
)
@click.pass_obj
def set_token(obj: Context, provider, api_key):
    """
    Sets the API token for a specific provider.
    """

    if not api_key:
        console.print("🔐 API key: ", style="bold", end="")
        api_key = pwinput.pwinput(prompt="", mask="*")

    if not api_key:
        console.print("\n[warning]🫡 Not setting anything")
        return

    obj.store.set(provider.lower(), api_key)

    console.print(
        f"\n[green]✔[/green] API key stored for "
        f"[bold cyan]{provider.lower()}[/bold cyan]"
    )


@cli.command()
@click.pass_obj
def providers(obj: Context):
    """
    Lists the providers, the ones that can be used first, in the order in
    which they are tried.
    """

    registry = ProviderRegistry.from_settings(obj.settings())
    order = registry.list_available()

    table = Table(title="Providers", title_justify="left", title_style="bold")
    table.add_column("ID", justify="left", style="bold cyan", no_wrap=True)
    table.add_column("Name", justify="left")
    table.add_column("Model", justify="left", style="magenta")
    table.add_column("Description", justify="left", style="dim")
    table.add_column("Status", justify="left")

    available = [registry.get(p) for p in order]
    unavailable = [d for d in registry.descriptors() if not d.available]

    for descriptor in [*available, *unavailable]:
        if descriptor is None:
            continue

        if descriptor.available:
            status = "[green]Active[/green]"
        else:
            status = f"[warning]Set {descriptor.credential_env}[/warning]"

        table.add_row(
            descriptor.id.value,
            descriptor.display_name,
            descriptor.model_id,
            descriptor.description,
            status,
        )

    console.print(table)


@cli.command()
@click.argument("text", type=str)
@click.option(
    *["--from", "-s", "source_lang"],
    type=click.Choice(list(LANGUAGE_NAMES), case_sensitive=False),
    default="en",
    help="The language of the text.",
    show_default=True,
)
@click.option(
    *["--to", "-t", "target_lang"],
    type=click.Choice(list(LANGUAGE_NAMES), case_sensitive=False),
    default="es",
    help="The language to translate to.",
    show_default=True,
)
@click.option(
    *["--provider", "-p"],
    type=click.Choice([p.value for p in ProviderId], case_sensitive=False),
    default=None,
    help="Provider to use. Defaults to the first available one.",
)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    help="Print the result as JSON.",
)
@click.option(
    "--no-delay",
    is_flag=True,
    help="Answer right away in demo mode instead of simulating an API call.",
)
@click.pass_obj
@run_sync
async def translate(
    obj: Context,
    text: str,
    source_lang: str,
    target_lang: str,
    provider: str | None,
    as_json: bool,
    no_delay: bool,
):
    """
    Translates TEXT from one language to another.
    """

    if not text.strip():
        msg = "Please enter some text to translate."
        raise click.ClickException(msg)

    source_lang = source_lang.lower()
    target_lang = target_lang.lower()

    if source_lang == target_lang:
        msg = "Source and target languages must be different."
        raise click.ClickException(msg)

    settings = obj.settings(mock_latency=(0.0, 0.0) if no_delay else MOCK_LATENCY)

    async with httpx.AsyncClient(timeout=settings.timeout) as client:
        dispatcher = Dispatcher.from_settings(settings, client=client)
        result = await dispatcher.translate(text, source_lang, target_lang, provider)

    if as_json:
        console.print(
            JSON.from_data(
                dict(
                    translation=result.translated_text,
                    provider=result.provider_name,
                    model=result.model_id,
                    fallback=result.fallback,
                ),
                ensure_ascii=False,
            )
        )
        return

    if result.fallback:
        err_console.print(
            "[warning]No provider could be reached, showing a demo translation."
        )

    console.print(
        Panel(
            result.translated_text,
            title=(
                f"[bold]{language_name(source_lang)} → "
                f"{language_name(target_lang)}"
            ),
            title_align="left",
            subtitle=f"[dim]{result.provider_name} · {result.model_id}[/dim]",
            subtitle_align="right",
            border_style="green" if not result.fallback else "magenta",
            padding=(0, 1),
        )
    )
