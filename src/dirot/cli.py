"""CLI interface for the apartment tracker."""

import logging
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Annotated, Any, NoReturn

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from dirot.app import AppContext, create_context
from dirot.config import settings
from dirot.email import send_apartment_email
from dirot.errors import DirotError
from dirot.forms import draft_from_analysis, draft_from_form
from dirot.lifecycle import PETS_LABELS, render_stars, status_label, status_style
from dirot.models import Apartment, ScannedApartment, ScanParams
from dirot.scan_import import load_scan_params
from dirot.store import JSONStore
from dirot.swipe import SwipeDeck, SwipeOutcome
from dirot.themes import ThemeConfig, ThemeId, current_theme, cycle_theme, set_theme
from dirot.viewmodel import Notice

app = typer.Typer(
    name="dirot",
    help="🏠 Dirot - shared apartment hunting tracker",
    add_completion=True,
    rich_markup_mode="rich",
)

scanned_app = typer.Typer(
    name="scanned",
    help="🔍 Scan Yad2 and review scanned apartments",
)
app.add_typer(scanned_app, name="scanned")

console = Console()

_context: AppContext | None = None

# Seconds to wait for a pending email before reporting the result of a save
NOTIFY_TIMEOUT = 10.0


class PartnerChoice(str, Enum):
    MOR = "mor"
    GABI = "gabi"


class StatusChoice(str, Enum):
    SPOKE = "spoke"
    NOT_SPOKE = "not_spoke"
    NO_ANSWER = "no_answer"


class PetsChoice(str, Enum):
    YES = "yes"
    NO = "no"
    UNKNOWN = "unknown"


def get_context() -> AppContext:
    """Build the application once per process."""
    global _context
    if _context is None:
        _context = create_context(settings)
    return _context


def _close_context() -> None:
    global _context
    if _context is not None:
        _context.close()
        _context = None


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logs")] = False,
) -> None:
    """🏠 Dirot - shared apartment hunting tracker."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )
    ctx.call_on_close(_close_context)


def fail(message: str, error: BaseException | None = None) -> NoReturn:
    """Print an error and exit with status 1."""
    console.print(f"[red]✗ Error:[/red] {message}")
    raise typer.Exit(1) from error


def print_notices(notices: list[Notice]) -> None:
    """Render view-model notices."""
    for notice in notices:
        if notice.variant == "destructive":
            console.print(f"[red]✗ {notice.title}[/red] {notice.description}")
        else:
            console.print(f"[green]✓ {notice.title}[/green] {notice.description}")


def report(ok: bool, notices: list[Notice]) -> None:
    """Print notices and exit 1 when the operation failed."""
    print_notices(notices)
    if not ok:
        raise typer.Exit(1)


def report_saved(context: AppContext, ok: bool) -> None:
    """Report an add after its email notification has settled."""
    context.notifier.drain(timeout=NOTIFY_TIMEOUT)
    report(ok, context.apartments.take_notices())


def format_price(value: float | None) -> str:
    return f"{value:,.0f} ₪" if value is not None else "-"


def format_number(value: float | None) -> str:
    return f"{value:g}" if value is not None else "-"


def resolve_apartment(context: AppContext, id_prefix: str) -> Apartment:
    """Find an apartment by full id or unique id prefix."""
    view = context.apartments
    if not view.refresh():
        report(False, view.take_notices())

    matches = [a for a in view.apartments if a.id.startswith(id_prefix)]
    if not matches:
        fail(f"No apartment with id '{id_prefix}'")
    if len(matches) > 1:
        fail(f"Id prefix '{id_prefix}' matches {len(matches)} apartments")
    return matches[0]


def resolve_scanned(context: AppContext, id_prefix: str) -> ScannedApartment:
    """Find a scanned apartment by full id or unique id prefix."""
    view = context.scanned
    if not view.refresh():
        report(False, view.take_notices())

    matches = [s for s in view.scanned if s.id.startswith(id_prefix)]
    if len(matches) != 1:
        fail(f"No unique scanned apartment with id '{id_prefix}'")
    return matches[0]


def apartments_table(apartments: list[Apartment], theme: ThemeConfig) -> Table:
    """Overview table of apartments, best combined rating first."""
    table = Table(
        title=f"{theme.emojis[0]} דירות ({len(apartments)})",
        show_header=True,
        header_style=theme.style,
    )
    table.add_column("ID", style="dim", width=8)
    table.add_column("Title", style="cyan")
    table.add_column("Price", justify="right")
    table.add_column("Location", style="green")
    table.add_column("Status")
    table.add_column("Mor", style="magenta")
    table.add_column("Gabi", style="magenta")
    table.add_column("Σ", justify="right", style="bold")
    table.add_column("Talked")

    for apt in apartments:
        talked = " ".join(
            name for name, flag in (("M", apt.spoke_with_mor), ("G", apt.spoke_with_gabi)) if flag
        )
        table.add_row(
            apt.id[:8],
            apt.title,
            format_price(apt.price),
            apt.location or "-",
            f"[{status_style(apt.status)}]{status_label(apt.status)}[/]",
            render_stars(apt.mor_rating),
            render_stars(apt.gabi_rating),
            str(apt.combined_rating),
            talked or "-",
        )
    return table


def apartment_panel(apt: Apartment, theme: ThemeConfig) -> Panel:
    """Detail view of one apartment."""
    shelter = {True: "יש", False: "אין"}.get(apt.has_shelter, "לא ידוע")  # type: ignore[arg-type]
    lines = [
        f"[bold]{apt.title}[/bold]",
        "",
        f"[cyan]ID:[/cyan] {apt.id}",
        f"[cyan]Price:[/cyan] {format_price(apt.price)}",
        f"[cyan]Arnona:[/cyan] {format_price(apt.arnona)}",
        f"[cyan]Size:[/cyan] {format_number(apt.square_meters)} m²",
        f"[cyan]Floor:[/cyan] {format_number(apt.floor)}",
        f"[cyan]Location:[/cyan] {apt.location or '-'}",
        f"[cyan]Entry:[/cyan] {apt.entry_date or '-'}",
        f"[cyan]Status:[/cyan] [{status_style(apt.status)}]{status_label(apt.status)}[/]",
        f"[cyan]Pets:[/cyan] {PETS_LABELS[apt.pets_allowed]}",
        f"[cyan]Shelter:[/cyan] {shelter}",
        f"[cyan]Mor:[/cyan] {render_stars(apt.mor_rating)}"
        f"{'  ☎' if apt.spoke_with_mor else ''}",
        f"[cyan]Gabi:[/cyan] {render_stars(apt.gabi_rating)}"
        f"{'  ☎' if apt.spoke_with_gabi else ''}",
        f"[cyan]Contact:[/cyan] {apt.contact_name or '-'} {apt.contact_phone or ''}",
        f"[cyan]Link:[/cyan] {apt.apartment_link or '-'}",
        f"[cyan]Visit:[/cyan] {apt.scheduled_visit_text or '-'}",
        f"[cyan]Note:[/cyan] {apt.note or '-'}",
    ]
    if apt.description:
        lines += ["", apt.description]
    return Panel("\n".join(lines), title=f"{theme.emojis[0]} Apartment", border_style="cyan")


def scanned_panel(item: ScannedApartment) -> Panel:
    """Card view of a scanned apartment."""
    lines = [
        f"[bold]{item.title}[/bold]",
        "",
        f"[cyan]Price:[/cyan] {format_price(item.price)}",
        f"[cyan]Location:[/cyan] {item.location or '-'}",
        f"[cyan]Size:[/cyan] {format_number(item.square_meters)} m²",
        f"[cyan]Floor:[/cyan] {format_number(item.floor)}",
        f"[cyan]Pets:[/cyan] {PETS_LABELS[item.pets_allowed]}",
        f"[cyan]Link:[/cyan] {item.apartment_link or '-'}",
    ]
    return Panel("\n".join(lines), title="🔍 Scanned", border_style="magenta")


@app.command("list")
def list_apartments() -> None:
    """List apartments, best combined rating first."""
    context = get_context()
    view = context.apartments
    if not view.refresh():
        report(False, view.take_notices())

    if not view.apartments:
        console.print("[yellow]No apartments yet[/yellow]")
        console.print("\n[dim]Tip: add one with 'dirot add TITLE'[/dim]")
        return
    console.print(apartments_table(view.apartments, current_theme(context.state)))


@app.command()
def show(
    apartment_id: Annotated[str, typer.Argument(help="Apartment id or id prefix")],
) -> None:
    """Show all details of one apartment."""
    context = get_context()
    apt = resolve_apartment(context, apartment_id)
    console.print(apartment_panel(apt, current_theme(context.state)))


@app.command()
def add(  # noqa: PLR0913
    title: Annotated[str, typer.Argument(help="Listing title")],
    price: Annotated[float | None, typer.Option(help="Monthly rent in NIS")] = None,
    location: Annotated[str | None, typer.Option(help="Address or neighborhood")] = None,
    description: Annotated[str | None, typer.Option(help="Free-text description")] = None,
    arnona: Annotated[float | None, typer.Option(help="Monthly property tax")] = None,
    square_meters: Annotated[float | None, typer.Option("--sqm", help="Size in m²")] = None,
    floor: Annotated[float | None, typer.Option(help="Floor number")] = None,
    entry_date: Annotated[str | None, typer.Option("--entry", help="Entry date")] = None,
    contact_name: Annotated[str | None, typer.Option("--contact", help="Contact name")] = None,
    contact_phone: Annotated[str | None, typer.Option("--phone", help="Contact phone")] = None,
    link: Annotated[str | None, typer.Option(help="Listing URL")] = None,
    pets: Annotated[PetsChoice, typer.Option(help="Pets policy")] = PetsChoice.UNKNOWN,
    shelter: Annotated[
        bool | None, typer.Option("--shelter/--no-shelter", help="Has a shelter")
    ] = None,
    note: Annotated[str | None, typer.Option(help="Shared note")] = None,
    image: Annotated[Path | None, typer.Option(help="Image file to upload")] = None,
) -> None:
    """Add a new apartment."""
    context = get_context()
    fields: dict[str, Any] = {
        "title": title,
        "price": price,
        "location": location,
        "description": description,
        "arnona": arnona,
        "square_meters": square_meters,
        "floor": floor,
        "entry_date": entry_date,
        "contact_name": contact_name,
        "contact_phone": contact_phone,
        "apartment_link": link,
        "pets_allowed": pets.value,
        "has_shelter": shelter,
        "note": note,
    }
    if image is not None:
        url = context.apartments.upload_image(image)
        if url:
            fields["image_url"] = url

    try:
        draft = draft_from_form(fields)
    except DirotError as e:
        fail(str(e), e)

    report_saved(context, context.apartments.add(draft))


@app.command()
def edit(  # noqa: PLR0913
    apartment_id: Annotated[str, typer.Argument(help="Apartment id or id prefix")],
    title: Annotated[str | None, typer.Option(help="Listing title")] = None,
    price: Annotated[float | None, typer.Option(help="Monthly rent in NIS")] = None,
    location: Annotated[str | None, typer.Option(help="Address or neighborhood")] = None,
    description: Annotated[str | None, typer.Option(help="Free-text description")] = None,
    arnona: Annotated[float | None, typer.Option(help="Monthly property tax")] = None,
    square_meters: Annotated[float | None, typer.Option("--sqm", help="Size in m²")] = None,
    floor: Annotated[float | None, typer.Option(help="Floor number")] = None,
    entry_date: Annotated[str | None, typer.Option("--entry", help="Entry date")] = None,
    contact_name: Annotated[str | None, typer.Option("--contact", help="Contact name")] = None,
    contact_phone: Annotated[str | None, typer.Option("--phone", help="Contact phone")] = None,
    link: Annotated[str | None, typer.Option(help="Listing URL")] = None,
    pets: Annotated[PetsChoice | None, typer.Option(help="Pets policy")] = None,
    shelter: Annotated[
        bool | None, typer.Option("--shelter/--no-shelter", help="Has a shelter")
    ] = None,
    visit: Annotated[str | None, typer.Option(help="Planned visit")] = None,
) -> None:
    """Edit fields of an apartment."""
    context = get_context()
    apt = resolve_apartment(context, apartment_id)

    options: dict[str, Any] = {
        "title": title,
        "price": price,
        "location": location,
        "description": description,
        "arnona": arnona,
        "square_meters": square_meters,
        "floor": floor,
        "entry_date": entry_date,
        "contact_name": contact_name,
        "contact_phone": contact_phone,
        "apartment_link": link,
        "pets_allowed": pets.value if pets else None,
        "has_shelter": shelter,
        "scheduled_visit_text": visit,
    }
    patch = {key: value for key, value in options.items() if value is not None}
    if not patch:
        console.print("[yellow]Nothing to change[/yellow]")
        return

    view = context.apartments
    report(view.update(apt.id, patch), view.take_notices())


@app.command()
def rate(
    apartment_id: Annotated[str, typer.Argument(help="Apartment id or id prefix")],
    partner: Annotated[PartnerChoice, typer.Argument(help="Who is rating")],
    rating: Annotated[int, typer.Argument(help="Rating from 0 to 5")],
) -> None:
    """Set one partner's rating."""
    context = get_context()
    apt = resolve_apartment(context, apartment_id)
    view = context.apartments
    if partner is PartnerChoice.MOR:
        ok = view.set_mor_rating(apt.id, rating)
    else:
        ok = view.set_gabi_rating(apt.id, rating)
    report(ok, view.take_notices())


@app.command()
def talked(
    apartment_id: Annotated[str, typer.Argument(help="Apartment id or id prefix")],
    partner: Annotated[PartnerChoice, typer.Argument(help="Who talked to the landlord")],
    no: Annotated[bool, typer.Option("--no", help="Clear the flag instead")] = False,
) -> None:
    """Mark that a partner talked to the landlord."""
    context = get_context()
    apt = resolve_apartment(context, apartment_id)
    view = context.apartments
    if partner is PartnerChoice.MOR:
        ok = view.set_mor_talked(apt.id, not no)
    else:
        ok = view.set_gabi_talked(apt.id, not no)
    report(ok, view.take_notices())


@app.command()
def status(
    apartment_id: Annotated[str, typer.Argument(help="Apartment id or id prefix")],
    value: Annotated[StatusChoice, typer.Argument(help="New contact status")],
) -> None:
    """Set the contact status."""
    context = get_context()
    apt = resolve_apartment(context, apartment_id)
    view = context.apartments
    report(view.set_status(apt.id, value.value), view.take_notices())  # type: ignore[arg-type]


@app.command()
def note(
    apartment_id: Annotated[str, typer.Argument(help="Apartment id or id prefix")],
    text: Annotated[str, typer.Argument(help="Note text; empty clears the note")],
) -> None:
    """Replace the shared note."""
    context = get_context()
    apt = resolve_apartment(context, apartment_id)
    view = context.apartments
    report(view.set_note(apt.id, text or None), view.take_notices())


@app.command()
def delete(
    apartment_id: Annotated[str, typer.Argument(help="Apartment id or id prefix")],
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
) -> None:
    """Move an apartment to the recycle bin."""
    context = get_context()
    apt = resolve_apartment(context, apartment_id)
    if not yes and not typer.confirm(f"Delete '{apt.title}'?"):
        raise typer.Exit(0)

    view = context.apartments
    report(view.remove(apt.id), view.take_notices())


@app.command()
def trash() -> None:
    """List apartments in the recycle bin."""
    context = get_context()
    try:
        archived = context.repository.list_deleted()
    except DirotError as e:
        fail(str(e), e)

    if not archived:
        console.print("[yellow]Recycle bin is empty[/yellow]")
        return

    table = Table(title="🗑️ Recycle bin", show_header=True, header_style="bold cyan")
    table.add_column("Original ID", style="dim", width=8)
    table.add_column("Title", style="cyan")
    table.add_column("Price", justify="right")
    table.add_column("Deleted", style="yellow")
    for item in archived:
        table.add_row(
            item.original_id[:8],
            item.title,
            format_price(item.price),
            item.deleted_at.strftime("%Y-%m-%d %H:%M"),
        )
    console.print(table)


@app.command()
def upload(
    file: Annotated[Path, typer.Argument(help="Image file", exists=True, dir_okay=False)],
) -> None:
    """Upload an image and print its URL."""
    view = get_context().apartments
    url = view.upload_image(file)
    if url is None:
        report(False, view.take_notices())
    console.print(url)


@app.command()
def analyze(
    image_url: Annotated[str, typer.Argument(help="URL of a listing screenshot")],
    save: Annotated[bool, typer.Option("--save", help="Add the result as an apartment")] = False,
) -> None:
    """Extract apartment details from an image with AI."""
    context = get_context()
    with console.status("[cyan]Analyzing image...[/cyan]"):
        result = context.advisor.analyze_image(image_url)

    if result.data is None:
        fail(f"לא הצלחנו לנתח את התמונה: {result.error}")
    if not result.data:
        fail("המערכת לא הצליחה לזהות נתוני דירה בתמונה")

    table = Table(title="🤖 Analysis", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    for key, value in result.data.items():
        table.add_row(key, str(value))
    console.print(table)

    if save:
        try:
            draft = draft_from_analysis(result.data, image_url)
        except DirotError as e:
            fail(str(e), e)
        report_saved(context, context.apartments.add(draft))


@app.command()
def advise(
    apartment_id: Annotated[str, typer.Argument(help="Apartment id or id prefix")],
) -> None:
    """Ask the AI whether an apartment is worth it (and for a joke)."""
    context = get_context()
    apt = resolve_apartment(context, apartment_id)
    with console.status("[cyan]Thinking...[/cyan]"):
        bundle = context.advisor.advise_and_joke(apt)

    if bundle.advice:
        console.print(Panel(bundle.advice, title="💡 Advice", border_style="green"))
    else:
        console.print(f"[red]✗ Advice failed:[/red] {bundle.advice_error}")
    if bundle.joke:
        console.print(Panel(bundle.joke, title="😂 Joke", border_style="yellow"))
    else:
        console.print(f"[red]✗ Joke failed:[/red] {bundle.joke_error}")

    if bundle.advice is None and bundle.joke is None:
        raise typer.Exit(1)


@app.command()
def login(
    password: Annotated[
        str, typer.Option(prompt=True, hide_input=True, help="Shared password")
    ],
) -> None:
    """Unlock editing for this session."""
    context = get_context()
    if context.authority is None:
        console.print("[yellow]No password configured; editing is open[/yellow]")
        return
    if not context.session.login(password):
        fail("סיסמה שגויה")
    console.print(Panel.fit("✅ [green]Logged in[/green]", border_style="green"))


@app.command()
def logout() -> None:
    """Forget the access token."""
    get_context().session.logout()
    console.print("[green]✓[/green] Logged out")


@app.command()
def theme(
    cycle: Annotated[bool, typer.Option("--cycle", help="Switch to the next theme")] = False,
    set_to: Annotated[ThemeId | None, typer.Option("--set", help="Theme to use")] = None,
) -> None:
    """Show or change the display theme."""
    state = get_context().state
    if set_to is not None:
        selected = set_theme(state, set_to)
    elif cycle:
        selected = cycle_theme(state)
    else:
        selected = current_theme(state)

    console.print(
        f"[{selected.style}]{' '.join(selected.emojis)}[/] "
        f"[bold]{selected.name}[/bold] [dim]({selected.id.value})[/dim]"
    )


def _run_deck(deck: SwipeDeck[Any], render: Any, mode_name: str) -> None:
    """Interactive loop over a swipe deck."""
    console.print("[dim]l = like, d = dislike, number = drag distance, r = reset, q = quit[/dim]")
    try:
        while True:
            if deck.is_complete:
                console.print(
                    Panel.fit(
                        f"🎉 סיימת לעבור על כל {mode_name}!",
                        border_style="green",
                    )
                )
                choice = typer.prompt("r = start over, q = quit", default="q")
                if choice.strip().lower() == "r":
                    deck.reset()
                    continue
                return

            seen, total = deck.progress
            console.print(f"\n[dim]{seen + 1}/{total}[/dim]")
            console.print(render(deck.current))

            choice = typer.prompt("swipe").strip().lower()
            if choice == "q":
                return
            if choice == "r":
                deck.reset()
                continue
            if choice == "l":
                outcome = deck.like()
            elif choice == "d":
                outcome = deck.dislike()
            else:
                try:
                    distance = float(choice)
                except ValueError:
                    console.print("[yellow]Unknown choice[/yellow]")
                    continue
                deck.start(0)
                deck.move(distance)
                outcome = deck.end()

            if outcome is SwipeOutcome.LIKE:
                console.print("[green]❤️  Like[/green]")
            elif outcome is SwipeOutcome.DISLIKE:
                console.print("[red]👎 Dislike[/red]")
            elif outcome is SwipeOutcome.SNAP_BACK:
                console.print("[dim]↩ Not far enough[/dim]")
    finally:
        deck.close()


@app.command()
def swipe(
    scanned: Annotated[
        bool, typer.Option("--scanned", help="Swipe scanned apartments; likes are imported")
    ] = False,
) -> None:
    """Browse apartments one card at a time."""
    context = get_context()
    theme_config = current_theme(context.state)

    if scanned:
        view = context.scanned
        if not view.refresh():
            report(False, view.take_notices())

        def on_like(item: ScannedApartment) -> None:
            view.like(item)
            print_notices(view.take_notices())

        scanned_deck = SwipeDeck(view.scanned, mode="scanned", on_like=on_like)
        _run_deck(scanned_deck, scanned_panel, "הדירות הסרוקות")
        return

    apartments = context.apartments
    if not apartments.refresh():
        report(False, apartments.take_notices())
    deck = SwipeDeck(apartments.apartments, mode="regular")
    _run_deck(deck, lambda apt: apartment_panel(apt, theme_config), "הדירות")


@app.command(name="email-test")
def email_test(
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Log instead of sending")] = False,
) -> None:
    """Send the canned test apartment email."""
    try:
        sent = send_apartment_email({}, dry_run=dry_run, test=True)
    except Exception as e:
        fail(f"Failed to send test email: {e}", e)
    if sent:
        console.print(Panel.fit("✅ [green]Test email sent[/green]", border_style="green"))


@scanned_app.command("list")
def scanned_list() -> None:
    """List scanned apartments, newest first."""
    view = get_context().scanned
    if not view.refresh():
        report(False, view.take_notices())

    if not view.scanned:
        console.print("[yellow]No scanned apartments[/yellow]")
        console.print("\n[dim]Tip: run 'dirot scanned scan'[/dim]")
        return

    table = Table(title="🔍 Scanned apartments", show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim", width=8)
    table.add_column("Title", style="cyan")
    table.add_column("Price", justify="right")
    table.add_column("Location", style="green")
    table.add_column("Pets")
    for item in view.scanned:
        table.add_row(
            item.id[:8],
            item.title,
            format_price(item.price),
            item.location or "-",
            PETS_LABELS[item.pets_allowed],
        )
    console.print(table)


@scanned_app.command("scan")
def scanned_scan(
    config: Annotated[
        Path | None, typer.Option("--config", "-c", help="YAML file with scan filters")
    ] = None,
    max_price: Annotated[int | None, typer.Option(help="Maximum price")] = None,
    area: Annotated[list[str] | None, typer.Option(help="Area to search (repeatable)")] = None,
    min_rooms: Annotated[float | None, typer.Option(help="Minimum rooms")] = None,
    max_rooms: Annotated[float | None, typer.Option(help="Maximum rooms")] = None,
) -> None:
    """Scan Yad2 for new candidates."""
    context = get_context()
    try:
        params = load_scan_params(config) if config else ScanParams()
    except (FileNotFoundError, DirotError) as e:
        fail(str(e), e)

    overrides: dict[str, Any] = {
        "max_price": max_price,
        "areas": area or None,
        "min_rooms": min_rooms,
        "max_rooms": max_rooms,
    }
    params = params.model_copy(update={k: v for k, v in overrides.items() if v is not None})

    view = context.scanned
    with console.status("[cyan]Scanning...[/cyan]"):
        count = view.scan(params)
    report(count is not None, view.take_notices())


@scanned_app.command("like")
def scanned_like(
    scanned_id: Annotated[str, typer.Argument(help="Scanned apartment id or id prefix")],
) -> None:
    """Move a scanned apartment into the apartment list."""
    context = get_context()
    item = resolve_scanned(context, scanned_id)
    view = context.scanned
    report(view.like(item), view.take_notices())


@scanned_app.command("clear")
def scanned_clear(
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
) -> None:
    """Delete every scanned apartment."""
    if not yes and not typer.confirm("Delete all scanned apartments?"):
        raise typer.Exit(0)
    view = get_context().scanned
    report(view.clear(), view.take_notices())


@app.command()
def info() -> None:
    """Show configuration and available commands."""
    context = get_context()
    config = context.settings
    store = f"hosted ({config.supabase_url})" if config.use_remote_store else "local JSON"
    selected = current_theme(context.state)
    rows = ""
    if isinstance(context.store, JSONStore):
        counts = context.store.get_stats()["tables"]
        rows = ", ".join(f"{name}: {count}" for name, count in counts.items())

    console.print(
        Panel(
            f"[cyan]Store:[/cyan] {store}\n"
            f"[cyan]Data dir:[/cyan] {config.data_dir}\n"
            f"[cyan]Rows:[/cyan] {rows or '-'}\n"
            f"[cyan]Password gate:[/cyan] {'✅ on' if context.authority else '❌ off'}\n"
            f"[cyan]Logged in:[/cyan] {'✅' if context.session.is_authenticated else '❌'}\n"
            f"[cyan]AI:[/cyan] {'✅ ' + config.openai_model if config.openai_api_key else '❌ no key'}\n"
            f"[cyan]Email:[/cyan] {', '.join(config.email_recipients)}\n"
            f"[cyan]Theme:[/cyan] {selected.name}\n"
            f"[cyan]Today:[/cyan] {date.today().isoformat()}",
            title="🏠 Dirot",
            border_style="cyan",
        )
    )

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Category", style="cyan", width=20)
    table.add_column("Commands", style="green")
    table.add_row("Apartments", "list\nshow ID\nadd TITLE [...]\nedit ID [...]\ndelete ID\ntrash")
    table.add_row(
        "Ratings", "rate ID mor|gabi N\ntalked ID mor|gabi [--no]\nstatus ID STATUS\nnote ID TEXT"
    )
    table.add_row("Images & AI", "upload FILE\nanalyze URL [--save]\nadvise ID")
    table.add_row(
        "Scanning", "scanned scan [--config FILE]\nscanned list\nscanned like ID\nscanned clear"
    )
    table.add_row("Browsing", "swipe [--scanned]")
    table.add_row("Session", "login\nlogout\ntheme [--cycle|--set ID]\nemail-test [--dry-run]")
    console.print(table)
    console.print("\n[dim]Run 'dirot --help' or 'dirot COMMAND --help' for more details[/dim]")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
