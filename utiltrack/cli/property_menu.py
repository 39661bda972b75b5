from __future__ import annotations

import questionary
from rich.console import Console
from rich.table import Table

from utiltrack.models.property import Property
from utiltrack.models.session import UserSession
from utiltrack.services.property_service import PropertyService

console = Console()


def create_property_menu(session: UserSession, property_service: PropertyService) -> Property | None:
    console.print()
    console.print("[bold]Add Property[/bold]", style="cyan")

    name = questionary.text("Property name (e.g. Home, Dacha):").ask()
    if not name:
        console.print("[yellow]Cancelled.[/yellow]")
        return None
    description = questionary.text("Description (optional):").ask() or ""

    prop = property_service.create_property(session.user_id, name, description)
    console.print(f"[green bold]Property '{prop.name}' created.[/green bold]")
    return prop


def rename_property_menu(prop: Property, session: UserSession, property_service: PropertyService) -> Property:
    name = questionary.text("New name:", default=prop.name).ask()
    if not name or name == prop.name:
        return prop
    prop = property_service.rename_property(prop, name, session.user_id)
    console.print("[green]Property renamed.[/green]")
    return prop


def select_property_menu(session: UserSession, property_service: PropertyService) -> Property | None:
    """Pick the property to work on, creating the first one if needed."""
    properties = property_service.list_properties(session.user_id)

    if not properties:
        console.print("[yellow]You have no properties yet.[/yellow]")
        prop = create_property_menu(session, property_service)
        if prop is not None:
            session.select_property(prop)
        return prop

    table = Table(title="Properties")
    table.add_column("#", style="dim")
    table.add_column("Name", style="bold")
    table.add_column("Description")
    for p in properties:
        table.add_row(str(p.id), p.name, p.description)
    console.print()
    console.print(table)

    property_choices = {f"{p.id} - {p.name}": p for p in properties}
    choices = list(property_choices.keys()) + ["Add Property", "Back"]
    choice = questionary.select("Select a property:", choices=choices).ask()

    if choice is None or choice == "Back":
        return None
    if choice == "Add Property":
        prop = create_property_menu(session, property_service)
    else:
        prop = property_choices[choice]
    if prop is not None:
        session.select_property(prop)
    return prop
