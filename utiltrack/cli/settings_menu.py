from __future__ import annotations

import questionary
from rich.console import Console
from rich.table import Table

from utiltrack.calculator import parse_decimal
from utiltrack.constants import TYPE_LABELS, UTILITY_LABELS
from utiltrack.models import format_currency
from utiltrack.models.property import Property
from utiltrack.models.tariff import FieldType, StandardReadings, TariffConfiguration
from utiltrack.services.tariff_service import TariffService

console = Console()

RATE_PROMPTS = {
    "electricity_rate": "Electricity price per kWh",
    "water_rate": "Water price per m³",
    "gas_rate": "Gas price per m³",
    "water_fixed_fee": "Water fixed monthly fee",
    "gas_fixed_fee": "Gas fixed monthly fee",
}


def _format_number_input(value: float) -> str:
    """Format a stored number as default input text: 4.0 -> '4', 4.32 -> '4.32'"""
    return f"{value:g}"


def _ask_number(label: str, default: float = 0) -> float | None:
    """Prompt until a non-negative number is typed. None if cancelled."""
    while True:
        val = questionary.text(f"{label}:", default=_format_number_input(default)).ask()
        if val is None:
            return None
        parsed = parse_decimal(val)
        if parsed is not None:
            return parsed
        console.print("[red]Invalid number. Try again.[/red]")


def _show_configuration(config: TariffConfiguration) -> None:
    table = Table(title="Tariffs")
    table.add_column("Setting")
    table.add_column("Value", justify="right")
    for key, label in RATE_PROMPTS.items():
        table.add_row(label, format_currency(getattr(config, key)))
    for key, label in UTILITY_LABELS.items():
        table.add_row(f"{label} last reading", _format_number_input(getattr(config.last_readings, key)))
    console.print(table)

    if config.custom_fields:
        fields = Table(title="Custom Fields")
        fields.add_column("Name")
        fields.add_column("Type", justify="center")
        fields.add_column("Price", justify="right")
        fields.add_column("Last reading", justify="right")
        for field in config.custom_fields:
            if field.is_metered:
                price = f"{format_currency(field.price)} / {field.unit}"
                last = _format_number_input(config.custom_last_readings.get(field.id, 0))
            elif field.is_variable_fee:
                price, last = "entered monthly", "-"
            else:
                price, last = format_currency(field.price), "-"
            fields.add_row(field.name, TYPE_LABELS[field.type], price, last)
        console.print(fields)


def _edit_rates_menu(config: TariffConfiguration, tariff_service: TariffService) -> None:
    rates: dict[str, float] = {}
    for key, label in RATE_PROMPTS.items():
        value = _ask_number(label, getattr(config, key))
        if value is None:
            console.print("[yellow]Cancelled.[/yellow]")
            return
        rates[key] = value
    tariff_service.update_rates(config.property_id, **rates)
    console.print("[green]Settings updated![/green]")


def _edit_readings_menu(config: TariffConfiguration, tariff_service: TariffService) -> None:
    values: dict[str, float] = {}
    for key, label in UTILITY_LABELS.items():
        value = _ask_number(f"{label} last reading", getattr(config.last_readings, key))
        if value is None:
            console.print("[yellow]Cancelled.[/yellow]")
            return
        values[key] = value
    custom: dict[str, float] = {}
    for field in config.custom_fields:
        if field.is_metered:
            value = _ask_number(f"{field.name} last reading", config.custom_last_readings.get(field.id, 0))
            if value is None:
                console.print("[yellow]Cancelled.[/yellow]")
                return
            custom[field.id] = value
    tariff_service.set_last_readings(config.property_id, StandardReadings(**values), custom)
    console.print("[green]Readings updated![/green]")


def _add_field_menu(config: TariffConfiguration, tariff_service: TariffService) -> None:
    name = (questionary.text("Field name (e.g. Internet):").ask() or "").strip()
    if not name:
        console.print("[yellow]Cancelled.[/yellow]")
        return

    type_label = questionary.select("Type:", choices=["Metered (rate)", "Fixed fee"]).ask()
    if type_label is None:
        return
    field_type = FieldType.RATE if type_label.startswith("Metered") else FieldType.FEE

    unit = ""
    start_reading: float = 0
    if field_type == FieldType.RATE:
        unit = (questionary.text("Unit (e.g. m³):").ask() or "").strip()
        if not unit:
            console.print("[red]Metered fields need a unit.[/red]")
            return
        price = _ask_number(f"Price per {unit}")
        if price is None:
            return
        reading = _ask_number("Starting reading")
        if reading is None:
            return
        start_reading = reading
    else:
        console.print("  [dim]Leave the amount at 0 to enter it each month.[/dim]")
        price = _ask_number("Monthly amount")
        if price is None:
            return

    try:
        field = tariff_service.add_custom_field(
            config.property_id,
            name=name,
            field_type=field_type,
            price=price,
            unit=unit,
            start_reading=start_reading,
        )
    except ValueError as exc:
        console.print(f"[red]Could not add field: {exc}[/red]")
        return
    console.print(f"[green]Field added: {field.name}[/green]")


def _pick_field(config: TariffConfiguration, prompt: str) -> str | None:
    if not config.custom_fields:
        console.print("[yellow]No custom fields.[/yellow]")
        return None
    field_choices = {f"{field.name} ({TYPE_LABELS[field.type]})": field.id for field in config.custom_fields}
    choice = questionary.select(prompt, choices=list(field_choices.keys()) + ["Back"]).ask()
    if choice is None or choice == "Back":
        return None
    return field_choices[choice]


def _edit_field_price_menu(config: TariffConfiguration, tariff_service: TariffService) -> None:
    field_id = _pick_field(config, "Field to edit:")
    if field_id is None:
        return
    field = config.get_field(field_id)
    if field is None:  # pragma: no cover
        return
    price = _ask_number("New price", field.price)
    if price is None:
        return
    tariff_service.update_custom_field_price(config.property_id, field_id, price)
    console.print("[green]Price updated. Saved bills keep their old cost.[/green]")


def _delete_field_menu(config: TariffConfiguration, tariff_service: TariffService) -> None:
    field_id = _pick_field(config, "Field to delete:")
    if field_id is None:
        return
    if questionary.confirm("Delete this field? Saved bills are not affected.", default=False).ask():
        tariff_service.delete_custom_field(config.property_id, field_id)
        console.print("[green]Field deleted.[/green]")


def settings_menu(prop: Property, tariff_service: TariffService) -> None:
    if prop.id is None:
        console.print("[red]Invalid property.[/red]")
        return

    while True:
        config = tariff_service.get_configuration(prop.id)
        console.print()
        console.print(f"[bold cyan]Settings for: {prop.name}[/bold cyan]")
        _show_configuration(config)
        console.print()

        choice = questionary.select(
            "Settings:",
            choices=[
                "Edit Rates & Fees",
                "Edit Last Readings",
                "Add Custom Field",
                "Edit Custom Field Price",
                "Delete Custom Field",
                "Back",
            ],
        ).ask()

        if choice is None or choice == "Back":
            break
        elif choice == "Edit Rates & Fees":
            _edit_rates_menu(config, tariff_service)
        elif choice == "Edit Last Readings":
            _edit_readings_menu(config, tariff_service)
        elif choice == "Add Custom Field":
            _add_field_menu(config, tariff_service)
        elif choice == "Edit Custom Field Price":
            _edit_field_price_menu(config, tariff_service)
        elif choice == "Delete Custom Field":
            _delete_field_menu(config, tariff_service)
