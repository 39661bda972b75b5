from __future__ import annotations

import questionary
from rich.console import Console
from rich.table import Table

from utiltrack.constants import UTILITY_LABELS, UTILITY_UNITS, format_date
from utiltrack.models import format_currency
from utiltrack.models.bill import BillPreview, BillRecord, CostBreakdown, CustomBillRecord
from utiltrack.models.property import Property
from utiltrack.models.reading import MeterEntry
from utiltrack.services.bill_service import BillService

console = Console()


def _format_quantity(value: float) -> str:
    """Drop a trailing '.0' for whole readings: 100.0 -> '100'"""
    return f"{value:g}" if value == int(value) else f"{value:.3f}".rstrip("0")


def _custom_rows(records: list[CustomBillRecord]) -> list[tuple[str, str, str]]:
    rows = []
    for record in records:
        if record.consumption is not None:
            usage = f"{_format_quantity(record.consumption)} {record.unit or ''}".strip()
        else:
            usage = "-"
        rows.append((record.name, usage, format_currency(record.cost)))
    return rows


def _breakdown_table(
    title: str,
    consumption: tuple[float, float, float],
    breakdown: CostBreakdown,
    custom_records: list[CustomBillRecord],
    total: float,
) -> Table:
    electricity, water, gas = consumption
    table = Table(title=title)
    table.add_column("Item")
    table.add_column("Usage", justify="right")
    table.add_column("Cost", justify="right")

    table.add_row(UTILITY_LABELS["electricity"], f"{_format_quantity(electricity)} {UTILITY_UNITS['electricity']}", format_currency(breakdown.electricity_cost))
    table.add_row(UTILITY_LABELS["water"], f"{_format_quantity(water)} {UTILITY_UNITS['water']}", format_currency(breakdown.water_cost))
    table.add_row("  Water fixed fee", "-", format_currency(breakdown.water_fixed_fee))
    table.add_row(UTILITY_LABELS["gas"], f"{_format_quantity(gas)} {UTILITY_UNITS['gas']}", format_currency(breakdown.gas_cost))
    table.add_row("  Gas fixed fee", "-", format_currency(breakdown.gas_fixed_fee))
    for row in _custom_rows(custom_records):
        table.add_row(*row)
    table.add_row("[bold]Total[/bold]", "", f"[bold]{format_currency(total)}[/bold]")
    return table


def _show_preview(preview: BillPreview) -> None:
    consumption = preview.consumption
    console.print(
        _breakdown_table(
            "Estimated Bill",
            (consumption.electricity, consumption.water, consumption.gas),
            preview.breakdown,
            preview.custom_records,
            preview.total_cost,
        )
    )


def _show_bill_detail(bill: BillRecord) -> None:
    console.print(
        _breakdown_table(
            bill.name or format_date(bill.created_at),
            (bill.electricity_consumption, bill.water_consumption, bill.gas_consumption),
            bill.breakdown,
            bill.custom_records,
            bill.total_cost,
        )
    )
    console.print(f"  Saved: {format_date(bill.created_at)}")


def calculate_bill_menu(prop: Property, bill_service: BillService) -> BillRecord | None:
    if prop.id is None:
        console.print("[red]Invalid property.[/red]")
        return None

    config = bill_service.tariffs.get_configuration(prop.id)
    console.print()
    console.print(f"[bold]New Readings[/bold] for {prop.name}", style="cyan")
    if config.has_missing_rates:
        console.print("[yellow]Your tariff rates are set to 0. Update them in Settings.[/yellow]")

    last = config.last_readings
    readings: dict[str, str] = {}
    for key in ("electricity", "water", "gas"):
        previous = getattr(last, key)
        readings[key] = (
            questionary.text(
                f"  {UTILITY_LABELS[key]} current reading (prev {_format_quantity(previous)} {UTILITY_UNITS[key]}):"
            ).ask()
            or ""
        )

    custom_readings: dict[str, str] = {}
    manual_fees: dict[str, str] = {}
    for field in config.custom_fields:
        if field.is_metered:
            previous = config.custom_last_readings.get(field.id, 0)
            custom_readings[field.id] = (
                questionary.text(f"  {field.name} current reading (prev {_format_quantity(previous)} {field.unit}):").ask()
                or ""
            )
        elif field.is_variable_fee:
            manual_fees[field.id] = questionary.text(f"  {field.name} amount this month:").ask() or ""
        else:
            console.print(f"  [dim]Fixed:[/dim] {field.name} → {format_currency(field.price)}")

    entry = MeterEntry(custom_readings=custom_readings, manual_fees=manual_fees, **readings)
    preview = bill_service.preview(prop.id, entry)

    console.print()
    _show_preview(preview)

    if preview.is_empty:
        console.print("[yellow]Nothing was entered, bill not saved.[/yellow]")
        return None

    if not questionary.confirm("Save this bill?", default=True).ask():
        console.print("[yellow]Bill discarded.[/yellow]")
        return None

    name = questionary.text("Bill name (optional):").ask() or ""
    bill = bill_service.commit(prop.id, entry, name=name)
    if bill is None:  # pragma: no cover
        console.print("[yellow]Nothing was entered, bill not saved.[/yellow]")
        return None

    console.print()
    console.print("[green bold]Bill saved![/green bold]")
    console.print(f"  Total: [bold]{format_currency(bill.total_cost)}[/bold]")
    return bill


def history_menu(prop: Property, bill_service: BillService) -> None:
    if prop.id is None:
        console.print("[red]Invalid property.[/red]")
        return
    bills = bill_service.list_bills(prop.id)

    if not bills:
        console.print(f"[yellow]No history yet. Calculate and save your first bill for {prop.name}.[/yellow]")
        return

    table = Table(title=f"History - {prop.name}")
    table.add_column("#", style="dim")
    table.add_column("Date")
    table.add_column("Name")
    table.add_column("Total", justify="right")

    for b in bills:
        table.add_row(str(b.id), format_date(b.created_at), b.name or "-", format_currency(b.total_cost))

    console.print()
    console.print(table)

    bill_choices = {f"{b.id} - {b.name or format_date(b.created_at)}": b for b in bills}
    choices = list(bill_choices.keys()) + ["Back"]
    choice = questionary.select("Select a bill:", choices=choices).ask()

    if choice is None or choice == "Back":
        return

    selected = bill_choices[choice]
    bill = bill_service.get_bill(selected.id) if selected.id is not None else None
    if not bill:
        console.print("[red]Bill not found.[/red]")
        return

    _bill_detail_menu(bill, bill_service)


def _bill_detail_menu(bill: BillRecord, bill_service: BillService) -> None:
    while True:
        console.print()
        _show_bill_detail(bill)
        console.print()

        action = questionary.select("Actions:", choices=["Rename", "Back"]).ask()

        if action is None or action == "Back":
            break
        elif action == "Rename":
            name = questionary.text("New name:", default=bill.name).ask()
            if name is None:
                continue
            bill = bill_service.rename_bill(bill, name)
            console.print("[green]Bill renamed.[/green]")
