import questionary
from rich.console import Console

from utiltrack.cli.auth_menu import login_menu
from utiltrack.cli.bill_menu import calculate_bill_menu, history_menu
from utiltrack.cli.property_menu import rename_property_menu, select_property_menu
from utiltrack.cli.settings_menu import settings_menu
from utiltrack.repositories.factory import (
    get_bill_repository,
    get_property_repository,
    get_tariff_repository,
    get_user_repository,
)
from utiltrack.services.bill_service import BillService
from utiltrack.services.property_service import PropertyService
from utiltrack.services.tariff_service import TariffService
from utiltrack.services.user_service import UserService

console = Console()


def _build_services() -> tuple[UserService, PropertyService, TariffService, BillService]:
    user_repo = get_user_repository()
    property_repo = get_property_repository()
    tariff_repo = get_tariff_repository()
    bill_repo = get_bill_repository()
    return (
        UserService(user_repo),
        PropertyService(property_repo, tariff_repo),
        TariffService(tariff_repo),
        BillService(bill_repo, tariff_repo),
    )


def main_menu() -> None:
    user_service, property_service, tariff_service, bill_service = _build_services()

    console.print()
    console.print("[bold]UtilTrack[/bold] - Smart Utility Tracking", style="cyan")
    console.print()

    session = login_menu(user_service)
    if session is None:
        console.print("[bold]Goodbye![/bold]")
        return

    prop = select_property_menu(session, property_service)

    while True:
        if prop is None:
            console.print("[bold]Goodbye![/bold]")
            break

        choice = questionary.select(
            f"{prop.name}",
            choices=[
                "Calculate Bill",
                "History",
                "Settings",
                "Rename Property",
                "Switch Property",
                "Exit",
            ],
        ).ask()

        if choice is None or choice == "Exit":
            console.print("[bold]Goodbye![/bold]")
            break
        elif choice == "Calculate Bill":
            calculate_bill_menu(prop, bill_service)
        elif choice == "History":
            history_menu(prop, bill_service)
        elif choice == "Settings":
            settings_menu(prop, tariff_service)
        elif choice == "Rename Property":
            prop = rename_property_menu(prop, session, property_service)
        elif choice == "Switch Property":
            prop = select_property_menu(session, property_service)
