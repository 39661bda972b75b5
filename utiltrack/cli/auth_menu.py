from __future__ import annotations

import questionary
from rich.console import Console

from utiltrack.models.session import UserSession
from utiltrack.services.user_service import UserService

console = Console()


def _sign_in(user_service: UserService) -> UserSession | None:
    email = questionary.text("Email:").ask()
    password = questionary.password("Password:").ask()
    if not email or not password:
        return None
    user = user_service.authenticate(email, password)
    if user is None:
        console.print("[red]Invalid email or password.[/red]")
        return None
    console.print(f"[green]Welcome back, {user.email}![/green]")
    return UserSession.for_user(user)


def _sign_up(user_service: UserService) -> UserSession | None:
    email = questionary.text("Email:").ask()
    password = questionary.password("Password:").ask()
    if not email or not password:
        console.print("[yellow]Email and password are required.[/yellow]")
        return None
    confirm = questionary.password("Confirm password:").ask()
    if password != confirm:
        console.print("[red]Passwords do not match.[/red]")
        return None
    try:
        user = user_service.register_user(email, password)
    except ValueError:
        console.print("[red]Registration failed. Email might be taken.[/red]")
        return None
    console.print(f"[green]Account created for {user.email}.[/green]")
    return UserSession.for_user(user)


def login_menu(user_service: UserService) -> UserSession | None:
    """Loop until the user signs in, signs up, or quits (None)."""
    while True:
        choice = questionary.select("Welcome", choices=["Sign In", "Create Account", "Exit"]).ask()

        if choice is None or choice == "Exit":
            return None
        elif choice == "Sign In":
            session = _sign_in(user_service)
        else:
            session = _sign_up(user_service)

        if session is not None:
            return session
