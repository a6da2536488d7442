# -*- coding: utf-8 -*-
"""
Command line client for the Health Panda backend.

Usage:
    healthpanda register --name Jo --email jo@example.com
    healthpanda login --email jo@example.com
    healthpanda status
    healthpanda profile set --weight 70 --height-cm 175 --body-type 3 --goal maintain --activity light
    healthpanda food scan meal.jpg
    healthpanda food list --summary
    healthpanda food lookup "2 eggs and toast"
    healthpanda vitals --seconds 30
    healthpanda logout
"""

from __future__ import annotations

import argparse
import asyncio
import getpass
import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Awaitable, Callable, List, Optional

from .auth.models import AuthState
from .auth.session import SessionStore
from .auth.validation import validate_sign_up
from .client.api import ApiClient
from .config import settings
from .errors import HealthPandaError
from .food.nutritionix import NutritionixClient, lookup_nutrition
from .food.scanner import FoodScanner
from .food.summary import summarize_entries
from .profile.metrics import profile_bmi
from .profile.onboarding import OnboardingData
from .profile.models import UserProfile
from .storage import SQLiteKeyValueStore, TokenCredentials
from .vitals.simulator import VitalsSimulator

_STATE_LABELS = {
    AuthState.logged_out: "logged out",
    AuthState.logged_in_no_profile: "logged in (onboarding incomplete)",
    AuthState.logged_in_with_profile: "logged in",
}


@asynccontextmanager
async def open_session(args: argparse.Namespace) -> AsyncIterator[SessionStore]:
    store = SQLiteKeyValueStore(Path(args.store) if args.store else settings.store_path)
    credentials = TokenCredentials(store)
    async with ApiClient(credentials, base_url=args.base_url, timeout=args.timeout) as api:
        session = SessionStore(api, credentials)
        await session.initialize()
        await session.wait_idle()
        yield session


def _run(coro_fn: Callable[[argparse.Namespace], Awaitable[int]], args: argparse.Namespace) -> int:
    try:
        return asyncio.run(coro_fn(args))
    except HealthPandaError as exc:
        print(f"Error: {exc}")
        return 1


def _password(args: argparse.Namespace, *, confirm: bool = False) -> tuple[str, str]:
    password = args.password or getpass.getpass("Password: ")
    if not confirm:
        return password, password
    repeat = args.password if args.password else getpass.getpass("Confirm password: ")
    return password, repeat


def _print_profile(profile: UserProfile) -> None:
    bmi = profile_bmi(profile)
    print(f"Weight:         {profile.weight:g} kg")
    print(f"Height:         {profile.height:g} cm")
    print(f"BMI:            {bmi.bmi} ({bmi.category})")
    print(f"Body type:      {profile.body_type}")
    print(f"Fitness goal:   {profile.fitness_goal}")
    print(f"Activity level: {profile.activity_level}")


async def _register(args: argparse.Namespace) -> int:
    password, repeat = _password(args, confirm=True)
    validate_sign_up(args.name, args.email, password, repeat)
    async with open_session(args) as session:
        await session.register(args.name, args.email, password)
        print(f"Account created, {_STATE_LABELS[session.state]}")
    return 0


async def _login(args: argparse.Namespace) -> int:
    password, _ = _password(args)
    async with open_session(args) as session:
        await session.login(args.email, password)
        print(f"Login successful, {_STATE_LABELS[session.state]}")
    return 0


async def _logout(args: argparse.Namespace) -> int:
    async with open_session(args) as session:
        await session.logout()
    print("Logged out")
    return 0


async def _status(args: argparse.Namespace) -> int:
    async with open_session(args) as session:
        state = session.state
        print(f"Status: {_STATE_LABELS[state]}")
        if session.profile is not None:
            _print_profile(session.profile)
    return 0


async def _profile_show(args: argparse.Namespace) -> int:
    async with open_session(args) as session:
        if not session.is_logged_in:
            print("Not logged in")
            return 1
        if session.profile is None:
            print("No profile yet. Run 'healthpanda profile set' to finish onboarding.")
            return 1
        _print_profile(session.profile)
    return 0


async def _profile_set(args: argparse.Namespace) -> int:
    data = OnboardingData()
    if args.height_cm is not None:
        data.set_height_cm(args.height_cm)
    else:
        data.set_height_imperial(args.feet, args.inches)
    data.set_weight(args.weight, args.weight_unit)
    data.set_body_type(args.body_type)
    data.set_fitness_goal(args.goal)
    if args.target_weight is not None:
        data.set_target_weight(args.target_weight, args.weight_unit)
    data.set_activity_level(args.activity)
    payload = data.to_profile_payload()

    async with open_session(args) as session:
        if not session.is_logged_in:
            print("Not logged in")
            return 1
        resp = await session.update_profile(payload)
        print(resp.message or "Profile saved")
        if session.profile is not None:
            _print_profile(session.profile)
    return 0


async def _food_scan(args: argparse.Namespace) -> int:
    image = Path(args.image)
    if args.demo or settings.demo_mode:
        result = await FoodScanner(None, demo_mode=True).scan(image)
    else:
        if not image.exists():
            print(f"Error: Image not found: {image}")
            return 1
        async with open_session(args) as session:
            result = await FoodScanner(session.api, demo_mode=False).scan(image)
    calories = "?" if result.calories is None else f"{result.calories:g}"
    print(f"{result.food_name}: {calories} kcal")
    if result.confidence is not None:
        print(f"Confidence: {result.confidence:.0%}")
    return 0


async def _food_list(args: argparse.Namespace) -> int:
    async with open_session(args) as session:
        entries = await session.api.get_food_entries()
    if not entries:
        print("No food entries.")
        return 0
    if args.summary:
        for day in summarize_entries(entries):
            extra = f" ({day.unknown_calories} without estimate)" if day.unknown_calories else ""
            print(f"{day.date}  {day.calories:g} kcal  {day.entry_count} entries{extra}")
        return 0
    for entry in entries:
        calories = "?" if entry.calories is None else f"{entry.calories:g}"
        print(f"[{entry.entry_id}] {entry.created_on[:16]}  {entry.food_name}  {calories} kcal")
    return 0


async def _food_lookup(args: argparse.Namespace) -> int:
    query = " ".join(args.query)
    client = NutritionixClient.from_settings()
    try:
        results = await lookup_nutrition(query, client=client, demo_mode=args.demo or None)
    finally:
        if client is not None:
            await client.aclose()
    if not results:
        print("No matches found.")
        return 0
    for item in results:
        print(
            f"{item.name} ({item.serving}): {item.calories} kcal, "
            f"P {item.protein}g / C {item.carbs}g / F {item.fat}g"
        )
    return 0


def cmd_vitals(args: argparse.Namespace) -> int:
    sim = VitalsSimulator(seed=args.seed)
    df = sim.trace(args.seconds, args.tick)
    print(df.to_string(index=False))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="healthpanda",
        description="Health Panda client",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--base-url", help=f"Backend base URL (default: {settings.api_base_url})")
    parser.add_argument("--store", help=f"Token store path (default: {settings.store_path})")
    parser.add_argument("--timeout", type=float, help="Request timeout in seconds")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    register_parser = subparsers.add_parser("register", help="Create an account and log in")
    register_parser.add_argument("--name", required=True)
    register_parser.add_argument("--email", required=True)
    register_parser.add_argument("--password", help="Prompted when omitted")
    register_parser.set_defaults(handler=_register)

    login_parser = subparsers.add_parser("login", help="Log in")
    login_parser.add_argument("--email", required=True)
    login_parser.add_argument("--password", help="Prompted when omitted")
    login_parser.set_defaults(handler=_login)

    subparsers.add_parser("logout", help="Log out").set_defaults(handler=_logout)
    subparsers.add_parser("status", help="Show session state").set_defaults(handler=_status)

    # profile commands
    profile_parser = subparsers.add_parser("profile", help="Show or update the profile")
    profile_sub = profile_parser.add_subparsers(dest="profile_command")
    profile_sub.add_parser("show", help="Show the profile").set_defaults(handler=_profile_show)
    set_parser = profile_sub.add_parser("set", help="Create or update the profile")
    set_parser.add_argument("--weight", required=True, help="Body weight")
    set_parser.add_argument("--weight-unit", default="kg", choices=("kg", "lb"))
    set_parser.add_argument("--height-cm", help="Height in cm")
    set_parser.add_argument("--feet", default="0", help="Height, feet part")
    set_parser.add_argument("--inches", default="0", help="Height, inches part")
    set_parser.add_argument("--body-type", required=True, help="1 (Shredded) .. 5 (Obese)")
    set_parser.add_argument("--goal", required=True, help="lose | maintain | gain | health | sport")
    set_parser.add_argument("--target-weight", help="Target weight (lose/gain goals)")
    set_parser.add_argument(
        "--activity", required=True, help="sedentary | light | moderate | active | athlete"
    )
    set_parser.set_defaults(handler=_profile_set)

    # food commands
    food_parser = subparsers.add_parser("food", help="Food logging")
    food_sub = food_parser.add_subparsers(dest="food_command")
    scan_parser = food_sub.add_parser("scan", help="Estimate calories from a photo")
    scan_parser.add_argument("image", help="Image file")
    scan_parser.add_argument("--demo", action="store_true", help="Use placeholder results")
    scan_parser.set_defaults(handler=_food_scan)
    list_parser = food_sub.add_parser("list", help="List logged food")
    list_parser.add_argument("--summary", action="store_true", help="Per-day totals")
    list_parser.set_defaults(handler=_food_list)
    lookup_parser = food_sub.add_parser("lookup", help="Nutrition facts for a food description")
    lookup_parser.add_argument("query", nargs="+")
    lookup_parser.add_argument(
        "--demo", action="store_true", help="Use a rough estimate when no service is set up"
    )
    lookup_parser.set_defaults(handler=_food_lookup)

    vitals_parser = subparsers.add_parser("vitals", help="Print a simulated vitals trace")
    vitals_parser.add_argument("--seconds", type=float, default=20.0)
    vitals_parser.add_argument("--tick", type=float, default=2.0)
    vitals_parser.add_argument("--seed", type=int)
    vitals_parser.set_defaults(sync_handler=cmd_vitals)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 1

    sync_handler = getattr(args, "sync_handler", None)
    if sync_handler is not None:
        return sync_handler(args)
    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help()
        return 1
    return _run(handler, args)


if __name__ == "__main__":
    sys.exit(main())
