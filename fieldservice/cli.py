"""CLI for the service order desk: database setup, technician accounts, dev server."""

from __future__ import annotations

import argparse
import asyncio
import getpass
import logging
import sys


async def cmd_init_db(args):
    """Create all tables on the configured database."""
    from fieldservice.config import get_settings
    from fieldservice.db.engine import create_tables, engine

    await create_tables()
    await engine.dispose()
    print(f"Database ready: {get_settings().database_url}")


async def cmd_create_technician(args):
    """Create a technician account."""
    from fieldservice.db.engine import async_session_factory, create_tables, engine
    from fieldservice.errors import FieldServiceError
    from fieldservice.services import auth as auth_service

    await create_tables()

    # Get password interactively if not provided
    password = args.password
    if not password:
        password = getpass.getpass("Password: ")
        confirm = getpass.getpass("Confirm password: ")
        if password != confirm:
            print("Passwords do not match")
            sys.exit(1)

    async with async_session_factory() as db:
        try:
            result = await auth_service.register(db, args.email, password, args.name)
        except FieldServiceError as e:
            print(f"Could not create technician: {e.message}")
            sys.exit(1)
        tech = result.technician
        if args.phone:
            tech = await auth_service.update_profile(
                db, auth_service.context_for(tech), phone=args.phone,
            )

    await engine.dispose()
    print(f"Technician created: {tech.name} <{tech.email}> (id={tech.id})")


def cmd_serve(args):
    """Run the API with uvicorn."""
    import uvicorn

    from fieldservice.config import get_settings

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "fieldservice.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


def main():
    parser = argparse.ArgumentParser(description="Service order desk CLI")
    subparsers = parser.add_subparsers(dest="command")

    # init-db
    subparsers.add_parser("init-db", help="Create database tables")

    # create-technician
    ct = subparsers.add_parser("create-technician", help="Create a technician account")
    ct.add_argument("--email", required=True, help="Login email")
    ct.add_argument("--name", default="", help="Display name")
    ct.add_argument("--phone", default="", help="Phone number")
    ct.add_argument("--password", default="", help="Password (prompted if not given)")

    # serve
    sv = subparsers.add_parser("serve", help="Run the API server")
    sv.add_argument("--host", default="127.0.0.1")
    sv.add_argument("--port", type=int, default=3001)
    sv.add_argument("--reload", action="store_true")

    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command == "init-db":
        asyncio.run(cmd_init_db(args))
    elif args.command == "create-technician":
        asyncio.run(cmd_create_technician(args))
    elif args.command == "serve":
        cmd_serve(args)


if __name__ == "__main__":
    main()
