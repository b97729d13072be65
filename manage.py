#!/usr/bin/env python3
"""
OrderDesk management CLI.

Usage:
    python manage.py serve        Start the API server
    python manage.py migrate      Apply pending database migrations
    python manage.py status       Show migration status
    python manage.py verify       Check database integrity
    python manage.py reconcile    Retry pending mirror writes
    python manage.py backfill     Create missing invoices for a seller
"""

import argparse
import asyncio
import sys

from orderdesk.config import configure_logging, get_settings


def cmd_serve(args: argparse.Namespace) -> None:
    import uvicorn

    settings = get_settings()
    host = args.host or settings.api.host
    port = args.port or settings.api.port

    print(f"Starting server on {host}:{port}...")
    uvicorn.run(
        "orderdesk.api.main:app",
        host=host,
        port=port,
        reload=args.reload,
        workers=1 if args.reload else args.workers,
    )


def cmd_migrate(args: argparse.Namespace) -> None:
    from orderdesk.infrastructure.storage.sqlite.migrations import initialize_database

    results = asyncio.run(initialize_database(create_backup_before=not args.no_backup))
    if not results:
        print("Database is up to date.")
        return

    for r in results:
        mark = "OK  " if r.success else "FAIL"
        print(f"  [{mark}] v{r.version}_{r.name} ({r.execution_time_ms} ms)")
        if r.error:
            print(f"         {r.error}")

    if not all(r.success for r in results):
        sys.exit(1)


def cmd_status(args: argparse.Namespace) -> None:
    from orderdesk.infrastructure.storage.sqlite.migrations import get_migration_status

    status = asyncio.run(get_migration_status())
    if not status["exists"]:
        print(f"Database not found: {get_settings().storage.db_path}")
        print("Run 'migrate' first.")
        return

    print(f"Database:        {get_settings().storage.db_path}")
    print(f"Current version: {status['current_version']}")
    print(f"Applied:         {', '.join(status['applied_migrations']) or '-'}")
    print(f"Pending:         {', '.join(status['pending_migrations']) or '-'}")


def cmd_verify(args: argparse.Namespace) -> None:
    from orderdesk.infrastructure.storage.sqlite.migrations import verify_schema_integrity

    checks = asyncio.run(verify_schema_integrity())
    failed = False
    for check in checks:
        print(f"  {check['check']:<16} {check['status']}")
        if check["status"] != "PASS":
            failed = True
            if check.get("missing"):
                print(f"    missing: {', '.join(check['missing'])}")

    if failed:
        sys.exit(1)


async def _reconcile(limit: int | None) -> None:
    from orderdesk.application.use_cases import ReconcileLedgersUseCase
    from orderdesk.infrastructure.storage.sqlite import close_connection_pool

    try:
        report = await ReconcileLedgersUseCase().execute(limit=limit)
    finally:
        await close_connection_pool()

    print(f"Processed: {report.processed}  Repaired: {report.repaired}  Failed: {report.failed}")
    for err in report.errors:
        print(f"  order {err['order_id']} (outbox #{err['outbox_id']}): {err['error']}")


def cmd_reconcile(args: argparse.Namespace) -> None:
    asyncio.run(_reconcile(args.limit))


async def _backfill(seller_id: str, limit: int | None) -> None:
    from orderdesk.application.dto.requests import BackfillInvoicesRequest
    from orderdesk.application.use_cases import BackfillInvoicesUseCase
    from orderdesk.infrastructure.storage.sqlite import close_connection_pool

    try:
        result = await BackfillInvoicesUseCase().execute(
            BackfillInvoicesRequest(seller_id=seller_id, limit=limit)
        )
    finally:
        await close_connection_pool()

    print(
        f"Scanned: {result.scanned}  Created: {result.created}  "
        f"Skipped: {result.skipped}  Failed: {result.failed}"
    )
    for err in result.errors:
        print(f"  order {err['order_id']}: {err['error']}")


def cmd_backfill(args: argparse.Namespace) -> None:
    asyncio.run(_backfill(args.seller_id, args.limit))


def main() -> None:
    parser = argparse.ArgumentParser(
        description="OrderDesk management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # serve
    p_serve = sub.add_parser("serve", help="Start the API server")
    p_serve.add_argument("--host", default=None, help="Bind host (default: API_HOST)")
    p_serve.add_argument("--port", type=int, default=None, help="Bind port (default: API_PORT)")
    p_serve.add_argument("--reload", action="store_true", help="Auto-reload on code changes")
    p_serve.add_argument("--workers", type=int, default=1, help="Number of uvicorn workers")
    p_serve.set_defaults(func=cmd_serve)

    # migrate
    p_migrate = sub.add_parser("migrate", help="Apply pending migrations")
    p_migrate.add_argument("--no-backup", action="store_true", help="Skip the pre-migration backup")
    p_migrate.set_defaults(func=cmd_migrate)

    # status
    p_status = sub.add_parser("status", help="Show migration status")
    p_status.set_defaults(func=cmd_status)

    # verify
    p_verify = sub.add_parser("verify", help="Check database integrity")
    p_verify.set_defaults(func=cmd_verify)

    # reconcile
    p_reconcile = sub.add_parser("reconcile", help="Retry pending mirror writes")
    p_reconcile.add_argument("--limit", type=int, default=None, help="Max outbox entries")
    p_reconcile.set_defaults(func=cmd_reconcile)

    # backfill
    p_backfill = sub.add_parser("backfill", help="Create missing invoices for delivered orders")
    p_backfill.add_argument("seller_id", help="Seller business id")
    p_backfill.add_argument("--limit", type=int, default=None, help="Orders read per page")
    p_backfill.set_defaults(func=cmd_backfill)

    args = parser.parse_args()
    configure_logging()
    args.func(args)


if __name__ == "__main__":
    main()
