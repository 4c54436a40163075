import os
import sys
import typer
from hrpay.config import settings
from hrpay.logging import logger, get_run_id
from hrpay.domain.exceptions import HRPayError

app = typer.Typer(no_args_is_help=True)

@app.callback()
def main():
    """
    HR Payroll Engine CLI.
    """
    pass

@app.command(name="doctor")
def doctor():
    """
    Check system configuration and environment health.
    """
    logger.info("Running doctor check...")

    failures: list[str] = []
    passed = 0

    print("\n🩺 HR Payroll Doctor\n")

    # ── Check 1: Environment / Interpreter ──────────────────────────────────
    print("[Environment]")
    print(f"  Python: {sys.version.split()[0]}")
    print(f"  Prefix: {sys.prefix}")
    print(f"  Run ID: {get_run_id()}")
    passed += 1

    # ── Check 2: Tax policy resolves ─────────────────────────────────────────
    print("\n[Configuration]")
    from hrpay.domain.taxation import get_tax_policy
    try:
        policy = get_tax_policy()
        print(f"  TAX_POLICY:                  ✅ {policy.name}")
        passed += 1
    except ValueError as e:
        print(f"  TAX_POLICY:                  ❌ {settings.TAX_POLICY!r}")
        failures.append(str(e))

    # ── Check 3: Currency code ───────────────────────────────────────────────
    from hrpay.domain.periods import normalize_currency
    try:
        currency = normalize_currency(settings.DEFAULT_CURRENCY)
        print(f"  DEFAULT_CURRENCY:            ✅ {currency}")
        passed += 1
    except HRPayError as e:
        print(f"  DEFAULT_CURRENCY:            ❌ {settings.DEFAULT_CURRENCY!r}")
        failures.append(e.message)

    print(f"  LOG_LEVEL:                   {settings.LOG_LEVEL}")
    print(f"  API_BASE_URL:                {settings.API_BASE_URL}")

    # ── Check 4: Data directory ──────────────────────────────────────────────
    print("\n[Data Directory]")
    data_dir = settings.data_dir
    if data_dir.exists() and data_dir.is_dir():
        print(f"  {data_dir}/                        ✅ Found: {data_dir.absolute()}")
        passed += 1
    else:
        print(f"  {data_dir}/                        ❌ Missing: {data_dir.absolute()}")
        failures.append(f"{data_dir}/ directory not found at {data_dir.absolute()} — run `mkdir {data_dir}`")

    # ── Check 5: DB file / directory writability ─────────────────────────────
    print("\n[Database]")
    if settings.DATABASE_URL:
        print(f"  DATABASE_URL                 ⚠️  External database, file checks skipped")
    else:
        db_file = data_dir / "hrpay.db"
        if db_file.exists():
            if os.access(db_file, os.W_OK):
                print(f"  {db_file}              ✅ Exists and writable")
                passed += 1
            else:
                print(f"  {db_file}              ❌ Exists but NOT writable")
                failures.append(f"{db_file} exists but is not writable — check file permissions")
        elif data_dir.exists():
            if os.access(data_dir, os.W_OK):
                print(f"  {db_file}              ✅ Does not exist yet; {data_dir}/ is writable (db init can create it)")
                passed += 1
            else:
                print(f"  {db_file}              ❌ {data_dir}/ directory is not writable")
                failures.append(f"{data_dir}/ directory is not writable — db init cannot create hrpay.db")
        else:
            print(f"  {db_file}              ⚠️  Skipped ({data_dir}/ missing)")

    # ── Summary ──────────────────────────────────────────────────────────────
    total = passed + len(failures)
    print(f"\n{'─' * 50}")
    if failures:
        print(f"Result: {passed}/{total} checks passed\n")
        for msg in failures:
            print(f"  ❌ {msg}")
        print()
        raise typer.Exit(code=1)
    else:
        print(f"Result: {passed}/{total} checks passed — all good ✅")
        print()


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address"),
    port: int = typer.Option(8000, help="Bind port"),
    reload: bool = typer.Option(False, help="Auto-reload on code changes"),
):
    """Run the HTTP API with uvicorn."""
    import uvicorn
    uvicorn.run("hrpay.api.app:create_app", factory=True, host=host, port=port, reload=reload)


db_app = typer.Typer(help="Database management commands.")
app.add_typer(db_app, name="db")

@db_app.command("init")
def init():
    """Initialize the database tables."""
    from hrpay.infra.db import engine as engine_module
    from hrpay.db import init_db
    try:
        init_db(engine_module.engine)
        logger.info("Database initialized successfully.")
        print("✅ Database initialized.")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        print(f"❌ Failed: {e}")
        raise typer.Exit(code=1)


payroll_app = typer.Typer(help="Payroll period lifecycle commands.")
app.add_typer(payroll_app, name="payroll")


def _run_payroll(action):
    """Run one PayrollService call in its own UnitOfWork; domain errors exit 1."""
    from hrpay.infra.db.uow import UnitOfWork
    from hrpay.services.payroll_service import PayrollService
    try:
        with UnitOfWork() as uow:
            return action(PayrollService(uow))
    except HRPayError as e:
        logger.warning(f"{e.code}: {e.message}")
        print(f"❌ {e.code}: {e.message}")
        raise typer.Exit(code=1)


@payroll_app.command("generate")
def payroll_generate(period_id: int):
    """Create payroll items for active employees (safe to re-run)."""
    result = _run_payroll(lambda svc: svc.generate_items(period_id))
    print(
        f"✅ Period {period_id}: created {result.created_count}, "
        f"skipped {result.skipped_count}, {result.item_count} item(s) total"
    )
    if result.is_empty:
        print("⚠️  No items: there are no active employees")


@payroll_app.command("process")
def payroll_process(period_id: int):
    """Move a DRAFT period to PROCESSING."""
    result = _run_payroll(lambda svc: svc.process(period_id))
    print(f"✅ Period {period_id} is {result.status.value} ({result.processed_count} item(s))")


@payroll_app.command("mark-paid")
def payroll_mark_paid(period_id: int):
    """Move a PROCESSING period to PAID."""
    result = _run_payroll(lambda svc: svc.mark_paid(period_id))
    print(f"✅ Period {period_id} is {result.status.value} ({result.paid_count} item(s))")


@payroll_app.command("show")
def payroll_show(period_id: int):
    """Print a period with its totals."""
    p = _run_payroll(lambda svc: svc.get_period(period_id))
    print(f"{p.name}  [{p.status.value}]  {p.start_date} → {p.end_date}")
    print(f"  Items: {p.item_count}")
    print(f"  Gross: {p.total_gross} {p.currency}")
    print(f"  Tax:   {p.total_tax} {p.currency}")
    print(f"  Net:   {p.total_net} {p.currency}")


nssf_app = typer.Typer(help="NSSF contribution commands.")
app.add_typer(nssf_app, name="nssf")

@nssf_app.command("compute")
def nssf_compute(gross_salary: str):
    """Show the 5% employee / 10% employer split for a gross salary."""
    from hrpay.services.nssf_service import quote
    try:
        q = quote(gross_salary)
    except HRPayError as e:
        print(f"❌ {e.code}: {e.message}")
        raise typer.Exit(code=1)
    print(f"  Gross salary:           {q.gross_salary}")
    print(f"  Employee (5%):          {q.employee_contribution}")
    print(f"  Employer (10%):         {q.employer_contribution}")
    print(f"  Total:                  {q.total_contribution}")

if __name__ == "__main__":
    app()
