"""
Freelance Market CLI

Command-line interface over the Marketplace façade: post projects, bid,
decide bids, plan milestones and log hours against a SQLite database.

Usage:
    market init --db market.db
    market project create --client c-1 --title "Landing page" --description "..." \
        --budget-min 500 --budget-max 1500 --deadline 2026-12-01 --open
    market bid submit --project <id> --freelancer f-1 --rate 75.5 --days 30 --cover-letter "..."
    market bid list --project <id> --rank-by rating
    market bid accept --id <bid_id> --client c-1
    market time summary --project <id>
"""

import asyncio
import json
from collections.abc import Coroutine
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, TypeVar

import typer
from pydantic import BaseModel, ValidationError
from typing_extensions import Annotated

from freelance_market.kernel.errors import MarketplaceError
from freelance_market.kernel.logging import configure_logging
from freelance_market.kernel.money import to_decimal
from freelance_market.kernel.settings import MarketplaceSettings
from freelance_market.marketplace import Marketplace
from freelance_market.project.models import ProjectQuery
from freelance_market.project.service import parse_project_status

# Logs go to stderr so --json output on stdout stays parseable
SETTINGS = MarketplaceSettings.from_env()
configure_logging(json_output=SETTINGS.json_logs, log_level=SETTINGS.log_level)

app = typer.Typer(
    name="market",
    help="Freelance Market - projects, bids and billing",
    add_completion=False,
)

# Sub-apps
project_app = typer.Typer(help="Project lifecycle commands")
bid_app = typer.Typer(help="Bid submission and decision commands")
freelancer_app = typer.Typer(help="Freelancer profile commands")
milestone_app = typer.Typer(help="Milestone commands")
time_app = typer.Typer(help="Time tracking and billing commands")

app.add_typer(project_app, name="project")
app.add_typer(bid_app, name="bid")
app.add_typer(freelancer_app, name="freelancer")
app.add_typer(milestone_app, name="milestone")
app.add_typer(time_app, name="time")

# Global state
DEFAULT_DB = SETTINGS.db_path

T = TypeVar("T")


def get_market(db_path: Optional[Path] = None) -> Marketplace:
    """Open the marketplace on an initialized database"""
    db = db_path or DEFAULT_DB
    if not db.exists():
        typer.echo(f"Error: Database not found: {db}", err=True)
        typer.echo(f"Run 'market init --db {db}' to initialize", err=True)
        raise typer.Exit(1)
    return Marketplace(db, settings=SETTINGS)


def run(operation: Coroutine[Any, Any, T]) -> T:
    """Run a service coroutine, turning domain errors into exit status 1"""
    try:
        return asyncio.run(operation)
    except MarketplaceError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None


def as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def echo_json(value: BaseModel | list[BaseModel]) -> None:
    if isinstance(value, list):
        typer.echo(json.dumps([v.model_dump(mode="json") for v in value], indent=2))
    else:
        typer.echo(value.model_dump_json(indent=2))


# Initialization command


@app.command()
def init(
    db: Annotated[
        Path,
        typer.Option(help="Database path"),
    ] = DEFAULT_DB,
) -> None:
    """Initialize a new marketplace database"""
    if db.exists():
        typer.echo(f"Error: Database already exists: {db}", err=True)
        raise typer.Exit(1)

    Marketplace(db, settings=SETTINGS)
    typer.echo(f"✓ Initialized marketplace database: {db}")


# Project commands


@project_app.command("create")
def project_create(
    client: Annotated[str, typer.Option("--client", help="Owning client ID")],
    title: Annotated[str, typer.Option("--title", help="Project title")],
    description: Annotated[str, typer.Option("--description", help="Project description")],
    budget_min: Annotated[str, typer.Option("--budget-min", help="Lower budget bound")],
    budget_max: Annotated[str, typer.Option("--budget-max", help="Upper budget bound")],
    deadline: Annotated[datetime, typer.Option("--deadline", help="Delivery deadline")],
    project_type: Annotated[
        str,
        typer.Option("--type", help="Project type (FIXED, HOURLY)"),
    ] = "FIXED",
    open_now: Annotated[
        bool,
        typer.Option("--open", help="Open for bids immediately instead of DRAFT"),
    ] = False,
    db: Annotated[
        Optional[Path],
        typer.Option("--db", help="Database path"),
    ] = None,
) -> None:
    """Post a new project"""
    market = get_market(db)

    project = run(
        market.projects.create(
            client_id=client,
            title=title,
            description=description,
            budget_min=budget_min,
            budget_max=budget_max,
            deadline=as_utc(deadline),
            project_type=project_type.upper(),
            initial_status="OPEN" if open_now else "DRAFT",
        )
    )

    typer.echo(f"✓ Created project: {project.project_id}")
    typer.echo(f"  Title: {project.title}")
    typer.echo(f"  Status: {project.status.value}")
    typer.echo(f"  Budget: {project.budget_min} - {project.budget_max}")


@project_app.command("show")
def project_show(
    project_id: Annotated[str, typer.Option("--id", help="Project ID")],
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
    db: Annotated[
        Optional[Path],
        typer.Option("--db", help="Database path"),
    ] = None,
) -> None:
    """Show project details"""
    market = get_market(db)

    project = run(market.projects.get(project_id))

    if json_output:
        echo_json(project)
        return

    typer.echo(f"\nProject: {project.project_id}")
    typer.echo(f"  Title: {project.title}")
    typer.echo(f"  Client: {project.client_id}")
    typer.echo(f"  Status: {project.status.value}")
    typer.echo(f"  Type: {project.project_type.value}")
    typer.echo(f"  Budget: {project.budget_min} - {project.budget_max}")
    typer.echo(f"  Deadline: {project.deadline.isoformat()}")
    if project.freelancer_id:
        typer.echo(f"  Freelancer: {project.freelancer_id}")
        typer.echo(f"  Agreed rate: {project.agreed_rate}")


@project_app.command("list")
def project_list(
    client: Annotated[
        Optional[str],
        typer.Option("--client", help="Only this client's projects"),
    ] = None,
    freelancer: Annotated[
        Optional[str],
        typer.Option("--freelancer", help="Only projects assigned to this freelancer"),
    ] = None,
    status: Annotated[
        Optional[str],
        typer.Option("--status", help="Filter by status (DRAFT, OPEN, IN_PROGRESS, etc.)"),
    ] = None,
    budget_min: Annotated[
        Optional[str],
        typer.Option("--budget-min", help="Budget range lower bound"),
    ] = None,
    budget_max: Annotated[
        Optional[str],
        typer.Option("--budget-max", help="Budget range upper bound"),
    ] = None,
    page: Annotated[int, typer.Option("--page", min=1, help="Page number")] = 1,
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", min=1, help="Projects per page"),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
    db: Annotated[
        Optional[Path],
        typer.Option("--db", help="Database path"),
    ] = None,
) -> None:
    """Search projects (OPEN projects when no filter is given)"""
    market = get_market(db)

    try:
        query = ProjectQuery(
            client_id=client,
            freelancer_id=freelancer,
            status=parse_project_status(status) if status else None,
            budget_min=to_decimal(budget_min, "budget_min") if budget_min else None,
            budget_max=to_decimal(budget_max, "budget_max") if budget_max else None,
            page=page,
            limit=limit,
        )
    except (MarketplaceError, ValidationError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    result = run(market.projects.search(query))

    if json_output:
        typer.echo(result.model_dump_json(indent=2))
        return

    if not result.data:
        typer.echo("No projects found")
        return

    typer.echo(f"Projects ({len(result.data)} of {result.total}, page {result.page}):")
    for project in result.data:
        typer.echo(f"  {project.project_id}: {project.title} [{project.status.value}]")


@project_app.command("status")
def project_status(
    project_id: Annotated[str, typer.Option("--id", help="Project ID")],
    to: Annotated[str, typer.Option("--to", help="New status")],
    client: Annotated[str, typer.Option("--client", help="Owning client ID")],
    db: Annotated[
        Optional[Path],
        typer.Option("--db", help="Database path"),
    ] = None,
) -> None:
    """Move a project to a new lifecycle status"""
    market = get_market(db)

    project = run(market.projects.change_status(project_id, to, client))

    typer.echo(f"✓ Project {project.project_id} is now {project.status.value}")


@project_app.command("delete")
def project_delete(
    project_id: Annotated[str, typer.Option("--id", help="Project ID")],
    client: Annotated[str, typer.Option("--client", help="Owning client ID")],
    db: Annotated[
        Optional[Path],
        typer.Option("--db", help="Database path"),
    ] = None,
) -> None:
    """Delete a DRAFT project"""
    market = get_market(db)

    run(market.projects.remove(project_id, client))

    typer.echo(f"✓ Deleted project: {project_id}")


# Bid commands


@bid_app.command("submit")
def bid_submit(
    project_id: Annotated[str, typer.Option("--project", help="Project ID")],
    freelancer: Annotated[str, typer.Option("--freelancer", help="Freelancer ID")],
    rate: Annotated[str, typer.Option("--rate", help="Proposed rate")],
    days: Annotated[int, typer.Option("--days", help="Estimated duration in days")],
    cover_letter: Annotated[str, typer.Option("--cover-letter", help="Cover letter")],
    db: Annotated[
        Optional[Path],
        typer.Option("--db", help="Database path"),
    ] = None,
) -> None:
    """Bid on an OPEN project"""
    market = get_market(db)

    bid = run(market.bids.submit(project_id, freelancer, rate, days, cover_letter))

    typer.echo(f"✓ Submitted bid: {bid.bid_id}")
    typer.echo(f"  Project: {bid.project_id}")
    typer.echo(f"  Rate: {bid.proposed_rate}")
    typer.echo(f"  Duration: {bid.estimated_duration_days} days")


@bid_app.command("list")
def bid_list(
    project_id: Annotated[str, typer.Option("--project", help="Project ID")],
    rank_by: Annotated[
        Optional[str],
        typer.Option("--rank-by", help="Ranking strategy (price, rating, composite)"),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
    db: Annotated[
        Optional[Path],
        typer.Option("--db", help="Database path"),
    ] = None,
) -> None:
    """List a project's bids in ranked order"""
    market = get_market(db)

    views = run(market.bids.list_ranked(project_id, rank_by))

    if json_output:
        echo_json(views)
        return

    if not views:
        typer.echo(f"No bids for project {project_id}")
        return

    typer.echo(f"Bids ({len(views)}):")
    for position, view in enumerate(views, start=1):
        bid = view.bid
        typer.echo(
            f"  {position}. {bid.bid_id}: {bid.freelancer_id} rate={bid.proposed_rate} "
            f"rating={view.freelancer_rating} [{bid.status.value}]"
        )


@bid_app.command("accept")
def bid_accept(
    bid_id: Annotated[str, typer.Option("--id", help="Bid ID")],
    client: Annotated[str, typer.Option("--client", help="Owning client ID")],
    db: Annotated[
        Optional[Path],
        typer.Option("--db", help="Database path"),
    ] = None,
) -> None:
    """Accept a bid (rejects the other pending bids, starts the project)"""
    market = get_market(db)

    bid = run(market.bids.accept(bid_id, client))

    typer.echo(f"✓ Accepted bid: {bid.bid_id}")
    typer.echo(f"  Freelancer: {bid.freelancer_id}")
    typer.echo(f"  Agreed rate: {bid.proposed_rate}")


@bid_app.command("reject")
def bid_reject(
    bid_id: Annotated[str, typer.Option("--id", help="Bid ID")],
    client: Annotated[str, typer.Option("--client", help="Owning client ID")],
    db: Annotated[
        Optional[Path],
        typer.Option("--db", help="Database path"),
    ] = None,
) -> None:
    """Reject a single bid"""
    market = get_market(db)

    bid = run(market.bids.reject(bid_id, client))

    typer.echo(f"✓ Rejected bid: {bid.bid_id}")


@bid_app.command("mine")
def bid_mine(
    freelancer: Annotated[str, typer.Option("--freelancer", help="Freelancer ID")],
    db: Annotated[
        Optional[Path],
        typer.Option("--db", help="Database path"),
    ] = None,
) -> None:
    """List a freelancer's own bids"""
    market = get_market(db)

    bids = run(market.bids.list_for_freelancer(freelancer))

    if not bids:
        typer.echo(f"No bids from {freelancer}")
        return

    typer.echo(f"Bids by {freelancer} ({len(bids)}):")
    for bid in bids:
        typer.echo(f"  {bid.bid_id}: project {bid.project_id} rate={bid.proposed_rate} [{bid.status.value}]")


# Freelancer commands


@freelancer_app.command("register")
def freelancer_register(
    freelancer_id: Annotated[str, typer.Option("--id", help="Freelancer ID")],
    name: Annotated[str, typer.Option("--name", help="Display name")],
    hourly_rate: Annotated[
        Optional[str],
        typer.Option("--rate", help="Hourly rate"),
    ] = None,
    rating: Annotated[float, typer.Option("--rating", help="Rating 0.0-5.0")] = 0.0,
    portfolio: Annotated[
        Optional[str],
        typer.Option("--portfolio", help="Portfolio URL"),
    ] = None,
    db: Annotated[
        Optional[Path],
        typer.Option("--db", help="Database path"),
    ] = None,
) -> None:
    """Register a freelancer profile"""
    market = get_market(db)

    freelancer = run(
        market.freelancers.register(
            freelancer_id=freelancer_id,
            display_name=name,
            hourly_rate=hourly_rate,
            rating=rating,
            portfolio_url=portfolio,
        )
    )

    typer.echo(f"✓ Registered freelancer: {freelancer.freelancer_id}")
    typer.echo(f"  Name: {freelancer.display_name}")
    typer.echo(f"  Rating: {freelancer.rating}")


@freelancer_app.command("show")
def freelancer_show(
    freelancer_id: Annotated[str, typer.Option("--id", help="Freelancer ID")],
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
    db: Annotated[
        Optional[Path],
        typer.Option("--db", help="Database path"),
    ] = None,
) -> None:
    """Show a freelancer profile"""
    market = get_market(db)

    freelancer = run(market.freelancers.get(freelancer_id))

    if json_output:
        echo_json(freelancer)
        return

    typer.echo(f"\nFreelancer: {freelancer.freelancer_id}")
    typer.echo(f"  Name: {freelancer.display_name}")
    typer.echo(f"  Availability: {freelancer.availability_status.value}")
    typer.echo(f"  Rating: {freelancer.rating}")
    if freelancer.hourly_rate is not None:
        typer.echo(f"  Hourly rate: {freelancer.hourly_rate}")
    if freelancer.portfolio_url:
        typer.echo(f"  Portfolio: {freelancer.portfolio_url}")


# Milestone commands


@milestone_app.command("add")
def milestone_add(
    project_id: Annotated[str, typer.Option("--project", help="Project ID")],
    client: Annotated[str, typer.Option("--client", help="Owning client ID")],
    title: Annotated[str, typer.Option("--title", help="Milestone title")],
    amount: Annotated[str, typer.Option("--amount", help="Amount paid on completion")],
    order: Annotated[int, typer.Option("--order", help="Position within the project")] = 0,
    description: Annotated[
        Optional[str],
        typer.Option("--description", help="Milestone description"),
    ] = None,
    db: Annotated[
        Optional[Path],
        typer.Option("--db", help="Database path"),
    ] = None,
) -> None:
    """Add a milestone to a project"""
    market = get_market(db)

    milestone = run(
        market.milestones.create(project_id, client, title, amount, order, description)
    )

    typer.echo(f"✓ Added milestone: {milestone.milestone_id}")
    typer.echo(f"  Title: {milestone.title}")
    typer.echo(f"  Amount: {milestone.amount}")
    typer.echo(f"  Due: {milestone.due_date.isoformat()}")


@milestone_app.command("list")
def milestone_list(
    project_id: Annotated[str, typer.Option("--project", help="Project ID")],
    db: Annotated[
        Optional[Path],
        typer.Option("--db", help="Database path"),
    ] = None,
) -> None:
    """List a project's milestones in order"""
    market = get_market(db)

    milestones = run(market.milestones.list_for_project(project_id))

    if not milestones:
        typer.echo(f"No milestones for project {project_id}")
        return

    typer.echo(f"Milestones ({len(milestones)}):")
    for m in milestones:
        typer.echo(f"  {m.order}. {m.milestone_id}: {m.title} {m.amount} [{m.status.value}]")


@milestone_app.command("status")
def milestone_status(
    milestone_id: Annotated[str, typer.Option("--id", help="Milestone ID")],
    to: Annotated[str, typer.Option("--to", help="New status (PENDING, IN_PROGRESS, COMPLETED)")],
    db: Annotated[
        Optional[Path],
        typer.Option("--db", help="Database path"),
    ] = None,
) -> None:
    """Set a milestone's status"""
    market = get_market(db)

    milestone = run(market.milestones.change_status(milestone_id, to))

    typer.echo(f"✓ Milestone {milestone.milestone_id} is now {milestone.status.value}")


# Time tracking commands


@time_app.command("log")
def time_log(
    project_id: Annotated[str, typer.Option("--project", help="Project ID")],
    freelancer: Annotated[str, typer.Option("--freelancer", help="Freelancer ID")],
    hours: Annotated[str, typer.Option("--hours", help="Hours worked")],
    description: Annotated[str, typer.Option("--description", help="Work performed")],
    date: Annotated[datetime, typer.Option("--date", help="Day the work was performed")],
    milestone: Annotated[
        Optional[str],
        typer.Option("--milestone", help="Related milestone ID"),
    ] = None,
    db: Annotated[
        Optional[Path],
        typer.Option("--db", help="Database path"),
    ] = None,
) -> None:
    """Log hours worked on a project"""
    market = get_market(db)

    entry = run(
        market.time_entries.log(
            project_id, freelancer, hours, description, as_utc(date), milestone
        )
    )

    typer.echo(f"✓ Logged {entry.hours} hours: {entry.entry_id}")


@time_app.command("list")
def time_list(
    project_id: Annotated[str, typer.Option("--project", help="Project ID")],
    db: Annotated[
        Optional[Path],
        typer.Option("--db", help="Database path"),
    ] = None,
) -> None:
    """List time entries for a project"""
    market = get_market(db)

    entries = run(market.time_entries.list_for_project(project_id))

    if not entries:
        typer.echo(f"No time entries for project {project_id}")
        return

    typer.echo(f"Time entries ({len(entries)}):")
    for entry in entries:
        typer.echo(f"  {entry.date.date().isoformat()} {entry.hours}h {entry.freelancer_id}")


@time_app.command("summary")
def time_summary(
    project_id: Annotated[str, typer.Option("--project", help="Project ID")],
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
    db: Annotated[
        Optional[Path],
        typer.Option("--db", help="Database path"),
    ] = None,
) -> None:
    """Show total hours and amount owed"""
    market = get_market(db)

    summary = run(market.time_entries.billing_summary(project_id))

    if json_output:
        echo_json(summary)
        return

    typer.echo(f"Billing for project {project_id}:")
    typer.echo(f"  Entries: {summary.entry_count}")
    typer.echo(f"  Total hours: {summary.total_hours}")
    if summary.amount is None:
        typer.echo("  Amount: (no agreed rate yet)")
    else:
        typer.echo(f"  Rate: {summary.agreed_rate}")
        typer.echo(f"  Amount: {summary.amount}")


def main() -> None:
    """Main entry point"""
    app()


if __name__ == "__main__":
    main()
