"""
CLI tests

Drive the typer app end to end against a temporary SQLite file: every
command opens the marketplace afresh, so these also cover persistence
between invocations.
"""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner, Result

from freelance_market.cli.main import app


@pytest.fixture
def runner() -> CliRunner:
    """CLI test runner"""
    return CliRunner()


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "market.db"


@pytest.fixture
def initialized_db(runner: CliRunner, db_path: Path) -> Path:
    result = runner.invoke(app, ["init", "--db", str(db_path)])
    assert result.exit_code == 0
    return db_path


def created_id(result: Result, label: str) -> str:
    """Pull the id out of a '✓ <label>: <id>' line"""
    assert result.exit_code == 0, result.output
    return result.output.split(f"{label}: ")[1].split()[0]


def create_project(runner: CliRunner, db: Path, open_now: bool = True) -> str:
    args = [
        "project", "create",
        "--client", "client-1",
        "--title", "Landing page",
        "--description", "Rebuild the marketing site",
        "--budget-min", "500",
        "--budget-max", "1500",
        "--deadline", "2025-03-01",
        "--type", "hourly",
        "--db", str(db),
    ]
    if open_now:
        args.append("--open")
    return created_id(runner.invoke(app, args), "Created project")


def submit_bid(runner: CliRunner, db: Path, project_id: str, freelancer: str, rate: str) -> str:
    result = runner.invoke(
        app,
        [
            "bid", "submit",
            "--project", project_id,
            "--freelancer", freelancer,
            "--rate", rate,
            "--days", "14",
            "--cover-letter", "I have shipped a dozen of these",
            "--db", str(db),
        ],
    )
    return created_id(result, "Submitted bid")


# =============================================================================
# Init
# =============================================================================


def test_init_creates_database(runner: CliRunner, db_path: Path) -> None:
    result = runner.invoke(app, ["init", "--db", str(db_path)])

    assert result.exit_code == 0
    assert "initialized" in result.output.lower()
    assert db_path.exists()


def test_init_refuses_existing_database(runner: CliRunner, initialized_db: Path) -> None:
    result = runner.invoke(app, ["init", "--db", str(initialized_db)])

    assert result.exit_code == 1
    assert "already exists" in result.output


def test_commands_require_initialized_database(runner: CliRunner, db_path: Path) -> None:
    result = runner.invoke(app, ["project", "list", "--db", str(db_path)])

    assert result.exit_code == 1
    assert "Database not found" in result.output


# =============================================================================
# Projects
# =============================================================================


def test_project_create_and_show(runner: CliRunner, initialized_db: Path) -> None:
    project_id = create_project(runner, initialized_db)

    result = runner.invoke(app, ["project", "show", "--id", project_id, "--json", "--db", str(initialized_db)])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["status"] == "OPEN"
    assert data["project_type"] == "HOURLY"
    assert data["client_id"] == "client-1"
    assert data["freelancer_id"] is None


def test_project_lifecycle_commands(runner: CliRunner, initialized_db: Path) -> None:
    db = str(initialized_db)
    draft_id = create_project(runner, initialized_db, open_now=False)

    opened = runner.invoke(app, ["project", "status", "--id", draft_id, "--to", "open", "--client", "client-1", "--db", db])
    assert opened.exit_code == 0
    assert "now OPEN" in opened.output

    # OPEN projects are past the point of deletion
    refused = runner.invoke(app, ["project", "delete", "--id", draft_id, "--client", "client-1", "--db", db])
    assert refused.exit_code == 1
    assert "Error" in refused.output

    second_draft = create_project(runner, initialized_db, open_now=False)
    deleted = runner.invoke(app, ["project", "delete", "--id", second_draft, "--client", "client-1", "--db", db])
    assert deleted.exit_code == 0

    missing = runner.invoke(app, ["project", "show", "--id", second_draft, "--db", db])
    assert missing.exit_code == 1


def test_project_list_defaults_to_open(runner: CliRunner, initialized_db: Path) -> None:
    db = str(initialized_db)
    open_id = create_project(runner, initialized_db)
    draft_id = create_project(runner, initialized_db, open_now=False)

    result = runner.invoke(app, ["project", "list", "--json", "--db", db])

    assert result.exit_code == 0
    page = json.loads(result.stdout)
    assert page["total"] == 1
    assert [p["project_id"] for p in page["data"]] == [open_id]

    mine = runner.invoke(app, ["project", "list", "--client", "client-1", "--json", "--db", db])
    assert {p["project_id"] for p in json.loads(mine.stdout)["data"]} == {open_id, draft_id}


def test_project_list_rejects_unknown_status(runner: CliRunner, initialized_db: Path) -> None:
    result = runner.invoke(app, ["project", "list", "--status", "ARCHIVED", "--db", str(initialized_db)])

    assert result.exit_code == 1
    assert "Unknown project status" in result.output


def test_invalid_transition_exits_with_error(runner: CliRunner, initialized_db: Path) -> None:
    project_id = create_project(runner, initialized_db)

    result = runner.invoke(
        app,
        ["project", "status", "--id", project_id, "--to", "COMPLETED", "--client", "client-1", "--db", str(initialized_db)],
    )

    assert result.exit_code == 1
    assert "Error" in result.output


# =============================================================================
# Bids
# =============================================================================


def test_bid_flow_rank_accept_and_bill(runner: CliRunner, initialized_db: Path) -> None:
    db = str(initialized_db)
    project_id = create_project(runner, initialized_db)

    registered = runner.invoke(
        app, ["freelancer", "register", "--id", "dev-1", "--name", "Ada", "--rating", "4.5", "--db", db]
    )
    assert registered.exit_code == 0

    winner = submit_bid(runner, initialized_db, project_id, "dev-1", "80")
    loser = submit_bid(runner, initialized_db, project_id, "dev-2", "60")

    by_price = runner.invoke(app, ["bid", "list", "--project", project_id, "--rank-by", "price", "--json", "--db", db])
    assert by_price.exit_code == 0
    assert [v["bid"]["bid_id"] for v in json.loads(by_price.stdout)] == [loser, winner]

    by_rating = runner.invoke(app, ["bid", "list", "--project", project_id, "--rank-by", "rating", "--json", "--db", db])
    views = json.loads(by_rating.stdout)
    assert [v["bid"]["bid_id"] for v in views] == [winner, loser]
    assert views[0]["freelancer_rating"] == 4.5
    assert views[1]["freelancer_rating"] == 0.0

    accepted = runner.invoke(app, ["bid", "accept", "--id", winner, "--client", "client-1", "--db", db])
    assert accepted.exit_code == 0
    assert "Accepted bid" in accepted.output

    shown = json.loads(
        runner.invoke(app, ["project", "show", "--id", project_id, "--json", "--db", db]).stdout
    )
    assert shown["status"] == "IN_PROGRESS"
    assert shown["freelancer_id"] == "dev-1"
    assert shown["agreed_rate"] == "80"

    theirs = runner.invoke(app, ["bid", "mine", "--freelancer", "dev-2", "--db", db])
    assert "REJECTED" in theirs.output

    for hours, day in (("3.5", "2025-01-20"), ("4.25", "2025-01-21")):
        logged = runner.invoke(
            app,
            [
                "time", "log",
                "--project", project_id,
                "--freelancer", "dev-1",
                "--hours", hours,
                "--description", "Build the hero section",
                "--date", day,
                "--db", db,
            ],
        )
        assert logged.exit_code == 0

    summary = runner.invoke(app, ["time", "summary", "--project", project_id, "--json", "--db", db])
    assert summary.exit_code == 0
    billing = json.loads(summary.stdout)
    assert billing["entry_count"] == 2
    assert billing["total_hours"] == "7.75"
    assert billing["amount"] == "620.00"


def test_accept_by_non_owner_fails(runner: CliRunner, initialized_db: Path) -> None:
    db = str(initialized_db)
    project_id = create_project(runner, initialized_db)
    bid_id = submit_bid(runner, initialized_db, project_id, "dev-1", "80")

    result = runner.invoke(app, ["bid", "accept", "--id", bid_id, "--client", "client-2", "--db", db])

    assert result.exit_code == 1
    assert "Error" in result.output


def test_bid_on_draft_project_fails(runner: CliRunner, initialized_db: Path) -> None:
    project_id = create_project(runner, initialized_db, open_now=False)

    result = runner.invoke(
        app,
        [
            "bid", "submit",
            "--project", project_id,
            "--freelancer", "dev-1",
            "--rate", "80",
            "--days", "14",
            "--cover-letter", "Hello",
            "--db", str(initialized_db),
        ],
    )

    assert result.exit_code == 1
    assert "Error" in result.output


def test_bid_with_bad_rate_fails(runner: CliRunner, initialized_db: Path) -> None:
    project_id = create_project(runner, initialized_db)

    result = runner.invoke(
        app,
        [
            "bid", "submit",
            "--project", project_id,
            "--freelancer", "dev-1",
            "--rate", "cheap",
            "--days", "14",
            "--cover-letter", "Hello",
            "--db", str(initialized_db),
        ],
    )

    assert result.exit_code == 1
    assert "must be a number" in result.output


# =============================================================================
# Milestones
# =============================================================================


def test_milestones_add_list_and_status(runner: CliRunner, initialized_db: Path) -> None:
    db = str(initialized_db)
    project_id = create_project(runner, initialized_db)

    second = runner.invoke(
        app,
        ["milestone", "add", "--project", project_id, "--client", "client-1", "--title", "Launch", "--amount", "700", "--order", "2", "--db", db],
    )
    first = runner.invoke(
        app,
        ["milestone", "add", "--project", project_id, "--client", "client-1", "--title", "Design", "--amount", "300", "--order", "1", "--db", db],
    )
    first_id = created_id(first, "Added milestone")
    assert second.exit_code == 0

    listed = runner.invoke(app, ["milestone", "list", "--project", project_id, "--db", db])
    assert listed.output.index("Design") < listed.output.index("Launch")

    started = runner.invoke(app, ["milestone", "status", "--id", first_id, "--to", "in_progress", "--db", db])
    assert started.exit_code == 0
    assert "IN_PROGRESS" in started.output
