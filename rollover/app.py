from fncli import cli

from .adapters.gmail import GmailNotifier
from .adapters.google import build_service, get_credentials
from .adapters.tasks_api import GoogleTaskStore
from .config import Settings, load_settings
from .digest import DigestMailer
from .lib.dates import local_now, resolve_zone
from .lib.errors import echo
from .lock import RunLock
from .runlog import RunLog
from .runner import RolloverOrchestrator


def build_store(settings: Settings, creds=None) -> GoogleTaskStore:
    return GoogleTaskStore(
        build_service("tasks", "v1", creds),
        retries=settings.api_retries,
        native_move=settings.native_move,
    )


def build_orchestrator(settings: Settings | None = None) -> RolloverOrchestrator:
    """Wire the orchestrator to Google Tasks, Gmail, the lock file and the run log."""
    settings = settings if settings else load_settings()
    creds = get_credentials()
    store = build_store(settings, creds)
    notifier = GmailNotifier(build_service("gmail", "v1", creds), retries=settings.api_retries)
    recipient = settings.notify_email or notifier.account_email()
    run_log = RunLog()
    zone = resolve_zone(settings.time_zone)
    return RolloverOrchestrator(
        store=store,
        lock=RunLock(),
        run_log=run_log,
        notifier=notifier,
        settings=settings,
        recipient=recipient,
        digest=DigestMailer(run_log, notifier, recipient, zone),
    )


@cli("rollover")
def run() -> None:
    """Run the daily rollover once"""
    result = build_orchestrator().run()
    if result is None:
        echo("another run holds the lock, skipped")
        return
    echo(result.notes)


@cli("rollover")
def digest() -> None:
    """Send the weekly digest now"""
    settings = load_settings()
    notifier = GmailNotifier(build_service("gmail", "v1"), retries=settings.api_retries)
    recipient = settings.notify_email or notifier.account_email()
    zone = resolve_zone(settings.time_zone)
    sent = DigestMailer(RunLog(), notifier, recipient, zone).send_weekly_digest(local_now(zone))
    echo(f"digest sent to {recipient}" if sent else "digest failed, see log")


@cli("rollover")
def auth() -> None:
    """Authorize access to Google Tasks and Gmail"""
    get_credentials(interactive=True)
    echo("token stored")
