"""Run one focus session in the terminal: python -m zenfocus study -m 25."""

import argparse
import signal
import sys

from PyQt6.QtCore import QCoreApplication, QTimer

from . import ZenFocusError, configure_logging
from .app import ZenFocusCore
from .modes import AmbientSound
from .sessions.records import validate_config
from .settings import load_settings


def _format_clock(seconds: int) -> str:
    minutes, secs = divmod(max(0, seconds), 60)
    return f"{minutes:02d}:{secs:02d}"


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="zenfocus", description=__doc__)
    parser.add_argument("mode", nargs="?", help="study, deepwork, yoga, zen or interval")
    duration = parser.add_mutually_exclusive_group()
    duration.add_argument("-m", "--minutes", type=int)
    duration.add_argument("-s", "--seconds", type=int)
    parser.add_argument(
        "-a", "--ambient", choices=[s.value for s in AmbientSound],
    )
    parser.add_argument("-c", "--cycles", type=int, help="number of back-to-back rounds")
    parser.add_argument("-u", "--user", default=None, help="user id (guest if omitted)")
    parser.add_argument("--stats", action="store_true", help="print stats and exit")
    return parser.parse_args(argv)


def _print_stats(core: ZenFocusCore, user_id: str | None) -> None:
    stats = core.manager.get_session_stats(user_id)
    print(
        f"Focus time {_format_clock(stats.total_focus_time)}  "
        f"completion {stats.completion_rate}%  "
        f"streak {stats.current_streak} (longest {stats.longest_streak} days)"
    )
    for mode, totals in stats.mode_breakdown.items():
        if totals.count:
            print(f"  {mode.value:<9} {totals.count:>3}  {_format_clock(totals.total_time)}")


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    settings = load_settings()
    configure_logging(settings.log_level)

    app = QCoreApplication.instance() or QCoreApplication(sys.argv)
    app.setApplicationName("ZenFocus")
    core = ZenFocusCore(settings)

    if args.stats:
        _print_stats(core, args.user)
        core.shutdown()
        return 0

    try:
        config = core.default_config(args.mode, args.ambient, args.cycles)
        if args.minutes is not None or args.seconds is not None:
            planned = args.seconds if args.seconds is not None else args.minutes * 60
            config = validate_config({**config.model_dump(), "planned_duration": planned})
        session = core.manager.create_session(config, args.user)
        core.manager.start_session(session.id)
    except ZenFocusError as exc:
        print(f"error: {exc}", file=sys.stderr)
        core.shutdown()
        return 2

    mode = config.mode

    def ticked(snap) -> None:
        label = mode.value
        if snap.total_cycles > 1:
            label += f" {snap.current_cycle}/{snap.total_cycles}"
        print(f"\r{label} {_format_clock(snap.remaining_seconds)}", end="", flush=True)

    core.timer.tick.connect(ticked)

    def finished(done) -> None:
        print(f"\nSession {'completed' if done.completed_fully else 'cancelled'}"
              f" after {_format_clock(done.actual_duration)}")
        _print_stats(core, args.user)
        app.quit()

    core.manager.session_completed.connect(finished)
    core.manager.session_cancelled.connect(finished)

    def failed(exc) -> None:
        print(f"\nerror: {exc}", file=sys.stderr)
        app.exit(1)

    core.manager.completion_failed.connect(failed)

    def interrupted(*_) -> None:
        if not core.manager.is_session_active():
            app.quit()
            return
        try:
            core.manager.cancel_session()
        except ZenFocusError as exc:
            print(f"\nerror: {exc}", file=sys.stderr)
            app.exit(1)

    # Ctrl+C cancels; the idle timer lets Python run the signal handler
    signal.signal(signal.SIGINT, interrupted)
    wake = QTimer()
    wake.timeout.connect(lambda: None)
    wake.start(200)

    code = app.exec()
    core.shutdown()
    return code


if __name__ == "__main__":
    sys.exit(main())
