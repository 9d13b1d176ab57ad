import argparse
import asyncio
import logging
from typing import Optional

from battery_monitor.config import load_settings
from battery_monitor.models.dashboard import Evaluation
from battery_monitor.services.battery_service import fetch_snapshot
from battery_monitor.telemetry.pipeline import run_evaluation
from battery_monitor.telemetry.refresh import RefreshLoop
from battery_monitor.telemetry.thresholds import load_threshold_table
from battery_monitor.thingspeak.client import ThingSpeakClient


def print_evaluation(evaluation: Evaluation) -> None:
    s = evaluation.snapshot
    print(f"📡 Reading at {s.timestamp or 'unknown time'}")
    print(
        f"🔎 {s.voltage:.2f}V  {s.current:.2f}mA  {s.temperature:.1f}°C  "
        f"SOC {s.state_of_charge:.1f}%  SOH {s.state_of_health:.1f}%  "
        f"range {s.estimated_range}km  {'charging' if s.is_charging else 'discharging'}"
    )

    if evaluation.warnings:
        print("⚠️ WARNINGS:")
        for w in evaluation.warnings:
            print(f"  {w.icon} [{w.severity.value}] {w.message}")
    else:
        print("✅ All systems normal")

    if evaluation.alert.show_banner:
        print("🚨 CRITICAL ALERT")
        for message in evaluation.alert.messages:
            print(f"  • {message}")

    print("-" * 50)


def print_failure(reason: str) -> None:
    print(f"❌ Disconnected: {reason}")
    print("-" * 50)


async def run_watch(interval: Optional[float], once: bool) -> None:
    settings = load_settings()
    thresholds = load_threshold_table(settings.thresholds_file)

    async with ThingSpeakClient.from_settings(settings) as client:
        loop = RefreshLoop(
            fetch=lambda: fetch_snapshot(client, settings.layout),
            process=lambda snapshot: run_evaluation(snapshot, thresholds, settings.range),
            on_update=print_evaluation,
            on_failure=print_failure,
            interval=interval or settings.refresh_interval,
        )

        print(f"\n🔋 Watching ThingSpeak channel {settings.channel_id}...\n")
        if once:
            await loop.tick()
            return

        loop.start()
        try:
            await asyncio.Event().wait()
        finally:
            await loop.stop()


def positive_seconds(value: str) -> float:
    try:
        seconds = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}")
    if not seconds > 0:
        raise argparse.ArgumentTypeError(f"must be a positive number of seconds, got {value}")
    return seconds


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Print battery warnings from ThingSpeak")
    parser.add_argument("--interval", type=positive_seconds, default=None, help="seconds between reads")
    parser.add_argument("--once", action="store_true", help="read and evaluate a single snapshot")
    return parser


def main() -> None:
    args = build_parser().parse_args()

    logging.basicConfig(level=logging.WARNING, format="%(asctime)s [%(levelname)s] %(message)s")

    try:
        asyncio.run(run_watch(args.interval, args.once))
    except KeyboardInterrupt:
        print("\n👋 Stopped")


if __name__ == "__main__":
    main()
