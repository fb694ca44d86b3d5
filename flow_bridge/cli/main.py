"""
Main CLI entry point for Flow Bridge

This module provides the command-line interface and the main processing loop
for the Flow Bridge system.
"""

import argparse
import logging
import signal
import sys
import time
from threading import Event
from typing import List, Optional

from ..core.config import (
    SAMPLE_RATE, SAMPLES_PER_PACKET, TICK_HZ, STATUS_INTERVAL_SEC, CHANNEL_NAMES,
    SUSTAINED_MS, DEFAULT_COHERENCE_THRESHOLD, UDP_HOST, UDP_PORT,
)
from ..core.data_types import ThresholdSettings, Transition
from ..acquisition.sources import FakeMuseSource
from ..detection.quality import quality_label
from ..engine.pipeline import FlowPipeline
from ..engine.session import SessionTracker, calculate_session_stats, format_time
from ..communication.udp_sender import UDPSender


def run_realtime_processing(source: FakeMuseSource, pipeline: FlowPipeline,
                            sender: Optional[UDPSender], duration: Optional[float] = None,
                            tick_hz: float = TICK_HZ,
                            shutdown_event: Optional[Event] = None) -> SessionTracker:
    """
    Main real-time processing loop

    Feeds source packets into the pipeline at the source's sample rate, ticks
    the pipeline at tick_hz and forwards every result to the consumers.

    Returns:
        SessionTracker: The finished session
    """
    logging.info("Starting real-time processing...")

    shutdown_event = shutdown_event or Event()
    tick_interval = 1.0 / tick_hz
    session = SessionTracker()

    start_time = time.time()
    last_time = start_time
    last_status_time = 0.0
    owed_samples = 0.0

    pipeline.connect(assume_contact=True, timestamp_ms=start_time * 1000)
    session.start(start_time * 1000)

    try:
        while not shutdown_event.is_set():
            current_time = time.time()
            if duration is not None and current_time - start_time >= duration:
                break

            # Deliver whatever the headband would have sent since the last tick
            owed_samples += (current_time - last_time) * source.fs
            last_time = current_time
            while owed_samples >= SAMPLES_PER_PACKET:
                for channel, samples in source.next_packets(SAMPLES_PER_PACKET):
                    pipeline.ingest_samples(channel, samples, current_time * 1000)
                owed_samples -= SAMPLES_PER_PACKET
            pipeline.ingest_motion(*source.accelerometer())

            result = pipeline.tick(current_time * 1000)
            session.update(result.flow.is_active, result.coherence, result.timestamp_ms)

            if sender is not None:
                sender.send_result(result)

            if result.transition == Transition.ENTERED:
                print(">>> Flow state entered")
            elif result.transition == Transition.EXITED:
                print("<<< Flow state exited")

            if current_time - last_status_time > STATUS_INTERVAL_SEC:
                bands = result.snapshot.smoothed_bands
                contact = " ".join(f"{name}={quality_label(code)}" for name, code
                                   in zip(CHANNEL_NAMES, result.snapshot.electrode_codes))
                print(f"Coherence: {result.coherence:.2f} ({result.zone.value:>11}) | "
                      f"Alpha: {bands.alpha:.2f} Beta: {bands.beta:.2f} | "
                      f"B/A: {result.flow.beta_alpha_ratio:.2f} | "
                      f"Held: {result.flow.sustained_ms / 1000:.1f}s | "
                      f"Flow: {result.flow.is_active} | "
                      f"Contact: {contact}")
                last_status_time = current_time

            time.sleep(tick_interval)

    except Exception as e:
        logging.error(f"Processing error: {e}")
    finally:
        pipeline.disconnect()
        logging.info("Real-time processing stopped")

    return session


def create_parser() -> argparse.ArgumentParser:
    """Create command line argument parser"""
    parser = argparse.ArgumentParser(
        description="Flow Bridge - Real-time flow state detection from a four-channel EEG headband",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run with synthetic data, sending ticks to the default UDP port
  python -m flow_bridge --run --fake

  # Stricter flow detection held for 10 seconds, for one minute
  python -m flow_bridge --run --fake --coherence-threshold 0.8 --sustained-ms 10000 --duration 60
        """
    )

    parser.add_argument("--run", action="store_true", required=True,
                        help="Run real-time processing")
    parser.add_argument("--fake", action="store_true",
                        help="Use synthetic EEG data (the only built-in source)")
    parser.add_argument("--duration", type=float, default=None,
                        help="Stop after this many seconds (default: run until Ctrl+C)")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed for the synthetic source")

    # Processing parameters
    parser.add_argument("--fs", type=int, default=SAMPLE_RATE,
                        help=f"Sampling frequency (default: {SAMPLE_RATE})")
    parser.add_argument("--tick-hz", type=float, default=TICK_HZ,
                        help=f"Pipeline tick rate (default: {TICK_HZ})")
    parser.add_argument("--sustained-ms", type=float, default=SUSTAINED_MS,
                        help=f"Time conditions must hold before flow (default: {SUSTAINED_MS})")
    parser.add_argument("--coherence-threshold", type=float, default=DEFAULT_COHERENCE_THRESHOLD,
                        help=f"Flow strictness 0-1 (default: {DEFAULT_COHERENCE_THRESHOLD})")

    # Communication options
    parser.add_argument("--udp-host", default=UDP_HOST,
                        help=f"Consumer UDP host (default: {UDP_HOST})")
    parser.add_argument("--udp-port", type=int, default=UDP_PORT,
                        help=f"Consumer UDP port (default: {UDP_PORT})")
    parser.add_argument("--no-udp", action="store_true",
                        help="Do not send UDP messages")

    # Logging
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Enable verbose logging")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    parser = create_parser()
    args = parser.parse_args(argv)

    # Setup logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    print("=" * 60)
    print("Flow Bridge - Real-time Flow State Detection")
    print("=" * 60)

    if not args.fake:
        logging.error("No device link is built in - run with --fake or feed FlowPipeline from your own bridge")
        return 1

    # Graceful shutdown handler
    shutdown_event = Event()

    def signal_handler(signum, frame):
        logging.info("Shutdown signal received")
        shutdown_event.set()

    previous_handlers = {sig: signal.signal(sig, signal_handler)
                         for sig in (signal.SIGINT, signal.SIGTERM)}

    sender = None
    try:
        source = FakeMuseSource(args.fs, seed=args.seed)
        pipeline = FlowPipeline(sample_rate=args.fs)
        pipeline.apply_threshold_settings(ThresholdSettings(
            coherence_threshold=args.coherence_threshold,
            time_threshold_ms=args.sustained_ms,
        ))
        if not args.no_udp:
            sender = UDPSender(args.udp_host, args.udp_port)

        session = run_realtime_processing(source, pipeline, sender, args.duration,
                                          args.tick_hz, shutdown_event)

        summary = session.end(time.time() * 1000)
        if summary is not None:
            stats = calculate_session_stats(summary)
            print("-" * 60)
            print(f"Session: {format_time(stats.total_length_ms)} | "
                  f"Flow: {stats.flow_state_percent:.0f}% | "
                  f"Longest streak: {format_time(stats.longest_streak_ms)} | "
                  f"Avg coherence: {stats.avg_coherence:.2f} | {stats.achievement}")
        return 0

    except KeyboardInterrupt:
        logging.info("Interrupted by user")
        return 0
    except Exception as e:
        logging.error(f"Unexpected error: {e}")
        return 1
    finally:
        if sender is not None:
            sender.close()
        for sig, handler in previous_handlers.items():
            signal.signal(sig, handler)


if __name__ == "__main__":
    sys.exit(main())
