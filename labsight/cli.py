"""
LabSight CLI - Command-line interface for the engine.

Usage:
    labsight catalog [identity]                 List equipment or show one entry
    labsight identify <label> [--confidence]    Rank a classifier label
    labsight simulate <batches.json>            Replay recorded detections
    labsight serve [--host] [--port]            Run the REST API

A batches file is a JSON list with one entry per tick; each entry is
a list of predictions: {"class": "cup", "score": 0.8, "bbox": [x, y, w, h]}.
"""

import argparse
import asyncio
import json
import sys


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="LabSight - Laboratory Equipment Identifier",
        prog="labsight",
    )
    parser.add_argument("--log-level", help="Logging level (default: LABSIGHT_LOG_LEVEL or INFO)")
    parser.add_argument("--catalog-file", help="JSON catalog to use instead of the built-in one")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Catalog command
    catalog_parser = subparsers.add_parser("catalog", help="List known equipment")
    catalog_parser.add_argument("identity", nargs="?", help="Show one entry in full")

    # Identify command
    identify_parser = subparsers.add_parser("identify", help="Rank a classifier label")
    identify_parser.add_argument("label", help="Label reported by the classifier")
    identify_parser.add_argument("--confidence", type=float, default=0.9, help="Classifier score")
    identify_parser.add_argument("--top", type=int, default=3, help="Number of identities to show")

    # Simulate command
    simulate_parser = subparsers.add_parser("simulate", help="Replay recorded detections")
    simulate_parser.add_argument("batches_file", help="Path to JSON list of prediction batches")
    simulate_parser.add_argument("--threshold", type=float, default=None, help="Detection threshold")
    simulate_parser.add_argument(
        "--lab-classes-only", action="store_true", help="Ignore labels unrelated to lab equipment"
    )

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the REST API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)

    from .config import configure_logging
    configure_logging(args.log_level)

    if args.command == "catalog":
        cmd_catalog(args)
    elif args.command == "identify":
        cmd_identify(args)
    elif args.command == "simulate":
        cmd_simulate(args)
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def load_catalog(args):
    """Catalog from --catalog-file, or the built-in lab catalog."""
    from .catalog import EquipmentCatalog, create_lab_catalog

    if not args.catalog_file:
        return create_lab_catalog()
    try:
        return EquipmentCatalog.load_json(args.catalog_file)
    except FileNotFoundError:
        print(f"Error: File not found: {args.catalog_file}")
        sys.exit(1)
    except (ValueError, json.JSONDecodeError) as e:
        print(f"Error: Invalid catalog: {e}")
        sys.exit(1)


def cmd_catalog(args):
    """List equipment or show one entry."""
    catalog = load_catalog(args)

    if not args.identity:
        for entry in catalog:
            print(f"{entry.identity:<20} {entry.name}")
        return

    entry = catalog.get(args.identity)
    if entry is None:
        print(f"Error: Unknown equipment: {args.identity}")
        sys.exit(1)

    print(entry.name)
    print(entry.description)
    if entry.safety_warnings:
        print("\nSafety warnings:")
        for w in entry.safety_warnings:
            print(f"  - {w}")
    if entry.usage:
        print("\nCommon uses:")
        for u in entry.usage:
            print(f"  - {u}")
    if entry.steps:
        print("\nSteps:")
        for i, step in enumerate(entry.steps, start=1):
            print(f"  {i}. {step}")


def cmd_identify(args):
    """Rank one label against the catalog."""
    from .config import SessionConfig
    from .recognition import BeliefEngine

    if not 0.0 <= args.confidence <= 1.0:
        print(f"Error: Confidence must be between 0 and 1, got {args.confidence}")
        sys.exit(1)

    catalog = load_catalog(args)
    engine = BeliefEngine()
    engine.prime(catalog.identities, SessionConfig().base_likelihood)
    ranked = engine.update_belief(args.label, args.confidence, catalog.identities)

    print(f"Label: {args.label} ({args.confidence:.0%})")
    for identity, posterior in list(ranked.items())[:args.top]:
        print(f"  {identity:<20} {posterior:.3f}")


def cmd_simulate(args):
    """Drive a session tick by tick over recorded batches."""
    try:
        with open(args.batches_file, "r", encoding="utf-8") as f:
            batches = json.load(f)
    except FileNotFoundError:
        print(f"Error: File not found: {args.batches_file}")
        sys.exit(1)
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON: {e}")
        sys.exit(1)

    if not isinstance(batches, list):
        print("Error: Batches file must contain a JSON list")
        sys.exit(1)

    catalog = load_catalog(args)
    asyncio.run(_simulate(batches, catalog, args.threshold, args.lab_classes_only))


async def _simulate(batches, catalog, threshold, lab_classes_only=False):
    from .config import SessionConfig
    from .session import DetectionSession, InfoPanel, OverlayBoard, VoiceLog
    from .vision import ScriptedDetector, StaticCamera

    info = InfoPanel(catalog)
    voice = VoiceLog()
    session = DetectionSession(
        camera=StaticCamera(),
        detector=ScriptedDetector(batches),
        identities=catalog.identities,
        overlay=OverlayBoard(),
        info=info,
        voice=voice,
        config=SessionConfig(lab_classes_only=lab_classes_only),
        catalog=catalog,
    )
    if threshold is not None and not session.set_detection_threshold(threshold):
        print(f"Error: Threshold must be between 0 and 1, got {threshold}")
        sys.exit(1)

    await session.start()
    for _ in batches:
        result = await session.tick()
        if result is None:
            continue
        print(f"Tick {result.tick_number}: {result.observation_count} observation(s)")
        if result.error:
            print(f"  error: {result.error}")
        for detection_id in result.diff.removed:
            print(f"  - {detection_id}")
        for detection_id in result.diff.added:
            print(f"  + {detection_id}")
        if result.top:
            print(
                f"  top: {result.top.detected_class} -> {result.top.equipment} "
                f"({result.top.equipment_confidence:.3f})"
            )

    verdict = session.most_likely()
    print(f"\nMost likely over time: {verdict.identity} (score {verdict.score:.3f})")
    if info.entry:
        print(info.entry.summary_text())

    await session.stop()
    await session.drain_announcements()
    print("\nAnnouncements:")
    for text in voice.spoken:
        print(f"  - {text}")


def cmd_serve(args):
    """Run the REST API with uvicorn."""
    import uvicorn
    from .api import create_app
    from .api.service import APIService
    from .config import SessionConfig
    from .session import SessionManager

    service = APIService(
        session_manager=SessionManager(
            catalog=load_catalog(args),
            config=SessionConfig.from_env(),
        )
    )
    uvicorn.run(create_app(service), host=args.host, port=args.port)


if __name__ == "__main__":
    main()
