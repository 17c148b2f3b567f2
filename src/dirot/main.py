"""Main entry point for the scheduled Yad2 scan."""

import sys
import traceback
from pathlib import Path

from dirot.app import create_context
from dirot.config import settings
from dirot.errors import DirotError
from dirot.models import ScanParams
from dirot.scan_import import load_scan_params


def main(dry_run: bool = False, config_path: Path | None = None, clear: bool = False) -> int:
    """
    Scan for new candidates and store them.

    Args:
        dry_run: If True, only log notifications
        config_path: YAML file with scan filters
        clear: Empty the scanned pool before scanning

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    print("🚀 Starting Yad2 scan...")
    print("=" * 60)

    try:
        params = load_scan_params(config_path) if config_path else ScanParams()
        print(f"   Type: {params.property_type}")
        print(f"   Areas: {', '.join(params.areas)}")
        print(f"   Max price: {params.max_price}")

        with create_context(settings, dry_run=dry_run) as context:
            if clear:
                print("\n🧹 Clearing scanned apartments...")
                context.importer.clear_all(token=context.session.token)

            summary = context.importer.scan(params)
            print(f"\n📊 {summary.message}")

            pending = context.importer.list_scanned()
            print(f"   Scanned apartments waiting for review: {len(pending)}")

        print("\n" + "=" * 60)
        print("✅ Scan completed successfully")
        return 0

    except DirotError as e:
        print(f"\n❌ {e}")
        return 1
    except Exception as e:
        print(f"\n❌ Error: {e}")
        traceback.print_exc()
        return 1


def run() -> None:
    """Console script entry point."""
    args = sys.argv[1:]
    config_path = None
    if "--config" in args:
        index = args.index("--config")
        if index + 1 < len(args):
            config_path = Path(args[index + 1])
    sys.exit(main(dry_run="--dry-run" in args, config_path=config_path, clear="--clear" in args))


if __name__ == "__main__":
    run()
