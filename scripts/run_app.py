#!/usr/bin/env python
"""
Run the Streamlit document editor for quotations, proposals and invoices.

Usage:
    python scripts/run_app.py [--backend http://localhost:5000] [--catalog data/courses.csv]
"""
import argparse
import os
import subprocess
import sys
from pathlib import Path


def main():
    parser = argparse.ArgumentParser(description="Run the document editor")
    parser.add_argument("--backend", help="Backend base URL (sets PRICING_BACKEND_URL)")
    parser.add_argument("--catalog", help="Course catalog export (sets PRICING_CATALOG_PATH)")
    args = parser.parse_args()

    project_root = Path(__file__).parent.parent
    ui_path = project_root / 'src' / 'institute_pricing' / 'ui' / 'app_streamlit.py'

    if not ui_path.exists():
        print(f"ERROR: UI module not found at {ui_path}")
        sys.exit(1)

    env = os.environ.copy()
    if args.backend:
        env['PRICING_BACKEND_URL'] = args.backend
    if args.catalog:
        env['PRICING_CATALOG_PATH'] = str(Path(args.catalog).resolve())

    cmd = [sys.executable, '-m', 'streamlit', 'run', str(ui_path)]
    print(f"Starting Streamlit: {' '.join(cmd)}")

    try:
        subprocess.run(cmd, cwd=str(project_root), env=env)
    except KeyboardInterrupt:
        print("\nApplication stopped.")


if __name__ == "__main__":
    main()
