# -*- coding: utf-8 -*-
"""
export_report.py: fetch a report through the API and write it to disk.

    python export_report.py usuarios pdf --username admin --password secret --out ./exports

Modes: usuarios, dia, semana, fixadas. Formats: csv, pdf, xlsx.
"""

import argparse
import sys
from pathlib import Path

from ativix_client import ApiClient, ApiError, RelatoriosView, SessionStore
from ativix_client.relatorios import MODES


def main():
    parser = argparse.ArgumentParser(description="Export an activity report")
    parser.add_argument("mode", choices=list(MODES))
    parser.add_argument("format", choices=["csv", "pdf", "xlsx"])
    parser.add_argument("--url", help="API base URL (default: $ATIVIX_API_URL)")
    parser.add_argument("--username", help="log in first (otherwise the saved session is used)")
    parser.add_argument("--password")
    parser.add_argument("--out", default=".", help="output directory")
    args = parser.parse_args()

    api = ApiClient(args.url, SessionStore())
    if args.username:
        try:
            api.login(args.username, args.password or "")
        except ApiError as err:
            print(f"❌ {err.message}")
            sys.exit(1)

    view = RelatoriosView(api, alert=lambda message: print(f"❌ {message}"))
    if view.load(args.mode) is None:
        sys.exit(1)

    Path(args.out).mkdir(parents=True, exist_ok=True)
    exporter = {"csv": view.export_csv, "pdf": view.export_pdf, "xlsx": view.export_xlsx}[args.format]
    path = exporter(args.out)
    print(f"✅ {MODES[args.mode]}: {len(view.rows())} linhas → {path}")


if __name__ == "__main__":
    main()
