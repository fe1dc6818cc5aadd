"""Lightweight REST client for the futsquad API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the futsquad REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("roster", type=Path, nargs="?", help="Club roster CSV to upload")
    parser.add_argument("--coins", type=int, default=None, help="Coin balance to send with the upload")
    parser.add_argument("--sort", default="rating:desc", help="Sort spec for the roster listing")
    parser.add_argument("--limit", type=int, default=20, help="Number of players to list")
    parser.add_argument("--improve", action="store_true", help="Request squad recommendations")
    parser.add_argument("--formation", default=None, help="Preferred formation for recommendations")
    parser.add_argument("--load-session", action="store_true", help="Restore the saved session instead of uploading")
    parser.add_argument("--save-session", action="store_true", help="Save the session after uploading")
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url, timeout=120.0) as client:
        if args.load_session:
            resp = client.post("/session/load")
            if resp.status_code == 404:
                raise SystemExit("no saved session")
        else:
            if args.roster is None:
                raise SystemExit("roster file is required unless using --load-session")
            files = {"roster": (args.roster.name, args.roster.read_bytes(), "text/csv")}
            data = {"coins": str(args.coins)} if args.coins is not None else {}
            resp = client.post("/roster", files=files, data=data)
        if resp.status_code == 400:
            raise SystemExit(resp.json()["detail"])
        resp.raise_for_status()
        print("Import report:", json.dumps(resp.json(), indent=2))

        if args.save_session:
            resp = client.post("/session/save")
            resp.raise_for_status()

        resp = client.get("/roster", params={"sort": args.sort, "limit": args.limit})
        resp.raise_for_status()
        payload = resp.json()
        print(f"{payload['matched_players']} players; summary:", json.dumps(payload["summary"], indent=2))
        for entry in payload["entries"]:
            print(f"{entry['rating']:>3} {entry['name']} ({entry['preferred_position']}, {entry['team']})")

        if args.improve:
            body = {"formation": args.formation} if args.formation else {}
            resp = client.post("/recommendations", json=body)
            if resp.status_code in {400, 409, 502, 503}:
                raise SystemExit(resp.json()["detail"])
            resp.raise_for_status()
            print(json.dumps(resp.json()["recommendation"], indent=2))


if __name__ == "__main__":
    main()
