#!/usr/bin/env python3
"""
Script to register a table QR code for a restaurant and save it as a PNG.

The image encodes the web scan link by default:
    {FRONTEND_URL}/scan?restaurant={restaurant_id}&table={table_number}
Pass --deep-link to encode klub://restaurant/{restaurant_id}/table/{table_number} instead.
"""
import argparse
import os
import sys
import uuid
from pathlib import Path

import httpx

from klub.services.qr_image import render_png

DEFAULT_BASE_URL = "http://localhost:8000"


def create_qr_code(base_url: str, restaurant_id: str, table_number: int, token: str) -> dict:
    """
    Register a table QR code via POST request.

    Args:
        base_url: Backend base URL
        restaurant_id: Restaurant UUID
        table_number: Table number, starting at 1
        token: Bearer token of the restaurant owner

    Returns:
        QR code response with qr_url and deep_link
    """
    endpoint = f"{base_url}/api/restaurant/{restaurant_id}/qr-codes"
    print(f"Registering table {table_number} at {endpoint}...")

    try:
        with httpx.Client(timeout=30.0) as client:
            response = client.post(
                endpoint,
                json={"table_number": table_number},
                headers={"Authorization": f"Bearer {token}"},
            )
            response.raise_for_status()
            qr_code = response.json()
            print("✓ QR code registered")
            print(f"  QR code ID: {qr_code['id']}")
            return qr_code
    except httpx.HTTPStatusError as e:
        print(f"✗ Error registering QR code: {e.response.status_code}")
        print(f"  Response: {e.response.text!s}")
        sys.exit(1)
    except httpx.RequestError as e:
        print(f"✗ Request error: {e}")
        sys.exit(1)


def save_qr_code(data: str, filename: str, output_dir: str = "qr_codes") -> Path:
    """Render data as a QR code PNG inside output_dir and return its path."""
    qr_dir = Path(output_dir)
    qr_dir.mkdir(parents=True, exist_ok=True)

    output_path = qr_dir / Path(filename).name
    output_path.write_bytes(render_png(data))

    print(f"✓ QR code saved to: {output_path}")
    print(f"  Payload: {data}")
    return output_path


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(
        description="Register a restaurant table QR code and save it as PNG"
    )
    parser.add_argument("--restaurant-id", type=str, required=True, help="Restaurant UUID")
    parser.add_argument("--table", type=int, required=True, help="Table number")
    parser.add_argument(
        "--base-url",
        type=str,
        default=DEFAULT_BASE_URL,
        help=f"Backend base URL (default: {DEFAULT_BASE_URL})"
    )
    parser.add_argument(
        "--token",
        type=str,
        default=os.environ.get("KLUB_TOKEN"),
        help="Owner bearer token (default: $KLUB_TOKEN)"
    )
    parser.add_argument(
        "--deep-link",
        action="store_true",
        help="Encode the klub:// deep link instead of the web scan URL"
    )
    parser.add_argument("--output", type=str, help="Output file name (default: table_{n}_qr.png)")

    args = parser.parse_args(argv)

    try:
        restaurant_id = str(uuid.UUID(args.restaurant_id))
    except ValueError:
        print(f"✗ Error: '{args.restaurant_id}' is not a valid UUID")
        sys.exit(1)

    if args.table <= 0:
        print("✗ Error: table number must be positive")
        sys.exit(1)

    if not args.token:
        print("✗ Error: a bearer token is required (--token or KLUB_TOKEN)")
        sys.exit(1)

    qr_code = create_qr_code(args.base_url.rstrip("/"), restaurant_id, args.table, args.token)
    data = qr_code["deep_link"] if args.deep_link else qr_code["qr_url"]
    qr_path = save_qr_code(data, args.output or f"table_{args.table}_qr.png")

    print("\n✓ Done!")
    print(f"  Table: {args.table}")
    print(f"  QR Code: {qr_path}")


if __name__ == "__main__":
    main()
