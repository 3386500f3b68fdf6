"""
Command line client.

Usage:
    python -m docchat.client --token TOKEN [--upload notes.pdf] [--wait]
"""

import argparse
import logging
import sys
from pathlib import Path

from docchat.client.documents_client import DocumentsClient, DocumentsClientError
from docchat.client.poller import PollTimeout, StatusPoller
from docchat.config import settings


def print_documents(documents) -> None:
    for doc in documents:
        pages = doc.get("page_count")
        suffix = f" ({pages} pages)" if pages else ""
        print(f"  {doc['status']:<10} {doc['name']}{suffix}  [{doc['id']}]")
    print()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Upload PDFs and watch their status")
    parser.add_argument("--base-url", default="http://localhost:8000", help="API server URL")
    parser.add_argument("--token", required=True, help="Bearer token from /auth/login")
    parser.add_argument("--upload", type=Path, help="PDF file to upload first")
    parser.add_argument("--wait", action="store_true", help="Poll until nothing is processing")
    parser.add_argument(
        "--interval",
        type=float,
        default=settings.POLL_INTERVAL_SECONDS,
        help="Seconds between polls",
    )
    parser.add_argument("--timeout", type=float, default=None, help="Give up after this many seconds")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")

    with DocumentsClient(args.base_url, args.token, api_prefix=settings.API_PREFIX) as client:
        try:
            if args.upload:
                document = client.upload(args.upload)
                print(f"Uploaded {document['name']} [{document['id']}]: {document['status']}")

            if args.wait:
                poller = StatusPoller(client, interval=args.interval, timeout=args.timeout)
                documents = poller.poll_until_settled(on_update=print_documents)
            else:
                documents = client.list_documents()
                print_documents(documents)
        except DocumentsClientError as e:
            print(f"Request failed: {e}", file=sys.stderr)
            return 1
        except PollTimeout as e:
            print_documents(e.documents)
            print("Timed out waiting for documents", file=sys.stderr)
            return 2

    return 1 if any(doc["status"] == "error" for doc in documents) else 0


if __name__ == "__main__":
    sys.exit(main())
