#!/usr/bin/env python3
"""
Command-line access to the storage service.

Handy for poking at a storage deployment without writing code.

Usage:
    python scripts/storage_cli.py upload ./photo.png --bucket-id default
    python scripts/storage_cli.py upload-string /notes/hello.txt "hello" --content-type text/plain
    python scripts/storage_cli.py presign <file-id>
    python scripts/storage_cli.py metadata /notes/hello.txt

Requires:
    - STORAGE_URL in the environment or a .env file (or --url)
    - STORAGE_ACCESS_TOKEN or --token for protected buckets
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

# Add project root to path so we can import our modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from nhost_storage.config.settings import get_settings
from nhost_storage.core.models import FileUpload, RemoteResult, StringFormat, StringUploadSpec
from nhost_storage.infrastructure.storage.client import StorageClient, create_storage_client


def print_progress(sent: int, total: int) -> None:
    print(f"\r  {sent}/{total} bytes", end="", file=sys.stderr)
    if sent == total:
        print(file=sys.stderr)


def report(result: RemoteResult) -> bool:
    """Print a result and return True on success."""
    if result.error:
        print(f"ERROR: {result.error.message}")
        return False

    value = result.value
    if value is None:
        print("[OK]")
    elif hasattr(value, "model_dump"):
        print(json.dumps(value.model_dump(mode="json", by_alias=True), indent=2))
    else:
        print(json.dumps(value, indent=2, default=str))
    return True


async def run(args: argparse.Namespace, storage: StorageClient) -> bool:
    if args.command == "upload":
        path = Path(args.file)
        file = FileUpload(
            content=path.read_bytes(),
            name=args.name or path.name,
            content_type=args.content_type,
        )
        if args.path:
            result = await storage.upload_file_at_path(
                args.path, file, on_upload_progress=print_progress
            )
        else:
            result = await storage.upload(
                file,
                bucket_id=args.bucket_id,
                file_id=args.file_id,
                file_name=args.name or path.name,
            )
        return report(result)

    if args.command == "upload-string":
        metadata = {"content-type": args.content_type} if args.content_type else None
        spec = StringUploadSpec(
            path=args.path,
            data=args.data,
            encoding=args.encoding,
            metadata=metadata,
        )
        return report(await storage.upload_string_at_path(spec))

    if args.command == "url":
        print(storage.get_url(args.file_id))
        return True

    if args.command == "presign":
        return report(await storage.get_presigned_url(args.file_id))

    if args.command == "delete":
        return report(await storage.delete(args.file_id))

    if args.command == "delete-path":
        return report(await storage.delete_file_at_path(args.path))

    if args.command == "metadata":
        return report(await storage.get_metadata_at_path(args.path))

    raise ValueError(f"Unknown command: {args.command}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Talk to the storage service")
    parser.add_argument("--url", help="Storage URL (defaults to STORAGE_URL)")
    parser.add_argument("--app-id", help="Tenant namespace (defaults to STORAGE_APP_ID)")
    parser.add_argument("--token", help="Bearer token (defaults to STORAGE_ACCESS_TOKEN)")

    commands = parser.add_subparsers(dest="command", required=True)

    upload = commands.add_parser("upload", help="Upload a local file")
    upload.add_argument("file")
    upload.add_argument("--bucket-id")
    upload.add_argument("--file-id")
    upload.add_argument("--name", help="File name sent to the server")
    upload.add_argument("--content-type")
    upload.add_argument("--path", help="Upload to this object path instead of /files")

    upload_string = commands.add_parser("upload-string", help="Upload a string at a path")
    upload_string.add_argument("path")
    upload_string.add_argument("data")
    upload_string.add_argument(
        "--encoding",
        default=StringFormat.RAW.value,
        choices=[fmt.value for fmt in StringFormat],
    )
    upload_string.add_argument("--content-type")

    url = commands.add_parser("url", help="Print the direct URL of a file")
    url.add_argument("file_id")

    presign = commands.add_parser("presign", help="Get a presigned URL")
    presign.add_argument("file_id")

    delete = commands.add_parser("delete", help="Delete a file by id")
    delete.add_argument("file_id")

    delete_path = commands.add_parser("delete-path", help="Delete an object by path")
    delete_path.add_argument("path")

    metadata = commands.add_parser("metadata", help="Show object metadata")
    metadata.add_argument("path")

    return parser


async def amain(args: argparse.Namespace) -> bool:
    storage = create_storage_client(url=args.url, app_id=args.app_id)
    if args.token:
        storage.set_access_token(args.token)

    async with storage:
        return await run(args, storage)


def main():
    args = build_parser().parse_args()
    settings = get_settings()

    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=settings.log_level.upper(),
    )

    try:
        success = asyncio.run(amain(args))
    except ValueError as e:
        print(f"ERROR: {e}")
        sys.exit(1)

    sys.exit(0 if success else 1)


if __name__ == '__main__':
    main()
