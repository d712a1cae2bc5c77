#!/usr/bin/env python3
"""
Upload a folder (or list) of photos to the wedding gallery as one guest.
Images are resized/re-encoded to JPEG before upload, 4 uploads at a time.

Usage:
    python -m scripts.upload_photos --name "Alice" photo1.jpg photo2.png
    python -m scripts.upload_photos --name "Alice" --api http://localhost:8000 ./my-photos/
"""
import argparse
import asyncio
import mimetypes
import os
import sys

from app.client.api_client import GalleryApiClient
from app.client.uploader import BatchError, SelectedFile, UploadOrchestrator
from app.core.logger import logger
from app.services.transcoder import TranscodeConstraints

IMAGE_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.webp', '.gif', '.bmp', '.tif', '.tiff'}


def collect_files(paths: list[str]) -> list[SelectedFile]:
    """Expand directories and read selected image files."""
    selected = []
    for path in paths:
        if os.path.isdir(path):
            names = sorted(
                os.path.join(path, n) for n in os.listdir(path)
                if os.path.splitext(n)[1].lower() in IMAGE_EXTENSIONS
            )
        else:
            names = [path]
        for name in names:
            with open(name, "rb") as f:
                data = f.read()
            content_type = mimetypes.guess_type(name)[0] or "application/octet-stream"
            selected.append(SelectedFile(os.path.basename(name), data, content_type))
    return selected


async def run(args) -> int:
    files = collect_files(args.paths)
    constraints = TranscodeConstraints(args.max_size, args.max_size, args.quality)

    async with GalleryApiClient(args.api) as client:
        orchestrator = UploadOrchestrator(client, constraints=constraints, max_concurrent=args.concurrency)

        def _progress(index: int, percent: int) -> None:
            print(f"  [{orchestrator.done_count}/{orchestrator.total}] {files[index].filename} {percent}%")

        try:
            records = await orchestrator.upload_batch(files, args.name, on_progress=_progress)
        except BatchError as e:
            logger.error(f"Upload failed: {e}")
            print(f"Upload failed after {orchestrator.done_count}/{orchestrator.total}: {e}", file=sys.stderr)
            return 1

    print(f"Uploaded {len(records)} photo(s). See the gallery at {args.api}/photos")
    return 0


def main():
    parser = argparse.ArgumentParser(description="Upload wedding photos as a guest")
    parser.add_argument("paths", nargs="+", help="Image files or directories")
    parser.add_argument("--name", required=True, help="Guest name shown in the gallery")
    parser.add_argument("--api", default=os.getenv("GALLERY_API_URL", "http://localhost:8000"))
    parser.add_argument("--concurrency", type=int, default=4)
    parser.add_argument("--max-size", type=int, default=1920)
    parser.add_argument("--quality", type=float, default=0.7)
    args = parser.parse_args()
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
