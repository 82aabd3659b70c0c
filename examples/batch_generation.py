#!/usr/bin/env python3
"""
Batch Generation Example
========================

Run one prompt per line against a fixed character and background, with the
batch preset from the config. Ctrl+C stops after the current item; finished
images are kept.

Usage:
    python examples/batch_generation.py prompts.txt character.png background.jpg
"""

import asyncio
import base64
import logging
import signal
from pathlib import Path

# Add the project root to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from magic_studio import CancellationToken, Studio, UploadedImagePayload
from magic_studio.utils.image_utils import download_filename, parse_data_uri
from magic_studio.workflow.batch import BatchItem


async def main():
    if len(sys.argv) != 4:
        print(__doc__)
        return

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    prompts = Path(sys.argv[1]).read_text(encoding="utf-8")
    character = UploadedImagePayload.from_path(sys.argv[2])
    background = UploadedImagePayload.from_path(sys.argv[3])

    output_dir = Path("output") / "batch"
    output_dir.mkdir(parents=True, exist_ok=True)

    token = CancellationToken()
    asyncio.get_running_loop().add_signal_handler(
        signal.SIGINT, token.cancel, "interrupted"
    )

    def show_progress(index: int, total: int):
        print(f"[{index}/{total}] generating...")

    def save_result(item: BatchItem):
        if item.result is None:
            print(f"  failed: {item.error}")
            return
        _, data = parse_data_uri(item.result)
        path = output_dir / f"{len(list(output_dir.iterdir())):03d}-{download_filename(item.result)}"
        path.write_bytes(base64.b64decode(data))
        print(f"  saved {path}")

    async with Studio() as studio:
        print(f"Preset: {studio.config.batch.preset_id}  Locale: {studio.locale}")
        report = await studio.batch_runner().run(
            prompts,
            character,
            background,
            token=token,
            on_progress=show_progress,
            on_result=save_result,
        )

    print(f"\n{len(report.succeeded)} succeeded, {len(report.failed)} failed"
          f"{' (stopped early)' if report.cancelled else ''}")


if __name__ == "__main__":
    asyncio.run(main())
