#!/usr/bin/env python3
"""
Simple Generation Example
=========================

Generate a short video from a prompt, optionally conditioned on a subject
image and a background image that are fused into one frame first.

Usage:
    python examples/simple_generation.py "a couple dancing at sunset"
    python examples/simple_generation.py "waving" refs/subject.png refs/beach.jpg
"""

import asyncio
import logging
import os
from pathlib import Path

# Add the project root to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from magic_studio import Studio, StudioError, UploadedImagePayload
from magic_studio.api.video import VideoJob


async def main():
    """Simple video generation example."""

    if not (os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")):
        print("Please set GEMINI_API_KEY environment variable")
        print("Get your key at: https://aistudio.google.com/apikey")
        return

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    args = sys.argv[1:]
    prompt = args[0] if args else (
        "A beautiful sunset over the ocean, waves gently rolling, "
        "cinematic lighting, professional quality"
    )
    subject = UploadedImagePayload.from_path(args[1]) if len(args) > 1 else None
    context = UploadedImagePayload.from_path(args[2]) if len(args) > 2 else None

    print("=== Simple Video Generation ===")

    async with Studio() as studio:
        job = studio.videos.create_job(prompt, subject, context)

        print(f"\nPrompt: {job.prompt}")
        print(f"Quality: {job.quality}  Aspect: {job.aspect_ratio}")
        print(f"Fusing subject and background: {job.needs_fusion}")
        print("\nGenerating video (this can take a few minutes)...")

        def show_state(j: VideoJob):
            print(f"  -> {j.state.value}")

        try:
            handle = await studio.videos.run(job, on_state=show_state)
        except StudioError as e:
            print(f"\nError: {e}")
            return

        output_path = handle.save("output", "simple_example.mp4")
        print(f"\nPolled {job.poll_count} times")
        print(f"Downloaded: {output_path} ({handle.size} bytes)")


if __name__ == "__main__":
    asyncio.run(main())
