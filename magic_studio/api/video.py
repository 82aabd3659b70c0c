"""
Video Generation Client
=======================

Long-running video jobs against the Veo endpoint.

A job moves through::

    IDLE -> COMPOSING (two source images only) -> SUBMITTED -> POLLING -> DONE

Any step can end the job in FAILED instead.

When a job is conditioned on a subject image and a separate context image,
the two are first fused into one composite frame with a single image edit
call. If that call fails the job is FAILED and nothing is submitted.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional

from ..core.cancellation import CancellationToken
from ..core.config import ApiConfig, VideoConfig
from ..core.exceptions import (
    NetworkFetchError,
    OperationCancelled,
    PollTimeoutError,
    ProviderError,
    ValidationError,
    VideoJobError,
)
from ..presets.catalog import FUSION_INSTRUCTION
from ..utils.image_utils import UploadedImagePayload
from ..utils.media import MediaHandle
from .base import ApiSession, TextPart
from .gateway import ApiGateway
from .image import ImageGenClient

logger = logging.getLogger(__name__)


class VideoJobState(Enum):
    """Lifecycle of a video job."""

    IDLE = "idle"
    COMPOSING = "composing"
    SUBMITTED = "submitted"
    POLLING = "polling"
    DONE = "done"
    FAILED = "failed"


@dataclass
class VideoJob:
    """A single video request and its progress."""

    prompt: str
    subject_image: Optional[UploadedImagePayload] = None
    context_image: Optional[UploadedImagePayload] = None
    quality: str = "720p"
    aspect_ratio: str = "16:9"

    state: VideoJobState = VideoJobState.IDLE
    operation_name: Optional[str] = None
    conditioning_image: Optional[UploadedImagePayload] = None
    result: Optional[MediaHandle] = None
    error: Optional[str] = None
    poll_count: int = 0

    created_at: datetime = field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None

    @property
    def needs_fusion(self) -> bool:
        return self.subject_image is not None and self.context_image is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "prompt": self.prompt,
            "quality": self.quality,
            "aspect_ratio": self.aspect_ratio,
            "state": self.state.value,
            "operation_name": self.operation_name,
            "image_conditioned": self.subject_image is not None,
            "poll_count": self.poll_count,
            "error": self.error,
            "created_at": self.created_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }


@dataclass(frozen=True)
class VideoJobDescriptor:
    """What gets submitted to the video endpoint."""

    model: str
    prompt: str
    quality: str
    aspect_ratio: str
    number_of_videos: int = 1
    image: Optional[UploadedImagePayload] = None

    def to_payload(self) -> Dict[str, Any]:
        instance: Dict[str, Any] = {"prompt": self.prompt}
        if self.image is not None:
            instance["image"] = {
                "bytesBase64Encoded": self.image.data,
                "mimeType": self.image.mime_type,
            }
        return {
            "instances": [instance],
            "parameters": {
                "sampleCount": self.number_of_videos,
                "resolution": self.quality,
                "aspectRatio": self.aspect_ratio,
            },
        }


Sleep = Callable[[float], Awaitable[None]]
StateListener = Callable[[VideoJob], None]


class VideoGenClient:
    """
    Drives video jobs from submission to downloaded bytes.

    ``sleep`` and ``clock`` are injectable so the polling loop can run on
    simulated time.
    """

    def __init__(
        self,
        session: ApiSession,
        image_client: ImageGenClient,
        gateway: Optional[ApiGateway] = None,
        api_config: Optional[ApiConfig] = None,
        video_config: Optional[VideoConfig] = None,
        sleep: Sleep = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.session = session
        self.image_client = image_client
        self.gateway = gateway or ApiGateway()
        self.api_config = api_config or ApiConfig(api_key=session.api_key)
        self.video_config = video_config or VideoConfig()
        self._sleep = sleep
        self._clock = clock

    def create_job(
        self,
        prompt: str,
        subject_image: Optional[UploadedImagePayload] = None,
        context_image: Optional[UploadedImagePayload] = None,
        quality: Optional[str] = None,
        aspect_ratio: Optional[str] = None,
    ) -> VideoJob:
        """Validate inputs and build an idle job."""
        if not prompt or not prompt.strip():
            raise ValidationError("A video prompt is required", field="prompt")
        if context_image is not None and subject_image is None:
            raise ValidationError(
                "A context image needs a subject image to fuse with",
                field="subject_image",
            )
        return VideoJob(
            prompt=prompt,
            subject_image=subject_image,
            context_image=context_image,
            quality=quality or self.video_config.quality,
            aspect_ratio=aspect_ratio or self.video_config.aspect_ratio,
        )

    async def generate(
        self,
        prompt: str,
        subject_image: Optional[UploadedImagePayload] = None,
        context_image: Optional[UploadedImagePayload] = None,
        quality: Optional[str] = None,
        aspect_ratio: Optional[str] = None,
        token: Optional[CancellationToken] = None,
    ) -> MediaHandle:
        """Create a job and run it to completion."""
        job = self.create_job(prompt, subject_image, context_image, quality, aspect_ratio)
        return await self.run(job, token=token)

    async def run(
        self,
        job: VideoJob,
        token: Optional[CancellationToken] = None,
        on_state: Optional[StateListener] = None,
        max_wait: Optional[float] = None,
    ) -> MediaHandle:
        """
        Run ``job`` through the state machine.

        Args:
            job: An idle job from ``create_job``
            token: Checked between polls; cancellation raises OperationCancelled
            on_state: Called after every state transition
            max_wait: Seconds of polling before PollTimeoutError; defaults to
                the configured ``max_wait`` (None polls indefinitely)

        Returns:
            In-memory handle to the downloaded video

        Raises:
            StudioError subclasses; the job is left FAILED with ``error`` set.
            Cancelling the running task also leaves the job FAILED before
            ``CancelledError`` propagates.
        """
        if job.state is not VideoJobState.IDLE:
            raise ValidationError(
                f"Job already ran (state={job.state.value})",
                field="state",
            )
        if max_wait is None:
            max_wait = self.video_config.max_wait

        try:
            if job.needs_fusion:
                self._transition(job, VideoJobState.COMPOSING, on_state)
                job.conditioning_image = await self._fuse(job)
            elif job.subject_image is not None:
                job.conditioning_image = job.subject_image

            operation = await self._submit(job)
            self._transition(job, VideoJobState.SUBMITTED, on_state)

            self._transition(job, VideoJobState.POLLING, on_state)
            operation = await self._poll(job, operation, token, max_wait)

            uri = self._extract_video_uri(job, operation)
            job.result = await self._download(uri)

        except asyncio.CancelledError:
            job.error = "task cancelled"
            job.completed_at = datetime.now()
            self._transition(job, VideoJobState.FAILED, on_state)
            raise
        except Exception as e:
            job.error = str(e)
            job.completed_at = datetime.now()
            self._transition(job, VideoJobState.FAILED, on_state)
            raise

        job.completed_at = datetime.now()
        self._transition(job, VideoJobState.DONE, on_state)
        return job.result

    # -------------------------------------------------------------------------
    # Steps
    # -------------------------------------------------------------------------

    async def _fuse(self, job: VideoJob) -> UploadedImagePayload:
        """Exactly one edit call: subject first, context second, then the instruction."""
        logger.info("Composing subject and context into a single frame")
        composite = await self.image_client.edit_images(
            [job.subject_image, job.context_image, TextPart(FUSION_INSTRUCTION)]
        )
        return UploadedImagePayload.from_data_uri(composite)

    def build_descriptor(self, job: VideoJob) -> VideoJobDescriptor:
        return VideoJobDescriptor(
            model=self.api_config.video_model,
            prompt=job.prompt,
            quality=job.quality,
            aspect_ratio=job.aspect_ratio,
            image=job.conditioning_image,
        )

    async def _submit(self, job: VideoJob) -> Dict[str, Any]:
        descriptor = self.build_descriptor(job)
        logger.info(
            f"Submitting video job to {descriptor.model} "
            f"({descriptor.quality}, {descriptor.aspect_ratio}, "
            f"image={'yes' if descriptor.image else 'no'})"
        )
        operation = await self.gateway.invoke(
            lambda: self.session.post_json(
                f"models/{descriptor.model}:predictLongRunning",
                descriptor.to_payload(),
            )
        )
        if not operation.get("name"):
            raise ProviderError("No operation ID in response")
        job.operation_name = operation["name"]
        return operation

    async def _poll(
        self,
        job: VideoJob,
        operation: Dict[str, Any],
        token: Optional[CancellationToken],
        max_wait: Optional[float],
    ) -> Dict[str, Any]:
        started = self._clock()
        interval = self.video_config.poll_interval

        while not operation.get("done"):
            if token is not None and token.cancelled:
                raise OperationCancelled(
                    f"Video job {job.operation_name} cancelled: {token.reason}"
                )
            if max_wait is not None and self._clock() - started >= max_wait:
                raise PollTimeoutError(job.operation_name, max_wait)

            await self._sleep(interval)
            job.poll_count += 1
            logger.debug(f"Polling {job.operation_name} (attempt {job.poll_count})")
            operation = await self.gateway.invoke(
                lambda: self.session.get_json(job.operation_name)
            )

        return operation

    def _extract_video_uri(self, job: VideoJob, operation: Dict[str, Any]) -> str:
        error = operation.get("error")
        if error:
            message = error.get("message") if isinstance(error, dict) else str(error)
            logger.error(f"Video operation {job.operation_name} failed: {message}")
            raise VideoJobError(message or "Unknown API error", job.operation_name)

        response = operation.get("response") or {}
        samples = (
            (response.get("generateVideoResponse") or {}).get("generatedSamples")
            or response.get("generatedVideos")
            or []
        )
        uri = ((samples[0].get("video") or {}).get("uri")) if samples else None
        if not uri:
            raise VideoJobError("no video URI returned", job.operation_name)
        return uri

    async def _download(self, uri: str) -> MediaHandle:
        response = await self.session.fetch(uri)
        if not response.is_success:
            logger.error(f"Failed to download video: {response.status_code}")
            raise NetworkFetchError(response.status_code)

        mime_type = response.headers.get("content-type", "video/mp4").split(";")[0].strip()
        handle = MediaHandle(
            content=response.content,
            mime_type=mime_type or "video/mp4",
            source_uri=uri,
        )
        logger.info(f"Downloaded video ({handle.size} bytes)")
        return handle

    @staticmethod
    def _transition(
        job: VideoJob,
        state: VideoJobState,
        on_state: Optional[StateListener],
    ) -> None:
        logger.info(f"Video job {job.operation_name or '<new>'}: {job.state.value} -> {state.value}")
        job.state = state
        if on_state is not None:
            on_state(job)
