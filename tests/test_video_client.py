"""Tests for the video job state machine in api.video."""

import asyncio

import httpx
import pytest

from magic_studio.api.image import ImageGenClient
from magic_studio.api.video import VideoGenClient, VideoJobState
from magic_studio.core.cancellation import CancellationToken
from magic_studio.core.config import VideoConfig
from magic_studio.core.exceptions import (
    AuthError,
    GenerationBlocked,
    NetworkFetchError,
    OperationCancelled,
    PollTimeoutError,
    ProviderError,
    ValidationError,
    VideoJobError,
)
from magic_studio.presets import FUSION_INSTRUCTION


OPERATION_NAME = "models/veo-2.0-generate-001/operations/op-1"
VIDEO_URI = "https://files.example.com/files/video.mp4"


def pending():
    return {"name": OPERATION_NAME}


def done(uri=VIDEO_URI):
    return {
        "name": OPERATION_NAME,
        "done": True,
        "response": {"generateVideoResponse": {"generatedSamples": [{"video": {"uri": uri}}]}},
    }


class SimulatedTime:
    """Sleep and clock that advance together without waiting."""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def clock(self):
        return self.now

    async def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


class TestVideoGenClient:
    @pytest.fixture(autouse=True)
    def setup_client(self, session, fake_api, api_config, image_config, video_config):
        self.fake_api = fake_api
        self.time = SimulatedTime()
        self.images = ImageGenClient(session, api_config=api_config, image_config=image_config)
        self.client = VideoGenClient(
            session,
            self.images,
            api_config=api_config,
            video_config=video_config,
            sleep=self.time.sleep,
            clock=self.time.clock,
        )
        self.states = []

    def script(self, polls, download=None):
        self.fake_api.route(self.fake_api.SUBMIT, pending())
        self.fake_api.route(self.fake_api.OPERATION, *polls)
        self.fake_api.route(
            self.fake_api.DOWNLOAD,
            download or httpx.Response(200, content=b"\x00\x00\x00\x18ftypmp42",
                                       headers={"content-type": "video/mp4"}),
        )

    def run(self, job, **kwargs):
        return asyncio.run(
            self.client.run(job, on_state=lambda j: self.states.append(j.state), **kwargs)
        )

    # -------------------------------------------------------------------------
    # Happy paths
    # -------------------------------------------------------------------------

    def test_text_only_job(self):
        self.script([{"name": OPERATION_NAME}, done()])
        job = self.client.create_job("a drone shot over rice terraces")

        handle = self.run(job)

        assert handle.content == b"\x00\x00\x00\x18ftypmp42"
        assert handle.mime_type == "video/mp4"
        assert handle.source_uri == VIDEO_URI
        assert job.state is VideoJobState.DONE
        assert job.poll_count == 2
        assert self.time.sleeps == [10.0, 10.0]
        assert self.states == [VideoJobState.SUBMITTED, VideoJobState.POLLING, VideoJobState.DONE]

        body = self.fake_api.bodies(self.fake_api.SUBMIT)[0]
        assert body["instances"] == [{"prompt": "a drone shot over rice terraces"}]
        assert body["parameters"] == {"sampleCount": 1, "resolution": "720p", "aspectRatio": "16:9"}
        assert self.fake_api.calls(self.fake_api.DOWNLOAD)[0].url.params["key"] == "test-key"

    def test_single_image_is_sent_directly(self, subject):
        self.script([done()])
        job = self.client.create_job("wave hello", subject_image=subject, quality="1080p", aspect_ratio="9:16")

        self.run(job)

        assert self.fake_api.calls(self.fake_api.EDIT) == []
        body = self.fake_api.bodies(self.fake_api.SUBMIT)[0]
        assert body["instances"][0]["image"] == {
            "bytesBase64Encoded": subject.data,
            "mimeType": "image/png",
        }
        assert body["parameters"]["resolution"] == "1080p"
        assert body["parameters"]["aspectRatio"] == "9:16"

    def test_fusion_happens_before_submit(self, subject, context):
        self.fake_api.route(self.fake_api.EDIT, self.fake_api.image_response(mime_type="image/png"))
        self.script([done()])
        job = self.client.create_job("walk along the beach", subject, context)

        self.run(job)

        paths = [r.url.path for r in self.fake_api.requests]
        assert paths[0].endswith(self.fake_api.EDIT)
        assert paths[1].endswith(self.fake_api.SUBMIT)
        assert len(self.fake_api.calls(self.fake_api.EDIT)) == 1

        edit_parts = self.fake_api.bodies(self.fake_api.EDIT)[0]["contents"][0]["parts"]
        assert edit_parts[0]["inlineData"]["data"] == subject.data
        assert edit_parts[1]["inlineData"]["data"] == context.data
        assert edit_parts[2] == {"text": FUSION_INSTRUCTION}

        submitted = self.fake_api.bodies(self.fake_api.SUBMIT)[0]["instances"][0]["image"]
        assert submitted == {"bytesBase64Encoded": self.fake_api.IMAGE_B64, "mimeType": "image/png"}
        assert self.states[0] is VideoJobState.COMPOSING

    def test_generated_videos_shape(self):
        self.script([{
            "name": OPERATION_NAME,
            "done": True,
            "response": {"generatedVideos": [{"video": {"uri": VIDEO_URI}}]},
        }])

        handle = asyncio.run(self.client.generate("a timelapse"))

        assert handle.size == len(b"\x00\x00\x00\x18ftypmp42")

    # -------------------------------------------------------------------------
    # Failures
    # -------------------------------------------------------------------------

    def test_fusion_failure_submits_nothing(self, subject, context):
        self.fake_api.route(self.fake_api.EDIT, {"candidates": [], "promptFeedback": {"blockReason": "SAFETY"}})
        self.script([done()])
        job = self.client.create_job("walk along the beach", subject, context)

        with pytest.raises(GenerationBlocked):
            self.run(job)

        assert self.fake_api.calls(self.fake_api.SUBMIT) == []
        assert job.state is VideoJobState.FAILED
        assert "SAFETY" in job.error

    def test_operation_error(self):
        self.script([{"name": OPERATION_NAME, "done": True, "error": {"message": "Quota for Veo reached"}}])
        job = self.client.create_job("anything")

        with pytest.raises(VideoJobError) as exc_info:
            self.run(job)

        assert exc_info.value.provider_message == "Quota for Veo reached"
        assert "Quota for Veo reached" in str(exc_info.value)
        assert job.state is VideoJobState.FAILED
        assert self.fake_api.calls(self.fake_api.DOWNLOAD) == []

    def test_missing_uri(self):
        self.script([{"name": OPERATION_NAME, "done": True, "response": {}}])

        with pytest.raises(VideoJobError):
            self.run(self.client.create_job("anything"))

    def test_download_failure_is_terminal(self):
        self.script([done()], download=httpx.Response(429, content=b"slow down"))
        job = self.client.create_job("anything")

        with pytest.raises(NetworkFetchError) as exc_info:
            self.run(job)

        assert exc_info.value.status_code == 429
        assert job.state is VideoJobState.FAILED

    def test_submit_rejection_is_auth_error(self):
        self.fake_api.route(self.fake_api.SUBMIT, httpx.Response(403, json={"error": {"message": "denied"}}))

        with pytest.raises(AuthError):
            self.run(self.client.create_job("anything"))

    def test_submit_without_operation_name(self):
        self.fake_api.route(self.fake_api.SUBMIT, {})

        with pytest.raises(ProviderError):
            self.run(self.client.create_job("anything"))

    # -------------------------------------------------------------------------
    # Polling bounds
    # -------------------------------------------------------------------------

    def test_poll_timeout(self):
        self.script([pending()])
        job = self.client.create_job("anything")

        with pytest.raises(PollTimeoutError):
            self.run(job, max_wait=35.0)

        assert job.poll_count == 4
        assert job.state is VideoJobState.FAILED

    def test_configured_max_wait(self, session, api_config):
        client = VideoGenClient(
            session,
            self.images,
            api_config=api_config,
            video_config=VideoConfig(poll_interval=5.0, max_wait=20.0),
            sleep=self.time.sleep,
            clock=self.time.clock,
        )
        self.script([pending()])

        with pytest.raises(PollTimeoutError):
            asyncio.run(client.generate("anything"))

        assert self.time.sleeps == [5.0] * 4

    def test_cancel_between_polls(self):
        token = CancellationToken()
        polls = []

        def operation(request):
            polls.append(request)
            if len(polls) == 2:
                token.cancel("user left")
            return httpx.Response(200, json=pending())

        self.fake_api.route(self.fake_api.SUBMIT, pending())
        self.fake_api.route(self.fake_api.OPERATION, operation)
        job = self.client.create_job("anything")

        with pytest.raises(OperationCancelled):
            self.run(job, token=token)

        assert len(polls) == 2
        assert job.state is VideoJobState.FAILED

    def test_task_cancelled_while_sleeping(self):
        self.fake_api.route(self.fake_api.SUBMIT, pending())
        self.fake_api.route(self.fake_api.OPERATION, pending())
        job = self.client.create_job("anything")

        async def scenario():
            sleeping = asyncio.Event()

            async def sleep(seconds):
                sleeping.set()
                await asyncio.Event().wait()

            self.client._sleep = sleep
            task = asyncio.create_task(
                self.client.run(job, on_state=lambda j: self.states.append(j.state))
            )
            await sleeping.wait()
            task.cancel()
            await task

        with pytest.raises(asyncio.CancelledError):
            asyncio.run(scenario())

        assert job.state is VideoJobState.FAILED
        assert job.error == "task cancelled"
        assert job.completed_at is not None
        assert self.states[-1] is VideoJobState.FAILED

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def test_context_without_subject(self, context):
        with pytest.raises(ValidationError):
            self.client.create_job("anything", context_image=context)

    def test_blank_prompt(self):
        with pytest.raises(ValidationError):
            self.client.create_job("   ")

    def test_job_cannot_run_twice(self):
        self.script([done()])
        job = self.client.create_job("anything")
        self.run(job)

        with pytest.raises(ValidationError):
            self.run(job)

    def test_to_dict(self):
        job = self.client.create_job("anything")
        data = job.to_dict()
        assert data["state"] == "idle"
        assert data["image_conditioned"] is False
