"""End-to-end tests for the Studio facade over a mocked transport."""

import asyncio
import json

import httpx
import pytest

from magic_studio import Studio
from magic_studio.core.config import Config
from magic_studio.workflow.batch import BatchItemState


def echo_translation(fake_api):
    def handler(request):
        text = json.loads(request.content)["contents"][0]["parts"][0]["text"]
        return httpx.Response(200, json=fake_api.text_response(f"EN:{text}"))
    return handler


class TestStudio:
    def make_studio(self, http_client, **batch):
        config = Config.from_dict({
            "api": {"api_key": "test-key"},
            "video": {"poll_interval": 1.0},
            "batch": batch,
        })

        async def no_sleep(seconds):
            self.sleeps.append(seconds)

        return Studio(config, http_client=http_client, sleep=no_sleep)

    def setup_method(self):
        self.sleeps = []

    def test_shared_session(self, http_client):
        studio = self.make_studio(http_client)

        assert studio.images.session is studio.session
        assert studio.videos.session is studio.session
        assert studio.translator.session is studio.session
        assert studio.images.gateway is studio.videos.gateway is studio.gateway
        assert studio.batch_runner().image_client is studio.images
        assert studio.tools.image_client is studio.images
        assert studio.tools.translator is studio.translator
        assert studio.tools.image_client is studio.images
        assert studio.tools.translator is studio.translator

    def test_text_to_image_in_english(self, http_client, fake_api):
        fake_api.route(fake_api.PREDICT, {"predictions": [{"bytesBase64Encoded": "QUJD"}]})
        studio = self.make_studio(http_client)

        result = asyncio.run(studio.generate_from_text("a lighthouse", "landscape-nature", "fog"))

        assert result == "data:image/jpeg;base64,QUJD"
        assert fake_api.calls(fake_api.TRANSLATE) == []
        prompt = fake_api.bodies(fake_api.PREDICT)[0]["instances"][0]["prompt"]
        assert prompt.startswith("[QUALITY] ")
        assert "[PRESET:landscape-nature]" in prompt
        assert prompt.endswith("Positive: a lighthouse | Negative: fog")

    def test_text_to_image_translates_vietnamese(self, http_client, fake_api):
        fake_api.route(fake_api.TRANSLATE, echo_translation(fake_api))
        fake_api.route(fake_api.PREDICT, {"predictions": [{"bytesBase64Encoded": "QUJD"}]})
        studio = self.make_studio(http_client, locale="vi")

        asyncio.run(studio.generate_from_text("ngọn hải đăng", "landscape-nature", "sương mù"))

        assert len(fake_api.calls(fake_api.TRANSLATE)) == 2
        prompt = fake_api.bodies(fake_api.PREDICT)[0]["instances"][0]["prompt"]
        assert "[VIETNAMESE TEXT RENDERING INSTRUCTION]" in prompt
        assert prompt.endswith("Positive: EN:ngọn hải đăng | Negative: EN:sương mù")

    def test_video_prompt_is_translated(self, http_client, fake_api):
        fake_api.route(fake_api.TRANSLATE, echo_translation(fake_api))
        fake_api.route(fake_api.SUBMIT, {"name": "models/veo-2.0-generate-001/operations/op-1"})
        fake_api.route(fake_api.OPERATION, {
            "done": True,
            "response": {"generatedVideos": [{"video": {"uri": "https://files.example.com/files/video.mp4"}}]},
        })
        fake_api.route(fake_api.DOWNLOAD, httpx.Response(200, content=b"mp4"))
        studio = self.make_studio(http_client, locale="vi")

        handle = asyncio.run(studio.generate_video("pháo hoa"))

        assert handle.content == b"mp4"
        assert fake_api.bodies(fake_api.SUBMIT)[0]["instances"][0]["prompt"] == "EN:pháo hoa"
        assert self.sleeps == [1.0]

    def test_batch_through_studio(self, http_client, fake_api, subject, context):
        fake_api.route(fake_api.EDIT, fake_api.image_response())
        studio = self.make_studio(http_client, preset_id="portrait-studio", aspect_ratio="3:4")

        report = asyncio.run(studio.batch_runner().run("one\ntwo", subject, context))

        assert [item.state for item in report.items] == [BatchItemState.SUCCEEDED] * 2
        directive = fake_api.bodies(fake_api.EDIT)[0]["contents"][0]["parts"][2]["text"]
        assert "[PRESET:portrait-studio]" in directive
        assert "aspect=3:4;" in directive

    def test_upscale_through_studio(self, http_client, fake_api, context):
        fake_api.route(fake_api.EDIT, fake_api.image_response())
        studio = self.make_studio(http_client)

        result = asyncio.run(studio.tools.upscale(context, "2x"))

        assert result == f"data:image/png;base64,{fake_api.IMAGE_B64}"
        parts = fake_api.bodies(fake_api.EDIT)[0]["contents"][0]["parts"]
        assert parts[0]["inlineData"]["data"] == context.data
        assert '"target_resolution": "320x180px"' in parts[1]["text"]

    def test_close_keeps_injected_client(self, http_client):
        async def scenario():
            async with self.make_studio(http_client):
                pass

        asyncio.run(scenario())

        assert not http_client.is_closed
