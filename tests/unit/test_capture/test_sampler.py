"""Tests for the FrameSampler."""

from __future__ import annotations

import numpy as np
import pytest

from docsnap.capture.base import CaptureError
from docsnap.capture.sampler import FrameSampler


class TestFrameSampler:
    @pytest.mark.asyncio
    async def test_zero_size_returns_none(self, scripted_capture) -> None:
        source = scripted_capture([None])
        sampler = FrameSampler(source)
        assert await sampler.sample() is None
        assert source.grab_calls == 0
        assert sampler.frames_sampled == 0

    @pytest.mark.asyncio
    async def test_sample_returns_frame(self, scripted_capture, solid_image) -> None:
        sampler = FrameSampler(scripted_capture([solid_image(7, width=10, height=4)]))
        frame = await sampler.sample()
        assert frame is not None
        assert (frame.width, frame.height) == (10, 4)
        assert frame.pixel_count == 40
        assert frame.source_device == "scripted"
        assert int(frame.image[0, 0, 2]) == 7

    @pytest.mark.asyncio
    async def test_retries_after_not_ready(self, scripted_capture, solid_image) -> None:
        sampler = FrameSampler(scripted_capture([None, solid_image(1)]))
        assert await sampler.sample() is None
        frame = await sampler.sample()
        assert frame is not None
        assert frame.frame_number == 0

    @pytest.mark.asyncio
    async def test_frames_are_independent_and_read_only(self, scripted_capture, solid_image) -> None:
        sampler = FrameSampler(scripted_capture([solid_image(10), solid_image(200)]))
        first = await sampler.sample()
        second = await sampler.sample()
        assert int(first.image[0, 0, 2]) == 10
        assert int(second.image[0, 0, 2]) == 200
        assert not first.image.flags.writeable
        with pytest.raises(ValueError):
            first.image[0, 0, 0] = 0

    @pytest.mark.asyncio
    async def test_frame_numbers_increase(self, scripted_capture, solid_image) -> None:
        sampler = FrameSampler(scripted_capture([solid_image(0)]))
        numbers = [(await sampler.sample()).frame_number for _ in range(3)]
        assert numbers == [0, 1, 2]
        assert sampler.frames_sampled == 3

    @pytest.mark.asyncio
    async def test_scratch_buffer_follows_source_size(self, scripted_capture, solid_image) -> None:
        sampler = FrameSampler(
            scripted_capture([solid_image(0, width=8, height=6), solid_image(0, width=4, height=2)])
        )
        await sampler.sample()
        assert sampler._scratch.shape == (6, 8, 3)
        frame = await sampler.sample()
        assert sampler._scratch.shape == (2, 4, 3)
        assert frame.image.shape == (2, 4, 3)

    @pytest.mark.asyncio
    async def test_adopts_image_of_unexpected_shape(self, scripted_capture) -> None:
        gray = np.full((6, 8), 3, dtype=np.uint8)
        sampler = FrameSampler(scripted_capture([gray]))
        frame = await sampler.sample()
        assert frame.image.shape == (6, 8)
        assert frame.image is not gray

    @pytest.mark.asyncio
    async def test_paused_sampler_raises(self, scripted_capture, solid_image) -> None:
        source = scripted_capture([solid_image(0)])
        sampler = FrameSampler(source)
        sampler.pause()
        assert sampler.is_paused
        with pytest.raises(RuntimeError, match="paused"):
            await sampler.sample()
        assert source.grab_calls == 0
        sampler.resume()
        assert await sampler.sample() is not None

    @pytest.mark.asyncio
    async def test_read_failure_propagates(self, scripted_capture) -> None:
        sampler = FrameSampler(scripted_capture([CaptureError("USB unplugged")]))
        with pytest.raises(CaptureError, match="USB unplugged"):
            await sampler.sample()
