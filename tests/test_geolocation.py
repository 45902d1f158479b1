"""
Tests for the one-shot observer location request.

Run with: python -m pytest tests/test_geolocation.py
"""

import asyncio

import pytest

from gottago.models import GeoPoint
from gottago.services.geolocation import (
    PERMISSION_DENIED,
    LocationUnavailable,
    ObserverLocationRequest,
    PushedLocationSource,
)

HERE = GeoPoint(latitude=40.0, longitude=-74.0)


def test_result_delivered_once():
    results = []

    async def source():
        return HERE

    async def scenario():
        request = ObserverLocationRequest(source, results.append)
        await request.start()
        assert request.delivered

    asyncio.run(scenario())
    assert results == [HERE]


def test_failure_delivers_no_location():
    results = []

    async def source():
        raise LocationUnavailable(PERMISSION_DENIED)

    async def scenario():
        await ObserverLocationRequest(source, results.append).start()

    asyncio.run(scenario())
    assert results == [None]


def test_async_callback_is_awaited():
    results = []

    async def source():
        return HERE

    async def on_result(point):
        await asyncio.sleep(0)
        results.append(point)

    async def scenario():
        await ObserverLocationRequest(source, on_result).start()

    asyncio.run(scenario())
    assert results == [HERE]


def test_result_after_close_is_dropped():
    results = []

    async def scenario():
        source = PushedLocationSource()
        request = ObserverLocationRequest(source, results.append)
        task = request.start()
        await asyncio.sleep(0)
        request.close()
        assert request.closed
        assert source.push(HERE) is False
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(scenario())
    assert results == []


def test_close_after_delivery_is_harmless():
    results = []

    async def source():
        return HERE

    async def scenario():
        request = ObserverLocationRequest(source, results.append)
        await request.start()
        request.close()

    asyncio.run(scenario())
    assert results == [HERE]


def test_start_twice_rejected():
    async def source():
        return HERE

    async def scenario():
        request = ObserverLocationRequest(source, lambda point: None)
        task = request.start()
        with pytest.raises(RuntimeError):
            request.start()
        await task

    asyncio.run(scenario())


def test_pushed_source_first_push_wins():
    async def scenario():
        source = PushedLocationSource()
        assert source.push(HERE) is True
        assert source.push(GeoPoint(latitude=1, longitude=1)) is False
        assert source.fail(PERMISSION_DENIED) is False
        return await source()

    assert asyncio.run(scenario()) == HERE


def test_pushed_source_failure():
    results = []

    async def scenario():
        source = PushedLocationSource()
        request = ObserverLocationRequest(source, results.append)
        task = request.start()
        source.fail(PERMISSION_DENIED)
        await task

    asyncio.run(scenario())
    assert results == [None]


def test_unexpected_source_error_delivers_no_location():
    results = []

    async def source():
        raise RuntimeError("sensor crashed")

    async def scenario():
        request = ObserverLocationRequest(source, results.append)
        await request.start()
        assert request.delivered

    asyncio.run(scenario())
    assert results == [None]
