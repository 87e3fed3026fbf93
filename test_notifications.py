#!/usr/bin/env python3
"""Tests for the notification channel, wind helper and update timer"""

import threading
from unittest import mock

from smhi_wind.config import Config
from smhi_wind.main import WindApp
from smhi_wind.notifications import (
    GET_WIND_DATA, WIND_DATA, WIND_DATA_ERROR, Notification, NotificationChannel, WindHelper,
)
from smhi_wind.presenter import DisplayState
from smhi_wind.scheduler import UpdateTimer
from smhi_wind.smhi_client import FetchResult, ParseError, Reading


def collect(channel, *names):
    seen = []
    for name in names:
        channel.subscribe(name, seen.append)
    return seen


def test_helper_replies_with_wind_data():
    channel = NotificationChannel()
    client = mock.Mock()
    client.request.return_value = FetchResult(reading=Reading(4.0, 200))
    WindHelper(client, channel, threaded=False)
    seen = collect(channel, WIND_DATA, WIND_DATA_ERROR)

    channel.publish(Notification(GET_WIND_DATA, payload={"lat": 57.7, "lon": 11.9}))

    client.request.assert_called_once_with(57.7, 11.9)
    assert [n.name for n in seen] == [WIND_DATA]
    assert seen[0].payload == {"windSpeed": 4.0, "windDirection": 200}


def test_helper_replies_with_error_without_payload():
    channel = NotificationChannel()
    client = mock.Mock()
    client.request.return_value = FetchResult(error=ParseError("bad"))
    WindHelper(client, channel, threaded=False)
    seen = collect(channel, WIND_DATA, WIND_DATA_ERROR)

    channel.publish(Notification(GET_WIND_DATA, payload={"lat": 57.7, "lon": 11.9}))

    assert [n.name for n in seen] == [WIND_DATA_ERROR]
    assert seen[0].payload is None
    assert seen[0].to_message() == {"notification": WIND_DATA_ERROR, "payload": None}


def test_helper_rejects_request_without_coordinates():
    channel = NotificationChannel()
    client = mock.Mock()
    WindHelper(client, channel, threaded=False)
    seen = collect(channel, WIND_DATA_ERROR)

    channel.publish(Notification(GET_WIND_DATA, payload={"lat": "north"}))

    client.request.assert_not_called()
    assert len(seen) == 1


def test_helper_fetches_on_worker_thread():
    channel = NotificationChannel()
    done = threading.Event()
    client = mock.Mock()
    client.request.return_value = FetchResult(reading=Reading(1.0, 90))
    WindHelper(client, channel, threaded=True)
    channel.subscribe(WIND_DATA, lambda n: done.set())

    channel.publish(Notification(GET_WIND_DATA, payload={"lat": 1, "lon": 2}))

    assert done.wait(timeout=5)


def test_failing_subscriber_does_not_stop_others():
    channel = NotificationChannel()
    seen = []
    channel.subscribe(WIND_DATA, mock.Mock(side_effect=RuntimeError("boom")))
    channel.subscribe(WIND_DATA, seen.append)
    channel.publish(Notification(WIND_DATA, payload={}))
    assert len(seen) == 1


def test_notification_without_result_recovers_reading():
    result = Notification(WIND_DATA, payload={"windSpeed": 3.5, "windDirection": None}).to_result()
    assert result.reading == Reading(3.5, None)
    assert not Notification(WIND_DATA_ERROR).to_result().ok


def test_timer_ticks_immediately_and_stops():
    ticked = threading.Event()
    timer = UpdateTimer(ticked.set, interval_sec=3600)
    timer.start()
    try:
        assert ticked.wait(timeout=5)
    finally:
        timer.stop()
    assert not timer.running
    assert timer.ticks == 1


def test_timer_survives_task_errors():
    calls = []
    second = threading.Event()

    def task():
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("first tick fails")
        second.set()

    timer = UpdateTimer(task, interval_sec=0.01)
    timer.start()
    try:
        assert second.wait(timeout=5)
    finally:
        timer.stop()


def test_app_end_to_end_with_malformed_json():
    config = Config.from_dict({})
    client = mock.Mock()
    client.request.return_value = FetchResult(error=ParseError("Expecting value"))
    app = WindApp(config, client=client, threaded=False)

    app.presenter.request_update()

    assert app.presenter.state is DisplayState.ERROR
    assert "Wind data unavailable" in app.display.current_html


def test_app_end_to_end_with_reading():
    config = Config.from_dict({"display": {"display_type": "beaufort"}})
    client = mock.Mock()
    client.request.return_value = FetchResult(reading=Reading(13.9, 46))
    app = WindApp(config, client=client, threaded=False)

    app.presenter.request_update()

    assert "7 Beaufort" in app.display.current_html
    assert "wi-direction-down-left" in app.display.current_html
