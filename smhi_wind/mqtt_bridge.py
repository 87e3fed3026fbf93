"""
MQTT bridge to the host dashboard
Publishes wind notifications and accepts data requests from the dashboard
"""

import json
import logging
from typing import Optional

import paho.mqtt.client as mqtt

from .display_manager import render_html
from .notifications import (
    GET_WIND_DATA, WIND_DATA, WIND_DATA_ERROR, Notification, NotificationChannel,
)
from .presenter import WindFragment


class MQTTBridge:
    """Mirrors the notification channel onto MQTT topics"""

    def __init__(self, config, channel: NotificationChannel):
        """
        Initialize MQTT bridge

        Args:
            config: Config object with an mqtt section
            channel: Channel whose wind notifications are forwarded
        """
        self.config = config
        self.channel = channel
        settings = config.data.get('mqtt', {})

        self.broker = settings.get('broker', 'localhost')
        self.port = settings.get('port', 1883)
        self.keepalive = settings.get('keepalive', 60)
        self.username = settings.get('username')
        self.password = settings.get('password')
        self.request_topic = settings.get('request_topic', 'mirror/wind/request')
        self.data_topic = settings.get('data_topic', 'mirror/wind/data')
        self.fragment_topic = settings.get('fragment_topic')

        self.mqtt_client: Optional[mqtt.Client] = None
        self.connected = False

        channel.subscribe(WIND_DATA, self._forward)
        channel.subscribe(WIND_DATA_ERROR, self._forward)

    def start(self):
        """Connect to the broker and start the network loop"""
        try:
            self.mqtt_client = mqtt.Client(mqtt.CallbackAPIVersion.VERSION2, protocol=mqtt.MQTTv311)

            if self.username:
                self.mqtt_client.username_pw_set(self.username, self.password)

            self.mqtt_client.on_connect = self._on_connect
            self.mqtt_client.on_disconnect = self._on_disconnect
            self.mqtt_client.on_message = self._on_message

            logging.info(f"Connecting to MQTT broker: {self.broker}:{self.port}")
            self.mqtt_client.connect(self.broker, self.port, self.keepalive)
            self.mqtt_client.loop_start()

        except Exception as e:
            logging.error(f"MQTT initialization failed: {e}")
            self.mqtt_client = None

    def stop(self):
        if self.mqtt_client:
            self.mqtt_client.loop_stop()
            self.mqtt_client.disconnect()
            self.mqtt_client = None

        self.connected = False
        logging.info("MQTT bridge stopped")

    def _on_connect(self, client, userdata, flags, reason_code, properties=None):
        """MQTT connection callback"""
        if reason_code == 0:
            self.connected = True
            logging.info(f"Connected to MQTT broker {self.broker}")
            client.subscribe(self.request_topic)
            logging.info(f"Subscribed to {self.request_topic}")
        else:
            self.connected = False
            logging.error(f"MQTT connection failed: {reason_code}")

    def _on_disconnect(self, client, userdata, flags, reason_code, properties=None):
        """MQTT disconnection callback"""
        self.connected = False
        if reason_code != 0:
            logging.warning(f"Unexpected MQTT disconnection ({reason_code}), will auto-reconnect")
        else:
            logging.info("MQTT disconnected")

    def _on_message(self, client, userdata, msg):
        """A dashboard asked for fresh data; always for the configured point"""
        try:
            body = msg.payload.decode('utf-8').strip()
            request = json.loads(body) if body else {}
            if not isinstance(request, dict):
                raise ValueError(f"expected a JSON object, got {body!r}")

            payload = {'lat': self.config.lat, 'lon': self.config.lon}
            if 'lat' in request or 'lon' in request:
                logging.warning(
                    f"Ignoring coordinates in MQTT request, using configured point {payload}"
                )
            logging.debug(f"MQTT wind request received: {payload}")
            self.channel.publish(Notification(GET_WIND_DATA, payload=payload))

        except (UnicodeDecodeError, ValueError) as e:
            logging.error(f"Ignoring malformed MQTT request on {msg.topic}: {e}")

    def _publish(self, topic: str, message: str, retain: bool = True):
        if not self.mqtt_client or not self.connected:
            logging.debug(f"MQTT not connected, dropping message for {topic}")
            return
        self.mqtt_client.publish(topic, message, retain=retain)

    def _forward(self, notification: Notification):
        self._publish(self.data_topic, json.dumps(notification.to_message()))

    def publish_fragment(self, fragment: WindFragment, animation_speed: int = 0):
        """Presenter listener publishing the rendered HTML"""
        if self.fragment_topic:
            self._publish(self.fragment_topic, render_html(fragment))
