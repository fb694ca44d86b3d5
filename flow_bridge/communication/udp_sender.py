"""
Downstream communication interface

This module handles UDP communication with the audio and visual front ends,
formatting each tick result into a JSON message.
"""

import json
import logging
import socket

from ..core.config import UDP_HOST, UDP_PORT
from ..engine.pipeline import TickResult


class UDPSender:
    """
    Send tick results to consumers via UDP JSON messages

    Flow entered/exited transitions travel in the same message as the rest of
    the tick, so the reward player can react on the exact tick of the change.
    """

    def __init__(self, host: str = UDP_HOST, port: int = UDP_PORT):
        self.host = host
        self.port = port
        self.socket = None
        self._setup_socket()

    def _setup_socket(self):
        """Setup UDP socket for communication"""
        try:
            self.socket = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
            logging.info(f"UDP sender initialized: {self.host}:{self.port}")
        except Exception as e:
            logging.error(f"Failed to setup UDP socket: {e}")

    def send_result(self, result: TickResult) -> bool:
        """
        Send one tick result

        Args:
            result: Pipeline output for the current tick

        Returns:
            bool: True if sent successfully
        """
        if self.socket is None:
            return False

        try:
            json_str = json.dumps(result.to_message())
            self.socket.sendto(json_str.encode('utf-8'), (self.host, self.port))
            return True
        except Exception as e:
            logging.error(f"Failed to send UDP message: {e}")
            return False

    def close(self):
        """Close UDP socket"""
        if self.socket:
            self.socket.close()
            self.socket = None
