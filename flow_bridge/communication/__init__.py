"""
Consumer communication

This module provides the UDP JSON interface to the audio and visual front ends.
"""

from .udp_sender import UDPSender

__all__ = ['UDPSender']
