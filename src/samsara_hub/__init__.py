"""Samsara Hub: local dashboard for inspecting and controlling a Linux, Alpine or Termux host."""

from .server import create_app

__all__ = ["create_app"]
