from __future__ import annotations

import platform

from pydantic import BaseModel

APP_VERSION = "1.0.0"

_OS_NAMES = {"darwin": "macos"}
_ARCH_NAMES = {
    "amd64": "x86_64",
    "x64": "x86_64",
    "arm64": "aarch64",
    "i386": "x86",
    "i686": "x86",
}


class SystemInfo(BaseModel):
    os: str
    arch: str
    app_version: str


def get_app_version() -> str:
    return APP_VERSION


def get_system_info() -> SystemInfo:
    system = platform.system().lower()
    machine = platform.machine().lower()
    return SystemInfo(
        os=_OS_NAMES.get(system, system or "unknown"),
        arch=_ARCH_NAMES.get(machine, machine or "unknown"),
        app_version=APP_VERSION,
    )
