from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

REQUEST_ID = "c3784123-8ce1-4b7e-8583-3e6f61ef5676"
SYSLOG_PREFIX = "Feb  4 22:37:47 ip-10-15-1-216 cryo[1030829]: "

RAILS_LINES = [
    f'{SYSLOG_PREFIX}[{REQUEST_ID}] Started GET "/shipments/443155" for 45.77.120.91 at 2026-02-04 22:37:47 +0000',
    f"{SYSLOG_PREFIX}[{REQUEST_ID}] Processing by ShipmentsController#show as HTML",
    f'{SYSLOG_PREFIX}[{REQUEST_ID}] Parameters: {{"id"=>"443155"}}',
    f"{SYSLOG_PREFIX}[{REQUEST_ID}] Completed 200 OK in 48ms (Views: 20.1ms | ActiveRecord: 9.3ms)",
]

SIDEKIQ_LINES = [
    "2026-02-04T20:46:15.049Z pid=4022623 tid=c8kxf7 class=Logging::Broadcast::Job "
    "jid=9480cf0b927e443155f15a3f INFO: start",
    "2026-02-04T20:46:15.201Z pid=4022623 tid=c8kxf7 class=Logging::Broadcast::Job "
    "jid=9480cf0b927e443155f15a3f elapsed=0.152 INFO: done",
]


@pytest.fixture
def request_id() -> str:
    return REQUEST_ID


@pytest.fixture
def syslog_prefix() -> str:
    return SYSLOG_PREFIX


@pytest.fixture
def write_mixed_log() -> Callable[[Path], None]:
    def _write(path: Path) -> None:
        path.write_text(
            "\n".join(
                [
                    *RAILS_LINES,
                    "plain text nobody recognizes",
                    *SIDEKIQ_LINES,
                ]
            )
            + "\n",
            encoding="utf-8",
        )

    return _write
