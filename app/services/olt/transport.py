"""net-snmp subprocess transport for OLT polling."""

from __future__ import annotations

import logging
import os
import re
import subprocess
import threading
from collections.abc import Iterator

from app.services.olt.deadline import Deadline
from app.services.olt.decoders import PolledValue
from app.services.olt.exceptions import (
    DeviceUnreachable,
    PollTimeout,
    ProtocolError,
)

logger = logging.getLogger(__name__)

# Numeric OIDs, numeric enums, no MIB loading.
OUTPUT_FLAGS = ["-On", "-Oe", "-m", ""]

_LINE_RE = re.compile(r"^(\.?\d+(?:\.\d+)*)\s+=\s+(.*)$")
_INTEGER_TYPES = {"INTEGER", "Gauge32", "Counter32", "Counter64", "Unsigned32"}
_NO_VALUE_MARKERS = ("no such object", "no such instance", "no more variables")
_STRING_ESCAPE_RE = re.compile(r'\\(["\\])')


def normalize_oid(oid: str) -> str:
    return "." + oid.strip().strip(".")


def _parse_hex(text: str) -> bytes:
    try:
        return bytes.fromhex("".join(text.split()))
    except ValueError as exc:
        raise ProtocolError(f"malformed Hex-STRING: {text!r}") from exc


def parse_value(value_part: str) -> PolledValue | None:
    """Convert the right-hand side of an output line to a PolledValue.

    Returns None for "No Such Object/Instance" markers.
    """
    value_part = value_part.strip()
    if value_part.lower().startswith(_NO_VALUE_MARKERS):
        return None
    if value_part == '""':
        return PolledValue.text("")
    if ": " not in value_part:
        if value_part.endswith(":"):
            # Empty typed value, e.g. "STRING:" or "Hex-STRING:".
            type_name = value_part[:-1].strip()
            if type_name == "Hex-STRING":
                return PolledValue.octets(b"")
            return PolledValue.text("")
        return PolledValue.other(value_part)

    type_name, raw = value_part.split(": ", 1)
    type_name = type_name.strip()
    raw = raw.strip()
    if type_name in _INTEGER_TYPES:
        match = re.search(r"-?\d+", raw)
        if not match:
            raise ProtocolError(f"malformed {type_name} value: {raw!r}")
        return PolledValue.integer(int(match.group(0)))
    if type_name == "STRING":
        if len(raw) >= 2 and raw.startswith('"') and raw.endswith('"'):
            raw = _STRING_ESCAPE_RE.sub(r"\1", raw[1:-1])
        return PolledValue.text(raw)
    if type_name == "Hex-STRING":
        return PolledValue.octets(_parse_hex(raw))
    if type_name == "IpAddress":
        return PolledValue.text(raw)
    return PolledValue.other(raw)


def parse_output(stdout: str) -> list[tuple[str, PolledValue | None]]:
    """Parse ``OID = TYPE: value`` lines, joining wrapped continuation lines."""
    records: list[tuple[str, str]] = []
    for line in stdout.splitlines():
        if not line.strip():
            continue
        match = _LINE_RE.match(line.strip())
        if match:
            records.append((normalize_oid(match.group(1)), match.group(2)))
        elif records:
            oid, value = records[-1]
            records[-1] = (oid, f"{value} {line.strip()}")
    return [(oid, parse_value(value)) for oid, value in records]


class SnmpSession:
    """A handle on one OLT, running net-snmp commands one at a time."""

    def __init__(
        self,
        host: str,
        port: int = 161,
        community: str = "public",
        version: str = "2c",
        timeout: float = 10,
        retries: int = 2,
    ):
        self.host = host
        self.port = port
        self.community = community
        self.version = version
        self.timeout = timeout
        self.retries = retries
        self._lock = threading.Lock()

    @classmethod
    def connect(
        cls,
        host: str,
        port: int = 161,
        community: str = "public",
        timeout: float = 10,
        retries: int = 2,
    ) -> "SnmpSession":
        if not host:
            raise DeviceUnreachable("SNMP host is not configured")
        session = cls(host, port=port, community=community, timeout=timeout, retries=retries)
        logger.info("SNMP session configured for %s:%s", host, port)
        return session

    def _base_args(self, command: str) -> list[str]:
        return [
            command,
            "-v",
            self.version,
            "-c",
            self.community,
            "-t",
            str(self.timeout),
            "-r",
            str(self.retries),
            *OUTPUT_FLAGS,
            f"{self.host}:{self.port}",
        ]

    def _command_timeout(self, budget: float | None) -> float:
        # snmp tools retry internally; allow for all attempts.
        limit = float(self.timeout) * (self.retries + 1) + 1
        if budget is not None:
            limit = min(limit, budget)
        return max(limit, 0.001)

    def _acquire(self, command: str, deadline: Deadline | None) -> None:
        if deadline is None:
            self._lock.acquire()
            return
        if not self._lock.acquire(timeout=deadline.remaining()):
            raise PollTimeout(
                f"request deadline of {deadline.seconds}s expired waiting to run {command}"
            )

    def _run(self, args: list[str], deadline: Deadline | None) -> str:
        self._acquire(args[0], deadline)
        try:
            # Time spent queued for the session counts against the deadline.
            budget = deadline.remaining() if deadline is not None else None
            if budget is not None and budget <= 0:
                raise PollTimeout(f"request deadline of {deadline.seconds}s expired before {args[0]}")
            timeout = self._command_timeout(budget)
            try:
                result = subprocess.run(
                    args,
                    capture_output=True,
                    text=True,
                    check=False,
                    timeout=timeout,
                )
            except FileNotFoundError as exc:
                raise DeviceUnreachable(f"{args[0]} is not installed") from exc
            except subprocess.TimeoutExpired as exc:
                if budget is not None and timeout >= budget:
                    raise PollTimeout(f"{args[0]} exceeded the request deadline") from exc
                raise DeviceUnreachable(f"{args[0]} timed out talking to {self.host}") from exc
        finally:
            self._lock.release()

        if os.getenv("SNMP_DEBUG") == "1":
            logger.info(
                "SNMP debug: cmd=%s rc=%s stdout=%s stderr=%s",
                " ".join(args),
                result.returncode,
                result.stdout.splitlines()[:10],
                result.stderr.splitlines()[:10],
            )
        stderr = result.stderr.strip()
        if result.returncode != 0:
            lowered = stderr.lower()
            if "no response" in lowered or "timeout" in lowered:
                raise DeviceUnreachable(f"no response from {self.host}: {stderr}")
            if not result.stdout.strip():
                raise ProtocolError(stderr or f"{args[0]} failed with exit code {result.returncode}")
            logger.warning(
                "%s exited with %s but produced output: %s", args[0], result.returncode, stderr
            )
        return result.stdout

    def walk(
        self, oid: str, deadline: Deadline | None = None
    ) -> Iterator[tuple[str, PolledValue | None]]:
        """Yield every (address, value) under ``oid``.

        The command runs when iteration starts.
        """
        stdout = self._run([*self._base_args("snmpwalk"), normalize_oid(oid)], deadline)
        for address, value in parse_output(stdout):
            if value is None:
                continue
            yield address, value

    def get(
        self, oids: list[str], deadline: Deadline | None = None
    ) -> dict[str, PolledValue | None]:
        """Fetch instance values; absent instances map to None."""
        if not oids:
            return {}
        requested = [normalize_oid(oid) for oid in oids]
        stdout = self._run([*self._base_args("snmpget"), *requested], deadline)
        parsed = dict(parse_output(stdout))
        return {oid: parsed.get(oid) for oid in requested}
