"""Reference data for the device scenarios."""

from __future__ import annotations

from datetime import datetime

ASSET_CLASSES = (
    "ATS",
    "Busway",
    "Capacitor",
    "Circuit Breaker",
    "Disconnect Switch",
    "Fuse",
    "Generator",
    "Junction Box",
    "Loadcenter",
    "MCC",
    "MCC Bucket",
    "Motor",
    "Other",
    "Other OCP",
    "Panelboard",
    "PDU",
    "Relay",
    "Switchboard",
    "Transformer",
    "UPS",
    "Utility",
    "VFD",
)

SUBTYPES: dict[str, tuple[str, ...]] = {
    "ATS": (
        "Automatic Transfer Switch (<= 1000V)",
        "Automatic Transfer Switch (> 1000V)",
        "Transfer Switch (<= 1000V)",
        "Transfer Switch (> 1000V)",
    ),
    "Busway": (
        "Busway (<= 600V)",
        "Busway (> 600V)",
    ),
    "Circuit Breaker": (
        "Low-Voltage Power Circuit Breaker",
        "Low-Voltage Insulated Case Circuit Breaker",
        "Low-Voltage Molded Case Circuit Breaker (≤ 250A)",
        "Low-Voltage Molded Case Circuit Breaker (> 250A)",
        "Medium-Voltage Air Circuit Breaker",
    ),
    "Disconnect Switch": (
        "Bolted-Pressure Switch (BPS)",
        "High-Pressure Contact Switch (HPC)",
        "Load-Interruptor Switch",
        "Disconnect Switch (<= 1000V)",
        "Fused Disconnect Switch (<= 1000V)",
        "Fused Disconnect Switch (> 1000V)",
    ),
    "Fuse": (
        "Fuse (<= 1000V)",
        "Fuse (> 1000V)",
    ),
}

ISSUE_CLASSES = (
    "NEC Violation",
    "NFPA 70B Violation",
    "OSHA Violation",
    "Repair Needed",
    "Thermal Anomaly",
    "Ultrasonic Anomaly",
)

PRIORITIES = ("Low", "Medium", "High")

# Classes offered when creating an OCP child.
OCP_CHILD_CLASSES = ("Circuit Breaker", "Disconnect Switch", "Fuse", "Other OCP")


def unique_name(prefix: str) -> str:
    """prefix plus a timestamp, so repeated runs never collide."""
    return f"{prefix} {datetime.now():%Y%m%d%H%M%S%f}"


def no_match_term() -> str:
    return f"zzq-nomatch-{datetime.now():%Y%m%d%H%M%S%f}"
