"""Role profile resolution and user config merging."""

from __future__ import annotations

import json
from pathlib import Path


ROLE_SCREENS: dict[str, list[str]] = {
    "admin": ["buyers", "sellers", "employers", "orders", "bookings", "reviews", "jobs", "applications"],
    "vendor": ["orders", "bookings", "reviews", "earnings", "schedules"],
    "buyer": ["orders", "bookings", "reviews", "applications", "interviews"],
    "company": ["jobs", "applications", "interviews"],
}

BUILTIN_PROFILES: dict[str, dict] = {
    name: {"screens": screens, "refresh_seconds": 30}
    for name, screens in ROLE_SCREENS.items()
}

PROFILE_FOR_ROLE = {
    "ADMIN": "admin",
    "SELLER": "vendor",
    "BUYER": "buyer",
    "EMPLOYER": "company",
}


def load_user_config(path: str | None) -> dict:
    if not path:
        return {}

    config_path = Path(path)
    if not config_path.exists():
        raise ValueError(f"config path not found: {config_path}")

    try:
        config = json.loads(config_path.read_text())
    except json.JSONDecodeError as exc:
        raise ValueError(f"invalid JSON config: {exc}") from exc
    if not isinstance(config, dict):
        raise ValueError("config must be a JSON object")
    return config


def resolve_profile(profile: str, config_path: str | None = None) -> dict:
    if profile not in BUILTIN_PROFILES:
        raise ValueError(f"unknown profile: {profile}")

    user_config = load_user_config(config_path)

    selected_profile = user_config.get("profile")
    if selected_profile:
        if selected_profile not in BUILTIN_PROFILES:
            raise ValueError(f"unknown profile in config: {selected_profile}")
        profile = selected_profile

    base = BUILTIN_PROFILES[profile]
    resolved = {"screens": list(base["screens"]), "refresh_seconds": base["refresh_seconds"]}

    if "refresh_seconds" in user_config:
        value = int(user_config["refresh_seconds"])
        resolved["refresh_seconds"] = max(1, value)

    for key in ("base_url", "timeout"):
        if key in user_config:
            resolved[key] = user_config[key]

    screen_config = user_config.get("screens")
    allowed = base["screens"]
    if isinstance(screen_config, dict):
        # disable map: {"reviews": false}
        resolved["screens"] = [s for s in allowed if screen_config.get(s, True)]
    elif isinstance(screen_config, list) and screen_config:
        # explicit order; only screens the profile already allows survive
        filtered = [s for s in screen_config if s in allowed]
        if filtered:
            resolved["screens"] = filtered

    resolved["name"] = profile
    return resolved
