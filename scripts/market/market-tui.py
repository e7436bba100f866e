#!/usr/bin/env python3
"""Thin compatibility entrypoint for the marketplace list console."""

from __future__ import annotations

from listing_core.app import main


if __name__ == "__main__":
    raise SystemExit(main())
