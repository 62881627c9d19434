#!/usr/bin/env python3
"""Smoke script for a running Signal Gate API."""

import asyncio
import json

import httpx

BASE_URL = "http://localhost:8000"

SAMPLE_BATCH = [
    {
        "symbol": "BTCUSDT",
        "indicator": "RSI",
        "signal_type": "BUY",
        "level": "LEVEL_1",
        "score": 8,
        "stop_loss": 58000.0,
        "take_profit": 66000.0,
        "explanation": {"risk_reward_ratio": 2.5},
    },
    {
        "symbol": "ETHUSDT",
        "indicator": "MACD",
        "signal_type": "SELL",
        "level": "LEVEL_3",
        "score": 5,
    },
]


async def smoke():
    """Hit each endpoint once and print what comes back."""
    async with httpx.AsyncClient() as client:
        print("Testing Signal Gate API...\n")

        checks = [
            ("GET", "/api/health", None),
            ("POST", "/api/signals", SAMPLE_BATCH),
            ("GET", "/api/signal-filter/statistics", None),
            ("GET", "/api/signal-filter/digest", None),
            ("GET", "/api/blackout/BTCUSDT", None),
            ("GET", "/api/system/errors", None),
        ]
        for i, (method, path, body) in enumerate(checks, start=1):
            print(f"{i}. Testing {method} {path}")
            try:
                response = await client.request(method, f"{BASE_URL}{path}", json=body)
                print(f"   Status: {response.status_code}")
                print(f"   Response: {json.dumps(response.json(), indent=2)}\n")
            except Exception as e:
                print(f"   Error: {e}\n")


if __name__ == "__main__":
    asyncio.run(smoke())
